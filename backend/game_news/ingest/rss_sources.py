GAME_NEWS_FEEDS = [
    "https://www.gamespot.com/feeds/news/",
    "https://feeds.feedburner.com/ign/news",
    "https://www.pcgamer.com/rss/",
    "https://www.rockpapershotgun.com/feed/news",
    "https://www.eurogamer.net/feed/news",
]

ESPORTS_FEEDS = [
    "https://www.dexerto.com/feed/",
]

DEFAULT_RSS_SOURCES = GAME_NEWS_FEEDS + ESPORTS_FEEDS
