from __future__ import annotations

GAME_KEYWORDS = {
    "game","gaming","gamer","esports","e-sports","tournament","console","playstation","xbox",
    "nintendo","switch","steam","pc gaming","indie","rpg","mmo","fps","dlc","patch","update",
    "studio","developer","publisher","trailer","release","vr","speedrun","twitch","league",
}


def is_game_related_keywords(title: str, description: str | None) -> bool:
    text = f"{title} {description or ''}".lower()
    return any(k in text for k in GAME_KEYWORDS)
