from __future__ import annotations

import re
from typing import Optional

from bs4 import BeautifulSoup

_NON_CONTENT = ("script", "style", "noscript")


def parse_html(markup: str) -> BeautifulSoup:
    """Parsed document with script, style and noscript blocks removed."""
    soup = BeautifulSoup(markup or "", "html.parser")
    for tag in soup(_NON_CONTENT):
        tag.decompose()
    return soup


def strip_html(text: str) -> str:
    return parse_html(text).get_text(" ")


def _clean(text: str) -> str:
    text = re.sub(r"\s+", " ", strip_html(text)).strip()
    text = re.sub(r"https?://\S+", "", text)
    return text.strip()


def summarize_extractive(title: str, description: Optional[str], max_chars: int = 180) -> str:
    # first 1-2 sentences of the cleaned description, else the title
    desc = _clean(description or "")
    if not desc:
        return (title or "")[:120]
    sentences = re.split(r"(?<=[.!?])\s+", desc)
    out = " ".join(sentences[:2]).strip()
    return out[:max_chars] if out else (title or "")[:120]
