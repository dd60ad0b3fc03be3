"""
Utility functions for website generator
Helper functions for entry formatting, link safety, etc.
"""
from typing import Dict, List, Optional
from urllib.parse import urlsplit

from config import FEED_CATEGORIES
from feed_store import parse_entry_date

SAFE_URL_SCHEMES = ("", "http", "https")


def format_display_date(value) -> str:
    """Long human-readable date, e.g. "February 8, 2026".

    Unparseable values are shown as given; missing values as an empty string.
    """
    parsed = parse_entry_date(value)
    if parsed is None:
        return str(value) if value else ""
    return f"{parsed.strftime('%B')} {parsed.day}, {parsed.year}"


def safe_link(url) -> Optional[str]:
    """Return url if it is relative or http(s), otherwise None"""
    if not url or not isinstance(url, str):
        return None
    url = url.strip()
    try:
        scheme = urlsplit(url).scheme.lower()
    except ValueError:
        return None
    return url if scheme in SAFE_URL_SCHEMES else None


def category_display_name(category: str) -> str:
    """Filter bar label for a category slug"""
    if category in FEED_CATEGORIES:
        return FEED_CATEGORIES[category]
    return category.replace("-", " ").replace("_", " ").title()


def _text(value) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def enrich_entry(entry: Dict) -> Dict:
    """Build the template view of a single feed entry.

    Values are left unescaped here; the card templates autoescape them.
    """
    tags = entry.get("tags") or []
    if not isinstance(tags, list):
        tags = []
    category = _text(entry.get("category"))

    return {
        "id": _text(entry.get("id")),
        "title": _text(entry.get("title")),
        "summary": _text(entry.get("summary")),
        "source": _text(entry.get("source")),
        "source_url": safe_link(entry.get("sourceUrl")),
        "date_iso": _text(entry.get("date")),
        "date_display": format_display_date(entry.get("date")),
        "category": category,
        "category_name": category_display_name(category) if category else "",
        "tags": [_text(tag) for tag in tags if tag],
    }


def enrich_entries(entries: List[Dict]) -> List[Dict]:
    return [enrich_entry(entry) for entry in entries]
