"""
Feed filtering and sorting
Pure functions over an in-memory feed snapshot. None of them raise:
absent or malformed input degrades to an empty result.
"""
import posixpath
from datetime import datetime
from typing import List, Dict, Mapping, Optional

from bs4 import BeautifulSoup

from feed_store import parse_entry_date

ALL_CATEGORIES = "all"
CANDIDATE_SLUG_ATTR = "data-candidate-slug"


class PageContext:
    """The document a feed is being rendered for.

    Holds the body element's attributes and the document's own path,
    which is everything slug resolution needs.
    """

    def __init__(self, attributes: Optional[Mapping[str, str]] = None, pathname: Optional[str] = None):
        self.attributes = dict(attributes or {})
        self.pathname = pathname

    @classmethod
    def from_html(cls, html: str, pathname: Optional[str] = None) -> "PageContext":
        """Build a context from a page's markup, reading attributes off <body>"""
        return cls.from_soup(BeautifulSoup(html or "", 'html.parser'), pathname)

    @classmethod
    def from_soup(cls, soup: BeautifulSoup, pathname: Optional[str] = None) -> "PageContext":
        attributes = {}
        if soup.body is not None:
            for name, value in soup.body.attrs.items():
                # bs4 returns multi-valued attributes such as class as lists
                attributes[name] = " ".join(value) if isinstance(value, list) else value
        return cls(attributes, pathname)

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)


def _entries(entries) -> List[Dict]:
    if not entries or not isinstance(entries, (list, tuple)):
        return []
    return [entry for entry in entries if isinstance(entry, dict)]


def _sort_date(entry: Dict) -> datetime:
    # Unparseable dates sort after everything else when ordering newest-first
    return parse_entry_date(entry.get("date")) or datetime.min


def sort_newest_first(entries) -> List[Dict]:
    """Order entries by date descending, keeping original order for ties"""
    return sorted(_entries(entries), key=_sort_date, reverse=True)


def filter_by_category(entries, category: Optional[str] = None) -> List[Dict]:
    """Entries in the given category, in their original order.

    No category (or "all") returns every entry; an unknown category
    returns an empty list.
    """
    items = _entries(entries)
    if not category or category == ALL_CATEGORIES:
        return items
    return [entry for entry in items if entry.get("category") == category]


def filter_by_candidate(entries, slug: Optional[str]) -> List[Dict]:
    """Entries tied to one profile, newest first"""
    if not slug:
        return []
    matches = [entry for entry in _entries(entries) if entry.get("relatedCandidate") == slug]
    return sort_newest_first(matches)


def unique_categories(entries) -> List[str]:
    """Categories in first-seen order"""
    seen = []
    for entry in _entries(entries):
        category = entry.get("category")
        if category and category not in seen:
            seen.append(category)
    return seen


def get_candidate_slug(context: Optional[PageContext]) -> Optional[str]:
    """Resolve the profile slug for the current document.

    The explicit data-candidate-slug attribute wins; otherwise the slug is
    the last path segment with its extension removed.
    """
    if context is None:
        return None

    slug = context.get_attribute(CANDIDATE_SLUG_ATTR)
    if slug:
        return slug

    pathname = context.pathname
    if not pathname:
        return None
    segment = posixpath.basename(pathname.replace("\\", "/").rstrip("/"))
    slug, _ext = posixpath.splitext(segment)
    return slug or None


def count_by_category(entries) -> Dict[str, int]:
    """Number of entries per category, for filter bar badges"""
    counts: Dict[str, int] = {}
    for entry in _entries(entries):
        category = entry.get("category")
        if category:
            counts[category] = counts.get(category, 0) + 1
    return counts
