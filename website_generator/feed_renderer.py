"""
Feed rendering
Turns feed entries into card markup. Every entry field goes through Jinja2
autoescaping, and source links are only emitted for relative or http(s)
URLs, so feed content can never change the structure of the page it is
injected into.
"""
import logging
from pathlib import Path
from typing import List, Dict, Optional, Protocol, runtime_checkable

from bs4 import BeautifulSoup, Tag
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import escape

from website_generator.feed_filter import (
    ALL_CATEGORIES,
    count_by_category,
    filter_by_category,
    sort_newest_first,
)
from website_generator.utils import category_display_name, enrich_entries

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

NO_ACTIVITY_HTML = '<p class="feed-empty">No recent activity</p>'

_jinja_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(enabled_extensions=("html", "j2"), default=True),
)


@runtime_checkable
class ContentSink(Protocol):
    """Anything that can receive rendered markup"""

    def write(self, markup: str) -> None:
        ...


class Container:
    """In-memory content slot, the stand-in for a page element"""

    def __init__(self, inner_html: str = ""):
        self.inner_html = inner_html

    def write(self, markup: str) -> None:
        self.inner_html = markup


class ElementSink:
    """Replaces the children of a BeautifulSoup element with rendered markup"""

    def __init__(self, element):
        self.element = element

    def write(self, markup: str) -> None:
        self.element.clear()
        fragment = BeautifulSoup(markup, 'html.parser')
        for child in list(fragment.contents):
            self.element.append(child.extract())


def _write_to(container, markup: str) -> None:
    """Deliver markup to an optional container; rendering never depends on it"""
    if container is None:
        return
    try:
        if isinstance(container, Tag):
            ElementSink(container).write(markup)
        elif isinstance(container, ContentSink):
            container.write(markup)
        elif hasattr(container, "inner_html"):
            container.inner_html = markup
        elif isinstance(container, dict):
            container["inner_html"] = markup
        else:
            logger.warning(f"Container of type {type(container).__name__} cannot receive markup")
    except Exception as e:
        logger.warning(f"Could not write rendered feed into container: {e}")


def _render_template(name: str, fallback: str, **context) -> str:
    try:
        return _jinja_env.get_template(name).render(**context)
    except Exception as e:
        logger.error(f"Failed to render {name}: {e}", exc_info=True)
        return fallback


def _as_list(entries) -> List[Dict]:
    if not entries or not isinstance(entries, (list, tuple)):
        return []
    return [entry for entry in entries if isinstance(entry, dict)]


def render_profile_feed(entries, container=None) -> str:
    """Render a profile's recent activity.

    Entries are rendered in the order given; callers sort them first
    (see filter_by_candidate). Empty or absent input yields the
    "No recent activity" placeholder.
    """
    items = _as_list(entries)
    if not items:
        html = NO_ACTIVITY_HTML
    else:
        html = _render_template("profile_feed.html.j2", NO_ACTIVITY_HTML, entries=enrich_entries(items))
    _write_to(container, html)
    return html


def render_feed_list(entries, container=None, category: Optional[str] = None) -> str:
    """Render a feed page: category filter applied, newest first"""
    selected = sort_newest_first(filter_by_category(_as_list(entries), category))
    empty_html = '<p class="feed-empty">No entries in this category yet</p>'
    html = _render_template(
        "feed_list.html.j2",
        empty_html,
        entries=enrich_entries(selected),
        category=category or ALL_CATEGORIES,
    )
    _write_to(container, html)
    return html


def _filter_href(category: str, base_path: Optional[str]) -> str:
    if base_path is None:
        return f"?category={category}"
    if category == ALL_CATEGORIES:
        return f"{base_path}.html"
    return f"{base_path}/{category}.html"


def render_filter_bar(categories, active: Optional[str] = None, container=None,
                      base_path: Optional[str] = None, entries=None) -> str:
    """Render the category filter buttons, "All" first.

    With base_path, buttons link to pre-rendered category pages
    (<base_path>.html and <base_path>/<category>.html); otherwise they
    carry a ?category= query. Passing entries adds per-category counts.
    """
    active = active or ALL_CATEGORIES
    counts = count_by_category(entries) if entries is not None else None

    buttons = [{
        "category": ALL_CATEGORIES,
        "label": category_display_name(ALL_CATEGORIES),
        "href": _filter_href(ALL_CATEGORIES, base_path),
        "active": active == ALL_CATEGORIES,
        "count": len(_as_list(entries)) if counts is not None else None,
    }]
    for category in categories or []:
        if not category or category == ALL_CATEGORIES:
            continue
        buttons.append({
            "category": category,
            "label": category_display_name(category),
            "href": _filter_href(category, base_path),
            "active": active == category,
            "count": counts.get(category, 0) if counts is not None else None,
        })

    fallback = f'<div class="filter-buttons">{escape(category_display_name(ALL_CATEGORIES))}</div>'
    html = _render_template("filter_bar.html.j2", fallback, buttons=buttons)
    _write_to(container, html)
    return html
