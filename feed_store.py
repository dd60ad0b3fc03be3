"""
Feed Store access
Each feed is a JSON document holding an ordered array of feed entries.
Consumers always load the whole file; there is no index or pagination.
"""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Dict, Optional, TypedDict

import requests

from config import FEED_CONFIG, FEED_FILES

logger = logging.getLogger(__name__)


class _FeedEntryRequired(TypedDict):
    id: str
    date: str
    title: str
    summary: str
    source: str
    sourceUrl: str
    category: str
    tags: List[str]


class FeedEntry(_FeedEntryRequired, total=False):
    """One news/discussion item as stored in a feed file."""

    relatedCandidate: Optional[str]  # profile slug, absent when not tied to a profile


class FeedStoreError(Exception):
    """Raised when a feed document cannot be loaded"""


def parse_entry_date(value) -> Optional[datetime]:
    """Parse an ISO-8601 date or date-time into a naive UTC datetime.

    Returns None for anything that does not parse.
    """
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _is_url(location: str) -> bool:
    return location.startswith("http://") or location.startswith("https://")


def _decode_feed(payload, location: str) -> List[Dict]:
    if not isinstance(payload, list):
        raise FeedStoreError(f"Feed {location} is not a JSON array")
    return payload


def load_feed(location) -> List[Dict]:
    """Load a feed from a file path or an http(s) URL.

    Raises FeedStoreError when the document is missing, unreadable,
    not valid JSON, or not a top-level array.
    """
    location = str(location)

    if _is_url(location):
        try:
            resp = requests.get(
                location,
                timeout=FEED_CONFIG["timeout"],
                headers={"User-Agent": FEED_CONFIG["user_agent"]},
            )
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as e:
            raise FeedStoreError(f"Network error fetching feed {location}: {e}") from e
        except ValueError as e:
            raise FeedStoreError(f"Feed {location} is not valid JSON: {e}") from e
        return _decode_feed(payload, location)

    path = Path(location)
    if not path.is_file():
        raise FeedStoreError(f"Feed file not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise FeedStoreError(f"Feed {path} is not valid JSON: {e}") from e
    except OSError as e:
        raise FeedStoreError(f"Could not read feed {path}: {e}") from e
    return _decode_feed(payload, location)


def fetch_feed(location) -> List[Dict]:
    """Load a feed, returning an empty list instead of raising.

    Page rendering must not fail because one feed is unavailable.
    """
    try:
        entries = load_feed(location)
    except FeedStoreError as e:
        logger.error(f"Could not load feed: {e}")
        return []
    logger.debug(f"Loaded {len(entries)} entries from {location}")
    return entries


def feed_path(site_root, topic: str) -> Path:
    """Path of a topic's feed file under the site root"""
    if topic not in FEED_FILES:
        raise KeyError(f"Unknown feed topic: {topic}")
    return Path(site_root) / FEED_FILES[topic]


def validate_feed(entries) -> List[str]:
    """Check feed invariants and describe every violation.

    Every entry needs a non-empty category, a parseable date and an id
    that is unique within the file.
    """
    problems = []
    if not isinstance(entries, list):
        return ["feed is not a JSON array"]

    seen_ids = set()
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            problems.append(f"entry #{index} is not an object")
            continue

        entry_id = entry.get("id")
        label = entry_id or f"#{index}"
        if not entry_id:
            problems.append(f"entry #{index} has no id")
        elif entry_id in seen_ids:
            problems.append(f"entry {entry_id} has a duplicate id")
        else:
            seen_ids.add(entry_id)

        if not entry.get("category"):
            problems.append(f"entry {label} has no category")
        if parse_entry_date(entry.get("date")) is None:
            problems.append(f"entry {label} has an unparseable date: {entry.get('date')!r}")
        tags = entry.get("tags", [])
        if not isinstance(tags, list):
            problems.append(f"entry {label} has tags that are not a list")

    return problems
