#!/usr/bin/env python3
"""
Site structure checker
Validates that internal links resolve, that every official and every
feed-referenced candidate has a profile page, and that feed files keep
their invariants.
"""
import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Dict

from bs4 import BeautifulSoup

from config import CHECKER_CONFIG, FEED_FILES, SITE_CONFIG
from feed_store import FeedStoreError, load_feed, validate_feed

logger = logging.getLogger(__name__)


def find_html_files(root) -> List[Path]:
    """All .html files under root, skipping tooling directories"""
    root = Path(root)
    skip_dirs = set(CHECKER_CONFIG["skip_dirs"])
    files = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in skip_dirs)
        for filename in sorted(filenames):
            if filename.endswith(".html"):
                files.append(Path(dirpath) / filename)
    return files


def extract_hrefs(html: str) -> List[str]:
    soup = BeautifulSoup(html or "", 'html.parser')
    return [tag["href"] for tag in soup.find_all(href=True)]


def is_external(href: str) -> bool:
    return any(href.startswith(prefix) for prefix in CHECKER_CONFIG["external_prefixes"])


def is_anchor(href: str) -> bool:
    return href.startswith("#")


def resolve_href(root: Path, page: Path, href: str):
    """Filesystem path an internal href points at, or None if there is nothing to check"""
    clean = href.split('?')[0].split('#')[0]
    if not clean:
        return None

    if clean.startswith('/'):
        resolved = root / clean.lstrip('/')
    else:
        resolved = page.parent / clean
    if clean.endswith('/'):
        resolved = resolved / "index.html"
    return Path(os.path.normpath(resolved))


def check_page_links(root, page) -> List[str]:
    """Broken internal links of one page, as "href -> resolved path" strings"""
    root = Path(root)
    page = Path(page)
    with open(page, 'r', encoding='utf-8') as f:
        html = f.read()

    broken = []
    for href in extract_hrefs(html):
        if is_external(href) or is_anchor(href):
            continue
        resolved = resolve_href(root, page, href)
        if resolved is None:
            continue
        # Only site files are checked; images and fonts may come from elsewhere
        if resolved.suffix in CHECKER_CONFIG["checked_extensions"] and not resolved.exists():
            broken.append(f"{href} -> {resolved}")
    return broken


def check_internal_links(root) -> Dict[str, List[str]]:
    """Map of page (relative to root) to its broken links; clean pages are omitted"""
    root = Path(root)
    results = {}
    for page in find_html_files(root):
        broken = check_page_links(root, page)
        if broken:
            results[page.relative_to(root).as_posix()] = broken
    return results


def _profile_exists(root: Path, slug: str) -> bool:
    return (root / CHECKER_CONFIG["profiles_dir"] / f"{slug}.html").is_file()


class RegistryError(Exception):
    """Raised when the officials registry cannot be read"""


def load_officials_registry(root) -> Dict:
    """The officials registry document; empty when the site has none"""
    registry_path = Path(root) / CHECKER_CONFIG["officials_registry"]
    if not registry_path.is_file():
        logger.warning(f"Officials registry not found at {registry_path}")
        return {}
    try:
        with open(registry_path, 'r', encoding='utf-8') as f:
            registry = json.load(f)
    except json.JSONDecodeError as e:
        raise RegistryError(f"Officials registry {registry_path} is not valid JSON: {e}") from e
    except OSError as e:
        raise RegistryError(f"Could not read officials registry {registry_path}: {e}") from e

    if not isinstance(registry, dict):
        raise RegistryError(f"Officials registry {registry_path} is not a JSON object")
    if not isinstance(registry.get("current_officials", []), list):
        raise RegistryError(f"Officials registry {registry_path}: current_officials is not a list")
    return registry


def check_profile_registry(root) -> List[str]:
    """Slugs in the officials registry that have no profile page.

    Raises RegistryError when the registry exists but is malformed.
    """
    root = Path(root)
    registry = load_officials_registry(root)

    missing = []
    for official in registry.get("current_officials", []):
        slug = official.get("slug") if isinstance(official, dict) else None
        if slug and not _profile_exists(root, slug):
            missing.append(slug)
    return missing


def check_related_candidates(root) -> List[str]:
    """relatedCandidate slugs used in any feed that have no profile page"""
    root = Path(root)
    missing = []
    for topic, relative_path in FEED_FILES.items():
        path = root / relative_path
        if not path.is_file():
            continue
        try:
            entries = load_feed(path)
        except FeedStoreError as e:
            logger.warning(f"Skipping feed '{topic}': {e}")
            continue
        for entry in entries:
            slug = entry.get("relatedCandidate") if isinstance(entry, dict) else None
            if slug and slug not in missing and not _profile_exists(root, slug):
                missing.append(slug)
    return missing


def check_feeds(root) -> Dict[str, List[str]]:
    """Invariant violations per feed file; missing feed files are reported too"""
    root = Path(root)
    problems = {}
    for relative_path in FEED_FILES.values():
        try:
            entries = load_feed(root / relative_path)
        except FeedStoreError as e:
            problems[relative_path] = [str(e)]
            continue
        issues = validate_feed(entries)
        if issues:
            problems[relative_path] = issues
    return problems


def check_site(root) -> List[str]:
    """Run every check and return a flat list of problems"""
    problems = []
    for page, broken in check_internal_links(root).items():
        problems.extend(f"{page}: broken link {link}" for link in broken)
    try:
        problems.extend(f"officials registry: no profile page for '{slug}'" for slug in check_profile_registry(root))
    except RegistryError as e:
        problems.append(f"officials registry: {e}")
    problems.extend(f"feeds: no profile page for relatedCandidate '{slug}'" for slug in check_related_candidates(root))
    for feed, issues in check_feeds(root).items():
        problems.extend(f"{feed}: {issue}" for issue in issues)
    return problems


def main(argv=None) -> int:
    """Main entry point"""
    logging.basicConfig(
        level=SITE_CONFIG["log_level"],
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    parser = argparse.ArgumentParser(description="Check site links, profiles and feeds")
    parser.add_argument("--root", default=SITE_CONFIG["site_root"], help="Site directory to check")
    args = parser.parse_args(argv)

    root = Path(args.root)
    if not root.is_dir():
        print(f"Error: site root {root} not found", file=sys.stderr)
        return 1

    problems = check_site(root)
    for problem in problems:
        print(problem)
    if problems:
        logger.error(f"{len(problems)} problem(s) found in {root}")
        return 1
    logger.info(f"No problems found in {root}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
