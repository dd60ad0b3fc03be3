"""
Website generator that creates the static site from the content set
Feed pages and profile pages get their feed containers filled at build time,
using the same filter and renderer the pages use at load time.
"""
import logging
import re
import shutil
from pathlib import Path
from typing import List, Dict, Optional

from bs4 import BeautifulSoup

from config import SITE_CONFIG, FEED_FILES, FEED_CONFIG
from feed_store import feed_path, fetch_feed
from link_checker import find_html_files
from website_generator.feed_filter import (
    PageContext,
    filter_by_candidate,
    get_candidate_slug,
    unique_categories,
)
from website_generator.feed_renderer import (
    ElementSink,
    render_feed_list,
    render_filter_bar,
    render_profile_feed,
)

logger = logging.getLogger(__name__)

FEED_ATTR = "data-feed"
FEED_CONTAINER_ID = "feed-container"
FILTER_BAR_ID = "filter-bar"
ACTIVITY_CONTAINER_ID = "candidate-activity"
CATEGORY_SLUG = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


class WebsiteGenerator:
    """Generate the static website with every feed container rendered"""

    def __init__(self, site_root=None, output_dir=None):
        self.site_root = Path(site_root or SITE_CONFIG["site_root"])
        self.output_dir = Path(output_dir or SITE_CONFIG["output_dir"])
        self.feeds: Dict[str, List[Dict]] = {}

    def _ensure_directories(self):
        """Copy the content set into the output directory"""
        if not self.site_root.is_dir():
            raise FileNotFoundError(f"Site root {self.site_root} not found")
        site_root = self.site_root.resolve()
        output_dir = self.output_dir.resolve()
        if output_dir == site_root:
            raise ValueError("Output directory must differ from the site root")
        if site_root in output_dir.parents:
            raise ValueError(f"Output directory {output_dir} must not be inside the site root {site_root}")
        shutil.copytree(self.site_root, self.output_dir, dirs_exist_ok=True)

    def load_feeds(self) -> Dict[str, List[Dict]]:
        """Load every configured feed once; a missing feed is treated as empty"""
        self.feeds = {}
        for topic in FEED_FILES:
            path = feed_path(self.site_root, topic)
            if not path.exists():
                logger.warning(f"Feed file for '{topic}' not found at {path}, using an empty feed")
                self.feeds[topic] = []
                continue
            self.feeds[topic] = fetch_feed(path)
            logger.info(f"Loaded {len(self.feeds[topic])} entries for feed '{topic}'")
        return self.feeds

    def generate(self) -> Dict[str, int]:
        """Build the site and return counts of what was rendered"""
        logger.info(f"Generating website from {self.site_root} into {self.output_dir}")
        self._ensure_directories()
        self.load_feeds()

        summary = {"pages": 0, "feed_pages": 0, "category_pages": 0, "profiles": 0, "feeds": len(self.feeds)}
        # Walk the source pages so category pages from an earlier build are never re-rendered
        for source_file in find_html_files(self.site_root):
            summary["pages"] += 1
            self._generate_page(self.output_dir / source_file.relative_to(self.site_root), summary)

        logger.info(
            f"Website generated: {summary['pages']} pages, {summary['feed_pages']} feed pages, "
            f"{summary['category_pages']} category pages, {summary['profiles']} profiles"
        )
        return summary

    def _pathname(self, html_file: Path) -> str:
        return "/" + html_file.relative_to(self.output_dir).as_posix()

    def _generate_page(self, html_file: Path, summary: Dict[str, int]):
        with open(html_file, 'r', encoding='utf-8') as f:
            html = f.read()

        soup = BeautifulSoup(html, 'html.parser')
        changed = False

        topic = soup.body.get(FEED_ATTR) if soup.body is not None else None
        if topic:
            if topic not in self.feeds:
                logger.warning(f"{html_file} refers to unknown feed '{topic}'")
            else:
                self._fill_feed_page(soup, topic, html_file)
                summary["feed_pages"] += 1
                summary["category_pages"] += self._generate_category_pages(html, topic, html_file)
                changed = True

        activity = soup.find(id=ACTIVITY_CONTAINER_ID)
        if activity is not None:
            self._fill_profile_activity(soup, activity, html_file)
            summary["profiles"] += 1
            changed = True

        if changed:
            self._write_page(html_file, soup)

    def _categories(self, topic: str) -> List[str]:
        categories = []
        for category in unique_categories(self.feeds.get(topic, [])):
            if CATEGORY_SLUG.match(category):
                categories.append(category)
            else:
                logger.warning(f"Skipping category page for unsafe category name {category!r}")
        return categories

    def _base_path(self, html_file: Path) -> str:
        return self._pathname(html_file)[:-len(html_file.suffix)]

    def _fill_feed_page(self, soup: BeautifulSoup, topic: str, html_file: Path,
                        category: Optional[str] = None):
        entries = self.feeds.get(topic, [])
        filter_bar = soup.find(id=FILTER_BAR_ID)
        if filter_bar is not None:
            render_filter_bar(
                self._categories(topic),
                active=category,
                container=ElementSink(filter_bar),
                base_path=self._base_path(html_file),
                entries=entries,
            )

        feed_container = soup.find(id=FEED_CONTAINER_ID)
        if feed_container is None:
            logger.warning(f"{html_file} has no #{FEED_CONTAINER_ID} element")
            return
        render_feed_list(entries, container=ElementSink(feed_container), category=category)

    def _generate_category_pages(self, html: str, topic: str, html_file: Path) -> int:
        """Write <page>/<category>.html for every category of the page's feed"""
        page_dir = html_file.with_suffix("")
        count = 0
        for category in self._categories(topic):
            soup = BeautifulSoup(html, 'html.parser')
            self._fill_feed_page(soup, topic, html_file, category=category)
            page_dir.mkdir(parents=True, exist_ok=True)
            self._write_page(page_dir / f"{category}.html", soup)
            count += 1
        return count

    def _fill_profile_activity(self, soup: BeautifulSoup, activity, html_file: Path):
        context = PageContext.from_soup(soup, self._pathname(html_file))
        slug = get_candidate_slug(context)
        entries = filter_by_candidate(self.feeds.get(FEED_CONFIG["profile_feed"], []), slug)
        render_profile_feed(entries, ElementSink(activity))
        logger.debug(f"Rendered {len(entries)} activity entries for profile '{slug}'")

    def _write_page(self, path: Path, soup: BeautifulSoup):
        with open(path, 'w', encoding='utf-8') as f:
            f.write(str(soup))
