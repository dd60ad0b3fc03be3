"""
Configuration file for Comal County GOP Watch
"""
import os
from dotenv import load_dotenv

load_dotenv()

VERSION = "1.0.0"

# Locale Configuration
LOCALE = "Comal County, TX"
SITE_NAME = "Comal County GOP Watch"

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _resolve(path: str) -> str:
    """Resolve a configured path relative to the project directory"""
    return path if os.path.isabs(path) else os.path.join(BASE_DIR, path)


# Site Configuration
SITE_ROOT = _resolve(os.getenv("SITE_ROOT", "site"))
SITE_CONFIG = {
    "title": SITE_NAME,
    "description": f"Candidates, public policy and business news from {LOCALE}",
    "site_root": SITE_ROOT,
    "output_dir": _resolve(os.getenv("BUILD_DIR", "build")),
    "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
}

# Feed Store - one JSON array per topic, paths relative to the site root
FEED_FILES = {
    "candidates": "data/candidate-news.json",
    "policy": "data/policy-feed.json",
    "business": "data/business-watch.json",
}

FEED_CONFIG = {
    "timeout": int(os.getenv("FEED_TIMEOUT", "10")),
    "user_agent": "CountyWatchBot/1.0",
    # Topic whose entries carry relatedCandidate slugs for profile pages
    "profile_feed": "candidates",
}

# Display names for the filter bar; unknown categories fall back to a title-cased slug
FEED_CATEGORIES = {
    "all": "All",
    "elections": "Elections",
    "county-government": "County Government",
    "local-government": "Local Government",
    "legislation": "Legislation",
    "public-safety": "Public Safety",
    "development": "Development",
    "business": "Business",
    "economy": "Economy",
}

# Article generator
ARTICLE_CONFIG = {
    "articles_dir": "articles",
    "template_name": "template.html",
    "template_path": os.getenv("ARTICLE_TEMPLATE", ""),  # empty = <site_root>/articles/template.html
    "extension": ".html",
}

# Link / structure checker
CHECKER_CONFIG = {
    "skip_dirs": ["node_modules", ".git", "test", "tests"],
    "checked_extensions": [".html", ".css", ".js", ".json"],
    "external_prefixes": ["http://", "https://", "mailto:", "tel:"],
    "officials_registry": "data/officials.json",
    "profiles_dir": "profiles",
}
