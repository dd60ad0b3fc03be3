#!/usr/bin/env python3
"""
Article generator for Comal County GOP Watch
Creates standalone article pages by filling the article template document.

Usage:
    python article_generator.py --slug "article-slug" --title "Article Title" \\
        --date "YYYY-MM-DD" --body "<p>Article content...</p>" \\
        [--tags "tag1,tag2"] [--sources "Source Name|url,Source Name 2"]

Template format:
    {{TITLE}} {{DATE_ISO}} {{DATE_FORMATTED}} {{BODY}}   always substituted
    {{#if SOURCES}} ... {{ITEMS}} ... {{/if}}            kept only when sources were given
    {{#if TAGS}} ... {{ITEMS}} ... {{/if}}               kept only when tags were given
"""
import argparse
import logging
import os
import re
import stat
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from typing import List, Dict, Optional, Tuple

from config import ARTICLE_CONFIG, SITE_CONFIG

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("slug", "title", "date", "body")
SLUG_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")
DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
REGION_MARKER = re.compile(r"\{\{(?:#if\s+([A-Z][A-Z0-9_]*)|/if)\}\}")
PLACEHOLDER = re.compile(r"\{\{([A-Z][A-Z0-9_]*)\}\}")
ITEMS_LINE = re.compile(r"^([ \t]*)\{\{ITEMS\}\}", re.MULTILINE)

USAGE = """Usage: python article_generator.py \\
  --slug "article-slug" \\
  --title "Article Title" \\
  --date "YYYY-MM-DD" \\
  --body "<p>Article content...</p>" \\
  --tags "tag1,tag2,tag3" \\
  --sources "Source Name|url,Source Name 2\""""


class ArticleGenerationError(Exception):
    """Base class for article generation failures"""


class MissingFieldError(ArticleGenerationError):
    """A required field was not supplied"""


class InvalidFieldError(ArticleGenerationError):
    """A field was supplied but cannot be used"""


class TemplateNotFoundError(ArticleGenerationError):
    """The template document does not exist"""


class TemplateFormatError(ArticleGenerationError):
    """Region markers in the template are unbalanced or nested"""


class FilesystemError(ArticleGenerationError):
    """The output document could not be written"""


def format_article_date(date_str: str) -> str:
    """"2026-02-10" -> "February 10, 2026".

    The date is pinned to noon so no timezone conversion can move it
    to a neighbouring day.
    """
    if not isinstance(date_str, str) or not DATE_PATTERN.fullmatch(date_str):
        raise InvalidFieldError(f"Date must be YYYY-MM-DD, got {date_str!r}")
    try:
        date = datetime.strptime(date_str, "%Y-%m-%d").replace(hour=12)
    except (TypeError, ValueError):
        raise InvalidFieldError(f"Date must be YYYY-MM-DD, got {date_str!r}")
    return f"{date.strftime('%B')} {date.day}, {date.year}"


def parse_sources(sources_str: Optional[str]) -> List[Dict[str, str]]:
    """Split "Name|URL,Other Name" into citation dicts; bare names have no url"""
    if not sources_str:
        return []

    sources = []
    for item in sources_str.split(','):
        item = item.strip()
        if not item:
            continue
        if '|' in item:
            name, url = item.split('|', 1)
            sources.append({"name": name.strip(), "url": url.strip()})
        else:
            sources.append({"name": item})
    return sources


def parse_tags(tags_str: Optional[str]) -> List[str]:
    if not tags_str:
        return []
    return [tag.strip() for tag in tags_str.split(',') if tag.strip()]


def render_source_items(sources: List[Dict[str, str]]) -> List[str]:
    items = []
    for source in sources:
        if source.get("url"):
            items.append(f'<li><a href="{source["url"]}" target="_blank" rel="noopener">{source["name"]}</a></li>')
        else:
            items.append(f'<li>{source["name"]}</li>')
    return items


def render_tag_items(tags: List[str]) -> List[str]:
    return [f'<span class="tag">{tag}</span>' for tag in tags]


def parse_template(template: str) -> List[Tuple[str, Optional[str], str]]:
    """Split a template into ("text", None, text) and ("region", KEY, body) segments.

    Each marker is consumed here exactly once, so content substituted
    later can never be mistaken for a region.
    """
    segments = []
    position = 0
    open_key = None

    for match in REGION_MARKER.finditer(template):
        key = match.group(1)
        if key:
            if open_key is not None:
                raise TemplateFormatError(f"Region {key} opened inside region {open_key}")
            segments.append(("text", None, template[position:match.start()]))
            open_key = key
        else:
            if open_key is None:
                raise TemplateFormatError(f"Unmatched {{{{/if}}}} at offset {match.start()}")
            segments.append(("region", open_key, template[position:match.start()]))
            open_key = None
        position = match.end()

    if open_key is not None:
        raise TemplateFormatError(f"Region {open_key} is never closed")

    segments.append(("text", None, template[position:]))
    return segments


def substitute_placeholders(text: str, values: Dict[str, str]) -> str:
    """Replace {{NAME}} tokens in one pass; substituted values are not rescanned"""
    def replace(match):
        name = match.group(1)
        if name in values:
            return values[name]
        logger.warning(f"Unknown placeholder {{{{{name}}}}} left in output")
        return match.group(0)

    return PLACEHOLDER.sub(replace, text)


def _render_region(body: str, items: List[str], values: Dict[str, str]) -> str:
    block = body.strip()
    indent_match = ITEMS_LINE.search(block)
    indent = indent_match.group(1) if indent_match else ""
    items_html = ("\n" + indent).join(items)
    return substitute_placeholders(block, dict(values, ITEMS=items_html))


def render_template(template: str, values: Dict[str, str], regions: Dict[str, List[str]]) -> str:
    """Fill placeholders and resolve conditional regions.

    A region with items is replaced by its body; a region without items
    is removed together with the whitespace in front of it.
    """
    output: List[str] = []
    for kind, key, text in parse_template(template):
        if kind == "text":
            output.append(substitute_placeholders(text, values))
            continue

        if key not in regions:
            logger.warning(f"Template region {key} has no data and will be removed")
        items = regions.get(key) or []
        if items:
            output.append(_render_region(text, items, values))
        else:
            while output and not output[-1].strip():
                output.pop()
            if output:
                output[-1] = output[-1].rstrip()

    return "".join(output)


def _output_mode(path: Path) -> int:
    """Mode for the written file: kept from the file being replaced, else the umask default"""
    if path.exists():
        return stat.S_IMODE(path.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _write_atomic(path: Path, content: str) -> None:
    """Write content to path via a temporary file so a failure leaves nothing behind"""
    temp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile('w', encoding='utf-8', dir=str(path.parent),
                                         prefix=f".{path.name}.", suffix='.tmp', delete=False) as tmp:
            temp_name = tmp.name
            tmp.write(content)
        # NamedTemporaryFile creates the file owner-only
        os.chmod(temp_name, _output_mode(path))
        os.replace(temp_name, path)
    except OSError as e:
        if temp_name and os.path.exists(temp_name):
            os.unlink(temp_name)
        raise FilesystemError(f"Could not write {path}: {e}") from e


def generate_article(slug: Optional[str] = None, title: Optional[str] = None,
                     date: Optional[str] = None, body: Optional[str] = None,
                     tags: Optional[str] = None, sources: Optional[str] = None,
                     site_root=None, template_path=None) -> str:
    """Create <site_root>/articles/<slug>.html and return its relative path.

    An existing article with the same slug is overwritten.
    Values are inserted literally; title and body must already be safe markup.
    """
    fields = {"slug": slug, "title": title, "date": date, "body": body}
    missing = [name for name in REQUIRED_FIELDS if not fields[name]]
    if missing:
        raise MissingFieldError(f"Missing required fields: {', '.join(missing)}")

    if not SLUG_PATTERN.match(slug):
        raise InvalidFieldError(f"Slug must contain only letters, digits, '-' and '_': {slug!r}")
    date_formatted = format_article_date(date)

    site_root = Path(site_root or SITE_CONFIG["site_root"])
    articles_dir = ARTICLE_CONFIG["articles_dir"]
    if template_path is None:
        template_path = ARTICLE_CONFIG["template_path"] or site_root / articles_dir / ARTICLE_CONFIG["template_name"]
    template_path = Path(template_path)
    if not template_path.is_file():
        raise TemplateNotFoundError(f"Template not found at {template_path}")

    try:
        with open(template_path, 'r', encoding='utf-8') as f:
            template = f.read()
    except OSError as e:
        raise FilesystemError(f"Could not read template {template_path}: {e}") from e

    values = {
        "TITLE": title,
        "DATE_ISO": date,
        "DATE_FORMATTED": date_formatted,
        "BODY": body,
    }
    regions = {
        "SOURCES": render_source_items(parse_sources(sources)),
        "TAGS": render_tag_items(parse_tags(tags)),
    }
    html = render_template(template, values, regions)

    filename = f"{slug}{ARTICLE_CONFIG['extension']}"
    output_path = site_root / articles_dir / filename
    if output_path.exists():
        logger.info(f"Overwriting existing article {output_path}")
    _write_atomic(output_path, html)
    logger.info(f"Wrote article {output_path}")

    return f"{articles_dir}/{filename}"


class _ArgumentParser(argparse.ArgumentParser):
    """Argument errors are reported like any other generation failure"""

    def error(self, message):
        raise InvalidFieldError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(description="Generate a standalone article page", add_help=False)
    parser.add_argument("--slug", help="Output file name, e.g. county-budget-vote")
    parser.add_argument("--title", help="Article title")
    parser.add_argument("--date", help="Publication date, YYYY-MM-DD")
    parser.add_argument("--body", help="Article body markup")
    parser.add_argument("--tags", help="Comma-separated tags")
    parser.add_argument("--sources", help="Comma-separated sources, each 'Name' or 'Name|URL'")
    parser.add_argument("--site-root", help="Site directory holding articles/template.html")
    parser.add_argument("--template", help="Template document to use instead of the site template")
    return parser


def main(argv=None) -> int:
    """Main entry point"""
    logging.basicConfig(
        level=SITE_CONFIG["log_level"],
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    argv = sys.argv[1:] if argv is None else list(argv)

    if not argv:
        print(USAGE)
        return 1
    if "-h" in argv or "--help" in argv:
        print(USAGE)
        return 0

    try:
        args = build_parser().parse_args(argv)
        article_path = generate_article(
            slug=args.slug,
            title=args.title,
            date=args.date,
            body=args.body,
            tags=args.tags,
            sources=args.sources,
            site_root=args.site_root,
            template_path=args.template,
        )
    except ArticleGenerationError as e:
        logger.debug(f"Article generation failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(article_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
