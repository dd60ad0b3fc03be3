"""
Main orchestrator for Comal County GOP Watch
Builds the static site with feed and profile containers rendered.
"""
import argparse
import logging
import sys

from config import SITE_CONFIG
from link_checker import check_site
from website_generator import WebsiteGenerator

logger = logging.getLogger(__name__)


def build_site(site_root=None, output_dir=None, check: bool = False) -> int:
    """Generate the site, optionally checking the result; returns an exit status"""
    generator = WebsiteGenerator(site_root=site_root, output_dir=output_dir)
    try:
        summary = generator.generate()
    except (OSError, ValueError) as e:
        logger.error(f"Website generation failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(
        f"Built {summary['pages']} pages into {generator.output_dir} "
        f"({summary['feed_pages']} feed pages, {summary['category_pages']} category pages, "
        f"{summary['profiles']} profiles)"
    )

    if check:
        problems = check_site(generator.output_dir)
        for problem in problems:
            print(problem)
        if problems:
            logger.error(f"{len(problems)} problem(s) found in generated site")
            return 1
    return 0


def main(argv=None) -> int:
    """Main entry point"""
    logging.basicConfig(
        level=SITE_CONFIG["log_level"],
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    parser = argparse.ArgumentParser(description="Comal County GOP Watch site builder")
    parser.add_argument(
        "--site-root",
        default=SITE_CONFIG["site_root"],
        help="Content set to build from"
    )
    parser.add_argument(
        "--output",
        default=SITE_CONFIG["output_dir"],
        help="Directory to write the built site to"
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Run the link and profile checks on the built site"
    )
    args = parser.parse_args(argv)

    return build_site(args.site_root, args.output, check=args.check)


if __name__ == "__main__":
    sys.exit(main())
