#!/usr/bin/env python3
"""
Post-build feed generator.

Writes sitemap.xml and rss.xml for the blog into the output directory.
Exits non-zero when the content root cannot be read.

Usage:
    python cli_feeds.py [--settings settings.json] [--output dist] [--strict]
"""

import argparse
import sys
from typing import List

from colored_logger import setup_colored_logging, get_colored_logger
from content_index import ContentDiscoveryError, ContentIndexer, SlugCollisionError
from feeds import FeedGenerator
from settings import DEFAULT_SETTINGS_FILE, Settings

logger = get_colored_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blog-feeds",
        description="Generate sitemap.xml and rss.xml from the blog content",
    )
    parser.add_argument(
        "--settings",
        default=DEFAULT_SETTINGS_FILE,
        help=f"Path to settings file (default: {DEFAULT_SETTINGS_FILE})",
    )
    parser.add_argument(
        "-c", "--content-root", help="Content directory (default: from settings)"
    )
    parser.add_argument(
        "-o", "--output", help="Output directory (default: from settings)"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when two source files derive the same slug",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )
    return parser


def main(argv: List[str] = None) -> int:
    """Main entry point for the feed generator."""
    args = create_parser().parse_args(argv)
    setup_colored_logging(level="DEBUG" if args.verbose else "INFO")

    try:
        settings = Settings(args.settings)
        if args.content_root:
            settings.content_root = args.content_root

        indexer = ContentIndexer.from_settings(
            settings, strict_slugs=True if args.strict else None
        )
        written = FeedGenerator(settings, indexer).generate(output_dir=args.output)

    except ContentDiscoveryError as e:
        logger.failure("Feed generation failed: %s", e)
        return 1
    except SlugCollisionError as e:
        logger.failure("Feed generation failed: %s", e)
        return 1
    except OSError as e:
        logger.failure("Could not write feed artifacts: %s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 1
    except Exception as e:
        logger.failure("Unexpected error during feed generation: %s", e)
        return 1

    for name, path in written.items():
        print(f"  {name}: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
