#!/usr/bin/env python3

import argparse
import json
import sys
from typing import List, Optional

from colored_logger import setup_colored_logging, get_colored_logger
from content_index import (
    ContentIndexer,
    FacetIndex,
    FacetSelection,
    SearchEngine,
    SearchQuery,
    filter_posts,
    paginate,
)
from settings import DEFAULT_SETTINGS_FILE, Settings

logger = get_colored_logger(__name__)


class SearchCLI:
    """
    Command-line interface for browsing and searching the blog index.

    Provides commands for:
    - Listing posts with tag/topic filters and pagination
    - Fuzzy full-text search with facet filters
    - Showing a single post by slug
    - Listing tags and topics with usage counts
    - Viewing index build statistics
    """

    def __init__(self, settings: Optional[Settings] = None, indexer: ContentIndexer = None):
        """
        Args:
            settings: Settings instance. If None, loaded from --settings on run.
            indexer: ContentIndexer instance. If None, built from settings.
        """
        self.settings = settings
        self.indexer = indexer
        self._search_engine: Optional[SearchEngine] = None

    @property
    def search_engine(self) -> SearchEngine:
        if self._search_engine is None:
            self._search_engine = SearchEngine.from_indexer(
                self.indexer, threshold=self.settings.search_threshold
            )
        return self._search_engine

    def run(self, args: List[str] = None) -> int:
        """
        Run the search CLI with the given arguments.

        Args:
            args: Command line arguments. If None, uses sys.argv.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        try:
            parser = self._create_parser()
            parsed_args = parser.parse_args(args)

            setup_colored_logging(level="DEBUG" if parsed_args.verbose else "WARNING")

            if not hasattr(parsed_args, "func"):
                parser.print_help()
                return 1

            if self.settings is None:
                self.settings = Settings(parsed_args.settings)
            if self.indexer is None:
                self.indexer = ContentIndexer.from_settings(self.settings)

            return parsed_args.func(parsed_args)

        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 1
        except Exception as e:
            logger.error("Unexpected error: %s", e)
            return 1

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser with all subcommands."""
        parser = argparse.ArgumentParser(
            prog="blog-search",
            description="Browse and search the blog content index",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  %(prog)s list                              # Newest posts first
  %(prog)s list --tag react --topic Basics   # Posts carrying both filters
  %(prog)s search "vite deployment"          # Fuzzy search
  %(prog)s search hooks -t react -l 5        # Search within a tag
  %(prog)s show deployment-vercel            # Show one post
  %(prog)s tags                              # Tag and topic counts
            """,
        )

        parser.add_argument(
            "-v", "--verbose", action="store_true", help="Enable verbose logging"
        )
        parser.add_argument(
            "--settings",
            default=DEFAULT_SETTINGS_FILE,
            help=f"Path to settings file (default: {DEFAULT_SETTINGS_FILE})",
        )

        subparsers = parser.add_subparsers(dest="command", help="Available commands")

        self._add_list_parser(subparsers)
        self._add_search_parser(subparsers)
        self._add_show_parser(subparsers)
        self._add_tags_parser(subparsers)
        self._add_stats_parser(subparsers)

        return parser

    @staticmethod
    def _add_facet_arguments(subparser) -> None:
        subparser.add_argument(
            "-t",
            "--tag",
            action="append",
            help="Require a tag (can be used multiple times)",
        )
        subparser.add_argument(
            "--topic",
            action="append",
            help="Require a topic (can be used multiple times)",
        )
        subparser.add_argument(
            "--format",
            choices=["table", "list", "json"],
            default="table",
            help="Output format (default: table)",
        )

    def _add_list_parser(self, subparsers):
        list_parser = subparsers.add_parser("list", help="List posts, newest first")
        self._add_facet_arguments(list_parser)
        list_parser.add_argument(
            "-p",
            "--pages",
            type=int,
            default=1,
            help="Number of pages to show (default: 1)",
        )
        list_parser.add_argument(
            "--page-size", type=int, help="Posts per page (default: from settings)"
        )
        list_parser.set_defaults(func=self._cmd_list)

    def _add_search_parser(self, subparsers):
        search_parser = subparsers.add_parser("search", help="Search posts")
        search_parser.add_argument(
            "query",
            nargs="?",
            default="",
            help="Search text (leave empty to list all posts)",
        )
        self._add_facet_arguments(search_parser)
        search_parser.add_argument(
            "-l",
            "--limit",
            type=int,
            default=20,
            help="Maximum results to show (default: 20)",
        )
        search_parser.set_defaults(func=self._cmd_search)

    def _add_show_parser(self, subparsers):
        show_parser = subparsers.add_parser("show", help="Show a single post")
        show_parser.add_argument("slug", help="Post slug")
        show_parser.add_argument(
            "--body", action="store_true", help="Include the plain-text body"
        )
        show_parser.set_defaults(func=self._cmd_show)

    def _add_tags_parser(self, subparsers):
        tags_parser = subparsers.add_parser("tags", help="List tags and topics")
        tags_parser.add_argument(
            "-l",
            "--limit",
            type=int,
            default=50,
            help="Maximum entries per facet (default: 50)",
        )
        tags_parser.set_defaults(func=self._cmd_tags)

    def _add_stats_parser(self, subparsers):
        stats_parser = subparsers.add_parser("stats", help="Show index statistics")
        stats_parser.set_defaults(func=self._cmd_stats)

    # Command implementations
    def _cmd_list(self, args) -> int:
        selection = FacetSelection(tags=set(args.tag or []), topics=set(args.topic or []))
        posts = filter_posts(self.indexer.get_all_posts(), selection)
        page_size = self.settings.page_size if args.page_size is None else args.page_size

        try:
            visible, has_more = paginate(posts, args.pages, page_size)
        except ValueError as e:
            logger.error("%s", e)
            return 1

        if not visible:
            print("No posts found.")
            return 0

        if args.format == "json":
            print(json.dumps([post.to_dict() for post in visible], indent=2, ensure_ascii=False))
        else:
            self._print_posts(visible, args.format)
            if has_more:
                print(f"\n{len(posts) - len(visible)} more post(s), use --pages to show more.")
        return 0

    def _cmd_search(self, args) -> int:
        query = SearchQuery(
            text=args.query,
            tags=set(args.tag or []),
            topics=set(args.topic or []),
            limit=args.limit,
        )
        results = self.search_engine.search(query)

        if not results:
            print(f'No results for "{query.text}".')
            return 0

        self._display_search_results(results, args.format)
        return 0

    def _cmd_show(self, args) -> int:
        post = self.indexer.get_post_by_slug(args.slug)
        if post is None:
            print(f"❌ No post with slug: {args.slug}")
            return 1

        print(json.dumps(post.to_dict(include_body=args.body), indent=2, ensure_ascii=False))
        return 0

    def _cmd_tags(self, args) -> int:
        facets = FacetIndex.from_posts(self.indexer.get_all_posts())

        if not facets.tag_counts and not facets.topic_counts:
            print("No tags found.")
            return 0

        for heading, counts in (("Tags", facets.tag_counts), ("Topics", facets.topic_counts)):
            print(f"\n{heading} ({len(counts)}):")
            print(f"{'Name':<30} {'Posts':<8}")
            print("-" * 40)
            for name, count in counts[: args.limit]:
                print(f"{name:<30} {count:<8}")

        return 0

    def _cmd_stats(self, args) -> int:
        posts = self.indexer.get_all_posts()
        stats = self.indexer.get_indexing_stats()
        facets = FacetIndex.from_posts(posts)

        print("\nContent Index Statistics:")
        print(f"  Content root: {self.indexer.content_root}")
        print(f"  Total posts: {len(posts):,}")
        print(f"  Files discovered: {stats['files_discovered']:,}")
        print(f"  Files failed: {stats['files_failed']:,}")
        print(f"  Files without header: {stats['files_without_header']:,}")
        print(f"  Distinct tags: {len(facets.tag_counts):,}")
        print(f"  Distinct topics: {len(facets.topic_counts):,}")
        print(f"  Build time: {stats['elapsed_time']:.2f} seconds")

        if self.indexer.collisions:
            print(f"  ⚠️  Slug collisions: {len(self.indexer.collisions)}")
            for slug, paths in sorted(self.indexer.collisions.items()):
                print(f"    {slug}: {', '.join(paths)}")

        return 0

    def _print_posts(self, posts, format_type: str) -> None:
        if format_type == "list":
            for i, post in enumerate(posts, 1):
                print(f"{i}. {post.title}")
                print(f"   Date: {post.date} | Slug: {post.slug}")
                if post.tags:
                    print(f"   Tags: {', '.join(post.tags)}")
                if post.topics:
                    print(f"   Topics: {', '.join(post.topics)}")
                if post.excerpt:
                    print(f"   {post.excerpt}")
                print()
            return

        print(f"\n{'#':<3} {'Date':<11} {'Title':<40} {'Slug':<30}")
        print("-" * 86)
        for i, post in enumerate(posts, 1):
            title = post.title[:37] + "..." if len(post.title) > 40 else post.title
            slug = post.slug[:27] + "..." if len(post.slug) > 30 else post.slug
            print(f"{i:<3} {post.date:<11} {title:<40} {slug:<30}")

    def _display_search_results(self, results, format_type: str) -> None:
        """Display search results in the specified format."""
        if format_type == "json":
            output = []
            for result in results:
                entry = result.post.to_dict()
                entry["score"] = round(result.score, 4)
                entry["relevance"] = round(result.relevance, 4)
                entry["snippet"] = result.snippet
                output.append(entry)
            print(json.dumps(output, indent=2, ensure_ascii=False))

        elif format_type == "list":
            for i, result in enumerate(results, 1):
                post = result.post
                print(f"{i}. {post.title} ({result.relevance:.0%})")
                print(f"   Date: {post.date} | Slug: {post.slug}")
                if post.tags:
                    print(f"   Tags: {', '.join(post.tags)}")
                if result.snippet:
                    print(f"   {result.snippet}")
                print()

        else:  # table format
            print(f"\nFound {len(results)} result(s):")
            print(f"{'#':<3} {'Relevance':<10} {'Date':<11} {'Title':<40}")
            print("-" * 66)

            for i, result in enumerate(results, 1):
                title = (
                    result.post.title[:37] + "..."
                    if len(result.post.title) > 40
                    else result.post.title
                )
                print(
                    f"{i:<3} {result.relevance:<10.0%} {result.post.date:<11} {title:<40}"
                )


def main():
    """Main entry point for the search CLI."""
    cli = SearchCLI()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
