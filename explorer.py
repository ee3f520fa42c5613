#!/usr/bin/env python3
"""Book Feed Explorer CLI - paginated Open Library browsing."""
import argparse
import asyncio
import functools
import sys
import json
from tabulate import tabulate
from bookfeed.async_client import AsyncOpenLibraryClient
from bookfeed.client import OpenLibraryClient
from bookfeed.config import Config
from bookfeed.controller import FeedController
from bookfeed.highlight import highlight
from bookfeed.models import Category, FilterSignature
from bookfeed.parse import openlibrary_url, summarize_description
from bookfeed.query import resolve
from bookfeed.trigger import ScrollTrigger
import logging

logger = logging.getLogger(__name__)


def configure_logging(config: Config):
    """Configure root logging once for the CLI."""
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


async def browse_feed(args, config: Config):
    """Load pages of the feed the way a scrolling reader would."""
    signature = FilterSignature(category=args.category, search_term=args.search)

    async with AsyncOpenLibraryClient(
        timeout=config.DEFAULT_TIMEOUT,
        max_concurrent=config.DEFAULT_MAX_CONCURRENT
    ) as client:

        controller = FeedController(
            client.fetch_page,
            resolver=functools.partial(resolve, base_url=config.OPENLIBRARY_BASE_URL)
        )
        trigger = ScrollTrigger(controller, threshold=config.SCROLL_THRESHOLD)

        logger.info(f"Browsing category={signature.category.value} search={signature.search_term!r}")
        await controller.set_filter(signature)

        pages = 1
        # No automatic retry: stop at the first failed page
        while pages < args.pages and controller.can_load_more and controller.last_error is None:
            await trigger.fire()
            pages += 1

        if controller.last_error is not None:
            logger.error(f"Feed stopped growing: {controller.last_error}")

        logger.info(f"Loaded {len(controller.items)} books (next offset {controller.offset})")
        if controller.exhausted:
            logger.info("Reached end of results")

        display_books(controller.items, args.format, args.search)


def display_books(books, format_type: str, search: str = ""):
    """Display books in specified format."""
    if not books:
        print("No books found")
        return

    if format_type == "table":
        headers = ["Title", "Authors", "First published", "Cover"]
        rows = [
            [
                highlight(_truncate(book.title, 50), search, "[", "]"),
                _truncate(book.authors_str, 30),
                book.first_publish_year or "N/A",
                book.cover_url
            ]
            for book in books
        ]
        print("\n" + tabulate(rows, headers=headers, tablefmt="grid"))

    elif format_type == "json":
        books_dict = [
            {
                "id": book.id,
                "title": book.title,
                "title_html": highlight(book.title, search),
                "authors": book.authors,
                "first_publish_year": book.first_publish_year,
                "subjects": book.subjects,
                "cover_url": book.cover_url,
                "description": summarize_description(book),
                "url": openlibrary_url(book)
            }
            for book in books
        ]
        print(json.dumps(books_dict, indent=2))

    elif format_type == "compact":
        for i, book in enumerate(books, 1):
            print(f"{i}. {highlight(book.title, search, '[', ']')} - {book.authors_str}")


def _truncate(text: str, width: int) -> str:
    return text[:width] + "..." if len(text) > width else text


def show_detail(args, config: Config):
    """Show enrichment data for a single work."""
    with OpenLibraryClient(
        base_url=config.OPENLIBRARY_BASE_URL,
        timeout=config.DEFAULT_TIMEOUT,
        max_retries=config.DEFAULT_MAX_RETRIES
    ) as client:
        detail = client.get_book_detail(args.key)

    if detail is None:
        print(f"No details available for {args.key}")
        return

    if args.format == "json":
        print(json.dumps({
            "key": detail.key,
            "title": detail.title,
            "description": detail.description,
            "subjects": detail.subjects,
            "first_publish_date": detail.first_publish_date,
            "covers": detail.covers
        }, indent=2))
    else:
        rows = [
            ["Key", detail.key],
            ["Title", detail.title or "Unknown"],
            ["First published", detail.first_publish_date or "N/A"],
            ["Subjects", _truncate(", ".join(detail.subjects) or "Unknown", 60)],
            ["Description", _truncate(detail.description or "No description available.", 300)]
        ]
        print("\n" + tabulate(rows, tablefmt="grid", maxcolwidths=[None, 80]))


def list_categories(args, config: Config):
    """Print the browsable categories."""
    for category in Category:
        print(category.value)


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Book Feed Explorer - paginated Open Library browsing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Default browse, first page
  %(prog)s browse

  # Three pages of a subject
  %(prog)s browse --category science --pages 3

  # Title search (overrides the category)
  %(prog)s browse --search "dune" --format compact

  # Detail lookup
  %(prog)s detail /works/OL893415W
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Browse command
    browse_parser = subparsers.add_parser("browse", help="Browse the feed")
    browse_parser.add_argument("--category", choices=[c.value for c in Category], default="all", help="Subject category (default: all)")
    browse_parser.add_argument("--search", default="", help="Title search term")
    browse_parser.add_argument("--pages", type=int, default=1, help="Pages to load (default: 1)")
    browse_parser.add_argument("--format", choices=["table", "json", "compact"], default="table", help="Output format")

    # Detail command
    detail_parser = subparsers.add_parser("detail", help="Show details for a work key")
    detail_parser.add_argument("key", help="Detail key, e.g. /works/OL893415W")
    detail_parser.add_argument("--format", choices=["table", "json"], default="table", help="Output format")

    # Categories command
    subparsers.add_parser("categories", help="List categories")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = Config()
    configure_logging(config)

    try:
        if args.command == "browse":
            asyncio.run(browse_feed(args, config))

        elif args.command == "detail":
            show_detail(args, config)

        elif args.command == "categories":
            list_categories(args, config)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
