#!/usr/bin/env python3
"""
Ghost Exporter - export Ghost CMS content to static-site markdown.

Fetches posts and pages (and optionally tags and authors) from the Ghost
Content API, downloads every referenced image, rewrites image URLs to local
paths and writes markdown files with front-matter. Unchanged content is
restored from the build cache instead of being regenerated.

Usage:
    python -m ghost_exporter.main --url https://cms.example --key <content-key>

Environment:
    GHOST_URL, GHOST_KEY    Used when --url / --key are not given
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from ghost_exporter.config import ExportConfig, build_config
from ghost_exporter.errors import BuildFailure, ConfigError
from ghost_exporter.exporter import SyncOrchestrator, SyncReport
from ghost_exporter.exporter.lexer import LEXERS
from ghost_exporter.utils.log import (
    setup_logger,
    print_status,
    print_success,
    print_error,
    print_info
)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog='ghost-exporter',
        description='Export Ghost CMS content to markdown for static-site generators',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s --url https://cms.example --key 22444f78447824223cefc48062
    %(prog)s --config ghost.yml --tag-pages --author-pages
    %(prog)s --base-dir ./site --cache-dir /tmp/ghost-cache --no-date-prefix
        """
    )

    parser.add_argument(
        '--config', '-f',
        type=str,
        help='YAML configuration file (keys match ExportConfig fields)'
    )

    parser.add_argument('--url', '-u', dest='ghost_url', help='Ghost site URL')
    parser.add_argument('--key', '-k', dest='ghost_key', help='Ghost Content API key')
    parser.add_argument('--api-version', dest='api_version', help='Content API version')

    parser.add_argument(
        '--base-dir', '-o',
        dest='base_dir',
        help='Build root all output paths are relative to (default: .)'
    )
    parser.add_argument('--assets-dir', dest='assets_dir', help='Image output directory')
    parser.add_argument('--posts-dir', dest='posts_dir', help='Post output directory')
    parser.add_argument('--pages-dir', dest='pages_dir', help='Page output directory')
    parser.add_argument('--tags-dir', dest='tags_dir', help='Tag page output directory')
    parser.add_argument('--authors-dir', dest='authors_dir', help='Author page output directory')

    parser.add_argument('--posts-layout', dest='posts_layout', help='Layout for posts')
    parser.add_argument('--pages-layout', dest='pages_layout', help='Layout for pages')
    parser.add_argument('--tags-layout', dest='tags_layout', help='Layout for tag pages')
    parser.add_argument('--authors-layout', dest='authors_layout', help='Layout for author pages')

    parser.add_argument(
        '--tag-pages',
        dest='tag_pages',
        action='store_true',
        default=None,
        help='Generate a listing page per tag'
    )
    parser.add_argument(
        '--author-pages',
        dest='author_pages',
        action='store_true',
        default=None,
        help='Generate a listing page per author'
    )
    parser.add_argument(
        '--no-date-prefix',
        dest='post_date_prefix',
        action='store_false',
        default=None,
        help='Do not prefix post file names and permalinks with the publish date'
    )

    parser.add_argument('--cache-dir', dest='cache_dir', help='Persistent cache directory')
    parser.add_argument('--cache-file', dest='cache_file', help='Sync timestamp file')

    parser.add_argument(
        '--lexer',
        dest='asset_lexer',
        choices=sorted(LEXERS),
        help='How image URLs are found in post bodies (default: quoted)'
    )
    parser.add_argument(
        '--concurrency', '-c',
        type=int,
        help='Maximum concurrent image downloads (default: 10)'
    )
    parser.add_argument('--timeout', type=int, help='HTTP timeout in seconds (default: 30)')

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )
    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress output except errors'
    )
    parser.add_argument('--log-file', help='Also write logs to this file')

    return parser.parse_args(argv)


CONFIG_OPTIONS = (
    'ghost_url', 'ghost_key', 'api_version', 'base_dir', 'assets_dir',
    'posts_dir', 'pages_dir', 'tags_dir', 'authors_dir', 'posts_layout',
    'pages_layout', 'tags_layout', 'authors_layout', 'tag_pages',
    'author_pages', 'post_date_prefix', 'cache_dir', 'cache_file',
    'asset_lexer', 'concurrency', 'timeout',
)


def overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Config overrides given on the command line."""
    overrides = {name: getattr(args, name) for name in CONFIG_OPTIONS}
    if overrides['base_dir']:
        overrides['base_dir'] = os.path.abspath(overrides['base_dir'])
    return overrides


def print_summary(report: SyncReport) -> None:
    """
    Print the export summary.

    Args:
        report: SyncReport of the run
    """
    print("\n" + "=" * 60)
    print_success("EXPORT SUMMARY")
    print("=" * 60)
    for kind, count in report.items.items():
        print(f"  {kind + 's:':<19}{count}")
    print(f"  Documents written: {report.documents_written}")
    print(f"  Documents cached:  {report.documents_restored}")
    print(f"  Images downloaded: {report.assets_downloaded}")
    print(f"  Images cached:     {report.assets_restored}")
    print(f"  Previous sync:     {report.previous_sync}")
    print(f"  Synced at:         {report.synced_at}")
    print(f"  Duration:          {report.duration_seconds:.1f} seconds")
    print("=" * 60 + "\n")


async def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the Ghost exporter.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_arguments(argv)

    log_level = logging.DEBUG if args.verbose else (logging.WARNING if args.quiet else logging.INFO)
    setup_logger(level=log_level, log_file=args.log_file)

    try:
        config: ExportConfig = build_config(args.config, overrides_from_args(args))

        if not args.quiet:
            print_status("Ghost Exporter", "bold cyan")
            print_info(f"Ghost site: {config.ghost_url}")
            print_info(f"Kinds: {', '.join(kind.value for kind in config.enabled_kinds())}")

        report = await SyncOrchestrator(config).run()

        if not args.quiet:
            print_summary(report)

        return 0

    except KeyboardInterrupt:
        print_error("\nExport interrupted by user")
        return 1
    except ConfigError as e:
        print_error(f"Invalid configuration: {e}")
        return 1
    except BuildFailure as e:
        print_error(f"{e.label}: {e}")
        for failure in getattr(e, 'failures', []):
            print_error(f"  {failure}")
        return 1


def run() -> None:
    """Entry point wrapper for running as module."""
    sys.exit(asyncio.run(main()))


if __name__ == '__main__':
    run()
