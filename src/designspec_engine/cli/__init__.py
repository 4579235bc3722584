"""Command-line interface for the design spec engine.

Usage:
    designspec sync [--pr N] [--repository owner/repo] [--dry-run]
    designspec sync-file <path> [--dry-run]
    designspec parse <url>
    designspec inspect <path>
"""

from __future__ import annotations

import argparse
import logging
import sys

from designspec_engine.cli.inspect import cmd_inspect, cmd_parse
from designspec_engine.cli.sync import cmd_sync, cmd_sync_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="designspec",
        description="Catalog design links in pull-request descriptions",
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to a YAML settings file (default: .github/design-specs.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log progress to stderr",
    )
    sub = parser.add_subparsers(dest="command")

    # sync
    sync = sub.add_parser("sync", help="Sync the Design Specs section of a pull request")
    sync.add_argument(
        "--pr", default=None,
        help="Pull request number (default: $PR_NUMBER)",
    )
    sync.add_argument(
        "--repository", default=None,
        help="owner/repo (default: $GITHUB_REPOSITORY)",
    )
    sync.add_argument(
        "--dry-run", action="store_true",
        help="Report changes without writing",
    )

    # sync-file
    sync_file = sub.add_parser("sync-file", help="Sync the Design Specs section of a markdown file")
    sync_file.add_argument("path", help="Markdown file")
    sync_file.add_argument(
        "--dry-run", action="store_true",
        help="Print the result instead of writing it",
    )

    # parse
    parse = sub.add_parser("parse", help="Show the identifiers in a design URL")
    parse.add_argument("url")

    # inspect
    inspect = sub.add_parser("inspect", help="Offline report on a markdown file's section and links")
    inspect.add_argument("path", help="Markdown file")

    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    dispatch = {
        "sync": cmd_sync,
        "sync-file": cmd_sync_file,
        "parse": cmd_parse,
        "inspect": cmd_inspect,
    }
    return dispatch[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
