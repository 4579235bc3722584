"""Sync CLI commands."""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from typing import Any

import yaml

from designspec_engine.config import Settings, load_settings
from designspec_engine.providers import DocumentStore, ProviderError
from designspec_engine.providers.figma import FigmaClient
from designspec_engine.section.locator import AmbiguousSectionError


def _load(args: argparse.Namespace, *required: str) -> Settings | None:
    """Load settings and check required ones; prints the error and returns None on failure."""
    try:
        settings = load_settings(config_path=args.config)
        if getattr(args, "pr", None):
            settings = replace(settings, pr_number=str(args.pr))
        if getattr(args, "repository", None):
            settings = replace(settings, repository=args.repository)
        settings.require(*required)
        if "repository" in required:
            settings.owner_repo()
    except (ValueError, OSError, yaml.YAMLError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return None
    return settings


def _run(
    store: DocumentStore,
    ref: str,
    settings: Settings,
    dry_run: bool,
) -> dict[str, Any] | None:
    from designspec_engine.sync import sync_stored_document

    with FigmaClient(
        settings.figma_token,
        api_url=settings.figma_api_url,
        image_format=settings.image_format,
        timeout=settings.timeout,
    ) as figma:
        try:
            return sync_stored_document(
                store, ref, figma, dry_run=dry_run, host=settings.design_host,
            )
        except AmbiguousSectionError as e:
            print(f"ERROR: {e}", file=sys.stderr)
        except ProviderError as e:
            print(f"ERROR: {e}", file=sys.stderr)
    return None


def _print_result(result: dict[str, Any], target: str) -> None:
    print(f"Design Specs Sync — {target}")
    print("─" * 40)
    print(f"  Existing entries: {result['existing']}")
    print(f"  Links found:      {result['found']}")
    print(f"  Entries added:    {len(result['entries'])}")
    for e in result["entries"]:
        print(f"    - #{e['number']}: {e['file_id']} {e['node_id']} @ {e['version']}")
    if result["errors"]:
        print(f"  Errors:           {len(result['errors'])}")
        for e in result["errors"]:
            print(f"    - {e['url']}: {e['error']}")
    if result["action"] == "unchanged":
        print("\nNo updates needed.")
    elif result.get("dry_run"):
        print("\n[DRY RUN] Nothing was written.")


def cmd_sync(args: argparse.Namespace) -> int:
    from designspec_engine.providers.github import GitHubPullRequestStore

    settings = _load(args, "figma_token", "github_token", "pr_number", "repository")
    if settings is None:
        return 1

    owner, repo = settings.owner_repo()
    with GitHubPullRequestStore(
        owner, repo, settings.github_token,
        api_url=settings.github_api_url,
        timeout=settings.timeout,
    ) as store:
        result = _run(store, settings.pr_number, settings, args.dry_run)
    if result is None:
        return 1

    _print_result(result, f"{owner}/{repo}#{settings.pr_number}")
    return 1 if result["errors"] else 0


def cmd_sync_file(args: argparse.Namespace) -> int:
    from designspec_engine.providers.local import LocalFileStore

    settings = _load(args, "figma_token")
    if settings is None:
        return 1

    result = _run(LocalFileStore(), args.path, settings, args.dry_run)
    if result is None:
        return 1

    if args.dry_run and result["action"] == "updated":
        print(result["document"])
        print()
    _print_result(result, args.path)
    return 1 if result["errors"] else 0
