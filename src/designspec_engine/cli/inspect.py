"""Offline inspection commands (no API calls and no writes)."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import yaml

from designspec_engine.config import load_settings
from designspec_engine.links.parser import parse_url
from designspec_engine.section.locator import AmbiguousSectionError
from designspec_engine.section.splicer import insertion_mode
from designspec_engine.sync import analyze_document


def cmd_parse(args: argparse.Namespace) -> int:
    parsed = parse_url(args.url)
    if parsed is None:
        print(f"Not a design link (needs /design/<file>/ and node-id): {args.url}", file=sys.stderr)
        return 1
    print(json.dumps(parsed.to_dict(), indent=2))
    return 0


def cmd_inspect(args: argparse.Namespace) -> int:
    path = Path(args.path)
    if not path.is_file():
        print(f"ERROR: {path} not found.", file=sys.stderr)
        return 1

    try:
        settings = load_settings(config_path=args.config)
    except (ValueError, OSError, yaml.YAMLError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    try:
        analysis = analyze_document(path.read_text(encoding="utf-8"), settings.design_host)
    except AmbiguousSectionError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    bounds = analysis.bounds
    print(f"Design Specs — {path}")
    print("─" * 40)
    if bounds.exists:
        state = "closed" if bounds.is_closed else "open"
        print(f"  Section:          {state}, heading at {bounds.heading_offset}, ends at {bounds.end}")
    else:
        print("  Section:          absent")
    print(f"  Insertion:        {insertion_mode(bounds).value}")
    print(f"  Existing entries: {analysis.existing_count}")
    print(f"  Links to process: {len(analysis.matches)}")
    for m in analysis.matches:
        extra = f" (+{len(m.repeats)} repeat)" if m.repeats else ""
        print(f"    - [{m.origin.value}] {m.file_id} {m.node_id}{extra}: {m.url}")
    return 0
