#!/usr/bin/env python3
"""snipe - browse a file with multi-character snipe motions."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .engine.types import ScopeMode

_SCOPE_CHOICES = [mode.value for mode in ScopeMode]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snipe",
        description="Open a file in a pager with snipe motions (s/S, x/X, f/F, t/T).",
    )
    parser.add_argument("file", help="File to open")
    parser.add_argument("--settings", metavar="PATH", help="Path to a settings JSON file")
    parser.add_argument("--scope", choices=_SCOPE_CHOICES, help="Primary search scope")
    parser.add_argument("--repeat-scope", choices=_SCOPE_CHOICES, help="Scope used by repeats")
    parser.add_argument("--spillover-scope", choices=_SCOPE_CHOICES, help="Fallback scope")
    parser.add_argument(
        "--case-sensitive",
        action="store_true",
        help="Always match case (disables smart case)",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Store the scope and case options as the new defaults",
    )
    parser.add_argument("--debug", metavar="LOGFILE", help="Write debug logs to LOGFILE")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(
            filename=args.debug,
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    if args.settings:
        os.environ["SNIPE_SETTINGS_PATH"] = args.settings

    from .config import load_snipe_settings, save_snipe_settings
    from .engine.exceptions import SnipeError

    path = Path(args.file).expanduser()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error: cannot read {path}: {e}", file=sys.stderr)
        return 1

    try:
        settings = load_snipe_settings().with_overrides(
            scope=args.scope,
            repeat_scope=args.repeat_scope,
            spillover_scope=args.spillover_scope,
            smart_case=False if args.case_sensitive else None,
        )
        if args.save:
            save_snipe_settings(settings)
    except SnipeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    from .app import SnipeApp

    SnipeApp(text, settings=settings, path=path).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
