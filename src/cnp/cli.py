"""Command line entrypoint.

Usage:
  cnp [--root DIR] [--dry-run | -i | -a] [--include-dev] [--json]

Exit code 1 means the manifest or the settings file could not be read; every
other failure degrades to a warning and exit code 0.
"""

from __future__ import annotations

import argparse
import json
from dataclasses import replace
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from .core import analyze_project
from .errors import ConfigError, ManifestError
from .logging import setup_logging
from .report import aggregate, print_report
from .settings import load_settings
from .uninstall import UninstallMode, handle_unused_dependencies


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cnp",
        description="Check a Node.js project for unused dependencies.",
    )
    parser.add_argument("--root", type=Path, default=Path("."), help="Project root (default: .)")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings file (default: $CNP_CONFIG or <root>/.cnprc.json)",
    )
    parser.add_argument(
        "--include-dev",
        action="store_true",
        help="Also check devDependencies",
    )
    parser.add_argument(
        "--no-typescript",
        action="store_true",
        help="Do not run tsc to detect imports that are never read",
    )
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--dry-run",
        action="store_true",
        help="Simulate actions without making changes (e.g., no uninstalls)",
    )
    mode.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help="Choose which unused dependencies to uninstall",
    )
    mode.add_argument(
        "-a",
        "--all",
        dest="all_",
        action="store_true",
        help="Uninstall every unused dependency after one confirmation",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    console = Console()
    err_console = Console(stderr=True)
    # keep stdout clean for the JSON document
    ui_console = err_console if args.json else console
    root = args.root.resolve()

    try:
        settings = load_settings(root, args.config)
    except ConfigError as exc:
        err_console.print(f"[red]{escape(str(exc))}[/]", soft_wrap=True)
        return 1

    if args.include_dev:
        settings = settings.with_sections("devDependencies")
    if args.no_typescript:
        settings = replace(settings, typescript_check=False)

    try:
        with ui_console.status("Scanning files...") as status:
            scanned = 0

            def tick(path: Path) -> None:
                nonlocal scanned
                scanned += 1
                if scanned % 50 == 0:
                    status.update(f"Scanning files... ({scanned})")

            analysis = analyze_project(root, settings, progress=tick)
    except ManifestError as exc:
        err_console.print(f"[red]{escape(str(exc))}[/]", soft_wrap=True)
        return 1

    ui_console.print("[green]Scanning complete![/]")

    if args.json:
        print(json.dumps(aggregate(analysis, settings), indent=2))
    else:
        print_report(analysis, settings, console)

    mode = UninstallMode.from_flags(
        dry_run=args.dry_run,
        interactive=args.interactive,
        all_=args.all_,
    )
    if args.json and mode is UninstallMode.REPORT:
        return 0

    handle_unused_dependencies(
        root,
        analysis.unused,
        mode,
        ui_console,
        interactive_default=settings.interactive_default,
    )
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
