from __future__ import annotations

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Sequence

from .collector import summarize_attachments
from .command import ScanState, run_scan
from .config import ScanConfig, build_config
from .dxf import read
from .presenter import ConsolePresenter, StderrStatus


def _package_version() -> str:
    try:
        return version("psetview")
    except PackageNotFoundError:
        return "0.0.0"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="psetview",
        description="Show construction data attached to drawing entities.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_package_version()}",
    )
    subparsers = parser.add_subparsers(dest="command")

    show_parser = subparsers.add_parser(
        "show",
        help="Show property sets, extension dictionary entries and XData of one entity.",
    )
    show_parser.add_argument("path", help="Path to DXF file.")
    show_parser.add_argument(
        "handle",
        nargs="?",
        default=None,
        help="Entity handle, e.g. 2F. Prompts for one when omitted.",
    )
    _add_scan_options(show_parser)
    show_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log decode diagnostics and print a traceback when extraction fails.",
    )

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="List modelspace entities that carry construction data.",
    )
    inspect_parser.add_argument("path", help="Path to DXF file.")
    _add_scan_options(inspect_parser)
    return parser


def _add_scan_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--app",
        action="append",
        default=[],
        metavar="NAME",
        help="Additional XData application name to query (repeatable).",
    )
    parser.add_argument(
        "--legacy-apps",
        action="store_true",
        help="Query only the original four XData application names.",
    )
    parser.add_argument(
        "--encoding",
        default=None,
        help="Legacy text encoding tried after UTF-8 (default: shift_jis).",
    )


def _config_from_args(args: argparse.Namespace) -> ScanConfig:
    return build_config(
        extra_applications=args.app,
        legacy_apps_only=bool(args.legacy_apps),
        legacy_encoding=args.encoding,
    )


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _run_show(
    path: str,
    handle: str | None = None,
    *,
    config: ScanConfig,
    verbose: bool = False,
) -> int:
    file_path = Path(path)
    if not file_path.exists():
        print(f"error: file not found: {file_path}", file=sys.stderr)
        return 2

    try:
        drawing = read(str(file_path))
    except Exception as exc:
        print(f"error: failed to read DXF: {exc}", file=sys.stderr)
        return 2

    outcome = run_scan(
        drawing.selector(handle),
        drawing.transaction(),
        ConsolePresenter(),
        StderrStatus(),
        config=config,
        verbose=verbose,
    )
    if outcome.state is ScanState.FAILED:
        return 1
    return 0


def _run_inspect(path: str, *, config: ScanConfig) -> int:
    file_path = Path(path)
    if not file_path.exists():
        print(f"error: file not found: {file_path}", file=sys.stderr)
        return 2

    try:
        drawing = read(str(file_path))
    except Exception as exc:
        print(f"error: failed to read DXF: {exc}", file=sys.stderr)
        return 2

    total = 0
    with_data = 0
    for entity in drawing.modelspace_entities():
        total += 1
        try:
            summary = summarize_attachments(entity, entity.handle, config)
        except Exception as exc:
            print(f"{entity.handle} {entity.type_name} error={exc}")
            continue
        if not summary.has_data:
            continue
        with_data += 1
        keys = ",".join(summary.dictionary_keys) or "-"
        apps = ",".join(summary.applications) or "-"
        print(f"{summary.handle} {summary.type_name} dict={keys} xdata={apps}")

    print(f"file: {file_path}")
    print(f"total_entities: {total}")
    print(f"entities_with_data: {with_data}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command not in {"show", "inspect"}:
        parser.print_help()
        return 0

    try:
        config = _config_from_args(args)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.command == "show":
        _configure_logging(bool(args.verbose))
        return _run_show(args.path, args.handle, config=config, verbose=bool(args.verbose))
    _configure_logging(False)
    return _run_inspect(args.path, config=config)
