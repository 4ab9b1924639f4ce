"""
odpwriterctl: CLI for the odpwriter package writer.

Commands:
    build    Build an .odp package from a YAML/JSON deck description
    parts    List the part writers in execution order
    inspect  List the entries of an existing package

Deck description (YAML):

    properties: {title: Quarterly review, creator: Finance}
    layout: {width: 960, height: 540}
    slides:
      - name: Intro
        shapes:
          - {type: text, paragraphs: [Hello], width: 400, height: 100}
          - {type: image, path: images/logo.png, width: 200, height: 200}

Relative image, media and thumbnail paths are resolved against the deck
file's directory.
"""

import argparse
import json
import logging
import sys
import zipfile
from pathlib import Path
from typing import List, Optional

import yaml

from odpwriter.version import get_version

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_SAVE_FAILED = 2
EXIT_CLEANUP_FAILED = 3

# ANSI color helpers (auto-disabled for non-TTY)
_USE_COLOR = sys.stderr.isatty()


def _c(code: str, text: str) -> str:
    if not _USE_COLOR:
        return text
    return f"\033[{code}m{text}\033[0m"


def _bold(text: str) -> str:
    return _c("1", text)


def _green(text: str) -> str:
    return _c("32", text)


def _yellow(text: str) -> str:
    return _c("33", text)


def _red(text: str) -> str:
    return _c("31", text)


def _dim(text: str) -> str:
    return _c("2", text)


def _say(text: str = "") -> None:
    # stdout may carry the package itself
    print(text, file=sys.stderr)


# ---------------------------------------------------------------------------
# Deck loading
# ---------------------------------------------------------------------------

def _resolve_paths(shapes: List[dict], base: Path) -> None:
    for shape in shapes:
        if shape.get("type") in ("image", "media") and "path" in shape:
            p = Path(shape["path"])
            if not p.is_absolute():
                shape["path"] = str(base / p)
        if shape.get("type") == "group":
            _resolve_paths(shape.get("shapes", []), base)


def load_deck(path: Path):
    """Load a deck description (YAML or JSON) into a Presentation."""
    from odpwriter.models import Presentation

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Deck description must be a mapping, got {type(data).__name__}")

    base = path.resolve().parent
    for slide in data.get("slides", []):
        _resolve_paths(slide.get("shapes", []), base)
    if data.get("thumbnail_path") and not Path(data["thumbnail_path"]).is_absolute():
        data["thumbnail_path"] = str(base / data["thumbnail_path"])

    return Presentation.from_dict(data)


# ---------------------------------------------------------------------------
# Command: build
# ---------------------------------------------------------------------------

def cmd_build(args: argparse.Namespace) -> int:
    """Build a package from a deck description."""
    from odpwriter.config import load_config
    from odpwriter.errors import ODPWriterError
    from odpwriter.writer import ODPresentationWriter

    deck_path = Path(args.deck)
    if not deck_path.is_file():
        _say(_red(f"Error: Not a file: {deck_path}"))
        return EXIT_USAGE
    if args.disk_cache and not Path(args.disk_cache).is_dir():
        _say(_red(f"Error: Disk cache directory does not exist: {args.disk_cache}"))
        return EXIT_USAGE

    try:
        presentation = load_deck(deck_path)
    except (OSError, yaml.YAMLError, ValueError, KeyError, TypeError) as e:
        _say(_red(f"Error: Cannot load deck {deck_path}: {e}"))
        return EXIT_USAGE

    config = load_config(Path(args.config) if args.config else None)
    if not args.verbose:
        logging.getLogger("odpwriter").setLevel(config.logging.level)
    target = "stream://stdout" if args.output == "-" else args.output

    try:
        writer = ODPresentationWriter(presentation, config=config)
        if args.disk_cache:
            writer.set_use_disk_caching(True, args.disk_cache)
        report = writer.save(target)
    except ODPWriterError as e:
        if e.output_usable:
            _say(_yellow(f"Warning: {e}"))
            return EXIT_CLEANUP_FAILED
        _say(_red(f"FAILED [{e.stage}]: {e}"))
        if args.verbose and e.__cause__ is not None:
            _say(_dim(f"    caused by {type(e.__cause__).__name__}: {e.__cause__}"))
        return EXIT_SAVE_FAILED

    _say(_bold(f"odpwriter: {deck_path.name}"))
    _say(f"  {_green('saved')} {report.target}: {len(report.entries)} entries, "
         f"{report.drawing_count} drawings, {report.chart_count} charts "
         f"({report.execution_time_ms}ms)")
    if args.verbose:
        for name in report.entries:
            _say(f"    {_dim(name)}")
    return EXIT_OK


# ---------------------------------------------------------------------------
# Command: parts
# ---------------------------------------------------------------------------

def cmd_parts(args: argparse.Namespace) -> int:
    """List part writers in execution order."""
    from odpwriter.registry import PartWriterRegistry

    writers = PartWriterRegistry.ordered()
    if not writers:
        _say(_yellow("No part writers registered"))
        return EXIT_USAGE

    for position, writer_cls in enumerate(writers, 1):
        line = f"{position:2d}. {_bold(writer_cls.name):<16} {writer_cls.description}"
        print(line)
        if args.verbose:
            info = PartWriterRegistry.get_info(writer_cls.name)
            print(f"      {_dim(json.dumps({k: info[k] for k in ('order', 'requires', 'parts')}))}")
    return EXIT_OK


# ---------------------------------------------------------------------------
# Command: inspect
# ---------------------------------------------------------------------------

def cmd_inspect(args: argparse.Namespace) -> int:
    """List the entries of a package."""
    package = Path(args.package)
    try:
        with zipfile.ZipFile(package) as zf:
            infos = zf.infolist()
    except (OSError, zipfile.BadZipFile) as e:
        _say(_red(f"Error: Cannot read {package}: {e}"))
        return EXIT_USAGE

    for info in infos:
        method = "stored" if info.compress_type == zipfile.ZIP_STORED else "deflated"
        print(f"{info.file_size:>10}  {method:<8}  {info.filename}")
    if args.verbose:
        _say(_dim(f"{len(infos)} entries"))
    return EXIT_OK


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="odpwriterctl",
        description="Build and inspect OpenDocument Presentation packages",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")
    sub = parser.add_subparsers(dest="command", help="Available commands")

    # --- build ---
    p_build = sub.add_parser("build", help="Build an .odp package from a deck description")
    p_build.add_argument("deck", help="Path to deck description (YAML or JSON)")
    p_build.add_argument("-o", "--output", required=True, help="Output .odp path, or '-' for stdout")
    p_build.add_argument("-c", "--config", help="Path to odpwriter.yaml (default: auto)")
    p_build.add_argument("--disk-cache", metavar="DIR", help="Enable disk caching in DIR")
    p_build.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    p_build.set_defaults(func=cmd_build)

    # --- parts ---
    p_parts = sub.add_parser("parts", help="List part writers in execution order")
    p_parts.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    p_parts.set_defaults(func=cmd_parts)

    # --- inspect ---
    p_inspect = sub.add_parser("inspect", help="List the entries of a package")
    p_inspect.add_argument("package", help="Path to an .odp file")
    p_inspect.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    p_inspect.set_defaults(func=cmd_inspect)

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for odpwriterctl."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_OK

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
