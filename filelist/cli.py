"""
File inventory CLI:

    filelist ROOT [--workers N] [--utc] [--progress] [--config FILE] [-v]

Writes a tab-separated table (header + one row per file) to stdout.
Exit status 0 on completion, 1 when ROOT is missing or not a directory.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from filelist.config import load_settings
from filelist.crawl import scan
from filelist.formatter import format_inventory

logger = logging.getLogger(__name__)


def safe_print(line: str, stream=None) -> None:
    stream = stream or sys.stdout
    try:
        stream.write(line + "\n")
    except UnicodeEncodeError:
        enc = getattr(stream, "encoding", None) or "utf-8"
        stream.write(line.encode(enc, errors="replace").decode(enc) + "\n")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="filelist", description="List every file under ROOT with size, hash and PE header info"
    )
    ap.add_argument("root", nargs="?", help="Directory to scan")
    ap.add_argument("--workers", type=int, default=None, help="Build entries on N threads")
    ap.add_argument("--utc", action="store_true", help="Render timestamps in UTC")
    ap.add_argument("--progress", action="store_true", help="Show a progress bar on stderr")
    ap.add_argument("--config", default=None, help="YAML file overriding settings")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if not args.root:
        ap.print_usage(sys.stderr)
        return 1

    try:
        settings = load_settings(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        ap.print_usage(sys.stderr)
        print(f"filelist: bad configuration: {e}", file=sys.stderr)
        return 1
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL.upper(),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    root = Path(args.root)
    if not root.is_dir():
        logger.error(f"not a directory: {root}")
        return 1

    workers = args.workers if args.workers is not None else settings.WORKERS
    entries = scan(
        root,
        workers=max(1, workers),
        progress=args.progress or settings.SHOW_PROGRESS,
        settings=settings,
    )
    for line in format_inventory(entries, settings.SEPARATOR, args.utc or settings.TIMESTAMPS_UTC):
        safe_print(line)
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
