from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterator, List, Optional

from tqdm import tqdm

from filelist.config import Settings, get_settings
from filelist.entry import InventoryEntry, build

logger = logging.getLogger(__name__)


def _walk_error(err: OSError) -> None:
    logger.warning(f"[crawl] cannot list {err.filename}: {err.strerror}")


def iter_files(root) -> List[str]:
    """All files under root (recursive), sorted by full path."""
    found = []
    for dirpath, _, files in os.walk(str(root), onerror=_walk_error):
        for f in files:
            found.append(os.path.join(dirpath, f))
    return sorted(found)


def relative_name(root, path) -> str:
    return str(Path(path).relative_to(Path(root)))


def scan(
    root,
    workers: int = 1,
    progress: bool = False,
    settings: Optional[Settings] = None,
) -> Iterator[InventoryEntry]:
    """Yield one entry per file under root, in path order.

    With workers > 1 entries are built on a thread pool; results still come
    back in path order.
    """
    settings = settings or get_settings()
    paths = iter_files(root)
    logger.info(f"[crawl] {len(paths)} files under {root}")

    def _build(p: str) -> InventoryEntry:
        return build(relative_name(root, p), p, settings)

    bar = tqdm(total=len(paths), desc="scan", unit="file", disable=not progress)
    try:
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                for entry in pool.map(_build, paths):
                    bar.update(1)
                    yield entry
        else:
            for p in paths:
                entry = _build(p)
                bar.update(1)
                yield entry
    finally:
        bar.close()
