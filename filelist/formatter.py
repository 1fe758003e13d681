from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Iterator, Optional

from filelist.entry import InventoryEntry

HEADER = [
    "Name",
    "File Size",
    "Last Write Time",
    "Hash",
    "File Version",
    "Product Version",
    "Build Date Time",
    "Linker Version",
]

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(value: Optional[datetime], utc: bool = False) -> str:
    """Render an instant in host local time (or UTC); None renders as ''."""
    if value is None:
        return ""
    try:
        value = value.astimezone(timezone.utc if utc else None)
    except (OSError, OverflowError):
        # pre-1970 instants have no local conversion on some platforms
        value = value.astimezone(timezone.utc)
    return value.strftime(TIMESTAMP_FORMAT)


def header_line(sep: str = "\t") -> str:
    return sep.join(HEADER)


def format_entry(entry: InventoryEntry, sep: str = "\t", utc: bool = False) -> str:
    return sep.join(
        [
            entry.name,
            str(entry.file_size),
            format_timestamp(entry.last_write_time, utc),
            entry.hash_string,
            entry.file_version,
            entry.product_version,
            format_timestamp(entry.build_date_time, utc),
            entry.linker_version,
        ]
    )


def format_inventory(
    entries: Iterable[InventoryEntry], sep: str = "\t", utc: bool = False
) -> Iterator[str]:
    """Yield the header before the first entry, then one line per entry.

    An empty sequence yields nothing.
    """
    for i, entry in enumerate(entries):
        if i == 0:
            yield header_line(sep)
        yield format_entry(entry, sep, utc)
