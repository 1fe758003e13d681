"""
Reads the three PE header fields used in the inventory:

    offset 60                  e_lfanew, int32 LE (start of the NT headers)
    e_lfanew + 8               TimeDateStamp, int32 LE (epoch seconds)
    e_lfanew + 26              MajorLinkerVersion, MinorLinkerVersion (int8 each)

Nothing else in the file is parsed or validated.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import BinaryIO

OFFSET_OF_E_LFANEW = 60
OFFSET_OF_TIME_DATE_STAMP = 8
OFFSET_OF_LINKER_VERSION = 26

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class PeHeaderError(Exception):
    """The header fields could not be read (I/O error, bad offset, short file)."""


@dataclass(frozen=True)
class PeHeader:
    build_date_time: datetime  # UTC
    linker_version: str


def _read_at(f: BinaryIO, offset: int, fmt: str) -> tuple:
    if offset < 0:
        raise PeHeaderError(f"negative offset {offset}")
    size = struct.calcsize(fmt)
    f.seek(offset)
    data = f.read(size)
    if len(data) != size:
        raise PeHeaderError(f"short read at offset {offset}: {len(data)}/{size} bytes")
    return struct.unpack(fmt, data)


def to_datetime(time_t: int) -> datetime:
    """Convert a time_t value to a UTC datetime."""
    return EPOCH + timedelta(seconds=time_t)


def read_pe_header(path) -> PeHeader:
    """Read build timestamp and linker version; all three reads succeed or PeHeaderError is raised."""
    try:
        with open(path, "rb") as f:
            (e_lfanew,) = _read_at(f, OFFSET_OF_E_LFANEW, "<i")
            (time_t,) = _read_at(f, e_lfanew + OFFSET_OF_TIME_DATE_STAMP, "<i")
            major, minor = _read_at(f, e_lfanew + OFFSET_OF_LINKER_VERSION, "<bb")
        return PeHeader(to_datetime(time_t), f"{major}.{minor}")
    except PeHeaderError:
        raise
    except (OSError, ValueError, OverflowError) as e:
        raise PeHeaderError(str(e)) from e
