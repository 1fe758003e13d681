"""
One inventory row per file.

Every field is read independently: a failure in one step leaves that
field at its default (0, "" or None) and never stops the others.
"""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

from filelist.config import Settings, get_settings
from filelist.hashing import sha256_hex
from filelist.pe_header import PeHeaderError, read_pe_header
from filelist.version_info import read_version_info

logger = logging.getLogger(__name__)


class FileKind(enum.Enum):
    GENERIC = "generic"
    EXECUTABLE = "executable"


@dataclass(frozen=True)
class InventoryEntry:
    name: str
    file_path: str
    file_size: int = 0
    last_write_time: Optional[datetime] = None  # UTC
    file_version: str = ""
    product_version: str = ""
    build_date_time: Optional[datetime] = None  # UTC
    linker_version: str = ""
    hash_string: str = ""


def file_kind(path, extensions: Iterable[str] = (".exe", ".dll")) -> FileKind:
    # text from the last dot of the base name; ".exe" alone has extension ".exe"
    base = os.path.basename(str(path))
    ext = base[base.rfind(".") :].lower() if "." in base else ""
    if ext and ext in {e.lower() for e in extensions}:
        return FileKind.EXECUTABLE
    return FileKind.GENERIC


def build(name: str, file_path, settings: Optional[Settings] = None) -> InventoryEntry:
    """Collect size, timestamps, version strings, PE header fields and hash for one file."""
    settings = settings or get_settings()
    file_path = str(file_path)

    # size / last write time
    file_size, last_write_time = 0, None
    try:
        st = os.stat(file_path)
        file_size = st.st_size
        last_write_time = datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)
    except (OSError, ValueError, OverflowError) as e:
        logger.debug(f"stat failed for {file_path}: {e}")

    # file / product version
    file_version, product_version = "", ""
    try:
        vi = read_version_info(file_path)
        file_version, product_version = vi.file_version, vi.product_version
    except Exception as e:
        logger.debug(f"version info unavailable for {file_path}: {type(e).__name__}: {e}")

    # build date / linker version
    build_date_time, linker_version = None, ""
    if file_kind(file_path, settings.EXECUTABLE_EXTENSIONS) is FileKind.EXECUTABLE:
        try:
            header = read_pe_header(file_path)
            build_date_time, linker_version = header.build_date_time, header.linker_version
        except PeHeaderError as e:
            logger.debug(f"PE header not readable for {file_path}: {e}")

    # content hash
    hash_string = ""
    try:
        hash_string = sha256_hex(file_path, settings.HASH_CHUNK_SIZE)
    except OSError as e:
        logger.debug(f"hash failed for {file_path}: {e}")

    return InventoryEntry(
        name=name,
        file_path=file_path,
        file_size=file_size,
        last_write_time=last_write_time,
        file_version=file_version,
        product_version=product_version,
        build_date_time=build_date_time,
        linker_version=linker_version,
        hash_string=hash_string,
    )
