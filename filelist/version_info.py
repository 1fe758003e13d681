"""
File/product version strings from the Windows version resource.

Uses the Win32 version API (pywin32). On other platforms, or for files
without a version resource, the lookup fails and the caller falls back
to empty strings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionInfo:
    file_version: str = ""
    product_version: str = ""


def _query_string(win32api, path: str, lang: int, codepage: int, key: str) -> str:
    block = f"\\StringFileInfo\\{lang:04X}{codepage:04X}\\{key}"
    try:
        value = win32api.GetFileVersionInfo(path, block)
    except Exception as e:
        logger.debug(f"{path}: no {key} in {block}: {e}")
        return ""
    return (value or "").strip("\x00 ")


def read_version_info(path) -> VersionInfo:
    """Read FileVersion / ProductVersion from the first translation of the version resource.

    Raises when the version API is unavailable or the file has no version resource.
    """
    import win32api

    path = str(path)
    translations = win32api.GetFileVersionInfo(path, "\\VarFileInfo\\Translation")
    if not translations:
        return VersionInfo()
    lang, codepage = translations[0]
    return VersionInfo(
        file_version=_query_string(win32api, path, lang, codepage, "FileVersion"),
        product_version=_query_string(win32api, path, lang, codepage, "ProductVersion"),
    )
