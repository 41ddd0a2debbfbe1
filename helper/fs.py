"""
Phalcon Runtime - Filesystem Helpers

Path-name parsing only; nothing here touches the filesystem.
"""

from __future__ import annotations

import os
import re
from typing import Optional


def basename(uri: str, suffix: Optional[str] = None) -> str:
    """
    Return the last segment of `uri`, locale independent.

    Trailing separators are ignored and `suffix`, when given, is removed
    from the end of the segment:

        basename("/home/user/file.txt", ".txt")  # "file"
    """
    separator = re.escape(os.sep)
    uri = uri.rstrip(os.sep)
    match = re.search(f"[^{separator}]+$", uri)
    filename = match.group(0) if match else ""

    if suffix and filename.endswith(suffix):
        filename = filename[:-len(suffix)]

    return filename
