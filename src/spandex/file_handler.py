"""File handler module: encoding-aware read/write and timestamp helpers.

Provides the file I/O used by file-backed expanders. Every function is
synchronous and lets ``OSError`` propagate unchanged.

Timestamps are carried at microsecond precision. On filesystems that
store mtimes more coarsely (FAT: 2 s, some network mounts: 1 s) a
forced mtime is truncated below the in-memory value, so a freshness
check against it never passes and such snippets are rewritten on every
run.
"""

import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

from charset_normalizer import from_bytes

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# =============================================================================
# File Read/Write
# =============================================================================


def read_file_with_encoding(path: Path) -> tuple[str, str]:
    """Read a file, decoding UTF-8 first and detecting anything else.

    Reads raw bytes; strict UTF-8 decoding is tried first, then
    charset-normalizer picks the most likely encoding.

    Args:
        path: Path to the file to read.

    Returns:
        Tuple of (content_string, detected_encoding).
    """
    raw = path.read_bytes()
    if not raw:
        return ("", "utf-8")

    try:
        return (raw.decode("utf-8"), "utf-8")
    except UnicodeDecodeError:
        pass

    result = from_bytes(raw).best()
    if result is None:
        # Detection failed, keep what utf-8 can make of it
        return (raw.decode("utf-8", errors="replace"), "utf-8")
    return (str(result), result.encoding)


def write_file(
    path: Path, content: str, encoding: str = "utf-8"
) -> int:
    """Write content to a file, creating parent directories as needed.

    Args:
        path: Path to the output file.
        content: String content to write.
        encoding: Encoding to use (default: utf-8).

    Returns:
        Number of bytes written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    encoded = content.encode(encoding)
    path.write_bytes(encoded)
    return len(encoded)


# =============================================================================
# Timestamps
# =============================================================================


def datetime_to_ns(value: datetime) -> int:
    """Convert *value* to integer nanoseconds since the Unix epoch."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - _EPOCH) // timedelta(microseconds=1) * 1000


def ns_to_datetime(ns: int) -> datetime:
    """Convert nanoseconds since the Unix epoch to an aware UTC datetime."""
    return _EPOCH + timedelta(microseconds=ns // 1000)


def get_mtime(path: Path) -> datetime:
    """Return the on-disk modification time of *path* (UTC)."""
    return ns_to_datetime(path.stat().st_mtime_ns)


def set_times(path: Path, value: datetime) -> None:
    """Force both access and modification time of *path* to *value*."""
    ns = datetime_to_ns(value)
    os.utime(path, ns=(ns, ns))
