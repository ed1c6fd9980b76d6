"""
Extended file timestamps.

Module: fq/timestamps.py

``os.stat`` always reports access and modification times. Whether the
metadata change time and the birth (creation) time are available depends on
the platform:

- POSIX: ``st_ctime`` is the inode change time. Birth time is exposed as
  ``st_birthtime`` on macOS and the BSDs; on Linux it is read with
  ``statx(2)`` and is present only when the filesystem reports it.
- Windows: ``st_ctime`` historically held the creation time, so there is no
  change time; ``st_birthtime`` holds the creation time.
"""

import ctypes
import errno
import os
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Optional

_NS_PER_SECOND = 1_000_000_000


@dataclass(frozen=True)
class Timespec:
    """Timestamps read for a single path."""

    access: datetime
    modify: datetime
    change: Optional[datetime] = None
    birth: Optional[datetime] = None

    @property
    def has_change_time(self) -> bool:
        return self.change is not None

    @property
    def has_birth_time(self) -> bool:
        return self.birth is not None


def from_ns(value: int) -> datetime:
    """Convert a nanosecond timestamp to an aware UTC datetime (microsecond precision)."""
    seconds, remainder = divmod(value, _NS_PER_SECOND)
    return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(
        microsecond=remainder // 1000
    )


def _change_time(st: os.stat_result) -> Optional[datetime]:
    if os.name == "nt":
        return None
    return from_ns(st.st_ctime_ns)


def _birth_time(st: os.stat_result) -> Optional[datetime]:
    birth_ns = getattr(st, "st_birthtime_ns", None)
    if birth_ns is not None:
        # Some filesystems report 0 when the birth time is unknown
        return from_ns(birth_ns) if birth_ns > 0 else None

    birth = getattr(st, "st_birthtime", None)
    if birth is None or birth <= 0:
        return None
    return datetime.fromtimestamp(birth, tz=timezone.utc)


# statx(2) constants from <linux/stat.h> and <fcntl.h>
AT_FDCWD = -100
STATX_BTIME = 0x0800

# Errors meaning the kernel, libc or a sandbox cannot provide statx
_STATX_UNSUPPORTED = {errno.ENOSYS, errno.EINVAL, errno.EOPNOTSUPP, errno.EPERM}


class StatxTimestamp(ctypes.Structure):
    _fields_ = [
        ("tv_sec", ctypes.c_int64),
        ("tv_nsec", ctypes.c_uint32),
        ("reserved", ctypes.c_int32),
    ]


class Statx(ctypes.Structure):
    """``struct statx``; fields after ``stx_mtime`` are left opaque."""

    _fields_ = [
        ("stx_mask", ctypes.c_uint32),
        ("stx_blksize", ctypes.c_uint32),
        ("stx_attributes", ctypes.c_uint64),
        ("stx_nlink", ctypes.c_uint32),
        ("stx_uid", ctypes.c_uint32),
        ("stx_gid", ctypes.c_uint32),
        ("stx_mode", ctypes.c_uint16),
        ("spare0", ctypes.c_uint16),
        ("stx_ino", ctypes.c_uint64),
        ("stx_size", ctypes.c_uint64),
        ("stx_blocks", ctypes.c_uint64),
        ("stx_attributes_mask", ctypes.c_uint64),
        ("stx_atime", StatxTimestamp),
        ("stx_btime", StatxTimestamp),
        ("stx_ctime", StatxTimestamp),
        ("stx_mtime", StatxTimestamp),
        ("spare", ctypes.c_uint64 * 16),
    ]


@lru_cache(maxsize=1)
def _libc_statx() -> Optional[Any]:
    if not sys.platform.startswith("linux"):
        return None
    try:
        libc = ctypes.CDLL(None, use_errno=True)
        func = libc.statx
    except (OSError, AttributeError):
        # glibc < 2.28 or a libc without the wrapper
        return None
    func.argtypes = [
        ctypes.c_int,
        ctypes.c_char_p,
        ctypes.c_int,
        ctypes.c_uint,
        ctypes.POINTER(Statx),
    ]
    func.restype = ctypes.c_int
    return func


def statx_birth_time(path: str) -> Optional[datetime]:
    """
    Read the birth time of a path with ``statx(2)``, following symlinks.

    Args:
        path: File path

    Returns:
        Birth time, or None if the platform or filesystem does not record it

    Raises:
        OSError: If the path cannot be stat'ed
    """
    func = _libc_statx()
    if func is None:
        return None

    buf = Statx()
    if func(AT_FDCWD, os.fsencode(path), 0, STATX_BTIME, ctypes.byref(buf)) != 0:
        err = ctypes.get_errno()
        if err in _STATX_UNSUPPORTED:
            return None
        raise OSError(err, os.strerror(err), path)

    if not buf.stx_mask & STATX_BTIME:
        return None
    btime = buf.stx_btime
    return from_ns(btime.tv_sec * _NS_PER_SECOND + btime.tv_nsec)


def timespec_from_stat(st: os.stat_result, birth: Optional[datetime] = None) -> Timespec:
    """
    Build a Timespec from an existing stat result.

    Args:
        st: Result of ``os.stat``
        birth: Birth time read separately, used when the stat result has none
    """
    return Timespec(
        access=from_ns(st.st_atime_ns),
        modify=from_ns(st.st_mtime_ns),
        change=_change_time(st),
        birth=_birth_time(st) or birth,
    )


def stat_times(path: str) -> Timespec:
    """
    Read the extended timestamps of a path, following symlinks.

    Args:
        path: File path

    Returns:
        Timespec for the path

    Raises:
        OSError: If the path cannot be stat'ed
    """
    st = os.stat(path)
    birth = None
    if _birth_time(st) is None:
        birth = statx_birth_time(path)
    return timespec_from_stat(st, birth=birth)
