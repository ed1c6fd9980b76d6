"""
File Collector.

Module: fq/collector.py

Expands a glob pattern and collects metadata for every matched regular file.
The first failure aborts the whole collection.
"""

import glob
import logging
import os
import re
import stat
from typing import List

from .errors import GlobError, StatError, TimestampError
from .models import FileRecord
from .timestamps import stat_times

logger = logging.getLogger(__name__)


def validate_pattern(pattern: str) -> None:
    """
    Check glob pattern syntax.

    The standard glob module treats malformed patterns as literals, so
    an unterminated character class is rejected here instead.

    Args:
        pattern: Glob pattern

    Raises:
        GlobError: If the pattern is malformed
    """
    if "\x00" in pattern:
        raise GlobError("Pattern contains a NUL byte")

    i = 0
    n = len(pattern)
    while i < n:
        if pattern[i] != "[":
            i += 1
            continue

        j = i + 1
        if j < n and pattern[j] == "!":
            j += 1
        # A "]" opening the class is a member, not the terminator
        if j < n and pattern[j] == "]":
            j += 1
        while j < n and pattern[j] != "]":
            j += 1
        if j >= n:
            raise GlobError(f"Unterminated character class at offset {i} in '{pattern}'")
        i = j + 1


def expand(pattern: str) -> List[str]:
    """
    Expand a glob pattern into matching paths.

    ``**`` is not recursive. Hidden entries are matched by wildcards. A
    wildcard-free pattern naming a missing path yields no matches.

    Args:
        pattern: Glob pattern

    Returns:
        Matching paths, sorted level by level

    Raises:
        GlobError: If the pattern is malformed
    """
    validate_pattern(pattern)
    try:
        matches = glob.glob(pattern, recursive=False, include_hidden=True)
    except (ValueError, re.error) as e:
        raise GlobError("Failed to match from the glob", e) from e
    # Per-directory-level order: "a/x" before "a-b/y"
    return sorted(matches, key=lambda p: p.split(os.sep))


def build_record(path: str, info: os.stat_result) -> FileRecord:
    """
    Build a FileRecord for a regular file.

    Args:
        path: Path of a regular file
        info: Result of stat'ing the path

    Returns:
        Record with all available timestamps

    Raises:
        TimestampError: If timestamps cannot be read
    """
    try:
        times = stat_times(path)
    except OSError as e:
        raise TimestampError("Failed to fetch timestamps of the file", e) from e

    return FileRecord(
        path=path,
        name=os.path.basename(path),
        mode=info.st_mode,
        created_at=times.birth,
        changed_at=times.change,
        modified_at=times.modify,
        last_accessed_at=times.access,
    )


def collect(pattern: str) -> List[FileRecord]:
    """
    Collect metadata for every regular file matching a glob pattern.

    Args:
        pattern: Glob pattern (e.g., *.txt, logs/*/app.log)

    Returns:
        Records in glob expansion order; empty if nothing matched

    Raises:
        GlobError: If the pattern is malformed
        StatError: If a matched path cannot be stat'ed
        TimestampError: If timestamps of a matched file cannot be read
    """
    paths = expand(pattern)
    logger.debug(f"Pattern '{pattern}' matched {len(paths)} path(s)")

    records: List[FileRecord] = []
    for path in paths:
        try:
            info = os.stat(path)
        except OSError as e:
            raise StatError("Failed to stat the file", e) from e

        if stat.S_ISDIR(info.st_mode):
            logger.debug(f"Skipping directory: {path}")
            continue

        records.append(build_record(path, info))

    return records
