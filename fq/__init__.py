"""
fq - query file metadata matched by a glob pattern as JSON.

Module: fq/__init__.py
"""

from .collector import collect
from .errors import (
    CollectionError,
    EncodeError,
    FqError,
    GlobError,
    PipeError,
    SpawnError,
    StatError,
    SubprocessError,
    TimestampError,
)
from .models import ExitOutcome, FileRecord, SinkState
from .sink import CommandSink, emit

__version__ = "1.0.0"

__all__ = [
    "collect",
    "emit",
    "CommandSink",
    "FileRecord",
    "ExitOutcome",
    "SinkState",
    "FqError",
    "GlobError",
    "StatError",
    "TimestampError",
    "SpawnError",
    "PipeError",
    "EncodeError",
    "SubprocessError",
    "CollectionError",
]
