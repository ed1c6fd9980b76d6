"""
Pydantic models for fq.

Module: fq/models.py
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class FileRecord(BaseModel):
    """Metadata of one matched regular file."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Matched path exactly as returned by glob expansion")
    name: str = Field(..., description="Base name of the path")
    mode: int = Field(..., description="st_mode bits (file type and permissions)")
    created_at: Optional[datetime] = Field(
        default=None, description="Birth time, if the filesystem exposes it"
    )
    changed_at: Optional[datetime] = Field(
        default=None, description="Metadata change time, if the filesystem exposes it"
    )
    modified_at: datetime = Field(..., description="Last modification time")
    last_accessed_at: datetime = Field(..., description="Last access time")


class SinkState(str, Enum):
    """Lifecycle of a sink that pipes records into an external command."""

    NOT_STARTED = "not_started"
    SPAWN_PENDING = "spawn_pending"
    PIPING = "piping"
    AWAITING_EXIT = "awaiting_exit"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ExitOutcome(BaseModel):
    """Final outcome of emitting records."""

    state: SinkState
    returncode: Optional[int] = Field(
        default=None, description="Exit code of the external command, if one was run"
    )

    @property
    def succeeded(self) -> bool:
        return self.state == SinkState.SUCCEEDED
