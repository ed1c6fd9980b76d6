"""
Tests for fq models.

Module: tests/test_models.py
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from fq.models import ExitOutcome, FileRecord, SinkState

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestFileRecord:
    """Tests for FileRecord."""

    def test_optional_timestamps_default_to_none(self) -> None:
        """Test that created_at and changed_at are optional."""
        record = FileRecord(
            path="a.txt", name="a.txt", mode=0o100644, modified_at=NOW, last_accessed_at=NOW
        )

        assert record.created_at is None
        assert record.changed_at is None

    def test_required_timestamps(self) -> None:
        """Test that modified_at and last_accessed_at are required."""
        with pytest.raises(ValidationError):
            FileRecord(path="a.txt", name="a.txt", mode=0o100644)

    def test_immutable(self) -> None:
        """Test that records cannot be modified after construction."""
        record = FileRecord(
            path="a.txt", name="a.txt", mode=0o100644, modified_at=NOW, last_accessed_at=NOW
        )

        with pytest.raises(ValidationError):
            record.name = "b.txt"


class TestExitOutcome:
    """Tests for ExitOutcome."""

    @pytest.mark.parametrize(
        "state,expected",
        [(SinkState.SUCCEEDED, True), (SinkState.FAILED, False), (SinkState.PIPING, False)],
    )
    def test_succeeded(self, state: SinkState, expected: bool) -> None:
        """Test the succeeded shortcut."""
        assert ExitOutcome(state=state).succeeded is expected
