"""
Record Sink.

Module: fq/sink.py

Writes the JSON-encoded records either to standard output or into the
standard input of an external command (conventionally ``jq``). The command
inherits the program's standard output and standard error, so its output is
passed through untouched.

While the payload is written to the command's input, a single worker waits
for the command to exit. Its Future is the one-shot completion signal that
the main flow joins after closing the pipe.
"""

import logging
import subprocess
import sys
from concurrent.futures import Future, ThreadPoolExecutor
from typing import BinaryIO, List, Optional, Sequence

from pydantic import TypeAdapter
from pydantic_core import PydanticSerializationError

from .errors import EncodeError, PipeError, SpawnError, SubprocessError
from .models import ExitOutcome, FileRecord, SinkState

logger = logging.getLogger(__name__)

_RECORDS_ADAPTER = TypeAdapter(List[FileRecord])

# Terminates the single JSON value, like a JSON Lines record
RECORD_SEPARATOR = b"\n"


def encode_records(records: Sequence[FileRecord]) -> bytes:
    """
    Encode records as one compact JSON array followed by a newline.

    Args:
        records: Records to encode

    Returns:
        JSON payload

    Raises:
        EncodeError: If serialization fails
    """
    try:
        return _RECORDS_ADAPTER.dump_json(list(records)) + RECORD_SEPARATOR
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise EncodeError("Failed to encode to JSON", e) from e


def write_payload(stream: BinaryIO, payload: bytes, close: bool = False) -> None:
    """
    Write a payload in one operation.

    Args:
        stream: Binary stream to write to
        payload: Bytes to write
        close: Close the stream afterwards to signal end-of-input

    Raises:
        PipeError: If writing, flushing or closing fails
    """
    try:
        stream.write(payload)
        stream.flush()
    except OSError as e:
        raise PipeError("I/O error while writing the records", e) from e

    if close:
        try:
            stream.close()
        except OSError as e:
            raise PipeError("I/O error while closing the pipe", e) from e


class CommandSink:
    """
    Pipes records into an external command.

    Lifecycle:
        NOT_STARTED -> SPAWN_PENDING -> PIPING -> AWAITING_EXIT
        -> SUCCEEDED | FAILED

    Any failure moves the sink straight to FAILED and raises an error whose
    ``phase`` names the step that failed. A sink runs once.
    """

    def __init__(self, argv: Sequence[str]) -> None:
        """
        Initialize the sink.

        Args:
            argv: Command and its arguments, e.g. ["jq", "."]
        """
        if not argv:
            raise ValueError("argv must name a command")
        self.argv = list(argv)
        self.state = SinkState.NOT_STARTED
        self.process: Optional[subprocess.Popen] = None

    def run(self, records: Sequence[FileRecord]) -> ExitOutcome:
        """
        Spawn the command, stream the records into it and wait for it to exit.

        Args:
            records: Records to encode

        Returns:
            Outcome with the command's return code

        Raises:
            SpawnError: If the command cannot be started
            EncodeError: If the records cannot be serialized
            PipeError: If writing to or closing the command's input fails
            SubprocessError: If the command exits non-zero or cannot be waited on
        """
        if self.state != SinkState.NOT_STARTED:
            raise RuntimeError(f"Sink already used (state: {self.state.value})")

        try:
            return self._run(records)
        except Exception:
            self.state = SinkState.FAILED
            raise

    def _run(self, records: Sequence[FileRecord]) -> ExitOutcome:
        self.state = SinkState.SPAWN_PENDING
        self.process = self._spawn()

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="fq-wait")
        try:
            exited = executor.submit(self.process.wait)

            self.state = SinkState.PIPING
            try:
                payload = encode_records(records)
            except EncodeError:
                self._close_stdin()
                raise
            write_payload(self.process.stdin, payload, close=True)
            logger.debug(f"Wrote {len(payload)} bytes to '{self.argv[0]}'")

            self.state = SinkState.AWAITING_EXIT
            returncode = self._join(exited)
        except PipeError:
            self._close_stdin()
            raise
        finally:
            executor.shutdown(wait=False)

        self.state = SinkState.SUCCEEDED
        return ExitOutcome(state=self.state, returncode=returncode)

    def _spawn(self) -> subprocess.Popen:
        try:
            process = subprocess.Popen(self.argv, stdin=subprocess.PIPE)
        except (OSError, ValueError) as e:
            raise SpawnError(f"Failed to run command '{self.argv[0]}'", e) from e

        logger.debug(f"Spawned '{' '.join(self.argv)}' (pid {process.pid})")
        return process

    def _join(self, exited: "Future[int]") -> int:
        try:
            returncode = exited.result()
        except Exception as e:
            raise SubprocessError(
                f"Failed to wait for '{self.argv[0]}' to exit", e
            ) from e

        logger.debug(f"'{self.argv[0]}' exited with code {returncode}")
        if returncode != 0:
            cause = subprocess.CalledProcessError(returncode, self.argv)
            raise SubprocessError(
                f"Failed to wait for '{self.argv[0]}' to exit",
                cause,
                returncode=returncode,
            )
        return returncode

    def _close_stdin(self) -> None:
        stdin = self.process.stdin if self.process else None
        if stdin is None or stdin.closed:
            return
        try:
            stdin.close()
        except OSError as e:
            # The caller re-raises the pending failure
            logger.debug(f"Ignoring error while closing stdin: {e}")


def emit(
    records: Sequence[FileRecord],
    command: Optional[Sequence[str]] = None,
    stdout: Optional[BinaryIO] = None,
) -> ExitOutcome:
    """
    Emit records as JSON.

    Args:
        records: Records to emit
        command: argv of an external command to pipe the JSON into
        stdout: Binary stream used when no command is given
            (defaults to the process's standard output)

    Returns:
        Outcome of the emission

    Raises:
        FqError: On any encoding, I/O, spawn or subprocess failure
    """
    if command:
        return CommandSink(command).run(records)

    payload = encode_records(records)
    write_payload(stdout if stdout is not None else sys.stdout.buffer, payload)
    return ExitOutcome(state=SinkState.SUCCEEDED)
