"""
fq Main CLI Application.

Module: fq/cli.py

Usage:
    fq '<glob-pattern>' [command [arg ...]]

Examples:
    fq '*.txt'
    fq 'logs/*.log' jq -r '.[].name'
"""

from typing import BinaryIO, Optional, Sequence
import logging
import sys
import click
from rich.console import Console

from . import __version__
from .collector import collect
from .config import configure_logging, load_settings
from .errors import CollectionError, FqError, UsageError
from .models import ExitOutcome
from .sink import emit

# Paths and glob patterns may contain "[" or ":", so no markup or emoji
console = Console(stderr=True, markup=False, emoji=False, highlight=False, soft_wrap=True)

logger = logging.getLogger(__name__)


def die(error: BaseException) -> None:
    """Report an error on standard error and exit with status 1."""
    console.print(f"Error: {error}; aborting.")
    sys.exit(1)


def run(
    pattern: str,
    command: Sequence[str] = (),
    stdout: Optional[BinaryIO] = None,
) -> ExitOutcome:
    """
    Collect the files matching a pattern and emit them as JSON.

    Args:
        pattern: Glob pattern
        command: argv of an external command to pipe the JSON into
        stdout: Binary stream used when no command is given

    Returns:
        Outcome of the emission

    Raises:
        CollectionError: If collecting the files fails
        FqError: If emitting the records fails
    """
    try:
        records = collect(pattern)
    except FqError as e:
        raise CollectionError("Failed to query files from the glob", e) from e

    logger.info(f"Collected {len(records)} file record(s)")
    return emit(records, command=list(command) or None, stdout=stdout)


# Option parsing stops at the pattern, so the command keeps its own flags
@click.command(context_settings={"allow_interspersed_args": False})
@click.option("-v", "--verbose", is_flag=True, help="Log debug details to standard error")
@click.option("--version", is_flag=True, help="Show version and exit")
@click.argument("pattern", required=False)
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
def cli(verbose: bool, version: bool, pattern: Optional[str], command: Sequence[str]) -> None:
    """
    fq - query file metadata as JSON.

    Lists the regular files matching PATTERN with their name, mode and
    timestamps as a JSON array. When COMMAND is given (typically jq), the
    array is piped into it and its output is passed through.
    """
    if version:
        click.echo(f"fq v{__version__}")
        return

    try:
        configure_logging(load_settings(), verbose=verbose)
    except ValueError as e:
        die(e)

    if pattern is None:
        die(UsageError("Any argument must be passed"))

    try:
        run(pattern, command, stdout=sys.stdout.buffer)
    except FqError as e:
        logger.debug(f"Aborting in {e.phase} phase", exc_info=True)
        die(e)


def main() -> None:
    """Main entry point for fq."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\nInterrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
