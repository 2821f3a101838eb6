"""
Command-line interface for unmunge.

Usage:
    unmunge < cred.txt
    unmunge -i cred.txt -m meta.txt -o payload.bin
    unmunge -t status-code,uid -o /dev/null < cred.txt
    unmunge --list-tags
"""

from __future__ import annotations

import sys

import click
from rich.console import Console
from rich.markup import escape

from unmunge import __version__
from unmunge.config import DEFAULT_TIMEOUT, ConfigBuilder
from unmunge.errors import UnmungeError
from unmunge.session import Session
from unmunge.status import StatusCode
from unmunge.tags import all_tags


err_console = Console(stderr=True)


def display_tags() -> None:
    """Print every metadata tag name, one per line."""
    for tag in all_tags():
        click.echo(tag.label)


def fail(message: str, exit_code: int = StatusCode.SNAFU) -> None:
    """Report a fatal error on stderr and exit."""
    err_console.print(f"[red]Error:[/] {escape(message)}", highlight=False, soft_wrap=True)
    sys.exit(int(exit_code))


def note(message: str) -> None:
    """Print a progress note on stderr."""
    err_console.print(f"[dim]{escape(message)}[/]", highlight=False, soft_wrap=True)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-i",
    "--input",
    "input_path",
    metavar="FILE",
    default="-",
    help="Input credential from FILE",
)
@click.option(
    "-m",
    "--metadata",
    "metadata_path",
    metavar="FILE",
    default="-",
    help="Output metadata to FILE",
)
@click.option(
    "-o",
    "--output",
    "output_path",
    metavar="FILE",
    default="-",
    help="Output payload to FILE",
)
@click.option(
    "-n",
    "--no-output",
    is_flag=True,
    help="Discard all metadata and payload output",
)
@click.option(
    "-S",
    "--socket",
    metavar="STRING",
    default=None,
    help="Specify local domain socket (or http(s) URL) of the MUNGE daemon",
)
@click.option(
    "-t",
    "--tags",
    metavar="STRING",
    multiple=True,
    help="Specify subset of metadata tags to output",
)
@click.option(
    "-T",
    "--list-tags",
    is_flag=True,
    help="Print a list of metadata tags",
)
@click.option(
    "--timeout",
    type=float,
    default=DEFAULT_TIMEOUT,
    help="MUNGE daemon request timeout in seconds",
)
@click.option("-v", "--verbose", is_flag=True, help="Be verbose")
@click.version_option(__version__, "-V", "--version")
def main(
    input_path: str,
    metadata_path: str,
    output_path: str,
    no_output: bool,
    socket: str | None,
    tags: tuple[str, ...],
    list_tags: bool,
    timeout: float,
    verbose: bool,
) -> None:
    """Validate and decode a MUNGE credential.

    By default the credential is read from stdin, and both the metadata and
    the payload are written to stdout, separated by a blank line.

    Tags for --tags may be separated by spaces, commas, periods or
    semicolons; unknown names are ignored. Without --tags every tag is shown.

    The exit status is the MUNGE status code of the decode (0 on success).

    Examples:

        munge -s hello | unmunge

        unmunge -i cred.txt -t uid,gid -o /dev/null
    """
    if list_tags:
        display_tags()
        sys.exit(0)

    builder = (
        ConfigBuilder()
        .input(input_path)
        .metadata(metadata_path)
        .output(output_path)
        .no_output(no_output)
        .socket(socket)
        .timeout(timeout)
        .verbose(verbose)
    )
    for spec in tags:
        builder.tags(spec)

    try:
        config = builder.build()
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    try:
        with Session.create(config) as session:
            session.open()
            credential = session.read_credential()
            if verbose:
                note(f"Read {len(credential)} bytes from {_describe(config.input_path)}")

            result = session.decode()
            if verbose:
                detail = f" ({result.detail})" if result.detail else ""
                note(f"Decode status {int(result.status)}: {result.message}{detail}")

            session.display_meta()
            session.display_data()
            status = int(result.status)

    except MemoryError:
        fail("Out of memory", StatusCode.NO_MEMORY)
    except UnmungeError as e:
        fail(e.describe(), e.exit_code)

    sys.exit(status)


def _describe(path: str) -> str:
    return "stdin" if path == "-" else f'"{path}"'


if __name__ == "__main__":
    main()
