"""
revparse - revc Parser Command-Line Interface
=============================================

Parses one or more revc source files and prints, for each, the source,
its abstract syntax tree and any diagnostics.

Usage Examples
--------------
Parse a file:
    $ revparse program.rc

Show the token stream the parser sees:
    $ revparse --tokens program.rc

Fail the build on syntax errors:
    $ revparse --strict src/*.rc

Debug logging:
    $ revparse -v program.rc
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from revc import __version__
from revc.cli.errors import ExitCode, handle_cli_exception
from revc.frontend.ast import format_tree
from revc.frontend.cursor import TokenCursor
from revc.frontend.diagnostics import DiagnosticReporter
from revc.frontend.options import ParserOptions
from revc.frontend.parser import parse_program
from revc.frontend.tokens import TokenKind

logger = logging.getLogger(__name__)


def _echo_tokens(source: str, filename: str) -> None:
    """Print the significant tokens in the order the parser receives them."""
    cursor = TokenCursor(source, reporter=DiagnosticReporter(filename=filename))

    click.echo("Token Stream:")
    while True:
        token = cursor.current
        click.echo(f"  {token!r}")
        if token.kind == TokenKind.EOF:
            break
        cursor.advance()
    click.echo()


def _parse_file(path: Path, options: ParserOptions, show_tokens: bool) -> bool:
    """
    Parse one file and print its report.

    Returns:
        True if the file produced at least one error diagnostic
    """
    source = path.read_text(encoding="utf-8")
    logger.debug(f"Read {len(source)} chars from {path}")

    click.echo(f"Parsing input: {path}")
    click.echo(source.rstrip("\n"))
    click.echo()

    if show_tokens:
        _echo_tokens(source, options.filename)

    result = parse_program(source, options)

    click.echo("Abstract Syntax Tree:")
    click.echo(format_tree(result.program))

    if result.diagnostics:
        click.echo(result.report(), err=True)

    return result.has_errors


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the filtered token stream before the tree",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Exit with status 1 if any file has syntax errors",
)
@click.option(
    "--max-errors",
    type=click.IntRange(min=1),
    default=None,
    help="Errors reported per file before the rest are dropped "
         "(default: REVC_MAX_ERRORS or 100)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable debug logging",
)
@click.version_option(version=__version__, prog_name="revparse")
def main(
    input_files: tuple[Path, ...],
    tokens: bool,
    strict: bool,
    max_errors: Optional[int],
    verbose: bool,
) -> None:
    """
    Parse revc programs and print their syntax trees.

    INPUT_FILES are revc source files. Each is parsed independently;
    syntax errors are reported on stderr and never stop the parse.

    \b
    Examples:
        revparse hello.rc              # Tree and diagnostics
        revparse --tokens hello.rc     # Include the token stream
        revparse --strict *.rc         # Exit 1 on any syntax error

    \b
    Keywords are spelled backwards:
        tni taolf rahc diov      int float char void
        fi esle elihw            if else while
        taeper litnu             repeat until
        tnirp nruter lairotcaf   print return factorial
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    overrides = {} if max_errors is None else {"max_errors": max_errors}
    failed = []

    try:
        for index, path in enumerate(input_files):
            if index:
                click.echo()
            options = ParserOptions.from_env(filename=str(path), **overrides)
            if _parse_file(path, options, tokens):
                failed.append(path)
    except Exception as e:
        handle_cli_exception(e, verbose)

    if strict and failed:
        logger.debug(f"{len(failed)} of {len(input_files)} files had errors")
        sys.exit(ExitCode.PARSE_ERROR)


if __name__ == "__main__":
    main()
