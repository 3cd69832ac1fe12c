"""
Unified CLI Error Handling
==========================

Exit codes and exception reporting shared by the CLI commands.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    SYNTAX_ERROR = 1     # Lexical or syntax error in the script
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception raised while running a command and exit.

    Script errors are printed as their diagnostic blocks; file problems
    as a one-line message; anything else as an internal error, with a
    traceback in verbose mode.

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    from pseudolang.errors import PseudoError

    if isinstance(error, PseudoError):
        click.echo(str(error), err=True, nl=False)
        sys.exit(ExitCode.SYNTAX_ERROR)

    elif isinstance(error, (FileNotFoundError, PermissionError, IsADirectoryError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, UnicodeDecodeError):
        click.echo(f"Error: cannot decode input: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
