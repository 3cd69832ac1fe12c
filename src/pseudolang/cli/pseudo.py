"""
pseudo - Script Front End Command-Line Interface
================================================

Runs the lexer and parser over scripts from the terminal.

Usage Examples
--------------
Check a script:
    $ pseudo check script.pseudo

Dump the syntax tree:
    $ pseudo ast script.pseudo

Dump the tokens of standard input:
    $ echo 'let x <- 1' | pseudo tokens -

Parse line by line:
    $ pseudo repl < commands.txt

Verbose mode (debug logging, tracebacks for internal errors):
    $ pseudo -v ast script.pseudo
"""

import logging
import sys
from typing import TextIO

import click

from pseudolang import __version__
from pseudolang.cli.errors import ExitCode, handle_cli_exception
from pseudolang.syntax.ast import ASTPrinter
from pseudolang.syntax.frontend import Frontend, FrontendOptions, FrontendResult
from pseudolang.syntax.lexer import tokenize

logger = logging.getLogger(__name__)


# =============================================================================
# Shared Context
# =============================================================================

class Context:
    """Options shared by every subcommand."""

    def __init__(self) -> None:
        self.verbose: bool = False

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.INFO
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


def _process(ctx: Context, script: TextIO) -> FrontendResult:
    """
    Run the front end over an opened script, exiting on any failure.

    Returns:
        A successful FrontendResult
    """
    try:
        source = script.read()
        frontend = Frontend(FrontendOptions(filename=script.name))
        result = frontend.process_source(source)
    except Exception as e:
        handle_cli_exception(e, ctx.verbose)

    if not result.success:
        click.echo(result.report(), err=True, nl=False)
        word = "error" if len(result.errors) == 1 else "errors"
        logger.debug("%s: %d %s", result.filename, len(result.errors), word)
        sys.exit(ExitCode.SYNTAX_ERROR)

    return result


# =============================================================================
# CLI Definition
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Debug logging and tracebacks for internal errors",
)
@click.version_option(version=__version__, prog_name="pseudo")
@pass_context
def main(ctx: Context, verbose: bool) -> None:
    """
    Lexer and parser for pseudolang scripts.

    \b
    Examples:
        pseudo check script.pseudo
        pseudo ast script.pseudo
        pseudo tokens -
    """
    ctx.verbose = verbose
    ctx.setup_logging()


@main.command()
@click.argument("script", type=click.File("r", encoding="utf-8"))
@pass_context
def tokens(ctx: Context, script: TextIO) -> None:
    """
    Print the tokens of SCRIPT, one per line.

    Use - to read standard input. Every lexical error in the script is
    reported, not just the first.
    """
    try:
        token_list = tokenize(script.read(), script.name)
    except Exception as e:
        handle_cli_exception(e, ctx.verbose)

    for token in token_list:
        click.echo(repr(token))


@main.command()
@click.argument("script", type=click.File("r", encoding="utf-8"))
@pass_context
def ast(ctx: Context, script: TextIO) -> None:
    """Print the syntax tree of SCRIPT."""
    result = _process(ctx, script)
    click.echo(ASTPrinter().print(result.ast))


@main.command()
@click.argument("script", type=click.File("r", encoding="utf-8"))
@pass_context
def check(ctx: Context, script: TextIO) -> None:
    """Check that SCRIPT tokenizes and parses."""
    result = _process(ctx, script)
    click.echo(
        f"{result.filename}: OK "
        f"({result.token_count} tokens, {len(result.ast.body)} expressions)"
    )


@main.command()
@pass_context
def repl(ctx: Context) -> None:
    """
    Tokenize and parse standard input one line at a time.

    Each line is an independent script. Successful lines print their
    syntax tree; failing lines print their diagnostics and the loop
    carries on with the next line.
    """
    stdin = click.get_text_stream("stdin")
    printer = ASTPrinter()
    failures = 0

    for line_number, line in enumerate(stdin, start=1):
        frontend = Frontend(FrontendOptions("<stdin>", line_number))
        result = frontend.process_source(line.rstrip("\r\n"))

        if not result.success:
            failures += 1
            click.echo(result.report(), err=True, nl=False)
        elif result.ast.body:
            click.echo(printer.print(result.ast))

    logger.debug("repl: %d line(s) with errors", failures)


if __name__ == "__main__":
    main()
