"""
pseudolang Command-Line Interface
=================================

The `pseudo` command:

    pseudo tokens FILE   print the token list
    pseudo ast FILE      print the syntax tree
    pseudo check FILE    report whether the script is well formed
    pseudo repl          tokenize and parse stdin line by line
"""

from pseudolang.cli.errors import ExitCode, handle_cli_exception

__all__ = ["ExitCode", "handle_cli_exception"]
