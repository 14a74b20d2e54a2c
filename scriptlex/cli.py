"""
scriptlex command-line tool.

    scriptlex tokens FILE          token table
    scriptlex parse -e "a + b"     expression tree as JSON
    scriptlex print FILE           normalised source
    scriptlex check FILE           syntax check only

Every command takes either a FILE argument or ``-e/--expression``.
"""

import json
import logging
import sys
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import DEFAULT_CONFIG, ConfigError, GrammarConfig, load_config
from .lexer import LexError, Lexer
from .parser import ParseError, Parser, print_expression

console = Console()


def _configure_logging(verbose: bool):
    if not verbose:
        return
    package_logger = logging.getLogger("scriptlex")
    package_logger.setLevel(logging.DEBUG)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


def _read_source(file: Optional[str], expression: Optional[str]) -> Tuple[str, str]:
    if (file is None) == (expression is None):
        raise click.UsageError("Give exactly one of FILE or --expression")
    if expression is not None:
        return expression, "<expression>"
    with open(file, "r", encoding="utf-8") as f:
        return f.read(), file


def _parse(source: str, filename: str, config: GrammarConfig):
    tokens = Lexer(source, filename, config).tokenize()
    return Parser(tokens, config).parse()


def _report(error: Exception):
    """Print a lex/parse diagnostic and exit with status 1."""
    console.print(f"[bold red]{escape(str(error.diagnostic).rstrip())}[/bold red]")
    sys.exit(1)


source_arguments = [
    click.argument("file", type=click.Path(exists=True, dir_okay=False), required=False),
    click.option("-e", "--expression", help="Source text to use instead of a file"),
]


def with_source(command):
    for decorator in reversed(source_arguments):
        command = decorator(command)
    return command


@click.group()
@click.version_option(version=__version__, prog_name="scriptlex")
@click.option("--grammar", type=click.Path(exists=True, dir_okay=False),
              help="JSON grammar overlay (add_keywords, remove_keywords, binary_operators)")
@click.option("-v", "--verbose", is_flag=True, help="Log scanner and parser activity")
@click.pass_context
def cli(ctx, grammar, verbose):
    """scriptlex - scanner and expression parser for a JavaScript-like language"""
    _configure_logging(verbose)

    try:
        ctx.obj = load_config(grammar) if grammar else DEFAULT_CONFIG
    except ConfigError as e:
        raise click.BadParameter(str(e), param_hint="--grammar") from e


@cli.command()
@with_source
@click.pass_obj
def tokens(config, file, expression):
    """Show the tokens of the input"""
    source, filename = _read_source(file, expression)

    try:
        token_list = Lexer(source, filename, config).tokenize()
    except LexError as e:
        _report(e)

    table = Table(title="Tokens")
    table.add_column("Kind", style="cyan")
    table.add_column("Lexeme", style="green")
    table.add_column("Value", style="magenta")
    table.add_column("Position", style="yellow")
    table.add_column("NL", style="yellow")

    for token in token_list:
        if token.is_eof:
            break
        table.add_row(
            token.type.name,
            escape(token.lexeme),
            escape(repr(token.value)),
            f"{token.location.line}:{token.location.column}",
            "yes" if token.preceded_by_line_terminator else "",
        )

    console.print(table)


@cli.command()
@with_source
@click.pass_obj
def parse(config, file, expression):
    """Show the expression tree as JSON"""
    source, filename = _read_source(file, expression)

    try:
        tree = _parse(source, filename, config)
    except (LexError, ParseError) as e:
        _report(e)

    click.echo(json.dumps(tree.to_dict(), indent=2))


@cli.command("print")
@with_source
@click.pass_obj
def print_command(config, file, expression):
    """Print the input back as normalised source"""
    source, filename = _read_source(file, expression)

    try:
        tree = _parse(source, filename, config)
    except (LexError, ParseError) as e:
        _report(e)

    click.echo(print_expression(tree))


@cli.command()
@with_source
@click.pass_obj
def check(config, file, expression):
    """Check the syntax of the input"""
    source, filename = _read_source(file, expression)

    try:
        tree = _parse(source, filename, config)
    except (LexError, ParseError) as e:
        _report(e)

    console.print(f"[bold green]✅ Valid {tree.node_type.value} expression[/bold green]")


def main():
    cli(prog_name="scriptlex")


if __name__ == "__main__":
    main()
