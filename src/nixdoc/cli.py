"""
CLI for nixdoc.

Generates DocBook from Nix library functions.

Usage:
    nixdoc -f lib/strings.nix -c strings -d "String manipulation functions"
    nixdoc generate -f lib/strings.nix -c strings -d "String manipulation functions"
    nixdoc generate --config nixdoc.yaml
    nixdoc extract lib/strings.nix
"""

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from nixdoc import __version__
from nixdoc.config import LOG_LEVELS, NixdocConfig
from nixdoc.errors import NixdocError
from nixdoc.logging import configure_logging
from nixdoc.orchestrator import DocumentationOrchestrator
from nixdoc.parser.tree_walker import TreeWalker


def _err_console() -> Console:
    return Console(file=sys.stderr)


def _fail(error: NixdocError) -> None:
    console = _err_console()
    console.print(f"[bold red]✗ {error.phase.value} failed:[/bold red] {escape(error.message)}", highlight=False, soft_wrap=True)
    if error.cause is not None and str(error.cause) not in error.message:
        console.print(f"  caused by: {escape(str(error.cause))}", highlight=False, soft_wrap=True)
    sys.exit(1)


GENERATE_OPTIONS = [
    click.option(
        "--file", "-f", "file_path",
        type=click.Path(dir_okay=False, path_type=Path),
        help="Nix file to process.",
    ),
    click.option(
        "--category", "-c",
        help="Name of the function category (e.g. 'strings', 'attrsets').",
    ),
    click.option(
        "--description", "-d",
        help="Description of the function category.",
    ),
    click.option(
        "--config", "config_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="YAML file with default settings.",
    ),
    click.option(
        "--indent",
        type=click.IntRange(min=0),
        help="Spaces per nesting level (0 disables indentation).",
    ),
    click.option(
        "--no-declaration",
        is_flag=True,
        default=False,
        help="Omit the XML declaration.",
    ),
    click.option(
        "--log-level",
        type=click.Choice(LOG_LEVELS, case_sensitive=False),
        help="Log level for messages on stderr.",
    ),
]


def generate_options(func):
    """Attach the generate options to a command."""
    for option in reversed(GENERATE_OPTIONS):
        func = option(func)
    return func


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="nixdoc")
@generate_options
@click.pass_context
def cli(ctx: click.Context, **options):
    """Generate DocBook from Nix library functions.

    Without a subcommand the options run 'generate', so
    `nixdoc -f lib/strings.nix -c strings -d "String functions"` works too.
    """
    if ctx.invoked_subcommand is not None:
        return
    if all(value is None or value is False for value in options.values()):
        click.echo(ctx.get_help())
        return
    ctx.invoke(generate, **options)


@cli.command()
@generate_options
def generate(
    file_path: Path | None,
    category: str | None,
    description: str | None,
    config_path: Path | None,
    indent: int | None,
    no_declaration: bool,
    log_level: str | None,
):
    """Write the DocBook reference for one Nix file to stdout.

    Examples:
        nixdoc generate -f lib/strings.nix -c strings -d "String functions"
        nixdoc generate --config nixdoc.yaml --log-level info
    """
    try:
        config = NixdocConfig.from_yaml(config_path) if config_path else NixdocConfig()
        config = config.merge(
            file=file_path,
            category=category,
            description=description,
            indent=indent,
            write_declaration=False if no_declaration else None,
            log_level=log_level.upper() if log_level else None,
        )
        config.validate()
        configure_logging(level=config.log_level, json_format=config.json_logs)

        orchestrator = DocumentationOrchestrator(config)
        orchestrator.generate(sys.stdout)
    except NixdocError as e:
        _fail(e)


@cli.command()
@click.argument("file_path", type=click.Path(dir_okay=False, path_type=Path))
def extract(file_path: Path):
    """Show the documented identifiers found in a Nix file.

    Useful for checking how comments are split into description, type and
    example before generating DocBook.
    """
    configure_logging(level="WARNING")
    console = Console()

    try:
        items = list(TreeWalker().walk_file(file_path))
    except NixdocError as e:
        _fail(e)
        return

    console.print(f"\n[bold blue]📄 {file_path}[/bold blue]: {len(items)} documented identifiers\n", soft_wrap=True)
    if not items:
        return

    table = Table()
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("Description")
    table.add_column("Example", justify="center")

    for item in items:
        comment = item.comment
        summary = comment.doc.splitlines()[0] if comment.doc else ""
        table.add_row(
            item.name,
            comment.doc_type or "-",
            summary,
            "✅" if comment.example else "-",
        )

    console.print(table)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
