"""Resource commands: get, ls, which."""

from __future__ import annotations

import json
import sys
from typing import Any
from typing import NoReturn

import click
from rich.table import Table

from ..console import console
from ..exceptions import ResourceError
from ..identifiers import ResourceIdentifier
from ..utils.error_format import escape_markup
from ..utils.error_format import format_error_message


def _fail(e: BaseException) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape_markup(format_error_message(e))}")
    sys.exit(1)


def _print_resource(resource: Any, raw: bool) -> None:
    """Print a loaded resource: text as-is, bytes raw or summarised, data as JSON."""
    if isinstance(resource, str):
        click.echo(resource, nl=not resource.endswith("\n"))
    elif isinstance(resource, bytes):
        if raw:
            click.echo(resource, nl=False)
        else:
            console.print(f"[dim]<{len(resource)} bytes>[/dim] (use --raw to write them to stdout)")
    elif raw:
        click.echo(json.dumps(resource, default=str))
    else:
        console.print_json(data=resource, default=str)


@click.command(name="get")
@click.argument("uri")
@click.option("--raw", is_flag=True, help="Write bytes and data without formatting")
@click.pass_obj
def get_cmd(state, uri: str, raw: bool):
    """Load and print the resource at URI (e.g. text://lang/en/hello.txt)."""
    registry = state.get_registry()
    try:
        resource = registry.get_resource(uri)
    except Exception as e:
        # Loaders raise their own decode errors (json, yaml, unicode)
        _fail(e)

    _print_resource(resource, raw)


@click.command(name="ls")
@click.argument("uri")
@click.pass_obj
def ls_cmd(state, uri: str):
    """List the resources directly under a directory-like URI."""
    registry = state.get_registry()
    try:
        resolver = registry.find_path_resolver(uri)
        children = registry.list_identifiers(uri)
    except ResourceError as e:
        _fail(e)

    if not children:
        console.print(f"[dim]No resources under {escape_markup(uri)}[/dim]")
        return

    table = Table(title=f"Resources under {escape_markup(uri)}")
    table.add_column("Name", style="cyan")
    table.add_column("Identifier", style="green")
    for child in children:
        table.add_row(escape_markup(child.path.rsplit("/", 1)[-1]), escape_markup(child))

    console.print(table)
    console.print(f"[dim]Resolved by {escape_markup(repr(resolver))}[/dim]")


@click.command(name="which")
@click.argument("uri")
@click.pass_obj
def which_cmd(state, uri: str):
    """Show which resolvers have URI and which one supplies its stream."""
    registry = state.get_registry()
    try:
        identifier = ResourceIdentifier.parse(uri)
    except ResourceError as e:
        _fail(e)

    loader = registry.get_loader(identifier.scheme)
    resolvers = registry.get_path_resolvers()
    if not resolvers:
        console.print("[yellow]No path resolvers configured.[/yellow] Use --dir, --zip or --jar.")
        sys.exit(1)

    table = Table(title=f"Resolution of {escape_markup(identifier)}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Resolver", style="cyan")
    table.add_column("Has resource")

    winner = None
    for index, resolver in enumerate(resolvers, start=1):
        # Loading takes the first stream, so a directory that merely exists does not win
        stream = resolver.open(identifier) if winner is None else None
        if stream is not None:
            stream.close()
            winner = resolver
            status = "[green]yes (used)[/green]"
        else:
            status = "yes" if resolver.exists(identifier) else "[dim]no[/dim]"
        table.add_row(str(index), escape_markup(repr(resolver)), status)

    console.print(table)
    if loader is None:
        console.print(f"[yellow]No loader registered for scheme '{escape_markup(identifier.scheme)}'[/yellow]")
    else:
        console.print(f"[bold]Loader:[/bold] {escape_markup(repr(loader))}")

    if winner is None:
        sys.exit(1)
