"""Configuration commands: show the effective registry setup, manage settings files."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.table import Table

from ..console import console
from ..exceptions import ResourceError
from ..settings import ResolverSettings
from ..utils.error_format import escape_markup
from ..utils.error_format import format_error_message


@click.group(invoke_without_command=True)
@click.pass_context
def config(ctx: click.Context):
    """Inspect resolver and loader configuration."""
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@config.command(name="show")
@click.pass_obj
def config_show(state):
    """Show resolvers (in precedence order) and registered loaders."""
    registry = state.get_registry()

    resolvers = registry.get_path_resolvers()
    if resolvers:
        table = Table(title="Path Resolvers")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Resolver", style="cyan")
        table.add_column("Root", style="green")
        for index, resolver in enumerate(resolvers, start=1):
            table.add_row(str(index), type(resolver).__name__, escape_markup(getattr(resolver, "root", "")))
        console.print(table)
    else:
        console.print("[dim]No path resolvers configured.[/dim]")

    table = Table(title="Loaders")
    table.add_column("Scheme", style="cyan")
    table.add_column("Loader", style="dim")
    table.add_column("Produces")
    table.add_column("Fallback", style="green")
    for loader in registry.get_loaders():
        table.add_row(
            loader.scheme,
            type(loader).__name__,
            loader.resource_type.__name__,
            escape_markup(loader.fallback or "-"),
        )
    console.print(table)


@config.command(name="path")
@click.pass_obj
def config_path(state):
    """Show settings file locations."""
    settings = state.get_settings()
    for scope, path in settings.paths.in_order():
        status = "exists" if path.exists() else "not created"
        console.print(f"[bold]{scope}:[/bold] [cyan]{escape_markup(path)}[/cyan] [dim]({status})[/dim]")


@config.command(name="add")
@click.argument("resolver_type", type=click.Choice(["directory", "zip", "jar"]))
@click.argument("root", type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "--scope",
    type=click.Choice(["local", "project", "global"]),
    default="project",
    show_default=True,
    help="Settings file to write",
)
@click.pass_obj
def config_add(state, resolver_type: str, root: Path, scope: str):
    """Append a path resolver to a settings file.

    Relative roots are stored as absolute paths.
    """
    settings = state.get_settings()
    entry = ResolverSettings(type=resolver_type, root=root.expanduser().absolute())
    try:
        settings.add_resolver(entry, scope=scope)
    except ResourceError as e:
        console.print(f"[red]Error:[/red] {escape_markup(format_error_message(e))}")
        sys.exit(1)

    console.print(f"[green]✓ Added {resolver_type} resolver {escape_markup(entry.root)} ({scope})[/green]")
