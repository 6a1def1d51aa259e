"""resourcefs CLI - fetch, list and inspect resources from the command line."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

import click

from .commands.config import config as config_group
from .commands.resource import get_cmd
from .commands.resource import ls_cmd
from .commands.resource import which_cmd
from .console import console
from .exceptions import ResourceError
from .logging_setup import init_json_logging
from .paths import ResolverType
from .paths import create_registry
from .registry import ResourceRegistry
from .settings import ResourceSettings
from .settings import get_settings
from .utils.error_format import escape_markup
from .utils.error_format import format_error_message

logger = logging.getLogger(__name__)


@dataclass
class CliState:
    """Options shared by all subcommands."""

    extra_resolvers: list[tuple[ResolverType, Path]] = field(default_factory=list)
    use_settings: bool = True
    _registry: ResourceRegistry | None = None

    def get_settings(self) -> ResourceSettings:
        return get_settings()

    def get_registry(self) -> ResourceRegistry:
        """Build the registry on first use; configuration errors exit with status 1."""
        if self._registry is None:
            try:
                self._registry = create_registry(
                    self.get_settings(),
                    self.extra_resolvers,
                    use_settings=self.use_settings,
                )
            except ResourceError as e:
                console.print(f"[red]Error:[/red] {escape_markup(format_error_message(e))}")
                sys.exit(1)
        return self._registry


@click.group()
@click.version_option(package_name="resourcefs")
@click.option("--dir", "dirs", multiple=True, type=click.Path(file_okay=False, path_type=Path), help="Add a directory resolver root")
@click.option("--zip", "zips", multiple=True, type=click.Path(file_okay=False, path_type=Path), help="Add a zip archive resolver root")
@click.option("--jar", "jars", multiple=True, type=click.Path(file_okay=False, path_type=Path), help="Add a jar archive resolver root")
@click.option("--no-settings", is_flag=True, help="Ignore settings files")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), help="Write JSONL logs to this file")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level for --log-file",
)
@click.pass_context
def cli(
    ctx: click.Context,
    dirs: tuple[Path, ...],
    zips: tuple[Path, ...],
    jars: tuple[Path, ...],
    no_settings: bool,
    log_file: Path | None,
    log_level: str | None,
):
    """Resolve resource identifiers (scheme://host/path) to loaded resources.

    Resolvers from settings files are consulted first, then --dir, --zip and
    --jar roots in that order.
    """
    init_json_logging(log_file, log_level)

    state = CliState(use_settings=not no_settings)
    state.extra_resolvers.extend(("directory", root) for root in dirs)
    state.extra_resolvers.extend(("zip", root) for root in zips)
    state.extra_resolvers.extend(("jar", root) for root in jars)
    ctx.obj = state


cli.add_command(get_cmd)
cli.add_command(ls_cmd)
cli.add_command(which_cmd)
cli.add_command(config_group)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
