"""Root Typer app with global options and command group registration."""

from __future__ import annotations

from typing import Optional

import typer

from capella_cli import __version__
from capella_cli.commands import allowlist, api, apikey, backup_schedule, config_cmd
from capella_cli.logs import setup_logging

app = typer.Typer(
    name="capella-cli",
    help="CLI tool for the Couchbase Capella management API (v4).",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    if value:
        print(f"capella-cli {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True, help="Show version and exit."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
) -> None:
    """Couchbase Capella V4 API command line client."""
    setup_logging(verbose)


# Register command groups
app.add_typer(config_cmd.app, name="config")
app.add_typer(apikey.app, name="apikey")
app.add_typer(allowlist.app, name="allowlist")
app.add_typer(backup_schedule.app, name="backup-schedule")
app.add_typer(api.app, name="api")


def main() -> None:
    app()
