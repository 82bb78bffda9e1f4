"""Shared helpers for CLI commands: connection factory, options and diagnostics."""

from __future__ import annotations

import json
from typing import Annotated, Any

import typer
from rich.console import Console

from capella_cli.client.context import CallContext
from capella_cli.config.manager import ConfigManager
from capella_cli.resources.base import Connection, OperationResult, Severity

_console = Console()
_err_console = Console(stderr=True)

# Shared Typer option type aliases
ProfileOpt = Annotated[
    str | None,
    typer.Option("--profile", "-p", help="Connection profile"),
]
HostOpt = Annotated[
    str | None,
    typer.Option("--host", help="API host URL override"),
]
TokenOpt = Annotated[
    str | None,
    typer.Option("--token", help="API token override"),
]
FormatOpt = Annotated[
    str,
    typer.Option("--format", "-f", help="Output format"),
]
TimeoutOpt = Annotated[
    float | None,
    typer.Option("--timeout", help="Overall deadline for the operation in seconds"),
]
OrgOpt = Annotated[
    str,
    typer.Option("--org", help="Organization ID"),
]
ProjectOpt = Annotated[
    str,
    typer.Option("--project", help="Project ID"),
]
ClusterOpt = Annotated[
    str,
    typer.Option("--cluster", help="Cluster ID"),
]


def get_manager() -> ConfigManager:
    return ConfigManager()


def make_connection(
    profile: str | None,
    host: str | None,
    token: str | None,
) -> Connection:
    """Create a Connection from CLI options, env vars, or config profile."""
    resolved = get_manager().resolve_profile(profile_name=profile, host=host, token=token)
    return Connection.from_profile(resolved)


def make_context(timeout: float | None) -> CallContext:
    return CallContext(timeout=timeout)


def report(result: OperationResult[Any]) -> None:
    """Print an operation's diagnostics; exit 1 if any of them is an error."""
    for diag in result.diagnostics:
        if diag.severity is Severity.WARNING:
            _err_console.print(f"[bold yellow]Warning:[/] {diag.summary}")
        else:
            _err_console.print(f"[bold red]Error:[/] {diag.summary}")
        _err_console.print(diag.detail, markup=False, soft_wrap=True)
    if not result.ok:
        raise typer.Exit(1)


def parse_json_option(data: str | None, name: str) -> Any:
    if not data:
        return None
    try:
        return json.loads(data)
    except json.JSONDecodeError:
        _console.print(f"[red]Invalid JSON for {name}.[/]")
        raise typer.Exit(1)
