"""Raw API commands: direct access to any Capella v4 endpoint through the retrying executor."""

from __future__ import annotations

import json
from typing import Annotated, Any, Optional

import typer
from rich.console import Console

from capella_cli.client.errors import error_handler
from capella_cli.client.executor import EndpointCfg
from capella_cli.client.pagination import SortBy, get_paginated
from capella_cli.commands._common import (
    FormatOpt,
    HostOpt,
    ProfileOpt,
    TimeoutOpt,
    TokenOpt,
    make_connection,
    make_context,
)
from capella_cli.output.formatter import output

app = typer.Typer(name="api", help="Raw API access.")
console = Console()


def _url(host_url: str, path: str) -> str:
    if path.startswith(("http://", "https://")):
        return path
    return f"{host_url}/{path.lstrip('/')}"


def _decode(body: bytes) -> Any:
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return body.decode(errors="replace")


@app.command("get")
@error_handler
def api_get(
    path: Annotated[str, typer.Argument(help="API path (e.g. /v4/organizations)")],
    fetch_all: Annotated[
        bool, typer.Option("--all", help="Follow pagination and print every item"),
    ] = False,
    sort_by: Annotated[
        Optional[SortBy], typer.Option("--sort-by", help="Sort key for --all"),
    ] = None,
    profile: ProfileOpt = None,
    host: HostOpt = None,
    token: TokenOpt = None,
    timeout: TimeoutOpt = None,
    fmt: FormatOpt = "json",
) -> None:
    """Send a GET request to an API endpoint."""
    with make_connection(profile, host, token) as conn:
        ctx = make_context(timeout)
        cfg = EndpointCfg(url=_url(conn.host_url, path))
        if fetch_all:
            items = get_paginated(ctx, conn.executor, conn.token, cfg, dict, sort_by)
            output(items, fmt)
            return
        outcome = conn.executor.execute(ctx, cfg, token=conn.token)
        data = _decode(outcome.body)
        output(data, fmt, kv=isinstance(data, dict))


@app.command("delete")
@error_handler
def api_delete(
    path: Annotated[str, typer.Argument(help="API path")],
    expect: Annotated[
        int, typer.Option("--expect", help="Status code that means success"),
    ] = 204,
    profile: ProfileOpt = None,
    host: HostOpt = None,
    token: TokenOpt = None,
    timeout: TimeoutOpt = None,
    fmt: FormatOpt = "json",
) -> None:
    """Send a DELETE request to an API endpoint."""
    with make_connection(profile, host, token) as conn:
        cfg = EndpointCfg(url=_url(conn.host_url, path), method="DELETE", success_status=expect)
        outcome = conn.executor.execute(make_context(timeout), cfg, token=conn.token)
        data = _decode(outcome.body)
        if data is None:
            console.print("[green]Deleted.[/]")
        else:
            output(data, fmt, kv=isinstance(data, dict))
