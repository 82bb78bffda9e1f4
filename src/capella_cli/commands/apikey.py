"""API key commands."""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console

from capella_cli.client.errors import error_handler
from capella_cli.client.pagination import SortBy
from capella_cli.commands._common import (
    FormatOpt,
    HostOpt,
    OrgOpt,
    ProfileOpt,
    TimeoutOpt,
    TokenOpt,
    make_connection,
    make_context,
    parse_json_option,
    report,
)
from capella_cli.models.apikey import ApiKeyResourceItem, ApiKeyState
from capella_cli.output.formatter import output
from capella_cli.resources.apikey import ApiKeyResource

app = typer.Typer(name="apikey", help="Manage organization API keys.")
console = Console()


@app.command("list")
@error_handler
def list_keys(
    org: OrgOpt,
    sort_by: Annotated[
        SortBy, typer.Option("--sort-by", help="Sort key"),
    ] = SortBy.NAME,
    profile: ProfileOpt = None,
    host: HostOpt = None,
    token: TokenOpt = None,
    timeout: TimeoutOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """List every API key of an organization (all pages)."""
    with make_connection(profile, host, token) as conn:
        keys = ApiKeyResource(conn).list_all(make_context(timeout), org, sort_by)
        columns = ["ID", "Name", "Roles", "Expiry", "Allowed CIDRs"]
        rows = [
            [k.id, k.name, ", ".join(k.organization_roles), k.expiry, ", ".join(k.allowed_cidrs)]
            for k in keys
        ]
        output(keys, fmt, columns=columns, rows=rows, title="API Keys")


@app.command()
@error_handler
def show(
    key_id: Annotated[str, typer.Argument(help="API key ID")],
    org: OrgOpt,
    profile: ProfileOpt = None,
    host: HostOpt = None,
    token: TokenOpt = None,
    timeout: TimeoutOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Show one API key."""
    with make_connection(profile, host, token) as conn:
        result = ApiKeyResource(conn).read(
            make_context(timeout), ApiKeyState(organization_id=org, id=key_id),
        )
        report(result)
        if result.removed:
            console.print(f"[yellow]API key '{key_id}' does not exist.[/]")
            raise typer.Exit(4)
        output(result.state, fmt, kv=True, title=f"API Key: {key_id}")


@app.command()
@error_handler
def create(
    org: OrgOpt,
    name: Annotated[str, typer.Option("--name", help="Key name")],
    roles: Annotated[
        list[str], typer.Option("--role", help="Organization role (repeatable)"),
    ],
    description: Annotated[Optional[str], typer.Option("--description")] = None,
    expiry: Annotated[Optional[float], typer.Option("--expiry", help="Expiry in days, -1 never")] = None,
    cidrs: Annotated[
        Optional[list[str]], typer.Option("--cidr", help="Allowed CIDR (repeatable)"),
    ] = None,
    resources: Annotated[
        Optional[str],
        typer.Option("--resources", help='JSON list, e.g. [{"id": "<project>", "roles": ["projectViewer"]}]'),
    ] = None,
    profile: ProfileOpt = None,
    host: HostOpt = None,
    token: TokenOpt = None,
    timeout: TimeoutOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Create an API key. The token is only shown once."""
    items = [ApiKeyResourceItem(**item) for item in parse_json_option(resources, "--resources") or []]
    plan = ApiKeyState(
        organization_id=org,
        name=name,
        description=description,
        expiry=expiry,
        organization_roles=roles,
        allowed_cidrs=cidrs,
        resources=items,
    )
    with make_connection(profile, host, token) as conn:
        result = ApiKeyResource(conn).create(make_context(timeout), plan)
        report(result)
        output(result.state, fmt, kv=True, title=f"API Key: {name}")


@app.command()
@error_handler
def rotate(
    key_id: Annotated[str, typer.Argument(help="API key ID")],
    org: OrgOpt,
    counter: Annotated[int, typer.Option("--rotate", help="Rotation counter, greater than the last one")],
    last: Annotated[
        Optional[int], typer.Option("--last-rotate", help="Counter used for the previous rotation"),
    ] = None,
    secret: Annotated[Optional[str], typer.Option("--secret", help="New secret (generated if omitted)")] = None,
    profile: ProfileOpt = None,
    host: HostOpt = None,
    token: TokenOpt = None,
    timeout: TimeoutOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Rotate an API key's secret."""
    state = ApiKeyState(organization_id=org, id=key_id, rotate=last)
    plan = state.model_copy(update={"rotate": counter, "secret": secret})
    with make_connection(profile, host, token) as conn:
        result = ApiKeyResource(conn).update(make_context(timeout), plan, state)
        report(result)
        if result.removed:
            console.print(f"[yellow]API key '{key_id}' does not exist.[/]")
            raise typer.Exit(4)
        output(result.state, fmt, kv=True, title=f"API Key: {key_id}")


@app.command()
@error_handler
def delete(
    key_id: Annotated[str, typer.Argument(help="API key ID")],
    org: OrgOpt,
    profile: ProfileOpt = None,
    host: HostOpt = None,
    token: TokenOpt = None,
    timeout: TimeoutOpt = None,
) -> None:
    """Delete an API key. Deleting a missing key succeeds."""
    with make_connection(profile, host, token) as conn:
        report(ApiKeyResource(conn).delete(
            make_context(timeout), ApiKeyState(organization_id=org, id=key_id),
        ))
    console.print(f"[green]API key '{key_id}' deleted.[/]")


@app.command("import")
@error_handler
def import_key(
    import_id: Annotated[str, typer.Argument(help="organization_id=<id>,id=<id>")],
    profile: ProfileOpt = None,
    host: HostOpt = None,
    token: TokenOpt = None,
    timeout: TimeoutOpt = None,
    fmt: FormatOpt = "json",
) -> None:
    """Read an existing API key into a state document."""
    with make_connection(profile, host, token) as conn:
        result = ApiKeyResource(conn).import_state(make_context(timeout), import_id)
        report(result)
        if result.removed:
            console.print("[yellow]API key does not exist.[/]")
            raise typer.Exit(4)
        output(result.state, fmt, kv=True, title="Imported API Key")
