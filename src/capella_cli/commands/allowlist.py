"""Cluster allowlist commands."""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console

from capella_cli.client.errors import error_handler
from capella_cli.client.pagination import SortBy
from capella_cli.commands._common import (
    ClusterOpt,
    FormatOpt,
    HostOpt,
    OrgOpt,
    ProfileOpt,
    ProjectOpt,
    TimeoutOpt,
    TokenOpt,
    make_connection,
    make_context,
    report,
)
from capella_cli.models.allowlist import AllowListState
from capella_cli.output.formatter import output
from capella_cli.resources.allowlist import AllowListResource

app = typer.Typer(name="allowlist", help="Manage the CIDRs allowed to reach a cluster.")
console = Console()


@app.command("list")
@error_handler
def list_entries(
    org: OrgOpt,
    project: ProjectOpt,
    cluster: ClusterOpt,
    sort_by: Annotated[
        Optional[SortBy], typer.Option("--sort-by", help="Sort key"),
    ] = None,
    profile: ProfileOpt = None,
    host: HostOpt = None,
    token: TokenOpt = None,
    timeout: TimeoutOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """List a cluster's allowed CIDRs (all pages)."""
    with make_connection(profile, host, token) as conn:
        entries = AllowListResource(conn).list_all(make_context(timeout), org, project, cluster, sort_by)
        columns = ["ID", "CIDR", "Comment", "Expires At"]
        rows = [[e.id, e.cidr, e.comment or "", e.expires_at or ""] for e in entries]
        output(entries, fmt, columns=columns, rows=rows, title="Allowed CIDRs")


@app.command()
@error_handler
def show(
    entry_id: Annotated[str, typer.Argument(help="Allowlist entry ID")],
    org: OrgOpt,
    project: ProjectOpt,
    cluster: ClusterOpt,
    profile: ProfileOpt = None,
    host: HostOpt = None,
    token: TokenOpt = None,
    timeout: TimeoutOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Show one allowlist entry."""
    state = AllowListState(organization_id=org, project_id=project, cluster_id=cluster, id=entry_id)
    with make_connection(profile, host, token) as conn:
        result = AllowListResource(conn).read(make_context(timeout), state)
        report(result)
        if result.removed:
            console.print(f"[yellow]Allowlist entry '{entry_id}' does not exist.[/]")
            raise typer.Exit(4)
        output(result.state, fmt, kv=True, title=f"Allowlist: {entry_id}")


@app.command()
@error_handler
def create(
    org: OrgOpt,
    project: ProjectOpt,
    cluster: ClusterOpt,
    cidr: Annotated[str, typer.Option("--cidr", help="CIDR to allow, /32 for a single address")],
    comment: Annotated[Optional[str], typer.Option("--comment")] = None,
    expires_at: Annotated[
        Optional[str], typer.Option("--expires-at", help="RFC3339 expiry timestamp"),
    ] = None,
    profile: ProfileOpt = None,
    host: HostOpt = None,
    token: TokenOpt = None,
    timeout: TimeoutOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Allow a CIDR to connect to a cluster."""
    plan = AllowListState(
        organization_id=org,
        project_id=project,
        cluster_id=cluster,
        cidr=cidr,
        comment=comment,
        expires_at=expires_at,
    )
    with make_connection(profile, host, token) as conn:
        result = AllowListResource(conn).create(make_context(timeout), plan)
        report(result)
        output(result.state, fmt, kv=True, title=f"Allowlist: {cidr}")


@app.command()
@error_handler
def delete(
    entry_id: Annotated[str, typer.Argument(help="Allowlist entry ID")],
    org: OrgOpt,
    project: ProjectOpt,
    cluster: ClusterOpt,
    profile: ProfileOpt = None,
    host: HostOpt = None,
    token: TokenOpt = None,
    timeout: TimeoutOpt = None,
) -> None:
    """Remove a CIDR from a cluster's allowlist."""
    state = AllowListState(organization_id=org, project_id=project, cluster_id=cluster, id=entry_id)
    with make_connection(profile, host, token) as conn:
        report(AllowListResource(conn).delete(make_context(timeout), state))
    console.print(f"[green]Allowlist entry '{entry_id}' deleted.[/]")


@app.command("import")
@error_handler
def import_entry(
    import_id: Annotated[
        str,
        typer.Argument(help="id=<id>,cluster_id=<id>,project_id=<id>,organization_id=<id>"),
    ],
    profile: ProfileOpt = None,
    host: HostOpt = None,
    token: TokenOpt = None,
    timeout: TimeoutOpt = None,
    fmt: FormatOpt = "json",
) -> None:
    """Read an existing allowlist entry into a state document."""
    with make_connection(profile, host, token) as conn:
        result = AllowListResource(conn).import_state(make_context(timeout), import_id)
        report(result)
        if result.removed:
            console.print("[yellow]Allowlist entry does not exist.[/]")
            raise typer.Exit(4)
        output(result.state, fmt, kv=True, title="Imported Allowlist")
