"""Bucket backup schedule commands."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from capella_cli.client.errors import error_handler
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
from capella_cli.models.backup_schedule import BackupScheduleState, WeeklySchedule
from capella_cli.output.formatter import output
from capella_cli.resources.backup_schedule import BackupScheduleResource

app = typer.Typer(name="backup-schedule", help="Manage a bucket's weekly backup schedule.")
console = Console()

BucketOpt = Annotated[str, typer.Option("--bucket", help="Bucket ID")]
DayOpt = Annotated[str, typer.Option("--day", help="Day of the week for the full backup")]
StartOpt = Annotated[int, typer.Option("--start-at", min=0, max=23, help="Hour of the day (0-23)")]
IncrementalOpt = Annotated[
    int, typer.Option("--incremental-every", help="Hours between incremental backups"),
]
RetentionOpt = Annotated[str, typer.Option("--retention", help="Retention time, e.g. 30days")]
CostOpt = Annotated[
    bool, typer.Option("--cost-optimized/--no-cost-optimized", help="Use cost optimized retention"),
]


def _plan(
    org: str, project: str, cluster: str, bucket: str,
    day: str, start_at: int, incremental_every: int, retention: str, cost_optimized: bool,
) -> BackupScheduleState:
    return BackupScheduleState(
        organization_id=org,
        project_id=project,
        cluster_id=cluster,
        bucket_id=bucket,
        weekly_schedule=WeeklySchedule(
            day_of_week=day,
            start_at=start_at,
            incremental_every=incremental_every,
            retention_time=retention,
            cost_optimized_retention=cost_optimized,
        ),
    )


@app.command()
@error_handler
def show(
    org: OrgOpt,
    project: ProjectOpt,
    cluster: ClusterOpt,
    bucket: BucketOpt,
    profile: ProfileOpt = None,
    host: HostOpt = None,
    token: TokenOpt = None,
    timeout: TimeoutOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Show a bucket's backup schedule."""
    state = BackupScheduleState(organization_id=org, project_id=project, cluster_id=cluster, bucket_id=bucket)
    with make_connection(profile, host, token) as conn:
        result = BackupScheduleResource(conn).read(make_context(timeout), state)
        report(result)
        if result.removed:
            console.print(f"[yellow]Bucket '{bucket}' has no backup schedule.[/]")
            raise typer.Exit(4)
        output(result.state, fmt, kv=True, title=f"Backup Schedule: {bucket}")


@app.command()
@error_handler
def create(
    org: OrgOpt,
    project: ProjectOpt,
    cluster: ClusterOpt,
    bucket: BucketOpt,
    day: DayOpt,
    start_at: StartOpt,
    incremental_every: IncrementalOpt,
    retention: RetentionOpt,
    cost_optimized: CostOpt = False,
    profile: ProfileOpt = None,
    host: HostOpt = None,
    token: TokenOpt = None,
    timeout: TimeoutOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Create a bucket's backup schedule."""
    plan = _plan(org, project, cluster, bucket, day, start_at, incremental_every, retention, cost_optimized)
    with make_connection(profile, host, token) as conn:
        result = BackupScheduleResource(conn).create(make_context(timeout), plan)
        report(result)
        output(result.state, fmt, kv=True, title=f"Backup Schedule: {bucket}")


@app.command()
@error_handler
def update(
    org: OrgOpt,
    project: ProjectOpt,
    cluster: ClusterOpt,
    bucket: BucketOpt,
    day: DayOpt,
    start_at: StartOpt,
    incremental_every: IncrementalOpt,
    retention: RetentionOpt,
    cost_optimized: CostOpt = False,
    profile: ProfileOpt = None,
    host: HostOpt = None,
    token: TokenOpt = None,
    timeout: TimeoutOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Replace a bucket's backup schedule."""
    plan = _plan(org, project, cluster, bucket, day, start_at, incremental_every, retention, cost_optimized)
    with make_connection(profile, host, token) as conn:
        result = BackupScheduleResource(conn).update(make_context(timeout), plan, plan)
        report(result)
        if result.removed:
            console.print(f"[yellow]Bucket '{bucket}' has no backup schedule.[/]")
            raise typer.Exit(4)
        output(result.state, fmt, kv=True, title=f"Backup Schedule: {bucket}")


@app.command()
@error_handler
def delete(
    org: OrgOpt,
    project: ProjectOpt,
    cluster: ClusterOpt,
    bucket: BucketOpt,
    profile: ProfileOpt = None,
    host: HostOpt = None,
    token: TokenOpt = None,
    timeout: TimeoutOpt = None,
) -> None:
    """Delete a bucket's backup schedule."""
    state = BackupScheduleState(organization_id=org, project_id=project, cluster_id=cluster, bucket_id=bucket)
    with make_connection(profile, host, token) as conn:
        report(BackupScheduleResource(conn).delete(make_context(timeout), state))
    console.print(f"[green]Backup schedule for bucket '{bucket}' deleted.[/]")


@app.command("import")
@error_handler
def import_schedule(
    import_id: Annotated[
        str,
        typer.Argument(help="bucket_id=<id>,cluster_id=<id>,project_id=<id>,organization_id=<id>"),
    ],
    profile: ProfileOpt = None,
    host: HostOpt = None,
    token: TokenOpt = None,
    timeout: TimeoutOpt = None,
    fmt: FormatOpt = "json",
) -> None:
    """Read an existing backup schedule into a state document."""
    with make_connection(profile, host, token) as conn:
        result = BackupScheduleResource(conn).import_state(make_context(timeout), import_id)
        report(result)
        if result.removed:
            console.print("[yellow]Backup schedule does not exist.[/]")
            raise typer.Exit(4)
        output(result.state, fmt, kv=True, title="Imported Backup Schedule")
