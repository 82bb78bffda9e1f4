"""Config commands: manage Capella connection profiles."""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.prompt import Confirm, Prompt

from capella_cli.client.errors import error_handler
from capella_cli.client.executor import EndpointCfg
from capella_cli.commands._common import TimeoutOpt, get_manager, make_context
from capella_cli.config.constants import DEFAULT_HOST
from capella_cli.config.models import CapellaProfile
from capella_cli.output.formatter import output
from capella_cli.resources.base import Connection

app = typer.Typer(name="config", help="Manage Capella profiles and CLI configuration.")
console = Console()


def _mask(token: str) -> str:
    return token[:8] + "..." if len(token) > 8 else "***"


@app.command()
@error_handler
def init() -> None:
    """Interactive setup wizard to create your first profile."""
    mgr = get_manager()
    console.print("[bold]Capella CLI Setup Wizard[/]\n")

    name = Prompt.ask("Profile name", default="default")
    host_url = Prompt.ask("API host URL", default=DEFAULT_HOST)
    token = Prompt.ask("API key token", password=True, default=None)
    verify_ssl = Confirm.ask("Verify SSL certificates?", default=True)

    profile = CapellaProfile(
        name=name,
        host_url=host_url,
        token=token if token else None,
        verify_ssl=verify_ssl,
    )
    mgr.add_profile(profile)
    console.print(f"\n[green]Profile '{name}' saved.[/]")
    console.print(f"Config file: {mgr.config_path}")


@app.command()
@error_handler
def add(
    name: Annotated[str, typer.Argument(help="Profile name")],
    host_url: Annotated[str, typer.Option("--host", help="API host URL")] = DEFAULT_HOST,
    token: Annotated[Optional[str], typer.Option("--token", "-t", help="API key token")] = None,
    timeout: Annotated[Optional[float], typer.Option("--timeout", help="Per-request timeout in seconds")] = None,
    max_attempts: Annotated[
        Optional[int], typer.Option("--max-attempts", help="Attempts per request, including the first"),
    ] = None,
    no_verify_ssl: Annotated[bool, typer.Option("--no-verify-ssl", help="Disable SSL verification")] = False,
    set_default: Annotated[bool, typer.Option("--default", help="Set as default profile")] = False,
) -> None:
    """Add a Capella profile."""
    mgr = get_manager()
    extra: dict[str, float | int] = {}
    if timeout is not None:
        extra["timeout"] = timeout
    if max_attempts is not None:
        extra["max_attempts"] = max_attempts
    profile = CapellaProfile(
        name=name,
        host_url=host_url,
        token=token,
        verify_ssl=not no_verify_ssl,
        **extra,
    )
    mgr.add_profile(profile)
    if set_default:
        mgr.set_default(name)
    console.print(f"[green]Profile '{name}' added.[/]")


@app.command("list")
@error_handler
def list_profiles(
    fmt: Annotated[str, typer.Option("--format", "-f", help="Output format")] = "table",
) -> None:
    """List all configured profiles."""
    mgr = get_manager()
    profiles = mgr.config.profiles
    if not profiles:
        console.print("[yellow]No profiles configured. Run 'capella-cli config init' to get started.[/]")
        return

    default = mgr.config.default_profile
    columns = ["Name", "Host", "Auth", "Default"]
    rows = []
    for name, p in profiles.items():
        rows.append([name, p.host_url, "token" if p.auth_configured else "none", "*" if name == default else ""])

    output(
        {"profiles": [p.model_dump(exclude={"token"}) for p in profiles.values()]},
        fmt,
        columns=columns,
        rows=rows,
        title="Capella Profiles",
    )


@app.command()
@error_handler
def show(
    name: Annotated[str, typer.Argument(help="Profile name")],
    fmt: Annotated[str, typer.Option("--format", "-f", help="Output format")] = "table",
) -> None:
    """Show profile details."""
    profile = get_manager().get_profile(name)
    if not profile:
        console.print(f"[red]Profile '{name}' not found.[/]")
        raise typer.Exit(1)

    data = profile.model_dump(exclude_none=True)
    if "token" in data:
        data["token"] = _mask(data["token"])
    output(data, fmt, kv=True, title=f"Profile: {name}")


@app.command("set-default")
@error_handler
def set_default(
    name: Annotated[str, typer.Argument(help="Profile name to set as default")],
) -> None:
    """Set the default profile."""
    if get_manager().set_default(name):
        console.print(f"[green]Default profile set to '{name}'.[/]")
    else:
        console.print(f"[red]Profile '{name}' not found.[/]")
        raise typer.Exit(1)


@app.command()
@error_handler
def test(
    name: Annotated[Optional[str], typer.Argument(help="Profile name (uses default if omitted)")] = None,
    timeout: TimeoutOpt = None,
) -> None:
    """Test connectivity and credentials by listing organizations."""
    profile = get_manager().resolve_profile(profile_name=name)
    console.print(f"Testing connection to [bold]{profile.host_url}[/]...")

    with Connection.from_profile(profile) as conn:
        cfg = EndpointCfg(url=f"{conn.host_url}/v4/organizations")
        outcome = conn.executor.execute(make_context(timeout), cfg, token=conn.token)
    console.print(f"[green]Connected![/] HTTP {outcome.status_code} after {outcome.attempts} attempt(s).")


@app.command()
@error_handler
def remove(
    name: Annotated[str, typer.Argument(help="Profile name to remove")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation")] = False,
) -> None:
    """Remove a profile."""
    mgr = get_manager()
    if not mgr.get_profile(name):
        console.print(f"[red]Profile '{name}' not found.[/]")
        raise typer.Exit(1)

    if not force and not Confirm.ask(f"Remove profile '{name}'?"):
        console.print("Cancelled.")
        return

    mgr.remove_profile(name)
    console.print(f"[green]Profile '{name}' removed.[/]")
