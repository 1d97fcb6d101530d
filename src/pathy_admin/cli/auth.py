"""CLI: pathy-admin auth login|status|logout"""

from typing import Optional

import click
from rich.console import Console

from pathy_admin.config import load_config, resolve_base_url, save_config
from pathy_admin.errors import AuthError
from pathy_admin.permissions import visible_features

console = Console()


def _get_client(base_url: Optional[str] = None):
    from pathy_admin.cli.main import _get_client
    return _get_client(base_url)


def _run(coro):
    from pathy_admin.cli.main import _run
    return _run(coro)


@click.group()
def auth():
    """Authentication commands."""


@auth.command("login")
@click.option("--base-url", default=None, help="Admin API base URL")
@click.option("--team", "team_member", is_flag=True, help="Log in as a team member")
def auth_login(base_url: Optional[str], team_member: bool):
    """Log in with email and password."""

    async def _login():
        cfg = load_config()
        url = resolve_base_url(cfg, base_url)
        client = await _get_client(url)
        try:
            email = click.prompt("Email")
            password = click.prompt("Password", hide_input=True)
            with console.status("Signing in..."):
                session = await client.login(email, password, team_member=team_member)
        except AuthError as e:
            console.print(f"[red]{e}[/red]")
            raise SystemExit(1)
        finally:
            await client.close()
        save_config({**cfg, "base_url": url})
        console.print(f"[green]Logged in as {session.email} ({session.role.value})[/green]")

    _run(_login())


@auth.command("status")
def auth_status():
    """Show current session and accessible views."""

    async def _status():
        client = await _get_client()
        try:
            session = client.session
            if session is None:
                console.print("[yellow]Not logged in. Run `pathy-admin auth login`.[/yellow]")
                return
            console.print(f"[green]Logged in[/green] as {session.email or 'unknown'} ({session.role.value})")
            views = ", ".join(f.value for f in visible_features(session))
            console.print(f"[dim]Views: {views}[/dim]")
        finally:
            await client.close()

    _run(_status())


@auth.command("logout")
def auth_logout():
    """Clear saved credentials."""

    async def _logout():
        client = await _get_client()
        try:
            await client.logout()
        finally:
            await client.close()
        console.print("[green]Logged out.[/green]")

    _run(_logout())
