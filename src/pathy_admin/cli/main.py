"""
Pathy admin console — `pathy-admin` command.

Commands:
  pathy-admin auth login           Admin or team-member login
  pathy-admin dashboard            Summary counters and charts
  pathy-admin chats <cmd>          List, open, reply to and resolve chats
  pathy-admin users <cmd>          Scored user list, flags
  pathy-admin orders <cmd>         Orders and status changes
  pathy-admin consultations <cmd>  Consultations and assignment
  pathy-admin updates list         Daily updates
"""

import asyncio
import logging
from typing import Any, Optional

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise SystemExit("CLI requires extras: pip install pathy-admin[cli]")

from pathy_admin.client import AsyncAdminClient
from pathy_admin.config import load_config, resolve_base_url
from pathy_admin.models.session import Feature
from pathy_admin.permissions import LOGIN_VIEW

console = Console()


async def _get_client(base_url: Optional[str] = None) -> AsyncAdminClient:
    cfg = load_config()
    return await AsyncAdminClient.restore(base_url=resolve_base_url(cfg, base_url))


def _run(coro: Any) -> Any:
    return asyncio.run(coro)


async def _open_view(feature: Feature) -> Optional[AsyncAdminClient]:
    """Restore the session and check access. Denied views fall back to the dashboard."""
    client = await _get_client()
    view = client.resolve_view(feature)
    if view == LOGIN_VIEW:
        await client.close()
        console.print("[red]Not logged in. Run `pathy-admin auth login` first.[/red]")
        raise SystemExit(1)
    if view != feature:
        from pathy_admin.cli.dashboard import render_dashboard
        try:
            render_dashboard(await client.load_dashboard())
        finally:
            await client.close()
        return None
    return client


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log SDK activity")
def main(verbose: bool):
    """Pathy admin console — users, orders, consultations and live support chat."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[RichHandler(console=console)])


# Register subcommands from separate modules
from pathy_admin.cli.auth import auth
from pathy_admin.cli.chat import chats
from pathy_admin.cli.dashboard import dashboard_cmd
from pathy_admin.cli.records import consultations, orders, updates, users

main.add_command(auth)
main.add_command(chats)
main.add_command(dashboard_cmd)
main.add_command(users)
main.add_command(orders)
main.add_command(consultations)
main.add_command(updates)


if __name__ == "__main__":
    main()
