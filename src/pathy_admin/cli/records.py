"""CLI: pathy-admin users|orders|consultations|updates"""

import json
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from pathy_admin.errors import PathyAdminError
from pathy_admin.models.records import Flag, OrderStatus
from pathy_admin.models.session import Feature

console = Console()

FLAG_STYLES = {Flag.GREEN: "green", Flag.YELLOW: "yellow", Flag.RED: "red"}


def _run(coro):
    from pathy_admin.cli.main import _run
    return _run(coro)


async def _open_view(feature: Feature):
    from pathy_admin.cli.main import _open_view
    return await _open_view(feature)


def _write(feature: Feature, label: str, action):
    """Run a write action after checking the write capability."""

    async def _go():
        client = await _open_view(feature)
        if client is None:
            return
        try:
            if not client.session.has_capability(feature, write=True):
                console.print(f"[yellow]No write access to {feature.value}.[/yellow]")
                return
            with console.status(f"{label}..."):
                await action(client)
        except PathyAdminError as e:
            console.print(f"[red]{label} failed: {e}[/red]")
            raise SystemExit(1)
        finally:
            await client.close()
        console.print(f"[green]{label}: done.[/green]")

    _run(_go())


# -- users -------------------------------------------------------------------

@click.group()
def users():
    """Users and risk flags."""


@users.command("list")
@click.option("--flag", type=click.Choice([f.value for f in Flag]), default=None)
@click.option("--search", default=None, help="Match name or phone number")
@click.option("--json-output", "--json", is_flag=True)
def users_list(flag: Optional[str], search: Optional[str], json_output: bool):
    """List users with scores."""

    async def _list():
        client = await _open_view(Feature.USERS)
        if client is None:
            return
        try:
            records = await client.users.list_scores()
        finally:
            await client.close()
        if flag:
            records = [u for u in records if u.flag is not None and u.flag.value == flag]
        if search:
            needle = search.lower()
            records = [u for u in records if needle in u.full_name.lower() or needle in (u.phone_number or "")]
        if json_output:
            click.echo(json.dumps([u.model_dump(mode="json") for u in records], indent=2))
            return
        table = Table(title=f"Users ({len(records)})")
        table.add_column("ID", style="bold")
        table.add_column("Name")
        table.add_column("Phone")
        table.add_column("Goal")
        table.add_column("Score")
        table.add_column("Flag")
        for u in records:
            flag_cell = f"[{FLAG_STYLES[u.flag]}]{u.flag.value}[/]" if u.flag else ""
            table.add_row(u.id, u.full_name, u.phone_number or "", u.goal or "",
                          "" if u.score is None else f"{u.score:g}", flag_cell)
        console.print(table)

    _run(_list())


@users.command("flag")
@click.argument("user_id")
@click.argument("flag", type=click.Choice([f.value for f in Flag]))
def users_flag(user_id: str, flag: str):
    """Set a user's flag."""
    _write(Feature.USERS, "Update flag", lambda client: client.users.set_flag(user_id, flag))


@users.command("delete")
@click.argument("user_id")
@click.confirmation_option(prompt="Are you sure you want to delete this user?")
def users_delete(user_id: str):
    """Delete a user."""
    _write(Feature.USERS, "Delete user", lambda client: client.users.delete(user_id))


# -- orders ------------------------------------------------------------------

@click.group()
def orders():
    """Product orders."""


@orders.command("list")
@click.option("--status", type=click.Choice([s.value for s in OrderStatus]), default=None)
@click.option("--limit", default=None, type=int)
def orders_list(status: Optional[str], limit: Optional[int]):
    """List orders with totals."""

    async def _list():
        client = await _open_view(Feature.ORDERS)
        if client is None:
            return
        try:
            items = await client.orders.list(limit=limit)
        finally:
            await client.close()
        if status:
            items = [o for o in items if o.status == status]
        table = Table(title=f"Orders ({len(items)})")
        table.add_column("Order", style="bold")
        table.add_column("Customer")
        table.add_column("Items")
        table.add_column("Total", justify="right")
        table.add_column("Payment")
        table.add_column("Status")
        for o in items:
            table.add_row(o.id[-8:], o.contact_info.name or "Unknown", str(len(o.items)),
                          f"₹{o.total:,.2f}", o.payment_method or "N/A", o.status)
        console.print(table)
        revenue = sum(o.total for o in items)
        pending = sum(1 for o in items if o.status == OrderStatus.PENDING.value)
        console.print(f"[dim]Revenue ₹{revenue:,.2f} • pending {pending}[/dim]")

    _run(_list())


@orders.command("status")
@click.argument("order_id")
@click.argument("status", type=click.Choice([s.value for s in OrderStatus]))
def orders_status(order_id: str, status: str):
    """Change an order's status."""
    _write(Feature.ORDERS, "Update order status", lambda client: client.orders.update_status(order_id, status))


# -- consultations -------------------------------------------------------------

@click.group()
def consultations():
    """Consultation requests."""


@consultations.command("list")
def consultations_list():
    """List consultation requests."""

    async def _list():
        client = await _open_view(Feature.CONSULTATIONS)
        if client is None:
            return
        try:
            items = await client.consultations.list()
        finally:
            await client.close()
        table = Table(title=f"Consultations ({len(items)})")
        table.add_column("ID", style="bold")
        table.add_column("Name")
        table.add_column("Contact")
        table.add_column("Assigned")
        table.add_column("Status")
        for c in items:
            table.add_row(c.id, c.name, c.email or c.phone_number or "", c.assigned_to or "Unassigned", c.status or "")
        console.print(table)

    _run(_list())


@consultations.command("assign")
@click.argument("consultation_id")
@click.argument("team_member_id", required=False, default=None)
def consultations_assign(consultation_id: str, team_member_id: Optional[str]):
    """Assign to a team member (omit the member to unassign)."""
    _write(Feature.CONSULTATIONS, "Assign consultation",
           lambda client: client.consultations.assign(consultation_id, team_member_id))


# -- daily updates ---------------------------------------------------------------

@click.group()
def updates():
    """Daily progress updates."""


@updates.command("list")
@click.option("--user", "user_id", default=None, help="Only this user's updates")
def updates_list(user_id: Optional[str]):
    """List daily updates."""

    async def _list():
        client = await _open_view(Feature.DAILY_UPDATES)
        if client is None:
            return
        try:
            if user_id:
                items = await client.daily_updates.for_user(user_id)
            else:
                items = await client.daily_updates.list()
        finally:
            await client.close()
        table = Table(title=f"Daily updates ({len(items)})")
        table.add_column("User", style="bold")
        table.add_column("Title")
        table.add_column("Image")
        table.add_column("Posted")
        for u in items:
            table.add_row(u.user_name or "Unknown User", u.title, u.image_url or "", u.created_at or "")
        console.print(table)

    _run(_list())
