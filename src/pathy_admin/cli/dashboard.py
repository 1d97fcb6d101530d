"""CLI: pathy-admin dashboard"""

import click
from rich.console import Console
from rich.table import Table

from pathy_admin.dashboard import (
    PAYMENT_ANALYTICS,
    RECENT_CHATS,
    RECENT_CONSULTATIONS,
    RECENT_ORDERS,
    USER_SCORES,
)
from pathy_admin.models.dashboard import ChartDataset, Dashboard
from pathy_admin.models.session import Feature

console = Console()


def _run(coro):
    from pathy_admin.cli.main import _run
    return _run(coro)


def _error_line(dashboard: Dashboard, section: str) -> bool:
    if dashboard.failed(section):
        console.print(f"  [red]unavailable: {dashboard.errors[section]}[/red]")
        return True
    return False


def _bar_chart(title: str, dataset: ChartDataset) -> None:
    console.print(f"[bold]{title}[/bold]")
    peak = max(dataset.values) if dataset.values and max(dataset.values) > 0 else 1
    for label, value in zip(dataset.labels, dataset.values):
        bar = "█" * int(round(30 * value / peak))
        console.print(f"  {label:<12} {bar} {value:g}")


def render_dashboard(dashboard: Dashboard) -> None:
    c = dashboard.counters
    stats = Table(title="Overview", show_header=False)
    stats.add_row("Total users", "—" if c.total_users is None else str(c.total_users))
    stats.add_row("Green flag users", "—" if c.green_flag_users is None else str(c.green_flag_users))
    stats.add_row("Total revenue", "—" if c.total_revenue is None else f"₹{c.total_revenue:,.2f}")
    stats.add_row("Total payments", "—" if c.total_payments is None else str(c.total_payments))
    console.print(stats)

    if not _error_line(dashboard, USER_SCORES) and dashboard.flag_histogram:
        _bar_chart("User flags", dashboard.flag_histogram)
    if not _error_line(dashboard, PAYMENT_ANALYTICS) and dashboard.payment_sources:
        if dashboard.payment_sources.total:
            _bar_chart("Payment sources", dashboard.payment_sources)
        else:
            console.print("[bold]Payment sources[/bold]\n  [dim]no payments yet[/dim]")

    console.print("[bold]Recent chats[/bold]")
    if not _error_line(dashboard, RECENT_CHATS):
        for chat in dashboard.recent_chats:
            console.print(f"  {chat.id}  {chat.customer_name:<20} {chat.status.value}")
        if not dashboard.recent_chats:
            console.print("  [dim]none[/dim]")

    console.print("[bold]Recent consultations[/bold]")
    if not _error_line(dashboard, RECENT_CONSULTATIONS):
        for item in dashboard.recent_consultations:
            console.print(f"  {item.id}  {item.name:<20} {item.status or ''}")
        if not dashboard.recent_consultations:
            console.print("  [dim]none[/dim]")

    console.print("[bold]Recent orders[/bold]")
    if not _error_line(dashboard, RECENT_ORDERS):
        for order in dashboard.recent_orders:
            console.print(f"  {order.id[-8:]}  {order.contact_info.name or 'Unknown':<20} ₹{order.total:,.2f} {order.status}")
        if not dashboard.recent_orders:
            console.print("  [dim]none[/dim]")


@click.command("dashboard")
def dashboard_cmd():
    """Summary counters, charts and recent activity."""

    async def _show():
        from pathy_admin.cli.main import _open_view
        client = await _open_view(Feature.DASHBOARD)
        if client is None:
            return
        try:
            with console.status("Loading dashboard..."):
                dashboard = await client.load_dashboard()
        finally:
            await client.close()
        render_dashboard(dashboard)

    _run(_show())
