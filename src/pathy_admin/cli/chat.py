"""CLI: pathy-admin chats list|open|reply|resolve"""

import asyncio
import json
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from pathy_admin.attachments import load_attachment
from pathy_admin.chat_view import ChatView, ViewState
from pathy_admin.errors import ConnectionError, PathyAdminError, ValidationError
from pathy_admin.models.chat import Message, SenderRole
from pathy_admin.models.session import Feature

console = Console()


def _run(coro):
    from pathy_admin.cli.main import _run
    return _run(coro)


async def _open_view(feature: Feature):
    from pathy_admin.cli.main import _open_view
    return await _open_view(feature)


def _print_message(message: Message) -> None:
    who = "[cyan]Customer[/cyan]" if message.sender is SenderRole.CUSTOMER else "[green]Agent[/green]"
    stamp = f"[dim]{message.timestamp or ''}[/dim]"
    if message.text:
        console.print(f"{who} {stamp}: {message.text}")
    if message.media:
        size = f" ({message.media.file_size / 1024 / 1024:.2f} MB)" if message.media.file_size else ""
        console.print(f"{who} {stamp}: [{message.media.kind.name.lower()}] {message.media.file_name or message.media.url}{size}")


class _Printer:
    """Prints only what changed since the last render."""

    def __init__(self) -> None:
        self.printed = 0
        self.typing: frozenset = frozenset()
        self.error: Optional[str] = None

    def __call__(self, view: ChatView) -> None:
        messages = view.messages
        for message in messages[self.printed:]:
            _print_message(message)
        self.printed = len(messages)
        if view.typing != self.typing:
            self.typing = view.typing
            if self.typing:
                names = ", ".join(p.user_type for p in self.typing)
                console.print(f"[dim]{names} typing...[/dim]")
        if view.error and view.error != self.error:
            console.print(f"[red]{view.error}[/red]")
        self.error = view.error


@click.group()
def chats():
    """Support chat."""


@chats.command("list")
@click.option("--limit", default=20, type=int)
@click.option("--json-output", "--json", is_flag=True)
def chats_list(limit: int, json_output: bool):
    """List recent conversations."""

    async def _list():
        client = await _open_view(Feature.CHATS)
        if client is None:
            return
        try:
            items = await client.chats.list(limit=limit)
        finally:
            await client.close()
        if json_output:
            click.echo(json.dumps([c.model_dump(mode="json", exclude={"messages"}) for c in items], indent=2))
            return
        table = Table(title=f"Chats ({len(items)})")
        table.add_column("ID", style="bold")
        table.add_column("Customer")
        table.add_column("Type")
        table.add_column("Status")
        table.add_column("Assigned")
        for c in items:
            assignee = c.assigned_to.full_name if c.assigned_to and c.assigned_to.full_name else "Unassigned"
            table.add_row(c.id, c.customer_name, c.category_label, c.status.value, assignee)
        console.print(table)

    _run(_list())


@chats.command("open")
@click.argument("chat_id")
def chats_open(chat_id: str):
    """Open a conversation with live updates. /file PATH, /resolve, /quit."""

    async def _chat():
        client = await _open_view(Feature.CHATS)
        if client is None:
            return
        try:
            await client.connect()
        except ConnectionError as e:
            console.print(f"[yellow]Live updates unavailable ({e}); history only.[/yellow]")
        view: Optional[ChatView] = None
        try:
            view = await client.open_chat(chat_id, on_change=_Printer())
            if view.state is ViewState.FAILED:
                raise SystemExit(1)
            conv = view.conversation
            console.print(f"[bold]{conv.customer_name}[/bold] {conv.customer_email} • {conv.category_label} • {conv.status.value.upper()}")
            while view.can_reply:
                line = await asyncio.to_thread(click.prompt, "You", default="", show_default=False, prompt_suffix=": ")
                if line in ("/quit", "/exit"):
                    break
                if line == "/resolve":
                    if click.confirm("Mark this chat as resolved?"):
                        await view.resolve()
                    continue
                attachment = None
                if line.startswith("/file "):
                    try:
                        attachment = load_attachment(line[len("/file "):].strip())
                    except (ValidationError, OSError) as e:
                        console.print(f"[red]{e}[/red]")
                        continue
                    line = ""
                try:
                    await view.send(line, attachment)
                except ValidationError as e:
                    console.print(f"[yellow]{e}[/yellow]")
                    continue
                if view.send_error:
                    console.print(f"[red]Error sending message: {view.send_error}[/red]")
            if view.is_resolved:
                console.print("[green]This chat has been resolved.[/green]")
        except (KeyboardInterrupt, EOFError):
            pass
        finally:
            if view is not None:
                view.close()
            await client.close()

    _run(_chat())


@chats.command("reply")
@click.argument("chat_id")
@click.argument("text", required=False, default="")
@click.option("-f", "--file", "file_path", default=None, type=click.Path(exists=True, dir_okay=False))
def chats_reply(chat_id: str, text: str, file_path: Optional[str]):
    """Send a one-shot reply."""

    async def _reply():
        try:
            attachment = load_attachment(file_path) if file_path else None
        except ValidationError as e:
            console.print(f"[red]{e}[/red]")
            raise SystemExit(1)
        client = await _open_view(Feature.CHATS)
        if client is None:
            return
        try:
            agent_id = client.channel.participant.user_id
            await client.chats.reply(chat_id, agent_id, text, attachment)
        except PathyAdminError as e:
            console.print(f"[red]Error sending message: {e}[/red]")
            raise SystemExit(1)
        finally:
            await client.close()
        console.print("[green]Sent.[/green]")

    _run(_reply())


@chats.command("resolve")
@click.argument("chat_id")
def chats_resolve(chat_id: str):
    """Mark a conversation resolved."""

    async def _resolve():
        client = await _open_view(Feature.CHATS)
        if client is None:
            return
        try:
            with console.status("Resolving..."):
                await client.chats.resolve(chat_id)
        except PathyAdminError as e:
            console.print(f"[red]Error updating chat status: {e}[/red]")
            raise SystemExit(1)
        finally:
            await client.close()
        console.print(f"[green]Chat {chat_id} resolved.[/green]")

    _run(_resolve())
