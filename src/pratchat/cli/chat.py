"""
Interactive terminal chat against a running relay.

Usage:
    pratchat chat [--url http://localhost:3000]

Type a message and press Enter. /quit or Ctrl+D leaves.
"""

import asyncio
import threading
from typing import Optional

import typer

from pratchat.client.chat_client import ChatClient
from pratchat.client.connection import ConnectionState, TransportError
from pratchat.client.models import DisplayedMessage

QUIT_COMMANDS = {"/quit", "/exit"}
TYPING_TEXT = "bot is typing..."

_KIND_COLORS = {
    "notice": typer.colors.YELLOW,
    "error": typer.colors.RED,
}


def format_message(message: DisplayedMessage) -> str:
    """One chat bubble as a terminal line."""
    who = "you" if message.direction == "outgoing" else "bot"
    return f"[{message.format_time()}] {who}: {message.text}"


def render_message(message: DisplayedMessage) -> None:
    if message.direction == "outgoing":
        # The text is already visible as typed input; show the pending reply
        typer.secho(TYPING_TEXT, dim=True)
        return
    color = _KIND_COLORS.get(message.kind, typer.colors.CYAN)
    typer.secho(format_message(message), fg=color)


def render_state(old: ConnectionState, new: ConnectionState) -> None:
    if new == ConnectionState.CONNECTED:
        typer.secho("🟢 Connected", fg=typer.colors.GREEN, err=True)
    elif new == ConnectionState.RECONNECTING and old == ConnectionState.CONNECTED:
        typer.secho(
            "🔴 Connection lost, reconnecting...", fg=typer.colors.YELLOW, err=True
        )


def start_stdin_reader(loop: asyncio.AbstractEventLoop) -> asyncio.Queue:
    """
    Read stdin on a daemon thread and feed lines into an asyncio queue.

    None is queued at end of input. The thread never blocks interpreter exit.
    """
    lines: asyncio.Queue = asyncio.Queue()

    def _read():
        while True:
            try:
                line = input()
            except (EOFError, KeyboardInterrupt):
                line = None
            try:
                loop.call_soon_threadsafe(lines.put_nowait, line)
            except RuntimeError:
                # Event loop already closed
                return
            if line is None:
                return

    threading.Thread(target=_read, name="pratchat-stdin", daemon=True).start()
    return lines


async def _chat_loop(client: ChatClient, lines: asyncio.Queue) -> None:
    await client.fetch_greeting()
    run_task = asyncio.create_task(client.run())

    try:
        while True:
            next_line = asyncio.ensure_future(lines.get())
            done, _ = await asyncio.wait(
                {next_line, run_task}, return_when=asyncio.FIRST_COMPLETED
            )
            if next_line not in done:
                # Client stopped on its own (out of reconnect attempts)
                next_line.cancel()
                break

            line = next_line.result()
            if line is None or line.strip() in QUIT_COMMANDS:
                break
            try:
                await client.send(line)
            except TransportError as e:
                typer.secho(f"⚠️  {e}", fg=typer.colors.YELLOW, err=True)
    finally:
        await client.close()
        await run_task


async def _run_chat(client: ChatClient) -> None:
    lines = start_stdin_reader(asyncio.get_running_loop())
    await _chat_loop(client, lines)


def chat_command(
    url: Optional[str] = typer.Option(None, "--url", help="Server base URL"),
):
    """Chat with the assistant in the terminal."""
    client = ChatClient(
        server_url=url,
        on_message=render_message,
        on_state_change=render_state,
    )
    typer.echo(f"💬 PratChat @ {client.server_url} (type /quit to leave)\n")
    try:
        asyncio.run(_run_chat(client))
    except KeyboardInterrupt:
        typer.echo("\nBye")
