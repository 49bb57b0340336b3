"""
Functions for formatting and displaying data in the console using Rich.
"""

import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from spotify_cli.exceptions import ApiResponseError, RateLimitedError

SENSITIVE_KEYS = ("token",)


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "UnauthorizedError": [
            "• Your access token is invalid or has expired.",
            "• Obtain a fresh token and run `spotify-cli init <TOKEN> --force`.",
            "• Or export a fresh token as SPOTIFY_TOKEN.",
        ],
        "RateLimitedError": [
            "• Too many requests were sent in a short time.",
            "• Wait before retrying.",
        ],
        "ApiResponseError": [
            "• The API rejected the request; see the message above.",
            "• Check that the ID, URI or URL refers to the right resource type.",
        ],
        "TransportError": [
            "• A network connection issue occurred.",
            "• Check your internet connection and the configured base URL.",
        ],
        "ParseError": [
            "• The response was not the JSON this client expected.",
            "• The API version may differ from the one this client targets.",
        ],
        "ConfigurationError": [
            "• Run `spotify-cli init <TOKEN>` to create a configuration.",
            "• Run `spotify-cli --show-config` to inspect the current one.",
        ],
    }

    suggestions = list(
        suggestions_map.get(error_type, ["• Run the command with -vv for detailed logs."])
    )
    if isinstance(error, RateLimitedError) and error.retry_after is not None:
        suggestions.append(f"• The server asked to wait {error.retry_after} seconds.")
    if isinstance(error, ApiResponseError) and getattr(error.api_error, "reason", None):
        suggestions.append(f"• Player reason: {error.api_error.reason}")

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration, hiding sensitive data."""
    console = Console()
    content = Text()
    for key, value in config_data.items():
        if key in SENSITIVE_KEYS:
            value = "[hidden]" if value else "(not set)"
        content.append(f"{key} = {value}\n")
    content.rstrip()

    console.print(
        Panel(
            content or Text("(empty)"),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_response(console: Console, body: str, raw: bool = False):
    """Pretty-prints a JSON response body, or prints it verbatim."""
    if not body.strip():
        console.print("[dim](empty response)[/dim]")
        return
    if raw:
        console.print(body, markup=False, highlight=False)
        return
    try:
        data = json.loads(body)
    except ValueError:
        console.print(body, markup=False, highlight=False)
        return
    console.print(Syntax(json.dumps(data, indent=2, ensure_ascii=False), "json"))


def print_track_table(console: Console, track: dict[str, Any]):
    """Displays a short summary of a track object."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    artists = ", ".join(a.get("name", "?") for a in track.get("artists", []))
    duration_s = int(track.get("duration_ms", 0)) // 1000
    table.add_row("Title:", track.get("name", "Unknown Title"))
    table.add_row("Artists:", artists or "Unknown Artist")
    table.add_row("Album:", (track.get("album") or {}).get("name", "Unknown Album"))
    table.add_row("Duration:", f"{duration_s // 60}:{duration_s % 60:02}")
    table.add_row("URI:", track.get("uri", ""))
    console.print(table)
