"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler

from spotify_cli import __version__
from spotify_cli.api.client import HttpMethod, SpotifyAPIClient
from spotify_cli.api.endpoints import SEARCH_TYPES, SpotifyEndpoints
from spotify_cli.storage.config_manager import ConfigManager, get_config_dir
from spotify_cli.utils.ids import ResourceType, normalize_id, normalize_uri
from spotify_cli.utils.structured_logger import create_api_logger

from .formatters import print_config, print_response, print_track_table

T = TypeVar("T")

console = Console()

logging.basicConfig(
    level="WARNING",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
            show_level=True,
            markup=False,
        )
    ],
)
log = logging.getLogger("spotify_cli")

app = typer.Typer(
    name="spotify-cli",
    help="A typed, async client for the Spotify Web API.",
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)

CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _config_manager(ctx: typer.Context) -> ConfigManager:
    config_file = (ctx.obj or {}).get("config_file") or CONFIG_FILE
    return ConfigManager(Path(config_file))


def _run_with_client(
    ctx: typer.Context, action: Callable[[SpotifyAPIClient], Awaitable[T]]
) -> T:
    """Loads the configuration, opens a client and runs ``action`` with it."""
    overrides = (ctx.obj or {}).get("overrides", {})
    config = _config_manager(ctx).load_config(overrides)
    log_dir = (ctx.obj or {}).get("log_dir")
    api_logger = create_api_logger(log_dir) if log_dir else None

    async def _main() -> T:
        async with SpotifyAPIClient(config, api_logger=api_logger) as client:
            return await action(client)

    try:
        return asyncio.run(_main())
    finally:
        if api_logger:
            api_logger.logger.close()


def _parse_resource_type(value: str) -> ResourceType:
    try:
        return ResourceType(value.lower())
    except ValueError:
        choices = ", ".join(t.value for t in ResourceType)
        raise typer.BadParameter(f"must be one of: {choices}") from None


def _parse_params(params: list[str]) -> dict[str, str]:
    parsed = {}
    for item in params:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected KEY=VALUE, got '{item}'")
        parsed[key] = value
    return parsed


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", help="Path to the configuration file."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Override the API base URL."
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
    log_dir: Optional[Path] = typer.Option(
        None, "--log-dir", help="Also write request events as JSON lines here."
    ),
):
    """Spotify Web API client"""
    if version:
        console.print(f"[bold]spotify-cli[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "WARNING"
    if verbose == 1:
        log_level = "INFO"
    elif verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("spotify_cli").setLevel(log_level)

    ctx.obj = {
        "config_file": config_file or CONFIG_FILE,
        "overrides": {"base_url": base_url},
        "log_dir": log_dir,
    }

    if show_config:
        config_manager = _config_manager(ctx)
        if not config_manager.config_file_path.is_file():
            console.print(
                "[red]✗ Config file not found.[/] Run [cyan]spotify-cli init[/cyan]"
                " first."
            )
            raise typer.Exit(code=1)
        config = config_manager.load_config()
        print_config(config_manager.config_file_path, config.model_dump())
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    ctx: typer.Context,
    token: str = typer.Argument(..., help="A Spotify access token."),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="API base URL to store in the configuration."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite existing configuration without asking."
    ),
):
    """Initialize configuration with a Spotify access token."""
    config_manager = _config_manager(ctx)
    if (
        config_manager.config_file_path.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    settings: dict[str, Any] = {"token": token}
    if base_url:
        settings["base_url"] = base_url
    config_manager.save_new_config(settings)
    console.print(
        f"[bold green]✓ Configuration saved to '{config_manager.config_file_path}'"
        "[/bold green]"
    )


@app.command(name="request")
def request_command(
    ctx: typer.Context,
    method: str = typer.Argument(..., help="GET, POST, PUT or DELETE."),
    path: str = typer.Argument(..., help="Path relative to the base URL, or a URL."),
    params: list[str] = typer.Option(  # noqa: B008
        [], "--param", "-p", help="KEY=VALUE payload entry, repeatable."
    ),
    json_body: Optional[str] = typer.Option(
        None, "--json", help="JSON request body (POST, PUT, DELETE)."
    ),
    raw: bool = typer.Option(False, "--raw", help="Print the body verbatim."),
):
    """Send an authenticated request and print the response body."""
    try:
        http_method = HttpMethod(method.upper())
    except ValueError:
        raise typer.BadParameter(
            f"unsupported method '{method}'", param_hint="METHOD"
        ) from None

    payload: Any = _parse_params(params) if params else None
    if json_body is not None:
        if http_method is HttpMethod.GET:
            raise typer.BadParameter("GET requests take --param, not --json.")
        try:
            payload = json.loads(json_body)
        except ValueError as e:
            raise typer.BadParameter(f"invalid JSON: {e}", param_hint="--json") from e

    body = _run_with_client(
        ctx, lambda client: client.dispatch(http_method, path, payload)
    )
    print_response(console, body, raw=raw)


@app.command(name="id")
def id_command(
    resource_type: str = typer.Argument(..., metavar="TYPE", help="Resource type."),
    raw: str = typer.Argument(..., help="An ID, URI or URL."),
):
    """Print the bare ID of a resource."""
    console.print(normalize_id(_parse_resource_type(resource_type), raw), markup=False)


@app.command(name="uri")
def uri_command(
    resource_type: str = typer.Argument(..., metavar="TYPE", help="Resource type."),
    raw: str = typer.Argument(..., help="An ID, URI or URL."),
):
    """Print the spotify: URI of a resource."""
    console.print(normalize_uri(_parse_resource_type(resource_type), raw), markup=False)


@app.command()
def track(
    ctx: typer.Context,
    track_id: str = typer.Argument(..., help="A track ID, URI or URL."),
    market: Optional[str] = typer.Option(None, "--market", help="ISO country code."),
):
    """Show a track."""
    data = _run_with_client(
        ctx, lambda client: SpotifyEndpoints(client).track(track_id, market)
    )
    print_track_table(console, data)


@app.command()
def search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Search query."),
    search_type: str = typer.Option(
        "track", "--type", "-t", help=f"One of: {', '.join(SEARCH_TYPES)}."
    ),
    limit: int = typer.Option(10, "--limit", "-l", min=1, max=50),
    offset: int = typer.Option(0, "--offset", min=0),
):
    """Search the catalog."""
    if search_type not in SEARCH_TYPES:
        raise typer.BadParameter(
            f"must be one of: {', '.join(SEARCH_TYPES)}", param_hint="--type"
        )
    data = _run_with_client(
        ctx,
        lambda client: SpotifyEndpoints(client).search(
            query, search_type, limit=limit, offset=offset
        ),
    )
    print_response(console, json.dumps(data))


@app.command()
def me(ctx: typer.Context):
    """Show the current user's profile."""
    data = _run_with_client(ctx, lambda client: SpotifyEndpoints(client).me())
    print_response(console, json.dumps(data))
