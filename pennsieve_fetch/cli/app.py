"""
Defines the command-line interface for the application using Typer.
Every run option falls back to the environment variable the workflow runner sets.
"""

import asyncio
import logging
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from pennsieve_fetch import __version__
from pennsieve_fetch.api.client import PennsieveAPIClient
from pennsieve_fetch.core.download_manager import DownloadManager
from pennsieve_fetch.core.runner import IntegrationRunner
from pennsieve_fetch.download.downloader import ExternalDownloader
from pennsieve_fetch.exceptions import PennsieveFetchError, TransportError
from pennsieve_fetch.models.config import ENV_VARS, RunConfig, load_config
from pennsieve_fetch.models.stats import RunStats
from pennsieve_fetch.utils.naming import extract_sub_identifier
from pennsieve_fetch.utils.structured_logger import create_structured_logger

from .formatters import (
    format_error_with_suggestions,
    print_summary_panel,
    print_validation_table,
)

console = Console()

app = typer.Typer(
    name="pennsieve-fetch",
    help=(
        "Stage the files of a Pennsieve integration into a local input"
        " directory. Use 'pennsieve-fetch <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)

# Shared options; each one falls back to its environment variable.
IntegrationIdOption = typer.Option(
    None,
    "--integration-id",
    envvar=ENV_VARS["integration_id"],
    help="Pennsieve integration to process.",
)
InputDirOption = typer.Option(
    None,
    "--input-dir",
    envvar=ENV_VARS["input_dir"],
    help="Directory the files are downloaded into (default: current directory).",
)
SessionTokenOption = typer.Option(
    None,
    "--session-token",
    envvar=ENV_VARS["session_token"],
    help="Pennsieve session token.",
)
ApiHostOption = typer.Option(
    None,
    "--api-host",
    envvar=ENV_VARS["api_host"],
    help="Base URL of the packages API (download manifest).",
)
ApiHost2Option = typer.Option(
    None,
    "--api-host2",
    envvar=ENV_VARS["api_host2"],
    help="Base URL of the integrations API.",
)
DownloaderOption = typer.Option(
    None,
    "--downloader",
    envvar=ENV_VARS["downloader"],
    help="wget-compatible download executable (default: wget).",
)
LogLevelOption = typer.Option(
    None,
    "--log-level",
    envvar=ENV_VARS["log_level"],
    help="Structured log threshold: DEBUG, INFO, WARNING or ERROR.",
)


def _load_config_or_exit(options: dict[str, Any]) -> RunConfig:
    try:
        return load_config(options)
    except PennsieveFetchError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
):
    """Pennsieve integration file fetcher"""
    if version:
        console.print(
            f"[bold]pennsieve-fetch[/bold] version [cyan]{__version__}[/cyan]"
        )
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command(name="run")
def run_command(
    integration_id: str | None = IntegrationIdOption,
    input_dir: str | None = InputDirOption,
    session_token: str | None = SessionTokenOption,
    api_host: str | None = ApiHostOption,
    api_host2: str | None = ApiHost2Option,
    downloader: str | None = DownloaderOption,
    log_level: str | None = LogLevelOption,
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        help="Per-request timeout in seconds for API calls (default: none).",
    ),
    pretty: bool = typer.Option(
        False,
        "--pretty",
        help="Log human-readable lines through Rich instead of JSON records.",
    ),
):
    """Fetch the integration, its download manifest, and every listed file."""
    config = _load_config_or_exit(
        {
            "integration_id": integration_id,
            "input_dir": input_dir,
            "session_token": session_token,
            "api_host": api_host,
            "api_host2": api_host2,
            "downloader": downloader,
            "log_level": log_level,
            "request_timeout": timeout,
        }
    )

    base_log, download_log, api_log, session_log = create_structured_logger(
        level=config.log_level
    )
    if pretty:
        logging.basicConfig(
            level=config.log_level,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[
                RichHandler(
                    console=Console(stderr=True),
                    show_path=False,
                    markup=False,
                )
            ],
        )
        base_log.enable_json = False
        base_log.enable_console = True

    async def _run_async() -> RunStats:
        async with PennsieveAPIClient(
            config.api_host,
            config.api_host2,
            config.session_token,
            api_log,
            timeout=config.request_timeout,
        ) as api_client:
            manager = DownloadManager(
                ExternalDownloader(config.downloader, config.input_dir),
                download_log,
            )
            runner = IntegrationRunner(
                config.integration_id, api_client, manager, session_log, api_log
            )
            return await runner.execute()

    try:
        stats = asyncio.run(_run_async())
    except TransportError as e:
        session_log.run_aborted("transport_failure", str(e))
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    print_summary_panel(stats, console)


@app.command()
def validate(
    integration_id: str | None = IntegrationIdOption,
    input_dir: str | None = InputDirOption,
    session_token: str | None = SessionTokenOption,
    api_host: str | None = ApiHostOption,
    api_host2: str | None = ApiHost2Option,
    downloader: str | None = DownloaderOption,
    log_level: str | None = LogLevelOption,
):
    """Validate and display the resolved configuration."""
    config = _load_config_or_exit(
        {
            "integration_id": integration_id,
            "input_dir": input_dir,
            "session_token": session_token,
            "api_host": api_host,
            "api_host2": api_host2,
            "downloader": downloader,
            "log_level": log_level,
        }
    )
    print_validation_table(config, console)


@app.command()
def extract(
    file_names: list[str] = typer.Argument(  # noqa: B008
        ..., help="Original filenames as listed in a download manifest."
    ),
):
    """Show the local filename each original filename is saved under."""
    for file_name in file_names:
        typer.echo(f"{file_name} -> {extract_sub_identifier(file_name)}")
