"""
Functions for formatting and displaying data in the console using Rich.
"""

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pennsieve_fetch.models.config import ENV_VARS, RunConfig
from pennsieve_fetch.models.stats import RunStats
from pennsieve_fetch.utils.formatting import format_duration, mask_secret


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "TransportError": [
            "• Check PENNSIEVE_API_HOST and PENNSIEVE_API_HOST2.",
            "• The Pennsieve API might be temporarily unreachable.",
            "• Verify network access from the workflow container.",
        ],
        "ConfigurationError": [
            "• Check the environment variables provided by the workflow runner.",
            "• Run `pennsieve-fetch validate` to inspect the resolved settings.",
        ],
        "DownloadError": [
            "• Make sure the download utility is installed and on PATH.",
            "• Presigned URLs expire; request a fresh manifest.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run with LOG_LEVEL=DEBUG for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_validation_table(config: RunConfig, console: Console | None = None):
    """Displays the resolved settings, hiding the session token."""
    console = console or Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()
    table.add_column(style="dim")

    rows = [
        ("Integration ID:", config.integration_id or "[not set]", "integration_id"),
        ("Input Dir:", str(config.input_dir or "."), "input_dir"),
        ("Session Token:", mask_secret(config.session_token), "session_token"),
        ("API Host:", config.api_host or "[not set]", "api_host"),
        ("API Host 2:", config.api_host2 or "[not set]", "api_host2"),
        ("Downloader:", config.downloader, "downloader"),
        ("Log Level:", config.log_level, "log_level"),
    ]
    for label, value, field_name in rows:
        table.add_row(label, escape(value), ENV_VARS[field_name])

    console.print(
        Panel(
            table,
            title="[bold green]✓ Validated Settings[/bold green]",
            border_style="green",
        )
    )


def print_summary_panel(stats: RunStats, console: Console | None = None):
    """Displays the final summary of a run."""
    console = console or Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=16)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row("Manifest Files:", str(stats.files_total))
    stats_table.add_row(
        "✓ Downloaded:", f"[bold green]{stats.files_downloaded}[/bold green]"
    )

    # Failure metrics (only show if non-zero)
    if stats.files_failed > 0:
        stats_table.add_row("✗ Failed:", f"[bold red]{stats.files_failed}[/bold red]")
        stats_table.add_row(
            "", f"[dim]{escape(', '.join(stats.failed_files))}[/dim]"
        )

    stats_table.add_row("", "")  # Spacer
    stats_table.add_row(
        "Time Elapsed:", f"[blue]{format_duration(stats.duration_s)}[/blue]"
    )

    if stats.files_failed:
        title = "⚠ [bold]Run Finished With Failures[/bold]"
        border_color = "yellow"
    else:
        title = "✓ [bold]Run Complete[/bold]"
        border_color = "green"

    console.print(
        Panel(
            stats_table,
            title=title,
            border_style=border_color,
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
