"""
Main entry point for the pennsieve-fetch application.
This module handles top-level exception handling and CLI invocation.
"""

import sys

import typer
from rich.console import Console

from pennsieve_fetch.cli.app import app
from pennsieve_fetch.cli.formatters import format_error_with_suggestions
from pennsieve_fetch.exceptions import PennsieveFetchError


def main() -> None:
    """Main entry point function."""
    console = Console(stderr=True)

    try:
        app()
    except (typer.Exit, typer.Abort):
        pass
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️  Operation cancelled by user.[/yellow]")
        sys.exit(130)
    except PennsieveFetchError as e:
        console.print(format_error_with_suggestions(e))
        sys.exit(1)
    except Exception as e:
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        sys.exit(1)


if __name__ == "__main__":
    main()
