"""
Command-line interface: Typer application and Rich formatters.
"""
