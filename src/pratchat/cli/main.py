"""
Top-level CLI commands: serve, hello.
"""

import os
from typing import Optional

import typer

from pratchat.cli._http import _http_get


def configure_logging(verbose: bool = False):
    """Configure logging for the CLI."""
    from pratchat.logger import setup_logging

    log_level = "DEBUG" if verbose else "WARNING"
    setup_logging(level=log_level)


def register_commands(app: typer.Typer):
    """Register top-level commands onto the app."""

    @app.command()
    def serve(
        host: Optional[str] = typer.Option(None, help="Host to bind to"),
        port: Optional[int] = typer.Option(None, help="Port to bind to"),
        debug: bool = typer.Option(False, "--debug", help="Run in debug mode"),
    ):
        """Start the PratChat relay server."""
        from pratchat.config import CONFIG

        host = host or CONFIG.host
        port = port or CONFIG.port
        os.environ["LOG_LEVEL"] = "DEBUG" if debug else os.getenv("LOG_LEVEL", "INFO")
        typer.echo(f"🚀 Starting PratChat relay on {host}:{port}...")

        from pratchat.server import main as run_server

        try:
            run_server(host=host, port=port)
        except KeyboardInterrupt:
            typer.echo("\n🛑 Server stopped.")

    @app.command()
    def hello(
        url: Optional[str] = typer.Option(None, "--url", help="Server base URL"),
    ):
        """Fetch the server greeting."""
        data = _http_get("/api/hello", server_url=url)
        typer.echo(data.get("message", ""))
