"""
Shared HTTP helpers for CLI commands that talk to the running server.
"""

import os

import typer


def get_server_url() -> str:
    """Get the server URL from environment or config."""
    from pratchat.config import CONFIG

    return os.getenv("PRATCHAT_SERVER_URL", CONFIG.server_url).rstrip("/")


def _http_get(path: str, server_url: str | None = None) -> dict:
    """Make a GET request to the running server."""
    import httpx

    url = f"{(server_url or get_server_url()).rstrip('/')}{path}"
    try:
        resp = httpx.get(url, timeout=10.0)
        resp.raise_for_status()
        return resp.json()
    except httpx.ConnectError:
        typer.echo("❌ Cannot connect to PratChat server. Is it running?")
        raise typer.Exit(code=1)
    except httpx.HTTPStatusError as e:
        typer.echo(f"❌ Server error: {e.response.status_code}")
        raise typer.Exit(code=1)
    except Exception as e:
        typer.echo(f"❌ Error: {e}")
        raise typer.Exit(code=1)
