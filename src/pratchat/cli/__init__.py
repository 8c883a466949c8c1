"""
PratChat CLI.

This package splits CLI commands into focused modules:
- main: serve, hello
- chat: interactive terminal client
"""

import typer

from pratchat.cli.chat import chat_command
from pratchat.cli.main import configure_logging, register_commands

app = typer.Typer(help="PratChat - real-time chat relay for a language model")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging (DEBUG level)"
    ),
):
    """
    PratChat - real-time chat relay for a language model.
    """
    configure_logging(verbose)


# Register top-level commands (serve, hello)
register_commands(app)
app.command("chat")(chat_command)

if __name__ == "__main__":
    app()
