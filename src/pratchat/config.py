"""
Application configuration.

Defaults live on the Config class; every value can be overridden by an
environment variable (a .env file in the project directory is loaded first).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_DIR = Path(__file__).resolve().parent.parent.parent

load_dotenv(PROJECT_DIR / ".env")


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Config:
    # Application
    TITLE = "PratChat"
    GREETING = "Hello! How can I help you today?"

    # Generation backend (any LiteLLM model identifier)
    MODEL = "gemini/gemini-2.0-flash"
    SYSTEM_PROMPT = ""

    # Server
    HOST = "0.0.0.0"
    PORT = 3000
    CORS_ORIGINS = ["http://localhost:5173"]

    # Client
    SERVER_URL = "http://localhost:3000"
    SOFT_TIMEOUT = 10.0  # seconds before the "still working" notice
    HARD_TIMEOUT = 30.0  # seconds before giving up on a reply
    MAX_RECONNECT_ATTEMPTS = 5
    RECONNECT_DELAY = 1.0  # grows linearly per attempt
    RECONNECT_DELAY_MAX = 5.0

    def __init__(self):
        self.reload()

    def reload(self) -> None:
        """Re-read every setting from the environment."""
        self.title = os.getenv("PRATCHAT_TITLE", self.TITLE)
        self.greeting = os.getenv("PRATCHAT_GREETING", self.GREETING)
        self.model = os.getenv("PRATCHAT_MODEL", self.MODEL)
        self.system_prompt = os.getenv("PRATCHAT_SYSTEM_PROMPT", self.SYSTEM_PROMPT)
        self.host = os.getenv("PRATCHAT_HOST", self.HOST)
        self.port = int(os.getenv("PRATCHAT_PORT", self.PORT))
        self.cors_origins = _env_list("PRATCHAT_CORS_ORIGINS", self.CORS_ORIGINS)
        self.server_url = os.getenv("PRATCHAT_SERVER_URL", self.SERVER_URL)
        self.soft_timeout = float(
            os.getenv("PRATCHAT_SOFT_TIMEOUT", self.SOFT_TIMEOUT)
        )
        self.hard_timeout = float(
            os.getenv("PRATCHAT_HARD_TIMEOUT", self.HARD_TIMEOUT)
        )
        self.max_reconnect_attempts = int(
            os.getenv("PRATCHAT_MAX_RECONNECT_ATTEMPTS", self.MAX_RECONNECT_ATTEMPTS)
        )
        self.reconnect_delay = float(
            os.getenv("PRATCHAT_RECONNECT_DELAY", self.RECONNECT_DELAY)
        )
        self.reconnect_delay_max = float(
            os.getenv("PRATCHAT_RECONNECT_DELAY_MAX", self.RECONNECT_DELAY_MAX)
        )

        if self.hard_timeout <= self.soft_timeout:
            raise ValueError(
                f"hard_timeout ({self.hard_timeout}s) must be greater than "
                f"soft_timeout ({self.soft_timeout}s)"
            )


CONFIG = Config()
