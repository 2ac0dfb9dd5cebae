"""
Configuration — reads all settings from environment variables.
Never hardcodes credentials. Uses python-dotenv for local dev.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from ..adapters.json_contact_store_adapter import CONTACTS_FILE_NAME
from ..adapters.postback_crawler_adapter import DIRECTORY_URL, TIMEOUT_SECONDS

load_dotenv()

DEFAULT_CONTACTS_FILE = Path("data") / CONTACTS_FILE_NAME


@dataclass(frozen=True)
class Config:
    # Directory crawl
    directory_url: str = DIRECTORY_URL
    request_timeout_seconds: float = TIMEOUT_SECONDS

    # Local store
    contacts_file: Path = DEFAULT_CONTACTS_FILE

    # External APIs
    safe_browsing_api_key: str = ""

    # HTTP API
    api_key: str = "dev-key"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        invalid = []

        timeout_raw = os.getenv("REQUEST_TIMEOUT_SECONDS", str(TIMEOUT_SECONDS))
        try:
            timeout = float(timeout_raw)
        except ValueError:
            timeout = 0.0
        if timeout <= 0:
            invalid.append(f"REQUEST_TIMEOUT_SECONDS={timeout_raw!r} (must be a positive number)")

        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            invalid.append(f"LOG_LEVEL={log_level!r} (must be a logging level name)")

        directory_url = os.getenv("DIRECTORY_URL") or DIRECTORY_URL
        if not directory_url.startswith(("http://", "https://")):
            invalid.append(f"DIRECTORY_URL={directory_url!r} (must be an http(s) URL)")

        if invalid:
            raise EnvironmentError(
                f"Invalid environment variables: {', '.join(invalid)}\n"
                f"Copy .env.example to .env and fix the values."
            )

        return cls(
            directory_url=directory_url,
            request_timeout_seconds=timeout,
            contacts_file=Path(os.getenv("CONTACTS_FILE") or DEFAULT_CONTACTS_FILE),
            safe_browsing_api_key=os.getenv("GOOGLE_SAFE_BROWSING", ""),
            api_key=os.getenv("API_KEY", "dev-key"),
            log_level=log_level,
        )
