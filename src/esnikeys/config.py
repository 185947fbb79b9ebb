"""Runtime settings for the esnikeys command-line tool."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

ENV_PREFIX = "ESNIKEYS_"
INPUT_ENCODINGS = ("base64", "hex")
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def load_env() -> None:
    """Load .env from the project root or cwd without overriding the environment."""
    project_root = Path(__file__).resolve().parents[2]
    for path in (project_root / ".env", Path.cwd() / ".env"):
        if path.is_file():
            load_dotenv(path, override=False)
            return


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


@dataclass
class Settings:
    log_level: str = "WARNING"
    hexdump: bool = True
    input_encoding: str = "base64"

    def __post_init__(self) -> None:
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}")
        if self.input_encoding not in INPUT_ENCODINGS:
            raise ValueError(
                f"input_encoding must be one of {', '.join(INPUT_ENCODINGS)}, got {self.input_encoding!r}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ESNIKEYS_* variables.

        When environ is omitted, an optional .env file is loaded first and
        os.environ is read.
        """
        if environ is None:
            load_env()
            environ = os.environ
        defaults = cls()
        hexdump = environ.get(ENV_PREFIX + "HEXDUMP")
        return cls(
            log_level=environ.get(ENV_PREFIX + "LOG_LEVEL", defaults.log_level),
            hexdump=defaults.hexdump if hexdump is None else _parse_bool(ENV_PREFIX + "HEXDUMP", hexdump),
            input_encoding=environ.get(ENV_PREFIX + "INPUT_ENCODING", defaults.input_encoding).lower(),
        )
