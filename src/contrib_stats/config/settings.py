"""Centralized configuration for contrib-stats.

Loads configuration from an optional .env file and the environment, and
provides typed access to settings.

A fresh checkout needs no configuration at all: every setting has a default,
and a GitHub token is only needed for private repositories or higher rate
limits.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import pytz

__all__ = [
    "ConfigError",
    "Settings",
    "load_env_file",
    "load_settings",
]

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


@dataclass
class Settings:
    """Settings for contrib-stats.

    Attributes
    ----------
    api_url : str
        Base URL of the GitHub REST API
    github_token : str | None
        Token sent as ``Authorization: Bearer`` (optional)
    timeout : float
        HTTP timeout in seconds
    user_agent : str
        User-Agent header sent to GitHub
    default_timezone : str
        Timezone used to interpret ``--from``/``--to`` dates
    log_level : str
        Logging level
    log_file : Path | None
        JSON log file path
    """

    api_url: str = "https://api.github.com"
    github_token: str | None = None
    timeout: float = 30.0
    user_agent: str = "contrib-stats"
    default_timezone: str = "UTC"

    # Logging
    log_level: str = "WARNING"
    log_file: Path | None = None

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.log_file and isinstance(self.log_file, str):
            self.log_file = Path(self.log_file)

        self.api_url = self.api_url.rstrip("/")
        if not self.api_url.startswith(("http://", "https://")):
            raise ConfigError(
                f"CONTRIB_STATS_API_URL must be an http(s) URL, got {self.api_url!r}. "
                "Leave it unset to use https://api.github.com"
            )

        if self.timeout <= 0:
            raise ConfigError(f"CONTRIB_STATS_TIMEOUT must be positive, got {self.timeout}")

        try:
            pytz.timezone(self.default_timezone)
        except pytz.UnknownTimeZoneError as exc:
            raise ConfigError(
                f"CONTRIB_STATS_TZ is not a known timezone: {self.default_timezone!r} "
                "(e.g., UTC, Europe/London, America/New_York)"
            ) from exc

        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(
                f"CONTRIB_STATS_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}"
            )

    @classmethod
    def from_env(cls, env_file: Path | str | None = None) -> Settings:
        """Load settings from environment.

        Loads from .env file if present, otherwise from os.environ.

        Parameters
        ----------
        env_file
            Path to .env file (default: .env in current directory)

        Returns
        -------
        Settings
            Loaded settings

        Raises
        ------
        ConfigError
            If settings are invalid
        """
        if env_file is None:
            env_file = Path(".env")

        if isinstance(env_file, str):
            env_file = Path(env_file)

        if env_file.exists():
            load_env_file(env_file)

        try:
            return cls(
                api_url=os.environ.get("CONTRIB_STATS_API_URL", "https://api.github.com"),
                github_token=os.environ.get("GITHUB_TOKEN") or os.environ.get("CONTRIB_STATS_GITHUB_TOKEN"),
                timeout=float(os.environ.get("CONTRIB_STATS_TIMEOUT", "30.0")),
                user_agent=os.environ.get("CONTRIB_STATS_USER_AGENT", "contrib-stats"),
                default_timezone=os.environ.get("CONTRIB_STATS_TZ", "UTC"),
                log_level=os.environ.get("CONTRIB_STATS_LOG_LEVEL", "WARNING"),
                log_file=Path(os.environ["CONTRIB_STATS_LOG_FILE"]) if "CONTRIB_STATS_LOG_FILE" in os.environ else None,
            )

        except (ValueError, KeyError) as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc


def load_env_file(env_file: Path) -> None:
    """Export ``KEY=value`` lines of a dotenv file into ``os.environ``.

    Blank lines, ``#`` comments and lines without ``=`` are ignored. One pair
    of matching quotes around a value is removed. Existing variables are
    overwritten.
    """
    for raw_line in env_file.read_text(encoding="utf-8").splitlines():
        entry = raw_line.strip()
        if entry.startswith("#") or "=" not in entry:
            continue

        name, _, value = entry.partition("=")
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]

        os.environ[name.strip()] = value


def load_settings(env_file: Path | str | None = None) -> Settings:
    """Load settings from an optional .env file and the environment.

    Raises
    ------
    ConfigError
        If settings are invalid
    """
    return Settings.from_env(env_file)
