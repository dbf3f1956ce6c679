"""Runtime settings for reaching the GitHub API."""

from __future__ import annotations

import os
from dataclasses import dataclass

from ghsql.github.github_auth import GitHubAuth, load_github_auth_from_env


TRANSPORTS = {"auto", "http", "gh"}
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


@dataclass(frozen=True)
class Settings:
    """API location, transport selection, and client limits."""

    api_url: str
    transport: str
    http_timeout_s: float
    max_pages: int | None
    log_level: str
    auth: GitHubAuth

    @classmethod
    def from_env(cls, env: dict[str, str] | None = None) -> "Settings":
        source = os.environ if env is None else env
        api_url = (source.get("GHSQL_GITHUB_API_URL") or "https://api.github.com").strip()
        transport = (source.get("GHSQL_TRANSPORT") or "auto").strip().lower()
        if transport not in TRANSPORTS:
            raise ValueError(f"GHSQL_TRANSPORT must be one of {sorted(TRANSPORTS)}: {transport}")
        log_level = (source.get("GHSQL_LOG_LEVEL") or "WARNING").strip().upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"GHSQL_LOG_LEVEL must be one of {sorted(LOG_LEVELS)}: {log_level}")
        return cls(
            api_url=api_url.rstrip("/"),
            transport=transport,
            http_timeout_s=_parse_positive_float(source.get("GHSQL_HTTP_TIMEOUT_S"), 30.0),
            max_pages=_parse_optional_positive_int(source.get("GHSQL_MAX_PAGES")),
            log_level=log_level,
            auth=load_github_auth_from_env(source),
        )

    def resolved_transport(self) -> str:
        if self.transport != "auto":
            return self.transport
        return "http" if self.auth.token else "gh"


def get_settings(env: dict[str, str] | None = None) -> Settings:
    """Build settings from environment variables."""

    return Settings.from_env(env)


def _parse_positive_float(value: str | None, default: float) -> float:
    if value is None or not value.strip():
        return default
    parsed = float(value)
    if parsed <= 0:
        raise ValueError(f"expected a positive number, got {value}")
    return parsed


def _parse_optional_positive_int(value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    parsed = int(value)
    if parsed <= 0:
        raise ValueError(f"expected a positive integer, got {value}")
    return parsed
