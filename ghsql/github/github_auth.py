"""GitHub token lookup for the HTTP transport."""

from __future__ import annotations

import os
from dataclasses import dataclass


# Checked in order; the first non-blank value wins.
TOKEN_ENV_VARS = ("GHSQL_GITHUB_TOKEN", "GITHUB_TOKEN", "GH_TOKEN")


@dataclass(frozen=True)
class GitHubAuth:
    token: str | None
    source: str | None = None

    def redacted(self) -> dict[str, str]:
        """Loggable description of the credential; never contains the token."""
        return {"token": mask_token(self.token), "source": self.source or "none"}


def load_github_auth_from_env(env: dict[str, str] | None = None) -> GitHubAuth:
    env_map = os.environ if env is None else env
    for name in TOKEN_ENV_VARS:
        value = (env_map.get(name) or "").strip()
        if value:
            return GitHubAuth(token=value, source=name)
    return GitHubAuth(token=None)


def mask_token(token: str | None) -> str:
    if not token:
        return "unset"
    if len(token) < 12:
        return "***"
    return f"{token[:4]}*** ({len(token)} chars)"
