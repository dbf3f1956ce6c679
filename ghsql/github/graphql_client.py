"""GitHub GraphQL client over HTTP (requests) or the `gh` CLI."""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from ghsql import __version__
from ghsql.errors import DecodeError, RemoteError, TransportError
from ghsql.github.github_auth import GitHubAuth
from ghsql.models.graphql_contracts import GraphQLError, GraphQLErrorList
from ghsql.shared.settings import Settings

logger = logging.getLogger(__name__)

USER_AGENT = f"ghsql/{__version__}"

DataT = TypeVar("DataT", bound=BaseModel)


class GraphQLTransport(Protocol):
    """Sends one request body and returns the raw response bytes."""

    def post(self, body: dict[str, Any]) -> bytes: ...


@dataclass(frozen=True)
class GraphQLResponse(Generic[DataT]):
    data: DataT
    errors: list[GraphQLError] = field(default_factory=list)

    def error_msgs(self) -> str:
        return " / ".join(error.message for error in self.errors)

    def raise_for_errors(self) -> None:
        if self.errors:
            raise RemoteError([error.message for error in self.errors])


class HTTPTransport:
    def __init__(
        self,
        auth: GitHubAuth,
        base_url: str = "https://api.github.com",
        session: requests.Session | None = None,
        timeout_s: float = 30.0,
    ) -> None:
        self.auth = auth
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout_s = timeout_s

    def post(self, body: dict[str, Any]) -> bytes:
        headers = {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        if self.auth.token:
            headers["Authorization"] = f"Bearer {self.auth.token}"

        try:
            response = self.session.request(
                method="POST",
                url=f"{self.base_url}/graphql",
                headers=headers,
                json=body,
                timeout=self.timeout_s,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Failed to reach GitHub API: {exc}") from exc

        if response.status_code >= 400:
            raise TransportError(
                f"GitHub API responded with status code: {response.status_code}",
                status=response.status_code,
            )
        return response.content


class GhCliTransport:
    """Pipes the request body into `gh api graphql --input -`."""

    def __init__(self, executable: str = "gh") -> None:
        self.executable = executable

    def post(self, body: dict[str, Any]) -> bytes:
        try:
            completed = subprocess.run(
                [self.executable, "api", "graphql", "--input", "-"],
                input=json.dumps(body).encode("utf-8"),
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            raise TransportError(f"Failed to execute `{self.executable}` command: {exc}") from exc

        if completed.returncode != 0:
            stderr = completed.stderr.decode("utf-8", errors="replace").strip()
            # gh exits non-zero on GraphQL errors but still prints the response body.
            if not completed.stdout.strip():
                raise TransportError(
                    f"`{self.executable}` exited with status code: {completed.returncode}\n{stderr}",
                    status=completed.returncode,
                )
            logger.debug("gh exited with %s: %s", completed.returncode, stderr)
        return completed.stdout


class GraphQLClient:
    def __init__(self, transport: GraphQLTransport) -> None:
        self.transport = transport

    def execute(
        self,
        document: str,
        variables: dict[str, Any],
        data_model: type[DataT],
    ) -> GraphQLResponse[DataT]:
        raw = self.transport.post({"query": document, "variables": variables})
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            raise DecodeError(f"Failed to parse response: {exc}") from exc

        try:
            remote_errors: GraphQLErrorList | None = GraphQLErrorList.model_validate(payload)
            error_exc: Exception | None = None
        except ValidationError as exc:
            remote_errors = None
            error_exc = exc

        try:
            if not isinstance(payload, dict) or "data" not in payload:
                raise ValueError("response has no data member")
            data = data_model.model_validate(payload["data"])
        except (ValueError, ValidationError) as exc:
            if remote_errors is not None and remote_errors.errors:
                raise DecodeError(
                    "Failed to parse response", remote_messages=remote_errors.error_msgs()
                ) from exc
            if error_exc is None:
                raise DecodeError(f"Failed to parse response: {exc}") from exc
            raise DecodeError(
                f"Failed to parse response: {exc}; failed to parse error response: {error_exc}"
            ) from exc

        errors = remote_errors.errors if remote_errors is not None else []
        if errors:
            logger.debug("GraphQL partial errors: %s", " / ".join(e.message for e in errors))
        return GraphQLResponse(data=data, errors=list(errors))


def build_client_from_settings(
    settings: Settings,
    session: requests.Session | None = None,
) -> GraphQLClient:
    transport_name = settings.resolved_transport()
    logger.debug(
        "Using %s transport for %s (auth=%s)",
        transport_name,
        settings.api_url,
        settings.auth.redacted(),
    )
    if transport_name == "gh":
        return GraphQLClient(GhCliTransport())
    return GraphQLClient(
        HTTPTransport(
            auth=settings.auth,
            base_url=settings.api_url,
            session=session,
            timeout_s=settings.http_timeout_s,
        )
    )
