"""HTTP plumbing shared by the Jira Data Center client."""

from __future__ import annotations

import json
from typing import Any, Iterable, MutableMapping
from urllib.parse import quote

import requests

from .config import ServiceConfig

DEFAULT_TIMEOUT = 60.0  # seconds

QueryParams = MutableMapping[str, list[str]]


class JiraRequestError(Exception):
    """Raised when a Jira request cannot be sent or returns an error status."""

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def _format_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    return str(value)


def set_query_param(params: QueryParams, key: str, value: Any, invalid: Any) -> None:
    """Set ``params[key]`` to ``value`` unless it is ``None`` or equals ``invalid``."""
    if value is None or value == invalid:
        return
    params[key] = [_format_param(value)]


class JiraClientBase:
    """Holds the connection settings and sends authenticated JSON requests."""

    def __init__(self, config: ServiceConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self.session = session if session is not None else requests.Session()
        self.timeout = DEFAULT_TIMEOUT

    def _url(self, path_segments: Iterable[str]) -> str:
        path = "/".join(quote(str(segment), safe="") for segment in path_segments)
        return f"{self.config.url.rstrip('/')}/{path}"

    def _request(
        self,
        method: str,
        path_segments: Iterable[str],
        params: QueryParams | None = None,
        body: Any = None,
    ) -> Any:
        """Send a request and return the decoded JSON response, or ``None`` if it is empty."""
        headers = {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.config.token}",
        }
        data = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"

        try:
            response = self.session.request(
                method,
                self._url(path_segments),
                params=dict(params) if params else None,
                data=data,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise JiraRequestError(f"failed to send request: {exc}") from exc

        if not response.ok:
            raise JiraRequestError(
                f"jira request failed with status {response.status_code}: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        if not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise JiraRequestError(
                f"failed to decode response: {exc}",
                status_code=response.status_code,
                body=response.text,
            ) from exc