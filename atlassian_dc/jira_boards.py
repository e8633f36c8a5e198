"""Jira Agile board and sprint endpoints."""

from __future__ import annotations

from typing import Any, Iterable

from .jira_base import JiraClientBase, QueryParams, set_query_param

_AGILE = ("rest", "agile", "1.0")


def _add_fields(params: QueryParams, fields: Iterable[str] | None) -> None:
    """Add each field as a separate repeated ``fields`` query parameter."""
    if fields:
        params["fields"] = [str(field) for field in fields]


class BoardsMixin(JiraClientBase):
    """Board, backlog, epic and sprint queries against the Jira Agile API."""

    def get_boards(
        self,
        start_at: int = 0,
        max_results: int = 0,
        name: str = "",
        project_key_or_id: str = "",
        board_type: str = "",
    ) -> dict[str, Any] | None:
        """List boards, optionally filtered by name, project and type."""
        params: QueryParams = {}
        set_query_param(params, "startAt", start_at, 0)
        set_query_param(params, "maxResults", max_results, 0)
        set_query_param(params, "name", name, "")
        set_query_param(params, "projectKeyOrId", project_key_or_id, "")
        set_query_param(params, "type", board_type, "")
        return self._request("GET", [*_AGILE, "board"], params)

    def get_board(self, board_id: int) -> dict[str, Any] | None:
        """Fetch one board by its ID."""
        return self._request("GET", [*_AGILE, "board", str(board_id)])

    def get_board_backlog(
        self,
        board_id: int,
        start_at: int = 0,
        max_results: int = 0,
        jql: str = "",
        validate_query: bool = False,
        fields: Iterable[str] | None = None,
        expand: str = "",
    ) -> dict[str, Any] | None:
        """Fetch the issues in a board's backlog."""
        params: QueryParams = {}
        set_query_param(params, "startAt", start_at, 0)
        set_query_param(params, "maxResults", max_results, 0)
        set_query_param(params, "jql", jql, "")
        set_query_param(params, "validateQuery", validate_query, False)
        set_query_param(params, "expand", expand, "")
        _add_fields(params, fields)
        return self._request("GET", [*_AGILE, "board", str(board_id), "backlog"], params)

    def get_board_epics(
        self,
        board_id: int,
        start_at: int = 0,
        max_results: int = 0,
        done: str = "",
    ) -> dict[str, Any] | None:
        """Fetch the epics of a board."""
        params: QueryParams = {}
        set_query_param(params, "startAt", start_at, 0)
        set_query_param(params, "maxResults", max_results, 0)
        set_query_param(params, "done", done, "")
        return self._request("GET", [*_AGILE, "board", str(board_id), "epic"], params)

    def get_board_sprints(
        self,
        board_id: int,
        start_at: int = 0,
        max_results: int = 0,
        state: str = "",
    ) -> dict[str, Any] | None:
        """Fetch the sprints of a board, optionally filtered by state."""
        params: QueryParams = {}
        set_query_param(params, "startAt", start_at, 0)
        set_query_param(params, "maxResults", max_results, 0)
        set_query_param(params, "state", state, "")
        return self._request("GET", [*_AGILE, "board", str(board_id), "sprint"], params)

    def get_sprint(self, sprint_id: int) -> dict[str, Any] | None:
        """Fetch one sprint by its ID."""
        return self._request("GET", [*_AGILE, "sprint", str(sprint_id)])

    def get_sprint_issues(
        self,
        sprint_id: int,
        start_at: int = 0,
        max_results: int = 0,
        jql: str = "",
        validate_query: bool = False,
        fields: Iterable[str] | None = None,
        expand: str = "",
    ) -> dict[str, Any] | None:
        """Fetch the issues in a sprint."""
        params: QueryParams = {}
        set_query_param(params, "startAt", start_at, 0)
        set_query_param(params, "maxResults", max_results, 0)
        set_query_param(params, "jql", jql, "")
        set_query_param(params, "validateQuery", validate_query, False)
        set_query_param(params, "expand", expand, "")
        _add_fields(params, fields)
        return self._request("GET", [*_AGILE, "sprint", str(sprint_id), "issue"], params)