"""Jira issue endpoints: core REST API and Agile issue operations."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from .jira_base import JiraClientBase, QueryParams, set_query_param

_API = ("rest", "api", "2")
_AGILE = ("rest", "agile", "1.0")


def _add_fields(params: QueryParams, fields: Iterable[str] | None) -> None:
    """Add each field as a separate repeated ``fields`` query parameter."""
    if fields:
        params["fields"] = [str(field) for field in fields]


def _issue_fields(
    project_key: str, summary: str, issue_type: str, description: str, priority: str
) -> dict[str, Any]:
    return {
        "project": {"key": project_key},
        "summary": summary,
        "issuetype": {"name": issue_type},
        "description": description,
        "priority": {"name": priority},
    }


class IssuesMixin(JiraClientBase):
    """Create, read, update and transition Jira issues."""

    def get_issue(
        self, issue_key: str, fields: Iterable[str] | None = None
    ) -> dict[str, Any] | None:
        """Fetch an issue by key, optionally limited to the given fields."""
        params: QueryParams = {}
        set_query_param(params, "fields", None if fields is None else list(fields), None)
        return self._request("GET", [*_API, "issue", issue_key], params)

    def create_issue(
        self,
        project_key: str,
        summary: str,
        issue_type: str,
        description: str = "",
        priority: str = "",
    ) -> dict[str, Any] | None:
        """Create an issue in a project and return the created issue reference."""
        payload = {
            "fields": _issue_fields(project_key, summary, issue_type, description, priority)
        }
        return self.create_issue_with_payload(payload, False)

    def create_issue_with_payload(
        self, payload: Mapping[str, Any], update_history: bool = False
    ) -> dict[str, Any] | None:
        """Create an issue from a raw payload."""
        params: QueryParams = {}
        if update_history:
            params["updateHistory"] = ["true"]
        return self._request("POST", [*_API, "issue"], params, body=dict(payload))

    def create_sub_task(
        self,
        parent_key_or_id: str,
        project_key: str,
        summary: str,
        issue_type: str,
        description: str = "",
        priority: str = "",
    ) -> dict[str, Any] | None:
        """Create a sub-task under the given parent issue."""
        fields = _issue_fields(project_key, summary, issue_type, description, priority)
        fields["parent"] = {"key": parent_key_or_id}
        return self.create_issue_with_payload({"fields": fields}, False)

    def update_issue(
        self, issue_key: str, updates: Mapping[str, Any] | None
    ) -> dict[str, Any] | None:
        """Update the fields of an existing issue."""
        return self.update_issue_with_options(issue_key, updates, None)

    def update_issue_with_options(
        self,
        issue_key: str,
        updates: Mapping[str, Any] | None,
        options: Mapping[str, str] | None = None,
    ) -> dict[str, Any] | None:
        """Update an issue, passing ``options`` as query parameters."""
        payload: dict[str, Any] = {}
        if updates is not None:
            payload["fields"] = dict(updates)
        params: QueryParams | None = None
        if options is not None:
            params = {key: [str(value)] for key, value in options.items()}
        return self._request("PUT", [*_API, "issue", issue_key], params, body=payload)

    def get_transitions(self, issue_key: str) -> dict[str, Any] | None:
        """Fetch the transitions available for an issue."""
        return self._request("GET", [*_API, "issue", issue_key, "transitions"])

    def transition_issue(self, issue_key: str, transition_id: str) -> None:
        """Apply a workflow transition to an issue."""
        self._request(
            "POST",
            [*_API, "issue", issue_key, "transitions"],
            body={"transition": {"id": transition_id}},
        )

    def get_subtasks(self, issue_key: str) -> list[dict[str, Any]] | None:
        """Fetch the sub-tasks of an issue."""
        return self._request("GET", [*_API, "issue", issue_key, "subtask"])

    def get_agile_issue(
        self,
        issue_id_or_key: str,
        expand: str = "",
        fields: Iterable[str] | None = None,
        update_history: bool = False,
    ) -> dict[str, Any] | None:
        """Fetch an issue through the Agile API, including sprint and epic fields."""
        params: QueryParams = {}
        set_query_param(params, "expand", expand, "")
        _add_fields(params, fields)
        set_query_param(params, "updateHistory", update_history, False)
        return self._request("GET", [*_AGILE, "issue", issue_id_or_key], params)

    def get_issue_estimation_for_board(
        self, issue_id_or_key: str, board_id: int
    ) -> dict[str, Any] | None:
        """Fetch an issue's estimation as configured on a board."""
        params: QueryParams = {}
        set_query_param(params, "boardId", board_id, 0)
        return self._request("GET", [*_AGILE, "issue", issue_id_or_key, "estimation"], params)

    def set_issue_estimation_for_board(
        self, issue_id_or_key: str, board_id: int, value: str
    ) -> dict[str, Any] | None:
        """Set an issue's estimation for a board."""
        params: QueryParams = {}
        set_query_param(params, "boardId", board_id, 0)
        return self._request(
            "PUT",
            [*_AGILE, "issue", issue_id_or_key, "estimation"],
            params,
            body={"value": value},
        )