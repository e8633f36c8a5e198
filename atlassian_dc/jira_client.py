"""The complete Jira Data Center client: projects, search, users and metadata."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from .jira_base import QueryParams, set_query_param
from .jira_boards import BoardsMixin
from .jira_comments import CommentsMixin
from .jira_issues import IssuesMixin

_API = ("rest", "api", "2")


def build_search_jql(
    jql: str = "",
    project_key_or_id: str = "",
    order_by: str = "",
    statuses: Sequence[str] | None = None,
) -> str:
    """Return ``jql`` if given, otherwise a query built from project, statuses and ordering."""
    if jql:
        return jql

    parts: list[str] = []
    if project_key_or_id:
        parts.append(f"project = '{project_key_or_id}'")
    if statuses:
        quoted = ", ".join(f"'{status}'" for status in statuses)
        parts.append(f"status in ({quoted})")
    query = " AND ".join(parts)

    if order_by:
        query = f"{query} ORDER BY {order_by}"
    return query


class JiraClient(BoardsMixin, CommentsMixin, IssuesMixin):
    """Client for the Jira Data Center REST and Agile APIs."""

    def get_project(self, project_key: str) -> dict[str, Any] | None:
        """Fetch a project by its key."""
        return self._request("GET", [*_API, "project", project_key])

    def get_all_projects(
        self,
        expand: str = "",
        recent: int = 0,
        include_archived: bool = False,
        browse_archive: bool = False,
    ) -> list[dict[str, Any]] | None:
        """List the projects visible to the current user."""
        params: QueryParams = {}
        set_query_param(params, "expand", expand, "")
        set_query_param(params, "recent", recent, 0)
        set_query_param(params, "includeArchived", include_archived, False)
        set_query_param(params, "browseArchive", browse_archive, False)
        return self._request("GET", [*_API, "project"], params)

    def search_issues(
        self,
        jql: str = "",
        project_key_or_id: str = "",
        order_by: str = "",
        statuses: Sequence[str] | None = None,
        max_results: int = 0,
        start_at: int = 0,
        fields: Iterable[str] | None = None,
    ) -> dict[str, Any] | None:
        """Search issues by JQL, or by project and statuses when no JQL is given."""
        payload: dict[str, Any] = {
            "jql": build_search_jql(jql, project_key_or_id, order_by, statuses),
            "maxResults": max_results,
            "startAt": start_at,
        }
        field_list = list(fields) if fields is not None else []
        if field_list:
            payload["fields"] = field_list
        return self._request("POST", [*_API, "search"], body=payload)

    def get_user_by_name(self, username: str) -> dict[str, Any] | None:
        """Fetch a user by username."""
        params: QueryParams = {}
        set_query_param(params, "username", username, "")
        return self._request("GET", [*_API, "user"], params)

    def get_user_by_key(self, key: str) -> dict[str, Any] | None:
        """Fetch a user by user key."""
        params: QueryParams = {}
        set_query_param(params, "key", key, "")
        return self._request("GET", [*_API, "user"], params)

    def search_users(
        self, query: str, start_at: int = 0, max_results: int = 0
    ) -> list[dict[str, Any]] | None:
        """Search users matching ``query``."""
        params: QueryParams = {}
        set_query_param(params, "username", query, "")
        set_query_param(params, "startAt", start_at, 0)
        set_query_param(params, "maxResults", max_results, 0)
        return self._request("GET", [*_API, "user", "search"], params)

    def get_current_user(self) -> dict[str, Any] | None:
        """Fetch the user the client is authenticated as."""
        return self._request("GET", [*_API, "myself"])

    def get_issue_types(self) -> list[dict[str, Any]] | None:
        """List all issue types."""
        return self._request("GET", [*_API, "issuetype"])

    def get_priorities(self) -> list[dict[str, Any]] | None:
        """List all priorities."""
        return self._request("GET", [*_API, "priority"])