"""Jira issue comment and worklog endpoints."""

from __future__ import annotations

from typing import Any

from .jira_base import JiraClientBase, QueryParams, set_query_param

_API = ("rest", "api", "2")


class CommentsMixin(JiraClientBase):
    """Comment and worklog operations on Jira issues."""

    def get_comments(
        self,
        issue_key: str,
        start_at: int = 0,
        max_results: int = 0,
        expand: str = "",
        order_by: str = "",
    ) -> dict[str, Any] | None:
        """Fetch the comments on an issue."""
        params: QueryParams = {}
        set_query_param(params, "startAt", start_at, 0)
        set_query_param(params, "maxResults", max_results, 0)
        set_query_param(params, "expand", expand, "")
        set_query_param(params, "orderBy", order_by, "")
        return self._request("GET", [*_API, "issue", issue_key, "comment"], params)

    def add_comment(self, issue_key: str, comment: str) -> dict[str, Any] | None:
        """Add a comment to an issue and return the created comment."""
        return self._request(
            "POST", [*_API, "issue", issue_key, "comment"], body={"body": comment}
        )

    def get_worklogs(self, issue_key: str, worklog_id: str | None = None) -> dict[str, Any] | None:
        """Fetch all worklogs of an issue, or a single one when ``worklog_id`` is given."""
        segments = [*_API, "issue", issue_key, "worklog"]
        if worklog_id:
            segments.append(worklog_id)
        return self._request("GET", segments)