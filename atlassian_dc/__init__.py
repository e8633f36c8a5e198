"""Configuration loading, a logging middleware and a REST client for Jira Data Center."""

__version__ = "0.1.0"

__all__ = [
    "config",
    "middleware",
    "jira_base",
    "jira_boards",
    "jira_comments",
    "jira_issues",
    "jira_client",
]