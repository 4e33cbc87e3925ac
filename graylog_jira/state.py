"""Shared state type for the alert → Jira pipeline."""

from __future__ import annotations

from typing import Any, Dict, Optional, TypedDict

from graylog_jira.context import AlertContext  # noqa: F401 – needed at runtime for TypedDict
from graylog_jira.dedup.result import DuplicateCheckResult  # noqa: F401
from graylog_jira.jira.client import JiraClient  # noqa: F401
from graylog_jira.run_config import RunConfig  # noqa: F401


class AlertState(TypedDict, total=False):
    # Inputs (set once at graph invocation)
    context: AlertContext
    run_config: RunConfig
    client: JiraClient

    # Produced by render_content
    title: str
    description: str
    field_mapping: Dict[str, Any]

    # Produced by compute_fingerprint
    digest: str

    # Produced by check_duplicate
    duplicate: DuplicateCheckResult

    # Produced by create_ticket
    jira_fields: Dict[str, Any]
    issue_key: Optional[str]
    dry_run: bool
