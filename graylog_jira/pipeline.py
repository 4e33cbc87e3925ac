"""Entry point for processing a single triggered alert."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional

from graylog_jira.context import AlertContext
from graylog_jira.graph import build_graph
from graylog_jira.jira.client import JiraClient
from graylog_jira.run_config import RunConfig
from graylog_jira.utils.logger import log_alert_progress


@dataclass(frozen=True)
class AlertOutcome:
    """What happened to one alert."""

    title: str
    description: str
    digest: str
    duplicate: bool = False
    existing_issue_key: Optional[str] = None
    issue_key: Optional[str] = None
    dry_run: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "digest": self.digest,
            "duplicate": self.duplicate,
            "existing_issue_key": self.existing_issue_key,
            "issue_key": self.issue_key,
            "dry_run": self.dry_run,
        }


@lru_cache(maxsize=1)
def _graph():
    return build_graph()


def process_alert(context: AlertContext, run_config: RunConfig, client: JiraClient) -> AlertOutcome:
    """Render, fingerprint, deduplicate and (maybe) create the issue for an alert.

    Raises:
        TrackerQueryError: duplicate search failed; no issue was created.
        TicketCreateError: Jira rejected or failed the creation request.
    """
    log_alert_progress("Processing alert", stream_id=context.stream_id,
                       messages=len(context.matching_messages))

    final = _graph().invoke({"context": context, "run_config": run_config, "client": client})

    duplicate = final.get("duplicate")
    outcome = AlertOutcome(
        title=final.get("title", ""),
        description=final.get("description", ""),
        digest=final.get("digest", ""),
        duplicate=bool(duplicate and duplicate.is_duplicate),
        existing_issue_key=duplicate.existing_ticket_key if duplicate else None,
        issue_key=final.get("issue_key"),
        dry_run=bool(final.get("dry_run", False)),
    )
    log_alert_progress("Alert processed", **outcome.to_dict())
    return outcome
