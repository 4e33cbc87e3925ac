"""Graph definition for the Graylog alert → Jira pipeline.

This module wires the per-alert flow using LangGraph:

    render_content → compute_fingerprint → check_duplicate → create_ticket
                                                          └→ END (duplicate)

The steps are strictly sequential.  An exception raised by any node aborts
the run and propagates to the caller, so a failed duplicate search never
falls through to ticket creation.
"""

from __future__ import annotations

from typing import Any, Dict

from langgraph.graph import END, StateGraph

from graylog_jira.dedup.detector import DuplicateDetector
from graylog_jira.fingerprint.digest import FingerprintComputer, FingerprintSpec
from graylog_jira.jira.creator import IssueCreator
from graylog_jira.jira.mapping import build_mapping
from graylog_jira.jira.payload import Ticket
from graylog_jira.run_config import RunConfig
from graylog_jira.state import AlertState
from graylog_jira.templating.content import TicketContentBuilder
from graylog_jira.templating.placeholders import PlaceholderEngine
from graylog_jira.utils.logger import log_alert_progress, log_info


def _engine(rc: RunConfig) -> PlaceholderEngine:
    return PlaceholderEngine(rc.graylog_url, rc.graylog_time_span)


def render_content(state: Dict[str, Any]) -> Dict[str, Any]:
    """Render title and description, and project mapped message fields."""
    rc: RunConfig = state["run_config"]
    context = state["context"]

    builder = TicketContentBuilder(_engine(rc), max_title_length=rc.max_title_length)
    content = builder.build(
        context,
        title_template=rc.title_template,
        message_template=rc.message_template,
        message_regex=rc.message_regex,
    )
    mapping = build_mapping(rc.field_mapping, context)

    log_alert_progress("Content rendered", stream_id=context.stream_id, title=content.title,
                       mapped_fields=sorted(mapping))
    return {"title": content.title, "description": content.description, "field_mapping": mapping}


def compute_fingerprint(state: Dict[str, Any]) -> Dict[str, Any]:
    rc: RunConfig = state["run_config"]
    spec = FingerprintSpec(message_regex=rc.message_regex, hash_pattern=rc.md5_hash_pattern)
    digest = FingerprintComputer(_engine(rc)).compute_digest(spec, state["context"])
    log_alert_progress("Fingerprint computed", digest=digest or None)
    return {"digest": digest}


def check_duplicate(state: Dict[str, Any]) -> Dict[str, Any]:
    """Search Jira for an open issue with the same digest (fail-closed)."""
    rc: RunConfig = state["run_config"]
    detector = DuplicateDetector(state["client"], field_name=rc.md5_custom_field, issue_type=rc.jira_issue_type)
    result = detector.check(state.get("digest", ""), rc.jira_project_key, rc.md5_filter_query)
    return {"duplicate": result}


def create_ticket(state: Dict[str, Any]) -> Dict[str, Any]:
    """Assemble the ticket and submit it, or only log it in dry-run mode."""
    rc: RunConfig = state["run_config"]
    ticket = Ticket(
        project_key=rc.jira_project_key,
        issue_type=rc.jira_issue_type,
        summary=state["title"],
        description=state["description"],
        priority=rc.jira_priority or None,
        labels=rc.labels,
        components=rc.components,
        extra_fields=dict(state.get("field_mapping") or {}),
    )
    creator = IssueCreator(state["client"])
    digest = state.get("digest", "")

    if not rc.auto_create_ticket:
        fields = creator.prepare(ticket, digest, rc.md5_custom_field)
        log_info("[DRY RUN] Would create Jira issue", summary=ticket.summary,
                 project=ticket.project_key, fields=sorted(fields))
        return {"jira_fields": fields, "issue_key": None, "dry_run": True}

    key = creator.create(ticket, digest, rc.md5_custom_field)
    return {"issue_key": key, "dry_run": False}


def route_after_duplicate_check(state: Dict[str, Any]) -> str:
    duplicate = state.get("duplicate")
    return END if duplicate is not None and duplicate.is_duplicate else "create_ticket"


def build_graph():
    """Compile and return the LangGraph graph for one alert."""
    builder = StateGraph(AlertState)

    builder.set_entry_point("render_content")
    builder.add_node("render_content", render_content)
    builder.add_node("compute_fingerprint", compute_fingerprint)
    builder.add_node("check_duplicate", check_duplicate)
    builder.add_node("create_ticket", create_ticket)

    builder.add_edge("render_content", "compute_fingerprint")
    builder.add_edge("compute_fingerprint", "check_duplicate")
    builder.add_conditional_edges(
        "check_duplicate",
        route_after_duplicate_check,
        {END: END, "create_ticket": "create_ticket"},
    )
    builder.add_edge("create_ticket", END)

    return builder.compile()
