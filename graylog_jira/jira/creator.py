"""Jira issue creation with fingerprint-field resolution.

The digest goes into a dedicated custom field when one is known: the
configured field id first, otherwise a custom field named ``graylog_md5``
found in the project's create metadata.  Without such a field the digest is
inlined into the description so the duplicate search can still find it.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Optional

from graylog_jira.errors import MetadataLookupError, TicketCreateError
from graylog_jira.jira.client import JiraClient, JiraClientError
from graylog_jira.jira.payload import (
    FINGERPRINT_FIELD_NAME,
    JiraPayloadBuilder,
    Ticket,
    inline_fingerprint,
)
from graylog_jira.utils.logger import log_error, log_info, log_ticket_operation, log_warning


def find_fingerprint_field(client: JiraClient, project_key: str, issue_type: str) -> Optional[str]:
    """Id of the custom field named ``graylog_md5`` in the create metadata, if any.

    Raises:
        MetadataLookupError: when the metadata request fails.
    """
    try:
        catalogue = client.get_create_metadata(project_key, issue_type)
    except JiraClientError as e:
        raise MetadataLookupError("Failed retrieving MD5 field",
                                  project_key=project_key, issue_type=issue_type) from e

    for field_id, meta in catalogue.items():
        if not field_id.startswith("customfield_") or not isinstance(meta, dict):
            continue
        if str(meta.get("name", "")).lower() == FINGERPRINT_FIELD_NAME.lower():
            return field_id
    return None


class IssueCreator:
    """Create one Jira issue per call.  Holds no per-alert state."""

    def __init__(self, client: JiraClient, builder: Optional[JiraPayloadBuilder] = None) -> None:
        self.client = client
        self.builder = builder or JiraPayloadBuilder()

    def discover_fingerprint_field(self, project_key: str, issue_type: str) -> Optional[str]:
        """Find the ``graylog_md5`` custom field id for the new issue.

        Looked up on every call; no cache is kept between alerts.

        Raises:
            MetadataLookupError: when the metadata request fails.
        """
        log_warning("It is more efficient to configure 'jira_md5_custom_field' for MD5 hashing.")
        return find_fingerprint_field(self.client, project_key, issue_type)

    def resolve_fingerprint_field(self, ticket: Ticket, hint: Optional[str]) -> Optional[str]:
        if hint and hint.strip():
            return hint.strip()
        try:
            return self.discover_fingerprint_field(ticket.project_key, ticket.issue_type)
        except MetadataLookupError as e:
            log_warning("Fingerprint field lookup failed, inlining digest into the description",
                        error=str(e), cause=str(e.__cause__))
            return None

    def prepare(self, ticket: Ticket, digest: str, fingerprint_field_hint: Optional[str] = None) -> Dict[str, Any]:
        """Resolve the fingerprint target and build the ``fields`` payload."""
        fingerprint_field = None
        if digest and digest.strip():
            fingerprint_field = self.resolve_fingerprint_field(ticket, fingerprint_field_hint)
            if not fingerprint_field:
                ticket = replace(ticket, description=inline_fingerprint(ticket.description, digest))
                log_warning("It is more efficient to configure 'jira_md5_custom_field' for MD5 hashing "
                            "instead of embedding the hash in the Jira description!")

        return self.builder.build(ticket, fingerprint_field=fingerprint_field, digest=digest)

    def create(self, ticket: Ticket, digest: str, fingerprint_field_hint: Optional[str] = None) -> str:
        """Submit the issue and return its key.

        Raises:
            TicketCreateError: when Jira rejects or fails the request.  Never retried here.
        """
        fields = self.prepare(ticket, digest, fingerprint_field_hint)

        try:
            response = self.client.create_issue(fields)
        except JiraClientError as e:
            log_error("Error creating Jira issue", project=ticket.project_key,
                      issue_type=ticket.issue_type, error=str(e), response=e.response_text)
            raise TicketCreateError("Failed creating new issue", project_key=ticket.project_key,
                                    issue_type=ticket.issue_type, digest=digest or None) from e

        key = response.get("key")
        if not key:
            raise TicketCreateError("Jira response did not include an issue key",
                                    project_key=ticket.project_key, issue_type=ticket.issue_type,
                                    digest=digest or None)

        log_ticket_operation("created", ticket_key=key, project=ticket.project_key, digest=digest or None)
        log_info(f"Created new issue {key} for project {ticket.project_key}")
        return key
