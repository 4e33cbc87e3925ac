"""Jira issue payload builder: pure formatting, no side effects.

:class:`Ticket` is the create request assembled for one alert;
:class:`JiraPayloadBuilder` turns it into the ``fields`` object sent to
``POST /rest/api/2/issue``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from graylog_jira.jira.mapping import FieldValue, LIST_MARKER
from graylog_jira.utils.logger import log_debug, log_info

# Reserved name of the fingerprint custom field; also the inline marker key
FINGERPRINT_FIELD_NAME = "graylog_md5"


@dataclass
class Ticket:
    """Create request for one alert."""

    project_key: str
    issue_type: str
    summary: str
    description: str
    priority: Optional[str] = None
    labels: List[str] = field(default_factory=list)
    components: List[str] = field(default_factory=list)
    extra_fields: Dict[str, FieldValue] = field(default_factory=dict)


def inline_fingerprint(description: str, digest: str) -> str:
    """Append the ``graylog_md5=<digest>`` marker line used by the duplicate search."""
    return f"{description.rstrip()}\n\n{FINGERPRINT_FIELD_NAME}={digest}\n\n"


class JiraPayloadBuilder:
    """Builds Jira ``fields`` payloads.  Pure functions, no side effects."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(
        self,
        ticket: Ticket,
        *,
        fingerprint_field: Optional[str] = None,
        digest: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Assemble the complete ``fields`` object.

        Parameters
        ----------
        ticket:
            The create request; its description must already carry any
            inlined fingerprint.
        fingerprint_field:
            Custom field id receiving ``digest``, if one was resolved.
        """
        fields = self.base_fields(ticket)

        if fingerprint_field and digest:
            fields[fingerprint_field] = digest

        fields["description"] = ticket.description

        for key, value in self.mapped_fields(ticket.extra_fields).items():
            log_info("Jira/Graylog automap", jira_key=key, value=value)
            fields[key] = value

        return fields

    def base_fields(self, ticket: Ticket) -> Dict[str, Any]:
        """Mandatory fields plus labels and components when configured."""
        fields: Dict[str, Any] = {
            "project": {"key": ticket.project_key},
            "issuetype": {"name": ticket.issue_type},
            "summary": ticket.summary,
        }
        if ticket.priority:
            fields["priority"] = {"name": ticket.priority}
        if ticket.labels:
            fields["labels"] = list(ticket.labels)
        if ticket.components:
            fields["components"] = [{"name": name} for name in ticket.components]
        return fields

    @staticmethod
    def mapped_fields(extra_fields: Dict[str, FieldValue]) -> Dict[str, FieldValue]:
        """Mapped field assignments, skipping blank keys or values.

        A key still carrying the ``#i`` marker is converted here as well.
        """
        result: Dict[str, FieldValue] = {}
        for key, value in (extra_fields or {}).items():
            if not key or not key.strip():
                continue
            if isinstance(value, list):
                values = [str(v) for v in value if v is not None and str(v).strip()]
                if not values:
                    continue
                result[key] = values
                continue
            if value is None or not str(value).strip():
                log_debug("Skipping blank mapped field", jira_key=key)
                continue
            if key.endswith(LIST_MARKER):
                if key[:-len(LIST_MARKER)].strip():
                    result[key[:-len(LIST_MARKER)]] = [str(value)]
            else:
                result[key] = str(value)
        return result
