"""Alert data passed through the pipeline.

An ``AlertContext`` is built fresh for every triggered stream alert and
discarded once the alert has been handled.  Only the first matching message
(the *representative* message) is ever consulted for per-message data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class StreamRule:
    """A single stream rule, e.g. ``source REGEX ^web[0-9]$``."""

    field: str
    type: str
    value: str

    def render(self) -> str:
        return f"_{self.field}_ {self.type} _{self.value}_"


@dataclass(frozen=True)
class MessageSummary:
    """A log message that matched the alert condition."""

    message: str = ""
    source: str = ""
    fields: Mapping[str, Any] = field(default_factory=dict)

    def has_field(self, name: str) -> bool:
        return self.get_field(name) is not None

    def get_field(self, name: str) -> Optional[Any]:
        """Look up a field by its stored name (case-sensitive).

        ``message`` and ``source`` fall back to the summary attributes when
        the field map does not carry them.
        """
        value = self.fields.get(name)
        if value is None and name == "message":
            value = self.message or None
        if value is None and name == "source":
            value = self.source or None
        return value


@dataclass(frozen=True)
class AlertContext:
    """Read-only bundle describing one alert firing."""

    stream_id: str
    stream_title: str
    stream_rules: Tuple[StreamRule, ...] = ()
    result_description: str = ""
    triggered_at: Optional[Union[datetime, str]] = None
    triggered_condition: str = ""
    matching_messages: Tuple[MessageSummary, ...] = ()

    @property
    def representative_message(self) -> Optional[MessageSummary]:
        """The first matching message, or ``None`` when there is none."""
        return self.matching_messages[0] if self.matching_messages else None

    @property
    def triggered_at_text(self) -> str:
        if self.triggered_at is None:
            return ""
        if isinstance(self.triggered_at, datetime):
            return self.triggered_at.isoformat()
        return str(self.triggered_at)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> AlertContext:
        """Build a context from the JSON notification posted by Graylog.

        Raises:
            ValueError: when the payload is not shaped like an alert.
        """
        if not isinstance(payload, dict):
            raise ValueError("Alert payload must be a JSON object")

        stream = payload.get("stream") or {}
        result = payload.get("check_result") or {}
        if not isinstance(stream, dict) or not isinstance(result, dict):
            raise ValueError("'stream' and 'check_result' must be JSON objects")
        if not stream.get("id"):
            raise ValueError("Alert payload is missing stream.id")

        rules = tuple(
            StreamRule(
                field=str(rule.get("field", "")),
                type=str(rule.get("type", "")),
                value=str(rule.get("value", "")),
            )
            for rule in (stream.get("rules") or [])
            if isinstance(rule, dict)
        )

        messages = []
        for raw in result.get("matching_messages") or []:
            if not isinstance(raw, dict):
                raise ValueError("Each matching message must be a JSON object")
            fields = raw.get("fields") or {}
            if not isinstance(fields, dict):
                raise ValueError("Matching message 'fields' must be a JSON object")
            messages.append(MessageSummary(
                message=str(raw.get("message") or ""),
                source=str(raw.get("source") or ""),
                fields=dict(fields),
            ))

        return cls(
            stream_id=str(stream["id"]),
            stream_title=str(stream.get("title") or ""),
            stream_rules=rules,
            result_description=str(result.get("result_description") or ""),
            triggered_at=result.get("triggered_at"),
            triggered_condition=str(result.get("triggered_condition") or ""),
            matching_messages=tuple(messages),
        )
