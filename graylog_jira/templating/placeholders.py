"""Placeholder substitution for titles, descriptions and hash patterns.

Substitution order is fixed: context placeholders first, then one
``[LAST_MESSAGE.<field>]`` pass per field of the representative message,
then every leftover ``[LAST_MESSAGE.*]`` token is removed.  Field names are
matched case-sensitively, exactly as stored on the message.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

from graylog_jira.context import AlertContext

LAST_MESSAGE_PREFIX = "[LAST_MESSAGE."
FRAGMENT_PLACEHOLDER = "[MESSAGE_REGEX]"

_RE_LEFTOVER = re.compile(r"\[LAST_MESSAGE\.[^\]]*\]")
_RE_ESCAPE = re.compile(r"\\(u[0-9a-fA-F]{4}|[btnfr\"'\\])")
_ESCAPES = {
    "b": "\b",
    "t": "\t",
    "n": "\n",
    "f": "\f",
    "r": "\r",
    '"': '"',
    "'": "'",
    "\\": "\\",
}


def unescape(text: str) -> str:
    """Expand backslash escapes such as ``\\n`` typed into a template field."""
    def _sub(match: re.Match) -> str:
        seq = match.group(1)
        if seq.startswith("u"):
            return chr(int(seq[1:], 16))
        return _ESCAPES[seq]

    return _RE_ESCAPE.sub(_sub, text)


def callback_date(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2017-07-21T18:19:44.243Z."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_stream_url(base_url: str, stream_id: str, time_span) -> str:
    """Link back to the stream's messages over a relative time window."""
    if not base_url:
        return ""
    return (
        f"{base_url.rstrip('/')}/streams/{stream_id}"
        f"/messages?q=*&rangetype=relative&relative={time_span}"
    )


def build_stream_rules(context: AlertContext) -> str:
    return "\n".join(rule.render() for rule in context.stream_rules)


class PlaceholderEngine:
    """Render templates against an ``AlertContext``.

    The engine holds only the immutable link settings, so one instance can be
    shared by concurrent alerts.
    """

    def __init__(self, graylog_url: str = "", time_span=30) -> None:
        self.graylog_url = graylog_url or ""
        self.time_span = time_span

    def render(
        self,
        template: Optional[str],
        context: AlertContext,
        *,
        unescape_template: bool = True,
        now: Optional[datetime] = None,
    ) -> str:
        """Substitute every placeholder in ``template``; never raises for missing data."""
        if not template:
            return ""
        text = unescape(template) if unescape_template else template
        message = context.representative_message

        fixed = {
            "[CALLBACK_DATE]": callback_date(now),
            "[STREAM_ID]": context.stream_id,
            "[STREAM_TITLE]": context.stream_title,
            "[STREAM_URL]": build_stream_url(self.graylog_url, context.stream_id, self.time_span),
            "[STREAM_RULES]": build_stream_rules(context),
            "[STREAM_RESULT]": context.result_description,
            "[ALERT_TRIGGERED_AT]": context.triggered_at_text,
            "[ALERT_TRIGGERED_CONDITION]": context.triggered_condition,
            "[LAST_MESSAGE.message]": message.message if message else "",
            "[LAST_MESSAGE.source]": message.source if message else "",
        }
        for token, value in fixed.items():
            text = text.replace(token, value or "")

        if message is not None:
            for name, value in message.fields.items():
                text = text.replace(f"{LAST_MESSAGE_PREFIX}{name}]", "" if value is None else str(value))

        return _RE_LEFTOVER.sub("", text)
