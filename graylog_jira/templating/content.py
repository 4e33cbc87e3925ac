"""Ticket title and description rendering.

Titles additionally understand ``[MESSAGE_REGEX]`` (the regex fragment of the
representative message) and ``${name}`` (a named group of the same regex).
A title that renders blank falls back to the default alert title.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from graylog_jira.config import DEFAULT_MESSAGE_TEMPLATE, DEFAULT_TITLE_TEMPLATE
from graylog_jira.context import AlertContext
from graylog_jira.fingerprint.extract import extract, replace_named_groups
from graylog_jira.templating.placeholders import FRAGMENT_PLACEHOLDER, PlaceholderEngine, unescape
from graylog_jira.utils.logger import log_debug, log_warning

_RE_WS = re.compile(r"\s+")


@dataclass(frozen=True)
class TicketContent:
    title: str
    description: str


def default_title(context: AlertContext) -> str:
    return f"[Alert] Graylog alert for stream: {context.stream_title}"


class TicketContentBuilder:
    """Render ticket text for one alert from the configured templates."""

    def __init__(self, engine: PlaceholderEngine, *, max_title_length: int = 255) -> None:
        self.engine = engine
        self.max_title_length = max_title_length

    def build_title(
        self,
        context: AlertContext,
        template: Optional[str] = DEFAULT_TITLE_TEMPLATE,
        message_regex: Optional[str] = None,
    ) -> str:
        message = context.representative_message

        # Escapes belong to the template only; message text is inserted afterwards
        title = unescape(template or DEFAULT_TITLE_TEMPLATE)
        title = self.engine.render(title, context, unescape_template=False)

        fragment = ""
        if message is not None and message_regex:
            fragment = extract(message_regex, message.message) or ""
            title = replace_named_groups(title, message.message, message_regex)
        title = title.replace(FRAGMENT_PLACEHOLDER, fragment)

        title = self.clean_title(title)
        if not title:
            log_warning("Title template rendered blank, using default title", stream_id=context.stream_id)
            title = self.clean_title(default_title(context))

        log_debug("Title rendered", title=title)
        return title

    def build_description(self, context: AlertContext, template: Optional[str] = DEFAULT_MESSAGE_TEMPLATE) -> str:
        description = self.engine.render(template or DEFAULT_MESSAGE_TEMPLATE, context)
        return f"\n\n{description}\n\n"

    def build(
        self,
        context: AlertContext,
        *,
        title_template: Optional[str] = DEFAULT_TITLE_TEMPLATE,
        message_template: Optional[str] = DEFAULT_MESSAGE_TEMPLATE,
        message_regex: Optional[str] = None,
    ) -> TicketContent:
        return TicketContent(
            title=self.build_title(context, title_template, message_regex),
            description=self.build_description(context, message_template),
        )

    def clean_title(self, title: str) -> str:
        """Collapse to a single line and truncate to the summary limit."""
        title = _RE_WS.sub(" ", title).strip()
        if len(title) > self.max_title_length:
            title = title[: self.max_title_length - 1] + "…"
        return title
