"""Template rendering for ticket titles, descriptions and hash patterns."""

from graylog_jira.templating.placeholders import PlaceholderEngine
from graylog_jira.templating.content import TicketContent, TicketContentBuilder

__all__ = ["PlaceholderEngine", "TicketContent", "TicketContentBuilder"]
