"""Jira integration: REST client, payload assembly, field mapping, issue creation."""

from graylog_jira.jira.client import JiraClient, JiraClientError
from graylog_jira.jira.creator import IssueCreator
from graylog_jira.jira.mapping import build_mapping, parse_mapping_spec
from graylog_jira.jira.payload import FINGERPRINT_FIELD_NAME, JiraPayloadBuilder, Ticket

__all__ = [
    "JiraClient",
    "JiraClientError",
    "IssueCreator",
    "build_mapping",
    "parse_mapping_spec",
    "FINGERPRINT_FIELD_NAME",
    "JiraPayloadBuilder",
    "Ticket",
]
