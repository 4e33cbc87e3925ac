"""Immutable per-alert configuration.

``RunConfig`` captures every setting the alert pipeline reads.  It is built
once per alert and handed explicitly to each component, so nothing below the
entry point touches the global ``Config`` singleton or ``os.environ``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

from graylog_jira.config import (
    DEFAULT_MESSAGE_TEMPLATE,
    DEFAULT_TITLE_TEMPLATE,
    is_set,
)

if TYPE_CHECKING:
    from graylog_jira.config import Config


def split_csv(value: Optional[str]) -> List[str]:
    """Split a comma-separated setting, dropping blank entries."""
    if not is_set(value):
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _opt(value: Optional[str]) -> Optional[str]:
    return value.strip() if is_set(value) else None


@dataclass(frozen=True)
class RunConfig:
    """Immutable, per-alert configuration."""

    # --- Jira issue ---------------------------------------------------------
    jira_project_key: str = ""
    jira_issue_type: str = "Bug"
    jira_priority: str = "Low"
    jira_labels: str = ""
    jira_components: str = ""

    # --- Templates ----------------------------------------------------------
    title_template: str = DEFAULT_TITLE_TEMPLATE
    message_template: str = DEFAULT_MESSAGE_TEMPLATE
    max_title_length: int = 255

    # --- Fingerprint / duplicates -------------------------------------------
    message_regex: Optional[str] = None
    md5_hash_pattern: Optional[str] = None
    md5_custom_field: Optional[str] = None
    md5_filter_query: Optional[str] = None
    field_mapping: Optional[str] = None

    # --- Graylog links ------------------------------------------------------
    graylog_url: str = ""
    graylog_time_span: int = 30

    # --- Behaviour ----------------------------------------------------------
    auto_create_ticket: bool = False

    @property
    def labels(self) -> List[str]:
        return split_csv(self.jira_labels)

    @property
    def components(self) -> List[str]:
        return split_csv(self.jira_components)

    @classmethod
    def from_config(cls, config: Config) -> RunConfig:
        """Build a ``RunConfig`` snapshot from the process ``Config``."""
        return cls(
            jira_project_key=config.jira_project_key.strip(),
            jira_issue_type=config.jira_issue_type.strip(),
            jira_priority=config.jira_priority.strip() if is_set(config.jira_priority) else "",
            jira_labels=config.jira_labels,
            jira_components=config.jira_components,
            title_template=config.jira_title_template if is_set(config.jira_title_template) else DEFAULT_TITLE_TEMPLATE,
            message_template=config.jira_message_template if is_set(config.jira_message_template) else DEFAULT_MESSAGE_TEMPLATE,
            max_title_length=config.max_title_length,
            message_regex=config.message_regex if is_set(config.message_regex) else None,
            md5_hash_pattern=config.jira_md5_hash_pattern if is_set(config.jira_md5_hash_pattern) else None,
            md5_custom_field=_opt(config.jira_md5_custom_field),
            md5_filter_query=_opt(config.jira_md5_filter_query),
            field_mapping=_opt(config.jira_graylog_message_field_mapping),
            graylog_url=config.graylog_url if is_set(config.graylog_url) else "",
            graylog_time_span=config.graylog_histogram_time_span,
            auto_create_ticket=config.auto_create_ticket,
        )
