"""Configuration management using Pydantic BaseSettings.

This module provides centralized configuration management with validation,
type safety, and sensible defaults for the Graylog → Jira bridge.
"""
from typing import Any, Dict, List
from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from graylog_jira.errors import ConfigurationError

# Default title for Jira issues
DEFAULT_TITLE_TEMPLATE = "[Alert] Graylog alert for stream: [STREAM_TITLE]"

# Default description; escaped newlines are expanded when the template is rendered
DEFAULT_MESSAGE_TEMPLATE = (
    "[STREAM_RESULT]\\n\\n"
    "*Stream title:*\\n[STREAM_TITLE]\\n\\n"
    "*Stream URL:*\\n[STREAM_URL]\\n\\n"
    "*Stream rules:*\\n[STREAM_RULES]\\n\\n"
    "*Alert triggered at:*\\n[ALERT_TRIGGERED_AT]\\n\\n"
    "*Triggered condition:*\\n[ALERT_TRIGGERED_CONDITION]\\n\\n"
    "*Source:*\\n[LAST_MESSAGE.source]\\n\\n"
    "*Message:*\\n[LAST_MESSAGE.message]\\n\\n"
)

EXAMPLE_MESSAGE_REGEX = "([a-zA-Z_.]+(?!.*Exception): .+)"
EXAMPLE_MD5_HASH_PATTERN = "[MESSAGE_REGEX]"
EXAMPLE_MD5_FILTER_QUERY = "AND Status not in (Closed, Done, Resolved)"

MANDATORY_KEYS = (
    "jira_instance_url",
    "jira_username",
    "jira_password",
    "jira_project_key",
    "jira_issue_type",
)
URL_KEYS = ("jira_instance_url", "graylog_url")
SENSITIVE_KEYS = ("jira_password",)
LOGGED_KEYS = (
    "jira_instance_url",
    "jira_username",
    "jira_password",
    "jira_project_key",
    "jira_issue_type",
    "jira_md5_custom_field",
    "message_regex",
    "graylog_url",
    "auto_create_ticket",
    "log_level",
)


def is_set(value: Any) -> bool:
    """True when a setting holds real text (the literal "null" counts as unset)."""
    if value is None:
        return False
    text = str(value).strip()
    return bool(text) and text != "null"


class Config(BaseSettings):
    """Main configuration class combining all settings."""

    # Jira connection
    jira_instance_url: str = Field("", description="Jira server URL")
    jira_username: str = Field("", description="Username to log in to Jira and create issues")
    jira_password: str = Field("", description="Password or API token for the Jira user")
    jira_timeout: int = Field(20, ge=1, le=120, description="Per-request timeout in seconds")

    # Issue defaults
    jira_project_key: str = Field("", description="Project under which the issue will be created")
    jira_issue_type: str = Field("Bug", description="Type of issue")
    jira_priority: str = Field("Low", description="Priority of the issue")
    jira_labels: str = Field("", description="Comma-separated labels, e.g. graylog")
    jira_components: str = Field("", description="Comma-separated components")

    # Templates
    jira_title_template: str = Field(DEFAULT_TITLE_TEMPLATE, description="Title template for Jira issues")
    jira_message_template: str = Field(DEFAULT_MESSAGE_TEMPLATE, description="Description template; use \\n to separate lines")
    max_title_length: int = Field(255, ge=10, le=255, description="Maximum issue summary length")

    # Fingerprinting and duplicate detection
    message_regex: str = Field("", description=f"Regex to extract message content, e.g. {EXAMPLE_MESSAGE_REGEX}")
    jira_md5_hash_pattern: str = Field("", description=f"Pattern to build the MD5 from, e.g. {EXAMPLE_MD5_HASH_PATTERN}")
    jira_md5_custom_field: str = Field("", description="Custom field id for the MD5 (customfield_####); discovered when blank")
    jira_md5_filter_query: str = Field("", description=f"Extra JQL for the duplicate search, e.g. {EXAMPLE_MD5_FILTER_QUERY}")
    jira_graylog_message_field_mapping: str = Field("", description="Comma-separated graylog_field=jira_field pairs")

    # Graylog links
    graylog_url: str = Field("", description="Graylog web interface URL, used to build stream links")
    graylog_histogram_time_span: int = Field(30, ge=1, description="Relative time span in seconds for stream links")

    # Behaviour
    auto_create_ticket: bool = Field(False, description="Create real tickets (false = dry run)")

    # Logging
    log_level: str = Field("INFO", description="Logging level")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Invalid log level: {v}. Valid options: {valid_levels}')
        return v.upper()

    @field_validator('jira_instance_url', 'graylog_url')
    @classmethod
    def strip_url(cls, v):
        return v.strip()

    def configuration_errors(self) -> List[ConfigurationError]:
        """Every missing or invalid setting, in check order."""
        errors = []

        for key in MANDATORY_KEYS:
            if not is_set(getattr(self, key)):
                errors.append(ConfigurationError(key, f"{key.upper()} is mandatory and must not be empty"))

        for key in URL_KEYS:
            value = getattr(self, key)
            if not is_set(value):
                continue
            try:
                scheme = urlparse(value).scheme
            except ValueError:
                errors.append(ConfigurationError(key, f"Couldn't parse {key.upper()} correctly"))
                continue
            if scheme not in ("http", "https"):
                errors.append(ConfigurationError(key, f"{key.upper()} must be a valid HTTP or HTTPS URL"))

        return errors

    def validate_configuration(self) -> List[str]:
        """Validate the complete configuration and return any issues."""
        return [str(e) for e in self.configuration_errors()]

    def check_configuration(self) -> None:
        """Raise ``ConfigurationError`` for the first missing or invalid setting."""
        errors = self.configuration_errors()
        if errors:
            raise errors[0]

    def attributes(self) -> Dict[str, Any]:
        """Configuration values for display, with secrets masked."""
        return {
            key: ("****" if key in SENSITIVE_KEYS and value else value)
            for key, value in self.model_dump().items()
        }

    def log_configuration(self) -> None:
        """Log the current configuration (sanitized)."""
        from graylog_jira.utils.logger import log_info

        attributes = self.attributes()
        log_info("Configuration loaded", **{key: attributes[key] for key in LOGGED_KEYS})


# Global configuration instance (lazy loading), read by the entry point only
_config = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Reload configuration from environment variables."""
    global _config
    _config = Config()
    return _config
