"""Turn triggered Graylog stream alerts into deduplicated Jira issues."""

__version__ = "0.1.0"
