"""Duplicate detection for Graylog alerts.

An alert is suppressed when Jira already holds an open issue with the same
fingerprint digest.
"""

from graylog_jira.dedup.result import DuplicateCheckResult
from graylog_jira.dedup.detector import DuplicateDetector

__all__ = ["DuplicateCheckResult", "DuplicateDetector"]
