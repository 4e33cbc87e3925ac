"""Exception classes for alert → ticket processing.

Cosmetic problems (template rendering, regex extraction) are never raised;
they degrade to empty values and a warning in the log. Only failures that
affect correctness reach the caller.
"""
from typing import Optional


class GraylogJiraError(Exception):
    """Base exception for the Graylog → Jira bridge"""
    pass


class ConfigurationError(GraylogJiraError):
    """Raised when a mandatory setting is missing or a URL is invalid"""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class TrackerQueryError(GraylogJiraError):
    """Raised when the duplicate search against Jira fails"""

    def __init__(self, message: str, *, project_key: str, digest: str):
        super().__init__(f"{message} (project={project_key}, digest={digest})")
        self.project_key = project_key
        self.digest = digest


class MetadataLookupError(GraylogJiraError):
    """Raised when the create-metadata lookup for the fingerprint field fails"""

    def __init__(self, message: str, *, project_key: str, issue_type: str):
        super().__init__(f"{message} (project={project_key}, issue_type={issue_type})")
        self.project_key = project_key
        self.issue_type = issue_type


class TicketCreateError(GraylogJiraError):
    """Raised when Jira rejects or fails the issue creation request"""

    def __init__(self, message: str, *, project_key: str, issue_type: str,
                 digest: Optional[str] = None):
        super().__init__(f"{message} (project={project_key}, issue_type={issue_type})")
        self.project_key = project_key
        self.issue_type = issue_type
        self.digest = digest
