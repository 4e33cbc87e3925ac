"""Data classes for duplicate detection results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class DuplicateCheckResult:
    """Result of a duplicate detection check.

    Attributes:
        is_duplicate: Whether an open issue already carries the digest.
        strategy_name: Name of the check that found the duplicate
            (``"fingerprint_search"``).  ``None`` when no duplicate was found.
        existing_ticket_key: Jira issue key of the existing issue, when the
            search returned one.
        message: Human-readable explanation of the result.
    """

    is_duplicate: bool
    strategy_name: Optional[str] = None
    existing_ticket_key: Optional[str] = None
    message: Optional[str] = None
