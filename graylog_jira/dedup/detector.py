"""Duplicate detection against open Jira issues.

An alert is a duplicate when an issue in the project (narrowed by the
optional filter query) carries the same digest, either in the dedicated
fingerprint field or inline in its description.  The field is the
configured one, or the ``graylog_md5`` custom field found in the create
metadata; without either, only descriptions are searched.  Only existence
matters, so a single result is requested.
"""

from __future__ import annotations

import re
from typing import Optional

from graylog_jira.dedup.result import DuplicateCheckResult
from graylog_jira.errors import MetadataLookupError, TrackerQueryError
from graylog_jira.jira.client import JiraClient, JiraClientError
from graylog_jira.jira.creator import find_fingerprint_field
from graylog_jira.utils.logger import log_debug, log_duplicate_detection, log_error, log_info, log_warning

_RE_CUSTOMFIELD = re.compile(r"^customfield_(\d+)$")
_RE_LEADING_OPERATOR = re.compile(r"^(AND|OR)\b", re.IGNORECASE)


def fingerprint_jql_field(field_name: Optional[str]) -> Optional[str]:
    """JQL reference for the fingerprint field (``cf[NNN]`` for custom field ids)."""
    name = (field_name or "").strip()
    if not name:
        return None
    match = _RE_CUSTOMFIELD.match(name)
    if match:
        return f"cf[{match.group(1)}]"
    return f'"{name}"' if " " in name else name


def build_duplicate_jql(
    digest: str,
    project_key: str,
    extra_filter: Optional[str] = None,
    *,
    field_name: Optional[str] = None,
) -> str:
    """``project = KEY [AND filter] AND (<fp> ~ "digest" OR description ~ "digest")``.

    Without a fingerprint field the last clause is ``description ~ "digest"``.
    """
    clauses = [f"project = {project_key}"]
    extra = (extra_filter or "").strip()
    if extra:
        clauses.append(extra if _RE_LEADING_OPERATOR.match(extra) else f"AND {extra}")
    fp_field = fingerprint_jql_field(field_name)
    if fp_field:
        clauses.append(f'AND ({fp_field} ~ "{digest}" OR description ~ "{digest}")')
    else:
        clauses.append(f'AND description ~ "{digest}"')
    return " ".join(clauses)


class DuplicateDetector:
    """Look up an open issue carrying the alert's digest.

    Usage::

        detector = DuplicateDetector(client, issue_type="Bug")
        if detector.is_duplicate(digest, "OPS", "AND status != Done"):
            # skip ticket creation
            ...
    """

    def __init__(self, client: JiraClient, *, field_name: Optional[str] = None,
                 issue_type: Optional[str] = None):
        self.client = client
        self.field_name = field_name
        self.issue_type = issue_type

    def fingerprint_field(self, project_key: str) -> Optional[str]:
        """Configured field, else the one found in the create metadata."""
        if self.field_name and self.field_name.strip():
            return self.field_name.strip()
        if not self.issue_type:
            return None
        try:
            field_id = find_fingerprint_field(self.client, project_key, self.issue_type)
        except MetadataLookupError as e:
            log_warning("Fingerprint field lookup failed, searching descriptions only",
                        error=str(e), cause=str(e.__cause__))
            return None
        if field_id is None:
            log_debug("No fingerprint field in create metadata, searching descriptions only",
                      project=project_key, issue_type=self.issue_type)
        return field_id

    def check(self, digest: str, project_key: str, extra_filter: Optional[str] = None) -> DuplicateCheckResult:
        """Search Jira for the digest.

        A blank digest never reaches the network.

        Raises:
            TrackerQueryError: when the search fails; the caller must not
                treat this as "not a duplicate".
        """
        if not digest or not digest.strip():
            log_debug("No digest, duplicate check skipped")
            return DuplicateCheckResult(is_duplicate=False, message="Deduplication disabled for this alert")

        field_name = self.fingerprint_field(project_key)
        jql = build_duplicate_jql(digest, project_key, extra_filter, field_name=field_name)
        try:
            response = self.client.search_issues(jql, fields="id,key,summary", max_results=1)
        except JiraClientError as e:
            log_error("Error searching for duplicate Jira issue", error=str(e), jql=jql)
            raise TrackerQueryError("Failed searching for duplicate issue",
                                    project_key=project_key, digest=digest) from e

        issues = response.get("issues") or []
        total = response.get("total")
        count = total if isinstance(total, int) else len(issues)

        if count > 0 or issues:
            existing_key = issues[0].get("key") if issues else None
            log_duplicate_detection(existing_key, digest, open_issues=count, filter_query=extra_filter or None)
            return DuplicateCheckResult(
                is_duplicate=True,
                strategy_name="fingerprint_search",
                existing_ticket_key=existing_key,
                message=f"{count} open issue(s) with MD5={digest}",
            )

        log_info("No existing open Jira issue for digest", digest=digest, filter_query=extra_filter or None)
        return DuplicateCheckResult(is_duplicate=False)

    def is_duplicate(self, digest: str, project_key: str, extra_filter: Optional[str] = None) -> bool:
        return self.check(digest, project_key, extra_filter).is_duplicate
