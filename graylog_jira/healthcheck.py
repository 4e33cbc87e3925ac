"""Health check for the Jira connection.

Verifies, before any alert is processed, that the configured Jira instance is
reachable with the configured credentials and that the project accepts the
configured issue type.
"""
from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from graylog_jira.config import Config
from graylog_jira.jira.client import JiraClient, JiraClientError
from graylog_jira.jira.payload import FINGERPRINT_FIELD_NAME
from graylog_jira.utils.logger import log_error, log_info


@dataclass
class HealthCheckResult:
    """Result of a single health check."""
    service: str
    healthy: bool
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


def check_jira(client: JiraClient) -> HealthCheckResult:
    """Check Jira API connectivity and credentials via ``serverInfo``."""
    try:
        info = client.server_info()
    except JiraClientError as e:
        return HealthCheckResult(service="Jira", healthy=False, message=str(e),
                                 details={"status_code": e.status_code})

    return HealthCheckResult(
        service="Jira",
        healthy=True,
        message=f"Connected to {info.get('serverTitle', 'Jira')} {info.get('version', '')}".strip(),
        details={"version": info.get("version"), "base_url": info.get("baseUrl")},
    )


def check_project(client: JiraClient, project_key: str, issue_type: str) -> HealthCheckResult:
    """Check that the project exposes create metadata for the issue type."""
    try:
        catalogue = client.get_create_metadata(project_key, issue_type)
    except JiraClientError as e:
        return HealthCheckResult(service="Jira project", healthy=False, message=str(e))

    if not catalogue:
        return HealthCheckResult(
            service="Jira project",
            healthy=False,
            message=f"No create metadata for issue type '{issue_type}' in project {project_key}",
        )

    md5_fields = [
        field_id for field_id, meta in catalogue.items()
        if isinstance(meta, dict) and str(meta.get("name", "")).lower() == FINGERPRINT_FIELD_NAME
    ]
    message = f"Project {project_key} accepts '{issue_type}'"
    if md5_fields:
        message += f", {FINGERPRINT_FIELD_NAME} field is {md5_fields[0]}"
    else:
        message += f", no {FINGERPRINT_FIELD_NAME} field (digest will be inlined)"
    return HealthCheckResult(service="Jira project", healthy=True, message=message,
                             details={"md5_field": md5_fields[0] if md5_fields else None})


def run_health_checks(config: Config, verbose: bool = True) -> Tuple[bool, List[HealthCheckResult]]:
    """Run all health checks.

    Returns:
        Tuple of (all_healthy, list of results)
    """
    client = JiraClient.from_config(config)

    if verbose:
        print("\nRunning health checks...\n")

    results = [check_jira(client)]
    if results[0].healthy:
        results.append(check_project(client, config.jira_project_key, config.jira_issue_type))

    all_healthy = all(r.healthy for r in results)

    if verbose:
        for result in results:
            icon = "✓" if result.healthy else "✗"
            print(f"  {result.service}: {icon} {result.message}")
        print()

    for result in results:
        if result.healthy:
            log_info(f"Health check passed: {result.service}", **result.details)
        else:
            log_error(f"Health check failed: {result.service}", message=result.message)

    return all_healthy, results


if __name__ == "__main__":
    # Allow running directly: python -m graylog_jira.healthcheck
    from dotenv import load_dotenv
    load_dotenv()

    from graylog_jira.config import get_config

    all_healthy, _ = run_health_checks(get_config())
    sys.exit(0 if all_healthy else 1)
