"""HTTP client for the Jira REST API (v2).

Every call carries its own basic-auth credentials and timeout and the client
keeps no mutable state, so one instance may serve concurrent alerts.
"""
from __future__ import annotations

import base64
from typing import Any, Dict, Iterable, Optional, Union

import requests

from graylog_jira.utils.logger import log_api_response, log_error, log_info


class JiraClientError(Exception):
    """Transport, authentication or unexpected-status failure talking to Jira."""

    def __init__(self, message: str, status_code: Optional[int] = None, response_text: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text


class JiraClient:
    """Minimal synchronous Jira client built on ``requests``."""

    def __init__(self, instance_url: str, username: str, password: str, *, timeout: float = 20) -> None:
        self.instance_url = instance_url.rstrip("/") + "/"
        self.username = username
        self.password = password
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> JiraClient:
        return cls(
            config.jira_instance_url,
            config.jira_username,
            config.jira_password,
            timeout=config.jira_timeout,
        )

    def _url(self, path: str) -> str:
        return f"{self.instance_url}rest/api/2/{path}"

    def _headers(self) -> Dict[str, str]:
        auth_string = f"{self.username}:{self.password}"
        auth_encoded = base64.b64encode(auth_string.encode()).decode()
        return {
            "Authorization": f"Basic {auth_encoded}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _request(self, method: str, path: str, operation: str, **kwargs) -> Dict[str, Any]:
        url = self._url(path)
        try:
            resp = requests.request(method, url, headers=self._headers(), timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            log_error(f"Jira {operation} failed", error=str(e))
            raise JiraClientError(f"Could not reach Jira at {self.instance_url}: {e}") from e

        if resp.status_code == 401:
            log_error(f"Jira {operation} rejected credentials", status_code=401)
            raise JiraClientError(
                "Invalid credentials. Make sure your username/password are set properly.",
                status_code=401,
            )
        if resp.status_code >= 400:
            preview = (resp.text or "")[:500]
            log_error(f"Jira {operation} failed", status_code=resp.status_code, response=preview)
            raise JiraClientError(
                f"Unexpected HTTP response status {resp.status_code}",
                status_code=resp.status_code,
                response_text=preview,
            )

        try:
            data = resp.json() if resp.content else {}
        except ValueError as e:
            raise JiraClientError(f"Could not parse Jira response for {operation}", status_code=resp.status_code) from e

        log_api_response(f"Jira {operation}", resp.status_code)
        return data

    def search_issues(
        self,
        jql: str,
        *,
        fields: Union[str, Iterable[str]] = "id,key,summary",
        max_results: int = 1,
    ) -> Dict[str, Any]:
        """Run a JQL search; returns the raw ``{"total", "issues"}`` response."""
        if isinstance(fields, str):
            fields = [f.strip() for f in fields.split(",") if f.strip()]
        log_info("Searching Jira issues", jql=jql, max_results=max_results)
        return self._request("POST", "search", "search", json={
            "jql": jql,
            "maxResults": max_results,
            "fields": list(fields),
        })

    def get_create_metadata(self, project_key: str, issue_type: str) -> Dict[str, Dict[str, Any]]:
        """Field catalogue (``{field_id: {"name": ...}}``) for creating ``issue_type`` in ``project_key``."""
        data = self._request("GET", "issue/createmeta", "create metadata", params={
            "projectKeys": project_key,
            "issuetypeNames": issue_type,
            "expand": "projects.issuetypes.fields",
        })
        for project in data.get("projects") or []:
            if project.get("key") != project_key:
                continue
            for itype in project.get("issuetypes") or []:
                if str(itype.get("name", "")).lower() == issue_type.lower():
                    return itype.get("fields") or {}
        return {}

    def create_issue(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Create an issue; returns the response carrying ``key`` and ``id``."""
        return self._request("POST", "issue", "issue creation", json={"fields": fields})

    def server_info(self) -> Dict[str, Any]:
        return self._request("GET", "serverInfo", "server info")
