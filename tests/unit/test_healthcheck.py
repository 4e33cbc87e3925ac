"""Unit tests for the Jira health check."""

import pytest
from unittest.mock import patch
from types import SimpleNamespace

from graylog_jira.healthcheck import check_jira, check_project, run_health_checks
from graylog_jira.jira.client import JiraClientError

pytestmark = pytest.mark.unit


class TestCheckJira:

    def test_healthy(self, mock_jira_client):
        result = check_jira(mock_jira_client)

        assert result.healthy is True
        assert "9.4.0" in result.message

    def test_unauthorized(self, mock_jira_client):
        mock_jira_client.server_info.side_effect = JiraClientError("Invalid credentials.", status_code=401)

        result = check_jira(mock_jira_client)

        assert result.healthy is False
        assert result.details["status_code"] == 401


class TestCheckProject:

    def test_fingerprint_field_reported(self, mock_jira_client):
        mock_jira_client.get_create_metadata.return_value = {"customfield_10200": {"name": "graylog_md5"}}

        result = check_project(mock_jira_client, "OPS", "Bug")

        assert result.healthy is True
        assert result.details["md5_field"] == "customfield_10200"

    def test_no_fingerprint_field(self, mock_jira_client):
        mock_jira_client.get_create_metadata.return_value = {"summary": {"name": "Summary"}}

        result = check_project(mock_jira_client, "OPS", "Bug")

        assert result.healthy is True
        assert result.details["md5_field"] is None

    def test_unknown_issue_type(self, mock_jira_client):
        result = check_project(mock_jira_client, "OPS", "Incident")

        assert result.healthy is False

    def test_lookup_failure(self, mock_jira_client):
        mock_jira_client.get_create_metadata.side_effect = JiraClientError("boom")

        assert check_project(mock_jira_client, "OPS", "Bug").healthy is False


class TestRunHealthChecks:

    def test_stops_after_connection_failure(self, mock_jira_client):
        mock_jira_client.server_info.side_effect = JiraClientError("down")
        config = SimpleNamespace(jira_project_key="OPS", jira_issue_type="Bug")

        with patch("graylog_jira.healthcheck.JiraClient.from_config", return_value=mock_jira_client):
            all_healthy, results = run_health_checks(config, verbose=False)

        assert all_healthy is False
        assert len(results) == 1
        mock_jira_client.get_create_metadata.assert_not_called()

    def test_all_healthy(self, mock_jira_client):
        mock_jira_client.get_create_metadata.return_value = {"summary": {"name": "Summary"}}
        config = SimpleNamespace(jira_project_key="OPS", jira_issue_type="Bug")

        with patch("graylog_jira.healthcheck.JiraClient.from_config", return_value=mock_jira_client):
            all_healthy, results = run_health_checks(config, verbose=False)

        assert all_healthy is True
        assert [r.service for r in results] == ["Jira", "Jira project"]
