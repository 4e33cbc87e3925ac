"""Pytest configuration and fixtures for graylog-jira tests."""

import os
import pytest
from unittest.mock import MagicMock

# Add the project root to the Python path
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from graylog_jira.context import AlertContext, MessageSummary, StreamRule
from graylog_jira.jira.client import JiraClient
from graylog_jira.run_config import RunConfig


@pytest.fixture
def sample_message():
    """Representative message for testing."""
    return MessageSummary(
        message="2024-05-01 12:00:00 ERROR: com.example.OrderService - disk full on /var",
        source="web-01",
        fields={
            "level": 3,
            "facility": "orders",
            "env": "prod",
        },
    )


@pytest.fixture
def sample_context(sample_message):
    """Alert context with one matching message."""
    return AlertContext(
        stream_id="5968db3189c88913066fc469",
        stream_title="orders-warn",
        stream_rules=(
            StreamRule(field="source", type="REGEX", value="^web[0-9]+$"),
            StreamRule(field="message", type="CONTAINS", value="ERROR"),
        ),
        result_description="Stream had 3 messages in the last 5 minutes",
        triggered_at="2024-05-01T12:00:05.000Z",
        triggered_condition="message_count={time: 5, threshold: 0}",
        matching_messages=(sample_message,),
    )


@pytest.fixture
def empty_context():
    """Alert context without matching messages."""
    return AlertContext(
        stream_id="5968db3189c88913066fc469",
        stream_title="orders-warn",
        result_description="Stream had 0 messages",
    )


@pytest.fixture
def sample_payload():
    """Alert notification JSON as posted by Graylog."""
    return {
        "stream": {
            "id": "5968db3189c88913066fc469",
            "title": "orders-warn",
            "rules": [{"field": "source", "type": "REGEX", "value": "^web[0-9]+$"}],
        },
        "check_result": {
            "result_description": "Stream had 3 messages in the last 5 minutes",
            "triggered_at": "2024-05-01T12:00:05.000Z",
            "triggered_condition": "message_count={time: 5, threshold: 0}",
            "matching_messages": [
                {
                    "message": "2024 ERROR: disk full",
                    "source": "web-01",
                    "fields": {"level": 3, "facility": "orders"},
                }
            ],
        },
    }


@pytest.fixture
def run_config():
    """Per-alert configuration for testing (real mode)."""
    return RunConfig(
        jira_project_key="OPS",
        jira_issue_type="Bug",
        jira_priority="Low",
        jira_labels="graylog, alerts",
        jira_components="backend",
        title_template="[Alert] [STREAM_TITLE]",
        message_regex="ERROR: (.+)",
        graylog_url="https://graylog.example.com",
        graylog_time_span=300,
        auto_create_ticket=True,
    )


@pytest.fixture
def mock_jira_client():
    """Mock Jira client for testing."""
    client = MagicMock(spec=JiraClient)
    client.search_issues.return_value = {"total": 0, "issues": []}
    client.get_create_metadata.return_value = {}
    client.create_issue.return_value = {"id": "10001", "key": "OPS-123"}
    client.server_info.return_value = {"serverTitle": "Jira", "version": "9.4.0"}
    return client


@pytest.fixture
def temp_env():
    """Temporary environment variables for testing."""
    original_env = os.environ.copy()

    test_env = {
        "JIRA_INSTANCE_URL": "https://jira.example.com",
        "JIRA_USERNAME": "graylog",
        "JIRA_PASSWORD": "secret",
        "JIRA_PROJECT_KEY": "OPS",
        "GRAYLOG_URL": "https://graylog.example.com",
    }

    os.environ.update(test_env)

    yield test_env

    os.environ.clear()
    os.environ.update(original_env)
