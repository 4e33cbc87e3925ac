"""Unit tests for IssueCreator (graylog_jira/jira/creator.py).

Covers fingerprint-field resolution, the inline digest fallback and
creation error handling.
"""

import pytest
from unittest.mock import patch

from graylog_jira.errors import MetadataLookupError, TicketCreateError
from graylog_jira.jira.client import JiraClientError
from graylog_jira.jira.creator import IssueCreator
from graylog_jira.jira.payload import Ticket

pytestmark = pytest.mark.ticket

DIGEST = "9b2c1a0f5e6d7c8b9a0f1e2d3c4b5a69"


@pytest.fixture
def ticket():
    return Ticket(
        project_key="OPS",
        issue_type="Bug",
        summary="[Alert] orders-warn",
        description="\n\nsomething broke\n\n",
        priority="Low",
        labels=["graylog"],
    )


class TestDiscoverFingerprintField:
    """Looking up the graylog_md5 custom field."""

    def test_found_case_insensitive(self, mock_jira_client):
        mock_jira_client.get_create_metadata.return_value = {
            "summary": {"name": "Summary"},
            "customfield_10200": {"name": "Graylog_MD5"},
        }

        field_id = IssueCreator(mock_jira_client).discover_fingerprint_field("OPS", "Bug")

        assert field_id == "customfield_10200"
        mock_jira_client.get_create_metadata.assert_called_once_with("OPS", "Bug")

    def test_only_custom_fields_considered(self, mock_jira_client):
        mock_jira_client.get_create_metadata.return_value = {"graylog_md5": {"name": "graylog_md5"}}

        assert IssueCreator(mock_jira_client).discover_fingerprint_field("OPS", "Bug") is None

    def test_not_found(self, mock_jira_client):
        mock_jira_client.get_create_metadata.return_value = {"customfield_1": {"name": "Team"}}

        assert IssueCreator(mock_jira_client).discover_fingerprint_field("OPS", "Bug") is None

    def test_lookup_failure_raises(self, mock_jira_client):
        mock_jira_client.get_create_metadata.side_effect = JiraClientError("boom", status_code=500)

        with pytest.raises(MetadataLookupError) as exc_info:
            IssueCreator(mock_jira_client).discover_fingerprint_field("OPS", "Bug")

        assert exc_info.value.project_key == "OPS"
        assert isinstance(exc_info.value.__cause__, JiraClientError)

    def test_not_cached(self, mock_jira_client):
        creator = IssueCreator(mock_jira_client)

        creator.discover_fingerprint_field("OPS", "Bug")
        creator.discover_fingerprint_field("OPS", "Bug")

        assert mock_jira_client.get_create_metadata.call_count == 2


class TestPrepare:
    """Payload preparation."""

    def test_configured_field_used(self, mock_jira_client, ticket):
        fields = IssueCreator(mock_jira_client).prepare(ticket, DIGEST, "customfield_10200")

        assert fields["customfield_10200"] == DIGEST
        assert "graylog_md5=" not in fields["description"]
        mock_jira_client.get_create_metadata.assert_not_called()

    def test_discovered_field_used(self, mock_jira_client, ticket):
        mock_jira_client.get_create_metadata.return_value = {"customfield_77": {"name": "graylog_md5"}}

        fields = IssueCreator(mock_jira_client).prepare(ticket, DIGEST)

        assert fields["customfield_77"] == DIGEST

    def test_inline_when_no_field(self, mock_jira_client, ticket):
        with patch("graylog_jira.jira.creator.log_warning") as mock_warn:
            fields = IssueCreator(mock_jira_client).prepare(ticket, DIGEST)

        assert fields["description"] == f"\n\nsomething broke\n\ngraylog_md5={DIGEST}\n\n"
        assert not any(key.startswith("customfield_") for key in fields)
        assert mock_warn.called

    def test_inline_when_lookup_fails(self, mock_jira_client, ticket):
        mock_jira_client.get_create_metadata.side_effect = JiraClientError("boom")

        fields = IssueCreator(mock_jira_client).prepare(ticket, DIGEST)

        assert f"graylog_md5={DIGEST}" in fields["description"]

    def test_blank_digest(self, mock_jira_client, ticket):
        fields = IssueCreator(mock_jira_client).prepare(ticket, "")

        assert fields["description"] == ticket.description
        mock_jira_client.get_create_metadata.assert_not_called()

    def test_ticket_not_mutated(self, mock_jira_client, ticket):
        IssueCreator(mock_jira_client).prepare(ticket, DIGEST)

        assert ticket.description == "\n\nsomething broke\n\n"


class TestCreate:
    """Issue submission."""

    def test_returns_key(self, mock_jira_client, ticket):
        key = IssueCreator(mock_jira_client).create(ticket, DIGEST, "customfield_10200")

        assert key == "OPS-123"
        sent = mock_jira_client.create_issue.call_args.args[0]
        assert sent["project"] == {"key": "OPS"}
        assert sent["priority"] == {"name": "Low"}
        assert sent["customfield_10200"] == DIGEST

    def test_rejected(self, mock_jira_client, ticket):
        mock_jira_client.create_issue.side_effect = JiraClientError(
            "Unexpected HTTP response status 400", status_code=400, response_text='{"errors": {}}'
        )

        with pytest.raises(TicketCreateError) as exc_info:
            IssueCreator(mock_jira_client).create(ticket, DIGEST, "customfield_10200")

        assert exc_info.value.project_key == "OPS"
        assert exc_info.value.digest == DIGEST
        mock_jira_client.create_issue.assert_called_once()

    def test_missing_key(self, mock_jira_client, ticket):
        mock_jira_client.create_issue.return_value = {"id": "10001"}

        with pytest.raises(TicketCreateError):
            IssueCreator(mock_jira_client).create(ticket, DIGEST, "customfield_10200")
