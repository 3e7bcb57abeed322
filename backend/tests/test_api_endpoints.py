"""Tests for API endpoints."""

import csv
import io
import json
from unittest.mock import patch

from services.commitment_stats import calculate_sprint_stats
from services.exceptions import BoardNotFound, FetchFailure, NoActiveSprint


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert json.loads(response.data) == {"status": "ok"}


class TestBoardLookup:
    """Test board lookup endpoint."""

    def test_missing_credentials(self, client):
        response = client.get("/api/boards/lookup?name=Team")
        assert response.status_code == 401

    def test_missing_field_headers(self, client, jira_headers):
        del jira_headers["X-Jira-Committed-Date-Field"]
        response = client.get("/api/boards/lookup?name=Team", headers=jira_headers)
        assert response.status_code == 401

    def test_missing_name(self, client, jira_headers):
        response = client.get("/api/boards/lookup", headers=jira_headers)
        assert response.status_code == 400

    @patch("services.jira_client.JiraClient.fetch_board_id")
    def test_lookup_success(self, mock_fetch, client, jira_headers):
        mock_fetch.return_value = 7

        response = client.get("/api/boards/lookup", query_string={"name": "Team Alpha"},
                              headers=jira_headers)

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["data"] == {"id": 7, "name": "Team Alpha"}

    @patch("services.jira_client.JiraClient.fetch_board_id")
    def test_unknown_board(self, mock_fetch, client, jira_headers):
        mock_fetch.side_effect = BoardNotFound("No JIRA board named 'Nobody'")

        response = client.get("/api/boards/lookup?name=Nobody", headers=jira_headers)

        assert response.status_code == 404
        assert "error" in json.loads(response.data)


class TestBoardSprints:
    """Test sprint selection endpoint."""

    @patch("services.jira_client.JiraClient.fetch_active_sprints")
    def test_active_sprint(self, mock_fetch, client, jira_headers, sample_sprint_record):
        mock_fetch.return_value = [sample_sprint_record]

        response = client.get("/api/boards/7/sprints", headers=jira_headers)

        assert response.status_code == 200
        data = json.loads(response.data)
        assert [s["id"] for s in data["data"]] == [100]

    @patch("services.jira_client.JiraClient.fetch_sprints_page")
    def test_date_range(self, mock_fetch, client, jira_headers, sample_sprint_records):
        mock_fetch.return_value = (sample_sprint_records, True)

        response = client.get("/api/boards/7/sprints?since=2024-01-01&until=2024-01-31",
                              headers=jira_headers)

        assert response.status_code == 200
        data = json.loads(response.data)
        assert [s["name"] for s in data["data"]] == ["Sprint 1", "Sprint 2"]

    def test_until_without_since(self, client, jira_headers):
        response = client.get("/api/boards/7/sprints?until=2024-01-31", headers=jira_headers)
        assert response.status_code == 400

    def test_invalid_date(self, client, jira_headers):
        response = client.get("/api/boards/7/sprints?since=January", headers=jira_headers)
        assert response.status_code == 400


class TestCommitmentMetrics:
    """Test commitment metrics endpoints."""

    def test_missing_credentials(self, client):
        response = client.get("/api/metrics/7/commitment")
        assert response.status_code == 401

    @patch("app.api.metrics.SprintMetricsService")
    def test_returns_stats(self, mock_service_cls, client, jira_headers, make_issue, sample_sprint):
        stats = calculate_sprint_stats(sample_sprint, [make_issue("A-1", 3, completed=True)])
        mock_service_cls.return_value.get_commitment_metrics.return_value = [stats]

        response = client.get("/api/metrics/7/commitment?since=2024-01-01", headers=jira_headers)

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["data"][0]["sprint"]["name"] == "Sprint 1"
        assert data["data"][0]["total"]["points"]["attempted"] == 3
        assert data["data"][0]["committed"]["commitment"]["accuracy"] is None
        config = mock_service_cls.call_args.args[0]
        assert config.fields.story_points == "customfield_10002"
        call = mock_service_cls.return_value.get_commitment_metrics.call_args
        assert call.args == (7,)
        assert call.kwargs["since"].isoformat() == "2024-01-01T00:00:00"

    @patch("app.api.metrics.SprintMetricsService")
    def test_no_active_sprint(self, mock_service_cls, client, jira_headers):
        mock_service_cls.return_value.get_commitment_metrics.side_effect = NoActiveSprint("none")

        response = client.get("/api/metrics/7/commitment", headers=jira_headers)

        assert response.status_code == 404

    @patch("app.api.metrics.SprintMetricsService")
    def test_fetch_failure(self, mock_service_cls, client, jira_headers):
        mock_service_cls.return_value.get_commitment_metrics.side_effect = FetchFailure("Jira down")

        response = client.get("/api/metrics/7/commitment", headers=jira_headers)

        assert response.status_code == 502
        assert json.loads(response.data)["error"] == "Jira down"

    @patch("app.api.metrics.SprintMetricsService")
    def test_csv_download(self, mock_service_cls, client, jira_headers, make_issue, sample_sprint):
        stats = calculate_sprint_stats(sample_sprint, [make_issue("A-1", 3, completed=True)])
        mock_service_cls.return_value.get_commitment_metrics.return_value = [stats]

        response = client.get("/api/metrics/7/commitment.csv", headers=jira_headers)

        assert response.status_code == 200
        assert response.mimetype == "text/csv"
        assert "commitment-7.csv" in response.headers["Content-Disposition"]
        rows = list(csv.reader(io.StringIO(response.get_data(as_text=True))))
        assert rows[1][0] == "Sprint Name"
        assert rows[2][:4] == ["Sprint 1", "1/14/2024", "0.0", "N/A"]
