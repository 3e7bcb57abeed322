"""Shared fixtures for sprint commitment metrics tests."""

import os
import sys
from datetime import datetime

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from services.models import Bucket, FieldNames, Issue, JiraConfig, Sprint  # noqa: E402

STORY_POINTS_FIELD = "customfield_10002"
COMMITTED_DATE_FIELD = "customfield_10100"


@pytest.fixture
def field_names():
    return FieldNames(story_points=STORY_POINTS_FIELD, committed_date=COMMITTED_DATE_FIELD)


@pytest.fixture
def jira_config(field_names):
    """Jira settings for testing."""
    return JiraConfig(
        url="https://test.atlassian.net",
        username="test@example.com",
        password="test-token-123",
        fields=field_names,
    )


@pytest.fixture
def jira_headers():
    """Request headers carrying Jira settings."""
    return {
        "X-Jira-Server": "https://test.atlassian.net",
        "X-Jira-Email": "test@example.com",
        "X-Jira-Token": "token123",
        "X-Jira-Story-Points-Field": STORY_POINTS_FIELD,
        "X-Jira-Committed-Date-Field": COMMITTED_DATE_FIELD,
    }


@pytest.fixture
def sample_sprint_record():
    """Raw sprint as returned by the agile API."""
    return {
        "id": 100,
        "name": "Sprint 1",
        "state": "active",
        "startDate": "2024-01-01T00:00:00.000Z",
        "endDate": "2024-01-14T00:00:00.000Z",
        "originBoardId": 7,
        "goal": "Complete feature X"
    }


@pytest.fixture
def sample_sprint():
    return Sprint(
        id=100,
        name="Sprint 1",
        state="active",
        start_date=datetime(2024, 1, 1),
        end_date=datetime(2024, 1, 14),
        origin_board_id=7,
    )


@pytest.fixture
def sample_sprint_records():
    """Sprints of board 7 plus one sprint shared from board 9."""
    return [
        {"id": 101, "name": "Sprint 1", "state": "closed", "originBoardId": 7,
         "startDate": "2024-01-01T00:00:00.000Z", "endDate": "2024-01-14T00:00:00.000Z"},
        {"id": 102, "name": "Sprint 2", "state": "closed", "originBoardId": 7,
         "startDate": "2024-01-15T00:00:00.000Z", "endDate": "2024-01-28T00:00:00.000Z"},
        {"id": 103, "name": "Sprint 3", "state": "active", "originBoardId": 7,
         "startDate": "2024-02-01T00:00:00.000Z", "endDate": "2024-02-14T00:00:00.000Z"},
        {"id": 900, "name": "Other Team Sprint", "state": "closed", "originBoardId": 9,
         "startDate": "2024-01-16T00:00:00.000Z", "endDate": "2024-01-27T00:00:00.000Z"},
        {"id": 104, "name": "Future Sprint", "state": "future", "originBoardId": 7},
    ]


@pytest.fixture
def issue_committed_completed():
    """Committed Project story resolved inside the sprint."""
    return {
        "id": "10001",
        "key": "PROJ-1",
        "fields": {
            "summary": "Implement feature X",
            "issuetype": {"name": "Story", "subtask": False},
            "status": {"name": "Done"},
            "resolution": {"name": "Done"},
            "resolutiondate": "2024-01-10T15:30:00.000+0000",
            "labels": ["Project"],
            STORY_POINTS_FIELD: 3.0,
            COMMITTED_DATE_FIELD: "2024-01-05",
        }
    }


@pytest.fixture
def issue_committed_missed():
    """Committed sustainability story that was not resolved."""
    return {
        "id": "10002",
        "key": "PROJ-2",
        "fields": {
            "summary": "Upgrade database driver",
            "issuetype": {"name": "Story", "subtask": False},
            "status": {"name": "In Progress"},
            "resolution": None,
            "resolutiondate": None,
            "labels": ["sustainability"],
            STORY_POINTS_FIELD: 5.0,
            COMMITTED_DATE_FIELD: "2024-01-12",
        }
    }


@pytest.fixture
def issue_uncommitted_completed():
    """Unlabelled bug without a commitment date, resolved inside the sprint."""
    return {
        "id": "10003",
        "key": "PROJ-3",
        "fields": {
            "summary": "Fix login issue",
            "issuetype": {"name": "Bug", "subtask": False},
            "status": {"name": "Done"},
            "resolution": {"name": "Done"},
            "resolutiondate": "2024-01-08T12:00:00.000+0000",
            "labels": [],
            STORY_POINTS_FIELD: 2.0,
            COMMITTED_DATE_FIELD: None,
        }
    }


@pytest.fixture
def issue_subtask():
    """Subtask, always left out of the stats."""
    return {
        "id": "10004",
        "key": "PROJ-4",
        "fields": {
            "summary": "Write tests",
            "issuetype": {"name": "Sub-task", "subtask": True},
            "status": {"name": "Done"},
            "resolution": {"name": "Done"},
            "resolutiondate": "2024-01-05T10:00:00.000+0000",
            "labels": ["Project"],
            STORY_POINTS_FIELD: 1.0,
            COMMITTED_DATE_FIELD: "2024-01-03",
        }
    }


@pytest.fixture
def sample_issue_records(issue_committed_completed, issue_committed_missed,
                         issue_uncommitted_completed, issue_subtask):
    """Collection of raw issues for a sprint."""
    return [
        issue_committed_completed,
        issue_committed_missed,
        issue_uncommitted_completed,
        issue_subtask,
    ]


@pytest.fixture
def make_issue():
    """Factory for classified issues."""
    def _make_issue(key="PROJ-1", story_points=None, commitment_date=None,
                    completed=False, bucket=Bucket.BUGS_IMPROVEMENTS, summary=None):
        return Issue(
            id=key,
            key=key,
            summary=summary or f"Summary of {key}",
            status="Done" if completed else "In Progress",
            bucket=bucket,
            commitment_date=commitment_date,
            story_points=story_points,
            resolution_date=datetime(2024, 1, 10) if completed else None,
            completed_in_sprint=completed,
        )
    return _make_issue


@pytest.fixture
def app():
    """Create Flask test app."""
    from app import create_app
    app = create_app()
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    """Create Flask test client."""
    return app.test_client()
