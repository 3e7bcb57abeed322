"""Normalization and classification of raw Jira records."""

from datetime import datetime, timezone
from typing import Optional

from services.exceptions import FetchFailure
from services.models import Bucket, FieldNames, Issue, Sprint

# Checked in order; the first label found decides the bucket
BUCKET_LABELS = (
    ("Project", Bucket.PROJECT),
    ("sustainability", Bucket.SUSTAINABILITY),
)
DEFAULT_BUCKET = Bucket.BUGS_IMPROVEMENTS

# Jira formats: "2024-10-31T12:11:56.289-0400", "2024-10-31T12:11:56.289Z", "2024-10-31"
DATE_FORMATS = [
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d",
]


def parse_date(date_str: Optional[str]) -> Optional[datetime]:
    """Parse a Jira date or datetime string.

    Values carrying a zone offset are converted to UTC and returned naive,
    so every parsed value can be compared with every other one. Values
    without an offset are kept as they are.

    Raises:
        FetchFailure: If the string matches none of the Jira formats.
    """
    if date_str is None or date_str == "":
        return None

    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(date_str, fmt)
        except (TypeError, ValueError):
            continue
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed

    raise FetchFailure(f"Unrecognized date value: {date_str!r}")


def assign_bucket(labels) -> Bucket:
    labels = labels or []
    for label, bucket in BUCKET_LABELS:
        if label in labels:
            return bucket
    return DEFAULT_BUCKET


def is_committed(issue: Issue, sprint: Sprint) -> bool:
    """An issue is committed when its commitment date falls by the sprint end."""
    return (
        issue.commitment_date is not None
        and sprint.end_date is not None
        and issue.commitment_date <= sprint.end_date
    )


def is_subtask(record: dict) -> bool:
    try:
        return record["fields"]["issuetype"].get("subtask") is True
    except (KeyError, TypeError, AttributeError) as e:
        raise FetchFailure(f"Issue {record.get('key', '?')} has no issue type") from e


def parse_sprint(record: dict) -> Sprint:
    """Build a Sprint from a raw Jira sprint record."""
    try:
        sprint = Sprint(
            id=record["id"],
            name=record["name"],
            state=record.get("state"),
            start_date=parse_date(record.get("startDate")),
            end_date=parse_date(record.get("endDate")),
            origin_board_id=record.get("originBoardId"),
        )
    except (KeyError, TypeError) as e:
        raise FetchFailure(f"Malformed sprint record: {record!r}") from e

    if sprint.start_date and sprint.end_date and sprint.start_date > sprint.end_date:
        raise FetchFailure(f"Sprint {sprint.name} ends before it starts")
    return sprint


class IssueClassifier:
    """Turns raw Jira issue records into classified Issues for a sprint."""

    def __init__(self, field_names: FieldNames):
        self.field_names = field_names

    def _story_points(self, fields: dict, key: str) -> Optional[float]:
        points = fields.get(self.field_names.story_points)
        if points is None:
            return None
        if isinstance(points, bool) or not isinstance(points, (int, float)):
            raise FetchFailure(f"Issue {key} has non-numeric story points: {points!r}")
        return points

    def classify(self, record: dict, sprint: Sprint) -> Optional[Issue]:
        """Classify one issue record against a sprint.

        Returns:
            The classified Issue, or None for subtasks.

        Raises:
            FetchFailure: If the record lacks identifying fields or holds
                malformed values.
        """
        if is_subtask(record):
            return None

        try:
            fields = record["fields"]
            key = record["key"]
            resolution = fields.get("resolution")
            issue = Issue(
                id=record["id"],
                key=key,
                summary=fields["summary"],
                status=fields["status"]["name"],
                resolution=resolution["name"] if resolution else None,
                commitment_date=parse_date(fields.get(self.field_names.committed_date)),
                story_points=self._story_points(fields, key),
                bucket=assign_bucket(fields.get("labels")),
                resolution_date=parse_date(fields.get("resolutiondate")),
            )
        except (KeyError, TypeError) as e:
            raise FetchFailure(
                f"Malformed issue record {record.get('key', '?')}: missing {e}"
            ) from e

        issue.completed_in_sprint = (
            issue.resolution_date is not None
            and sprint.end_date is not None
            and issue.resolution_date <= sprint.end_date
        )
        return issue

    def classify_all(self, records: list, sprint: Sprint) -> list:
        """Classify records, leaving out subtasks."""
        issues = []
        for record in records:
            issue = self.classify(record, sprint)
            if issue is not None:
                issues.append(issue)
        return issues
