"""Paginated retrieval of sprints and issues."""

import logging

from services.exceptions import ConfigurationError
from services.models import FieldNames

logger = logging.getLogger(__name__)

BASE_ISSUE_FIELDS = [
    "id", "key", "created", "updated", "summary", "status",
    "resolution", "resolutiondate", "labels", "issuetype"
]

# Upper bound used until Jira reports the real total
SPECULATIVE_TOTAL = 8000
DEFAULT_PAGE_SIZE = 500


def issue_query_fields(field_names: FieldNames) -> list:
    """Fields requested for every issue page."""
    return BASE_ISSUE_FIELDS + [field_names.story_points, field_names.committed_date]


def _dedupe(records: list) -> list:
    """Drop records whose id was already seen, keeping the first one."""
    seen = set()
    unique = []
    for record in records:
        record_id = record.get("id")
        if record_id is not None and record_id in seen:
            continue
        seen.add(record_id)
        unique.append(record)
    return unique


class PaginationFetcher:
    """Collects every page of a board's sprints or a sprint's issues.

    Args:
        client: Object providing fetch_sprints_page and fetch_issues_page
            (normally a JiraClient).
        field_names: Custom field ids requested with every issue page.
        page_size: Number of issues requested per page.
    """

    def __init__(self, client, field_names: FieldNames,
                 page_size: int = DEFAULT_PAGE_SIZE):
        if page_size < 1:
            raise ConfigurationError(f"Page size must be at least 1, got {page_size}")
        self.client = client
        self.field_names = field_names
        self.page_size = page_size

    def fetch_all_sprints(self, board_id: int) -> list:
        """Fetch every sprint record of a board, following the isLast flag."""
        all_sprints = []
        start_at = 0
        is_last = False

        while not is_last:
            sprints, is_last = self.client.fetch_sprints_page(board_id, start_at)
            logger.debug(f"Board {board_id}: {len(sprints)} sprints at offset {start_at}")
            all_sprints.extend(sprints)
            start_at += len(sprints)

        return _dedupe(all_sprints)

    def fetch_sprint_issues(self, board_id: int, sprint_id: int) -> list:
        """Fetch every issue record of a sprint.

        Pages are requested until the offset reaches the total reported by
        the first page. Empty pages do not stop the loop.
        """
        fields = issue_query_fields(self.field_names)
        all_issues = []
        start_at = 0
        total = SPECULATIVE_TOTAL
        reported_total = False

        while start_at < total:
            issues, page_total = self.client.fetch_issues_page(
                board_id, sprint_id, start_at, self.page_size, fields
            )
            if not reported_total:
                total = page_total
                reported_total = True
            logger.debug(
                f"Sprint {sprint_id}: {len(issues)} issues at offset {start_at} of {total}"
            )
            all_issues.extend(issues)
            start_at += self.page_size

        return _dedupe(all_issues)
