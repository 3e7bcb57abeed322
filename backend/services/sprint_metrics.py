"""Sprint commitment metrics service."""

import logging
from datetime import date, datetime
from typing import Optional

from services.classifier import IssueClassifier, parse_sprint
from services.commitment_stats import calculate_sprint_stats
from services.dump_store import SPRINTS_KEY
from services.exceptions import ConfigurationError
from services.fetcher import DEFAULT_PAGE_SIZE, PaginationFetcher
from services.jira_client import JiraClient
from services.models import JiraConfig
from services.sprint_selector import SprintSelector, validate_range

logger = logging.getLogger(__name__)


class SprintMetricsService:
    """Service for calculating sprint commitment metrics from Jira data.

    Args:
        config: Jira connection settings and custom field names.
        dump_store: DumpStore used by the dump and offline modes.
        dump: Save every fetched sprint list and issue list to the dump store.
        offline: Replay the dump store instead of querying Jira.
        client: Fetch capability to use instead of a JiraClient built from
            ``config``.
    """

    def __init__(self, config: JiraConfig, dump_store=None, dump: bool = False,
                 offline: bool = False, client=None, page_size: int = DEFAULT_PAGE_SIZE):
        if (dump or offline) and dump_store is None:
            raise ValueError("dump and offline modes need a dump store")

        self.config = config
        self.client = client if client is not None else JiraClient(config)
        self.dump_store = dump_store
        self.dump = dump
        self.offline = offline
        self.fetcher = PaginationFetcher(self.client, config.fields, page_size=page_size)
        self.selector = SprintSelector(self.client, self.fetcher)
        self.classifier = IssueClassifier(config.fields)

    def resolve_board_id(self, board: str) -> int:
        """Use a numeric board argument as the id, otherwise look the name up."""
        board = str(board)
        if board.isdigit():
            return int(board)
        if self.offline:
            raise ConfigurationError("Offline mode needs a numeric board id.")
        board_id = self.client.fetch_board_id(board)
        logger.info(f"Board '{board}' has id {board_id}")
        return board_id

    def get_sprints(self, board_id: int, since: Optional[datetime] = None,
                    until: Optional[datetime] = None, today: Optional[date] = None) -> list:
        """Select the sprints to analyze, or replay the dumped selection."""
        validate_range(since, until)

        if self.offline:
            return [parse_sprint(r) for r in self.dump_store.load_cached(SPRINTS_KEY)]

        sprints = self.selector.select(board_id, since, until, today=today)
        if self.dump:
            self.dump_store.save_cached(SPRINTS_KEY, [s.to_record() for s in sprints])
        return sprints

    def get_sprint_issues(self, board_id: int, sprint) -> list:
        """Get the classified issues of a sprint, subtasks excluded."""
        if self.offline:
            records = self.dump_store.load_cached(sprint.id)
        else:
            records = self.fetcher.fetch_sprint_issues(board_id, sprint.id)
            if self.dump:
                self.dump_store.save_cached(sprint.id, records)

        issues = self.classifier.classify_all(records, sprint)
        logger.info(f"{sprint.name}: {len(issues)} issues ({len(records) - len(issues)} subtasks skipped)")
        return issues

    def get_stats(self, board_id: int, sprint):
        return calculate_sprint_stats(sprint, self.get_sprint_issues(board_id, sprint))

    def get_commitment_metrics(self, board, since: Optional[datetime] = None,
                               until: Optional[datetime] = None,
                               today: Optional[date] = None) -> list:
        """Compute SprintStats for every selected sprint of a board.

        Args:
            board: Board id, or board name to look up.
            since: Select sprints starting on or after this date. Without it
                the active sprint is used.
            until: Select sprints ending on or before this date (defaults to
                tomorrow). Only valid together with ``since``.

        Returns:
            One SprintStats per sprint, oldest sprint first
        """
        validate_range(since, until)
        board_id = self.resolve_board_id(board)
        sprints = self.get_sprints(board_id, since, until, today=today)
        return [self.get_stats(board_id, sprint) for sprint in sprints]
