"""Selection of the sprints to analyze for a board."""

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from services.classifier import parse_sprint
from services.exceptions import ConfigurationError, FetchFailure, NoActiveSprint

logger = logging.getLogger(__name__)


def validate_range(since: Optional[datetime], until: Optional[datetime]):
    """Reject selection bounds that cannot be used together."""
    if until is not None and since is None:
        raise ConfigurationError("Must supply a 'since' date if using 'until'.")
    if since is not None and until is not None and until < since:
        raise ConfigurationError("The 'until' date must not be before the 'since' date.")


def default_until(today: Optional[date] = None) -> datetime:
    """Midnight at the start of tomorrow."""
    today = today or date.today()
    tomorrow = today + timedelta(days=1)
    return datetime(tomorrow.year, tomorrow.month, tomorrow.day)


def filter_sprints_in_range(sprints: list, board_id: int,
                            since: datetime, until: datetime) -> list:
    """Keep the board's own sprints that start and end within the range.

    Returns:
        Matching sprints sorted by start date
    """
    selected = [
        sprint for sprint in sprints
        if sprint.origin_board_id == board_id
        and sprint.start_date is not None
        and sprint.end_date is not None
        and sprint.start_date >= since
        and sprint.end_date <= until
    ]
    selected.sort(key=lambda s: s.start_date)
    return selected


class SprintSelector:
    """Chooses the active sprint or the sprints in a date range.

    Args:
        client: Object providing fetch_active_sprints (normally a JiraClient).
        fetcher: PaginationFetcher used to list every sprint of a board.
    """

    def __init__(self, client, fetcher):
        self.client = client
        self.fetcher = fetcher

    def active_sprint(self, board_id: int):
        """Return the first active sprint owned by the board."""
        for record in self.client.fetch_active_sprints(board_id):
            sprint = parse_sprint(record)
            if sprint.origin_board_id == board_id:
                if sprint.start_date is None or sprint.end_date is None:
                    raise FetchFailure(f"Active sprint {sprint.name} has no start or end date")
                logger.info(f"Active sprint for board {board_id}: {sprint.name}")
                return sprint

        raise NoActiveSprint(f"No active sprint found for board {board_id}")

    def sprints_between(self, board_id: int, since: datetime,
                        until: Optional[datetime] = None, today: Optional[date] = None) -> list:
        """Return the board's sprints within [since, until], oldest first."""
        validate_range(since, until)
        if until is None:
            until = default_until(today)

        sprints = [parse_sprint(r) for r in self.fetcher.fetch_all_sprints(board_id)]
        selected = filter_sprints_in_range(sprints, board_id, since, until)
        logger.info(
            f"Selected {len(selected)} of {len(sprints)} sprints for board {board_id} "
            f"between {since.date()} and {until.date()}"
        )
        return selected

    def select(self, board_id: int, since: Optional[datetime] = None,
               until: Optional[datetime] = None, today: Optional[date] = None) -> list:
        """Select sprints in range mode when ``since`` is set, else active mode."""
        validate_range(since, until)
        if since is not None:
            return self.sprints_between(board_id, since, until, today=today)
        return [self.active_sprint(board_id)]
