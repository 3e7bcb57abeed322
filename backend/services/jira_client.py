"""Jira agile API client.

Each method fetches a single resource or page. Pagination is driven by the
caller (see services.fetcher).
"""

import logging
from typing import Optional

import requests

from services.exceptions import BoardNotFound, FetchFailure
from services.models import JiraConfig

logger = logging.getLogger(__name__)


class JiraClient:
    """Read-only client for the Jira agile REST API."""

    def __init__(self, config: JiraConfig, timeout: int = 30):
        self.server = config.url.rstrip("/")
        self.username = config.username
        self.password = config.password
        self.timeout = timeout

    def _request(self, endpoint: str, params: Optional[dict] = None) -> dict:
        """Make authenticated request to Jira API."""
        url = f"{self.server}/rest/agile/1.0/board{endpoint}"
        try:
            response = requests.get(
                url,
                auth=(self.username, self.password),
                headers={"Accept": "application/json"},
                params=params,
                timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            raise FetchFailure(f"Jira request to {url} failed: {e}") from e
        except ValueError as e:
            raise FetchFailure(f"Jira returned invalid JSON for {url}: {e}") from e

    def fetch_board_id(self, board_name: str) -> int:
        """Look up a board id by name. The first match wins."""
        data = self._request("", params={"name": board_name})
        boards = data.get("values") or []
        if not boards:
            raise BoardNotFound(f"No JIRA board named '{board_name}'")
        if "id" not in boards[0]:
            raise FetchFailure(f"Board record for '{board_name}' has no id")
        return boards[0]["id"]

    def fetch_sprints_page(self, board_id: int, offset: int) -> tuple:
        """Fetch one page of a board's sprints.

        Returns:
            Tuple of (sprint records, is_last)
        """
        data = self._request(f"/{board_id}/sprint", params={"startAt": offset})
        return data.get("values", []), bool(data.get("isLast", True))

    def fetch_active_sprints(self, board_id: int) -> list:
        """Fetch the sprints currently active on a board.

        Sprints shared between boards are returned too, so the result may
        include sprints owned by another board.
        """
        data = self._request(f"/{board_id}/sprint", params={"state": "active"})
        return data.get("values", [])

    def fetch_issues_page(self, board_id: int, sprint_id: int, offset: int,
                          page_size: int, fields: list) -> tuple:
        """Fetch one page of a sprint's issues.

        Returns:
            Tuple of (issue records, total reported by Jira)
        """
        data = self._request(
            f"/{board_id}/sprint/{sprint_id}/issue",
            params={
                "startAt": offset,
                "maxResults": page_size,
                "fields": ",".join(fields),
            }
        )
        try:
            total = int(data["total"])
        except (KeyError, TypeError, ValueError) as e:
            raise FetchFailure(f"Issue page for sprint {sprint_id} has no total") from e
        return data.get("issues", []), total
