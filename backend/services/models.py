"""Data models for sprint commitment metrics.

Sprints and issues are normalized from raw Jira records by the classifier.
Stats blocks are built by the aggregator and never change afterwards.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class Bucket(str, Enum):
    """Work category of an issue, derived from its labels."""

    PROJECT = "project"
    SUSTAINABILITY = "sustainability"
    BUGS_IMPROVEMENTS = "bugs_improvements"

    @property
    def display_name(self) -> str:
        return BUCKET_TITLES[self]


BUCKET_TITLES = {
    Bucket.PROJECT: "Project",
    Bucket.BUGS_IMPROVEMENTS: "Bugs / Improvements",
    Bucket.SUSTAINABILITY: "Sustainability",
}


@dataclass(frozen=True)
class FieldNames:
    """Jira custom field ids for story points and the committed date."""

    story_points: str
    committed_date: str


@dataclass(frozen=True)
class JiraConfig:
    """Connection settings for a Jira instance."""

    url: str
    username: str
    password: str
    fields: FieldNames


@dataclass(frozen=True)
class Sprint:
    id: int
    name: str
    state: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    origin_board_id: Optional[int] = None

    def to_record(self) -> dict:
        """Render the sprint in the shape Jira returns it."""
        return {
            "id": self.id,
            "name": self.name,
            "state": self.state,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "originBoardId": self.origin_board_id,
        }


@dataclass
class Issue:
    id: str
    key: str
    summary: str
    status: str
    bucket: Bucket
    resolution: Optional[str] = None
    commitment_date: Optional[datetime] = None
    story_points: Optional[float] = None
    resolution_date: Optional[datetime] = None
    completed_in_sprint: bool = False
    missed: bool = False


@dataclass
class StatsBlock:
    """Attempted and completed stories and points for a set of issues."""

    title: str
    attempted_stories: list = field(default_factory=list)
    completed_stories: list = field(default_factory=list)
    attempted_points: float = 0
    completed_points: float = 0


@dataclass
class TotalStatsBlock(StatsBlock):
    # None when the sprint has no issues
    commitment_percentage: Optional[float] = None


@dataclass
class CommitmentStats:
    percent: Optional[float] = None
    accuracy: Optional[float] = None
    missed: list = field(default_factory=list)


@dataclass
class CommittedStatsBlock(StatsBlock):
    commitment: CommitmentStats = field(default_factory=CommitmentStats)


@dataclass
class SprintStats:
    sprint: Sprint
    total: TotalStatsBlock
    committed: CommittedStatsBlock
    uncommitted: StatsBlock
    buckets: dict = field(default_factory=dict)
