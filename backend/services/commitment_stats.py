"""Per-sprint commitment statistics."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from services.classifier import is_committed
from services.models import (
    Bucket,
    CommitmentStats,
    CommittedStatsBlock,
    SprintStats,
    StatsBlock,
    TotalStatsBlock,
)


def get_points(issues: list) -> float:
    """Sum story points, counting issues without points as 0."""
    return sum(issue.story_points or 0 for issue in issues)


def percentage(part: int, whole: int) -> Optional[float]:
    """Percentage rounded half-up to 2 decimals.

    Returns:
        None when ``whole`` is 0, since the ratio is undefined.
    """
    if whole == 0:
        return None
    value = Decimal(part) * 100 / Decimal(whole)
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _fill_block(block: StatsBlock, issues: list) -> StatsBlock:
    completed = [issue for issue in issues if issue.completed_in_sprint]
    block.attempted_stories = list(issues)
    block.completed_stories = completed
    block.attempted_points = get_points(issues)
    block.completed_points = get_points(completed)
    return block


def generate_stats(title: str, issues: list) -> StatsBlock:
    return _fill_block(StatsBlock(title=title), issues)


def missed_sort_key(issue):
    return (issue.commitment_date, issue.key)


def calculate_sprint_stats(sprint, issues: list) -> SprintStats:
    """Build the statistics for one sprint from its classified issues.

    Marks every committed issue as missed when it was not completed within
    the sprint.
    """
    committed = []
    uncommitted = []
    for issue in issues:
        if is_committed(issue, sprint):
            committed.append(issue)
        else:
            uncommitted.append(issue)

    for issue in committed:
        issue.missed = not issue.completed_in_sprint

    commitment_percent = percentage(len(committed), len(issues))

    total = _fill_block(TotalStatsBlock(title="Total"), issues)
    total.commitment_percentage = commitment_percent

    committed_block = _fill_block(CommittedStatsBlock(title="Committed"), committed)
    committed_block.commitment = CommitmentStats(
        percent=commitment_percent,
        accuracy=percentage(len(committed_block.completed_stories), len(committed)),
        missed=sorted((i for i in committed if i.missed), key=missed_sort_key),
    )

    buckets = {
        bucket: generate_stats(
            bucket.display_name, [i for i in issues if i.bucket == bucket]
        )
        for bucket in (Bucket.PROJECT, Bucket.BUGS_IMPROVEMENTS, Bucket.SUSTAINABILITY)
    }

    return SprintStats(
        sprint=sprint,
        total=total,
        committed=committed_block,
        uncommitted=generate_stats("Uncommitted", uncommitted),
        buckets=buckets,
    )
