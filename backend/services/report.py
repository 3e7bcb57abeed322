"""Rendering of sprint statistics as console text, CSV and JSON-ready dicts."""

import csv
from typing import Optional

from services.models import Bucket

NOT_AVAILABLE = "N/A"

CSV_METRICS = ["Stories Attempted", "Stories Completed", "Points Attempted", "Points Completed"]
CSV_LEADING_COLUMNS = ["Sprint Name", "Sprint Ending", "Commitment %", "Commitment Delivery %"]
CSV_GROUPS = ["Total", "Committed", "Project", "Bugs / Improvements", "Sustainability"]

BUCKET_ORDER = (Bucket.PROJECT, Bucket.BUGS_IMPROVEMENTS, Bucket.SUSTAINABILITY)


def format_number(value) -> str:
    """Format points without a trailing .0 for whole numbers."""
    if value is None:
        return "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_ratio(value: Optional[float]) -> str:
    return NOT_AVAILABLE if value is None else str(value)


def format_csv_date(value) -> str:
    """M/D/YYYY without zero padding."""
    return f"{value.month}/{value.day}/{value.year}"


def _block_lines(block) -> list:
    return [
        f"{block.title}:",
        f"  {len(block.attempted_stories)} Stories Attempted",
        f"  {len(block.completed_stories)} Stories Completed",
        f"  {format_number(block.attempted_points)} Points Attempted",
        f"  {format_number(block.completed_points)} Points Completed",
    ]


def format_missed(issue) -> str:
    # Unestimated issues leave the points blank
    points = "" if issue.story_points is None else format_number(issue.story_points)
    return (
        f"{issue.commitment_date.date().isoformat()} - "
        f"{points} pts - {issue.key} - {issue.summary}"
    )


def format_summary(stats) -> str:
    """Console summary of one sprint's statistics."""
    sprint = stats.sprint
    lines = ["-" * 70]
    lines.append(f"{sprint.name} - {sprint.start_date.date()} - {sprint.end_date.date()}")

    lines.extend(_block_lines(stats.total))
    lines.append(f"  Commitment Percentage {format_ratio(stats.total.commitment_percentage)}")
    lines.append("")

    lines.append("-" * 40)
    commitment = stats.committed.commitment
    lines.extend(_block_lines(stats.committed))
    lines.append(f"  {format_ratio(commitment.accuracy)}% Accuracy")
    if commitment.missed:
        lines.append("  Missed:")
        lines.extend(f"    {format_missed(issue)}" for issue in commitment.missed)
    lines.append("")

    lines.extend(_block_lines(stats.uncommitted))
    lines.append("")

    lines.append("-" * 40)
    for bucket in BUCKET_ORDER:
        lines.extend(_block_lines(stats.buckets[bucket]))
        lines.append("")

    return "\n".join(lines)


def _csv_metrics(block) -> list:
    return [
        len(block.attempted_stories),
        len(block.completed_stories),
        format_number(block.attempted_points),
        format_number(block.completed_points),
    ]


def csv_rows(stats_list: list) -> list:
    """Header rows plus one row per sprint, most recent sprint first.

    ``stats_list`` is expected oldest first, as the sprint selector returns it.
    """
    padding = [""] * (len(CSV_METRICS) - 1)
    group_header = [""] * len(CSV_LEADING_COLUMNS)
    for name in CSV_GROUPS:
        group_header += [name] + padding

    rows = [group_header, CSV_LEADING_COLUMNS + CSV_METRICS * len(CSV_GROUPS)]

    for stats in reversed(stats_list):
        commitment = stats.committed.commitment
        row = [
            stats.sprint.name,
            format_csv_date(stats.sprint.end_date),
            format_ratio(commitment.percent),
            format_ratio(commitment.accuracy),
        ]
        for block in (stats.total, stats.committed,
                      stats.buckets[Bucket.PROJECT],
                      stats.buckets[Bucket.BUGS_IMPROVEMENTS],
                      stats.buckets[Bucket.SUSTAINABILITY]):
            row += _csv_metrics(block)
        rows.append(row)

    return rows


def write_csv_rows(stream, stats_list: list):
    writer = csv.writer(stream)
    writer.writerows(csv_rows(stats_list))


def write_csv(path: str, stats_list: list):
    """Write the CSV report to ``path`` as UTF-8."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        write_csv_rows(f, stats_list)


def _date(value) -> Optional[str]:
    return value.isoformat() if value else None


def issue_to_dict(issue) -> dict:
    return {
        "id": issue.id,
        "key": issue.key,
        "summary": issue.summary,
        "status": issue.status,
        "resolution": issue.resolution,
        "bucket": issue.bucket.value,
        "storyPoints": issue.story_points,
        "commitmentDate": _date(issue.commitment_date),
        "resolutionDate": _date(issue.resolution_date),
        "completedInSprint": issue.completed_in_sprint,
        "missed": issue.missed,
    }


def block_to_dict(block) -> dict:
    return {
        "title": block.title,
        "stories": {
            "attempted": len(block.attempted_stories),
            "completed": len(block.completed_stories),
        },
        "points": {
            "attempted": block.attempted_points,
            "completed": block.completed_points,
        },
    }


def stats_to_dict(stats) -> dict:
    """JSON-ready form of a sprint's statistics."""
    total = block_to_dict(stats.total)
    total["commitmentPercentage"] = stats.total.commitment_percentage

    commitment = stats.committed.commitment
    committed = block_to_dict(stats.committed)
    committed["commitment"] = {
        "percent": commitment.percent,
        "accuracy": commitment.accuracy,
        "missed": [issue_to_dict(issue) for issue in commitment.missed],
    }

    return {
        "sprint": stats.sprint.to_record(),
        "total": total,
        "committed": committed,
        "uncommitted": block_to_dict(stats.uncommitted),
        "buckets": {
            bucket.value: block_to_dict(stats.buckets[bucket]) for bucket in BUCKET_ORDER
        },
    }
