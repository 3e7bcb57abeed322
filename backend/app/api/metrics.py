"""Sprint commitment metrics API endpoints."""

import io

from flask import Blueprint, Response, jsonify

from app.api.common import error_response, get_date_range, get_jira_config, missing_credentials
from services.exceptions import SprintMetricsError
from services.report import stats_to_dict, write_csv_rows
from services.sprint_metrics import SprintMetricsService

bp = Blueprint("metrics", __name__, url_prefix="/api/metrics")


def _compute(board_id):
    config = get_jira_config()
    if config is None:
        return None
    since, until = get_date_range()
    service = SprintMetricsService(config)
    return service.get_commitment_metrics(board_id, since=since, until=until)


@bp.route("/<int:board_id>/commitment", methods=["GET"])
def get_commitment(board_id):
    """Get commitment metrics for the active sprint or a date range.

    Query params:
        - since: Optional ISO date (e.g., "2024-01-01")
        - until: Optional ISO date (e.g., "2024-03-31")

    Returns:
        - Total, committed, uncommitted and per-bucket stories and points
        - Commitment percentage and accuracy per sprint
        - Committed tickets missed in each sprint
    """
    try:
        sprints_stats = _compute(board_id)
    except SprintMetricsError as e:
        return error_response(e)

    if sprints_stats is None:
        return missing_credentials()

    return jsonify({"data": [stats_to_dict(stats) for stats in sprints_stats]})


@bp.route("/<int:board_id>/commitment.csv", methods=["GET"])
def get_commitment_csv(board_id):
    """Download commitment metrics as CSV, most recent sprint first."""
    try:
        sprints_stats = _compute(board_id)
    except SprintMetricsError as e:
        return error_response(e)

    if sprints_stats is None:
        return missing_credentials()

    output = io.StringIO()
    write_csv_rows(output, sprints_stats)
    return Response(
        output.getvalue(),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename=commitment-{board_id}.csv"}
    )
