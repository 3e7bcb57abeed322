"""Board and sprint API endpoints."""

from flask import Blueprint, request, jsonify

from app.api.common import error_response, get_date_range, get_jira_config, missing_credentials
from services.exceptions import SprintMetricsError
from services.sprint_metrics import SprintMetricsService

bp = Blueprint("boards", __name__, url_prefix="/api/boards")


@bp.route("/lookup", methods=["GET"])
def lookup_board():
    """Find a board id by name.

    Query params:
        - name: Board name
    """
    config = get_jira_config()
    if config is None:
        return missing_credentials()

    name = request.args.get("name", "").strip()
    if not name:
        return jsonify({"error": "Missing board name"}), 400

    try:
        service = SprintMetricsService(config)
        board_id = service.resolve_board_id(name)
        return jsonify({"data": {"id": board_id, "name": name}})
    except SprintMetricsError as e:
        return error_response(e)


@bp.route("/<int:board_id>/sprints", methods=["GET"])
def get_sprints(board_id):
    """Get the sprints that would be analyzed for a board.

    Query params:
        - since: Optional ISO date. Without it the active sprint is returned.
        - until: Optional ISO date, only valid together with since
    """
    config = get_jira_config()
    if config is None:
        return missing_credentials()

    try:
        since, until = get_date_range()
        service = SprintMetricsService(config)
        sprints = service.get_sprints(board_id, since, until)
        return jsonify({"data": [sprint.to_record() for sprint in sprints]})
    except SprintMetricsError as e:
        return error_response(e)
