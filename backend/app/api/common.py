"""Request helpers shared by the API blueprints."""

from datetime import datetime

from flask import current_app, jsonify, request

from services.exceptions import (
    BoardNotFound,
    ConfigurationError,
    FetchFailure,
    NoActiveSprint,
)
from services.models import FieldNames, JiraConfig


def get_jira_config():
    """Build Jira settings from request headers.

    Requires headers:
        - X-Jira-Server: Jira server URL
        - X-Jira-Email: User's Jira email
        - X-Jira-Token: Jira API token
        - X-Jira-Story-Points-Field: Story points custom field id
        - X-Jira-Committed-Date-Field: Committed date custom field id

    Returns:
        JiraConfig, or None when any header is missing
    """
    server = request.headers.get("X-Jira-Server", "").rstrip("/")
    email = request.headers.get("X-Jira-Email")
    token = request.headers.get("X-Jira-Token")
    story_points = request.headers.get("X-Jira-Story-Points-Field")
    committed_date = request.headers.get("X-Jira-Committed-Date-Field")

    if not all([server, email, token, story_points, committed_date]):
        return None

    return JiraConfig(
        url=server,
        username=email,
        password=token,
        fields=FieldNames(story_points=story_points, committed_date=committed_date),
    )


def missing_credentials():
    return jsonify({"error": "Missing Jira credentials or field names in headers"}), 401


def _parse_date_param(name):
    value = request.args.get(name)
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise ConfigurationError(f"Invalid {name} date '{value}', expected YYYY-MM-DD")


def get_date_range():
    """Get the optional since/until range from query params.

    Query params:
        - since: ISO date (e.g., "2024-01-01")
        - until: ISO date (e.g., "2024-03-31")

    Returns:
        Tuple of (since, until) datetimes, either can be None
    """
    return _parse_date_param("since"), _parse_date_param("until")


def error_response(error):
    """Map a service error to a JSON error response."""
    if isinstance(error, ConfigurationError):
        status = 400
    elif isinstance(error, (NoActiveSprint, BoardNotFound)):
        status = 404
    elif isinstance(error, FetchFailure):
        status = 502
    else:
        status = 500
    current_app.logger.warning(f"Request failed ({status}): {error}")
    return jsonify({"error": str(error)}), status
