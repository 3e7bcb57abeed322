"""Jira connection settings loaded from a .env file."""

import logging
import os

from dotenv import dotenv_values

from services.exceptions import ConfigurationError
from services.models import FieldNames, JiraConfig

logger = logging.getLogger(__name__)

REQUIRED_VARIABLES = (
    "JIRA_URL",
    "JIRA_USERNAME",
    "JIRA_PASSWORD",
    "JIRA_STORY_POINTS_CUSTOM_FIELD",
    "JIRA_COMMITTED_DATE_CUSTOM_FIELD",
)


def load_config(env_path: str = ".env", environ=None) -> JiraConfig:
    """Load Jira settings from a .env file.

    Values already set in the process environment take precedence over the
    file, so credentials can be supplied without writing them to disk.

    Args:
        env_path: Path of the .env file. A missing file is not an error as
            long as the environment provides every variable.
        environ: Mapping used instead of os.environ (for tests).

    Raises:
        ConfigurationError: If any required variable is missing or empty.
    """
    if environ is None:
        environ = os.environ

    values = {}
    if os.path.exists(env_path):
        logger.debug(f"Loading settings from {env_path}")
        values.update({k: v for k, v in dotenv_values(env_path).items() if v})
    else:
        logger.debug(f"No settings file at {env_path}, using environment only")

    for name in REQUIRED_VARIABLES:
        if environ.get(name):
            values[name] = environ[name]

    missing = [name for name in REQUIRED_VARIABLES if not values.get(name)]
    if missing:
        raise ConfigurationError(
            f"Missing required settings: {', '.join(missing)}. "
            f"Be sure that {env_path} contains the appropriate values."
        )

    return JiraConfig(
        url=values["JIRA_URL"].rstrip("/"),
        username=values["JIRA_USERNAME"],
        password=values["JIRA_PASSWORD"],
        fields=FieldNames(
            story_points=values["JIRA_STORY_POINTS_CUSTOM_FIELD"],
            committed_date=values["JIRA_COMMITTED_DATE_CUSTOM_FIELD"],
        ),
    )
