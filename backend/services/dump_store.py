"""Local dump files for replaying Jira data offline.

Sprints are stored in ``sprints.json`` and each sprint's raw issue records in
``issues.<sprint id>.json``.
"""

import json
import logging
import os

from services.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SPRINTS_KEY = "sprints"


class DumpStore:
    """Reads and writes captured Jira records in a directory."""

    def __init__(self, directory: str = "."):
        self.directory = directory

    def path_for(self, key) -> str:
        if key == SPRINTS_KEY:
            filename = f"{SPRINTS_KEY}.json"
        else:
            filename = f"issues.{key}.json"
        return os.path.join(self.directory, filename)

    def load_cached(self, key) -> list:
        """Load records previously saved under ``key``.

        Raises:
            ConfigurationError: If nothing was dumped for ``key``.
        """
        path = self.path_for(key)
        if not os.path.exists(path):
            raise ConfigurationError(
                f"No dump file {path}; run with --dump first to capture it"
            )
        logger.debug(f"Replaying {path}")
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def save_cached(self, key, records: list):
        """Persist records under ``key``, replacing any earlier dump."""
        if not os.path.exists(self.directory):
            os.makedirs(self.directory)
        path = self.path_for(key)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2)
        logger.info(f"Dumped {len(records)} records to {path}")
