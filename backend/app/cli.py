"""Command-line interface for sprint commitment metrics."""

import argparse
import logging
import sys
from datetime import datetime

from services.config import load_config
from services.dump_store import DumpStore
from services.exceptions import SprintMetricsError
from services.report import format_summary, write_csv
from services.sprint_metrics import SprintMetricsService

logger = logging.getLogger(__name__)

DESCRIPTION = """\
Generate Sprint Metrics around committed and uncommitted tickets. Tickets need
a custom field holding the date the team committed to complete them, and a
story points field.

The .env file must define JIRA_URL, JIRA_USERNAME, JIRA_PASSWORD,
JIRA_COMMITTED_DATE_CUSTOM_FIELD and JIRA_STORY_POINTS_CUSTOM_FIELD.
"""


def parse_date_arg(value: str) -> datetime:
    try:
        return datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD")


def setup_logging(*, debug: bool = False) -> None:
    """Configure logging for a report run."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def parse_arguments(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="sprint-metrics",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--board", "-b", required=True,
                        help="JIRA board name or numeric board id")
    parser.add_argument("--active", "-a", action="store_true",
                        help="Generate stats for the active sprint (default)")
    parser.add_argument("--since", "-s", type=parse_date_arg,
                        help="Generate stats for sprints starting on or after YYYY-MM-DD")
    parser.add_argument("--until", "-u", type=parse_date_arg,
                        help="Generate stats for sprints ending on or before YYYY-MM-DD")
    parser.add_argument("--file", "-f",
                        help="Output file path for CSV data. Not written if omitted")
    parser.add_argument("--environment", "-e", default=".env",
                        help="Path of the .env file with the JIRA settings (default: .env)")
    parser.add_argument("--dump", action="store_true",
                        help="Save fetched JSON data for later use with --offline")
    parser.add_argument("--offline", action="store_true",
                        help="Use the dump files instead of querying JIRA")
    parser.add_argument("--dump-dir", default=".",
                        help="Directory of the dump files (default: current directory)")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug output")

    args = parser.parse_args(argv)

    if args.active and args.since:
        parser.error("--active cannot be combined with --since")
    if args.dump and args.offline:
        parser.error("--dump cannot be combined with --offline")

    return args


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging(debug=args.debug)
    logger.debug(f"Arguments: {vars(args)}")

    try:
        config = load_config(args.environment)
        service = SprintMetricsService(
            config,
            dump_store=DumpStore(args.dump_dir),
            dump=args.dump,
            offline=args.offline,
        )
        sprints_stats = service.get_commitment_metrics(args.board, since=args.since, until=args.until)
    except SprintMetricsError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    for stats in sprints_stats:
        print(format_summary(stats))

    if args.file:
        write_csv(args.file, sprints_stats)
        logger.info(f"Wrote CSV data for {len(sprints_stats)} sprints to {args.file}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
