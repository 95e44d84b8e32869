"""Sync recent Strava history and optionally generate today's workout."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from run_planner.config import get_settings
from run_planner.logging_config import configure_logging
from run_planner.services.activity_summarizer import build_summary
from run_planner.services.strava_service import StravaError, StravaService
from run_planner.services.workout_generator import WorkoutGenerator


logger = logging.getLogger("scripts.sync_history")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Strava history sync and workout generation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print the six-week training summary
  python scripts/sync_history.py

  # Summary plus today's workout, preferring intervals
  python scripts/sync_history.py --generate --quality-type intervals \\
      --goal "Half marathon on 2026-11-29" --plan "Week 9, day 3 of a 12-week plan."
        """
    )
    parser.add_argument(
        "--lookback-days",
        type=int,
        help="History window in days (default from STRAVA_LOOKBACK_DAYS)"
    )
    parser.add_argument(
        "--generate",
        action="store_true",
        help="Also generate today's workout from the synced summary"
    )
    parser.add_argument("--goal", default="General fitness", help="Race goal passed to the model")
    parser.add_argument("--plan", default="Base building", help="Plan timing passed to the model")
    parser.add_argument("--preferences", default="", help="Free-text preferences")
    parser.add_argument(
        "--quality-type",
        choices=["intervals", "tempo", "long run"],
        default="tempo",
        help="Preferred quality session type"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show detailed output"
    )
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> dict:
    """Fetch, summarise and optionally plan; returns the JSON-ready result."""

    activities = StravaService().fetch_recent_activities(lookback_days=args.lookback_days)
    summary = build_summary(activities)
    result: dict = {
        "summary": summary.model_dump(by_alias=True),
        "activitiesCount": len(activities),
    }

    if args.generate:
        response = WorkoutGenerator().generate(
            args.goal,
            args.plan,
            summary,
            preferences=args.preferences,
            preferred_quality_type=args.quality_type,
        )
        result.update(response.model_dump(by_alias=True))

    return result


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    configure_logging()
    settings = get_settings()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("run_planner.services").setLevel(logging.DEBUG)
        logger.info("Model provider: %s", settings.llm_provider)

    try:
        result = run(args)
    except StravaError as err:
        logger.error("❌ Strava sync failed (HTTP %s): %s", err.status_code, err)
        sys.exit(1)

    print(json.dumps(result, indent=2))
    if result.get("source") == "fallback":
        logger.info("ℹ️  Workout produced by the rule-based fallback planner")


if __name__ == "__main__":
    main()
