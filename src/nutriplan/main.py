#!/usr/bin/env python3
"""
Command-line entry point for Nutriplan.

Reads profiles and stored plans from JSON files and prints JSON results.
"""

import argparse
import json
import logging
import sys
from datetime import date
from typing import Any, Optional

from nutriplan.config import configure_logging, get_settings
from nutriplan.data.catalog import Catalog
from nutriplan.data.models import DatedPlan, Profile
from nutriplan.errors import NutriplanError
from nutriplan.planner import MealPlanner
from nutriplan.targets import calculate_targets

logger = logging.getLogger(__name__)


def _read_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _print_json(data: Any):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _parse_date(value: Optional[str]) -> date:
    return date.fromisoformat(value) if value else date.today()


def cmd_plan(planner: MealPlanner, args) -> int:
    profile = Profile.from_dict(_read_json(args.profile))
    plan = planner.plan_day(profile)
    if plan is None:
        print("❌ Error: profile has no calorie target", file=sys.stderr)
        return 1
    _print_json(plan.to_dict())
    return 0


def cmd_week(planner: MealPlanner, args) -> int:
    profile = Profile.from_dict(_read_json(args.profile))
    existing = []
    if args.plans:
        existing = [DatedPlan.from_dict(p).plan_date for p in _read_json(args.plans)]

    if not profile.can_plan:
        print("❌ Error: profile has no calorie target", file=sys.stderr)
        return 1
    plans = planner.fill_week(profile, existing, start=_parse_date(args.start), days=args.days)
    _print_json([DatedPlan(d, p).to_dict() for d, p in plans.items()])
    return 0


def cmd_prep(planner: MealPlanner, args) -> int:
    stored = [DatedPlan.from_dict(p) for p in _read_json(args.plans)]
    session = planner.prep_session(stored, start=_parse_date(args.start), days=args.days)
    _print_json({
        "dates": session["dates"],
        "components": [g.to_dict() for g in session["manifest"]],
        "unresolved": session["manifest"].unresolved,
        "steps": [s.to_dict() for s in session["steps"]],
    })
    return 0


def cmd_targets(planner: MealPlanner, args) -> int:
    targets = calculate_targets(_read_json(args.metrics))
    _print_json(targets.to_dict())
    return 0


COMMANDS = {
    "plan": cmd_plan,
    "week": cmd_week,
    "prep": cmd_prep,
    "targets": cmd_targets,
}


def build_parser(prep_days: int = 3) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Nutriplan meal planner")
    parser.add_argument(
        "command",
        choices=sorted(COMMANDS),
        help="Command to run",
    )
    parser.add_argument(
        "--profile",
        type=str,
        help="Profile JSON file (plan, week)",
    )
    parser.add_argument(
        "--plans",
        type=str,
        help="Stored plans JSON file: list of {plan_date, plan_data} (week, prep)",
    )
    parser.add_argument(
        "--metrics",
        type=str,
        help="Body metrics JSON file (targets)",
    )
    parser.add_argument(
        "--start",
        type=str,
        help="First date of the window (YYYY-MM-DD, default: today)",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help=f"Window length (default: 7 for week, {prep_days} for prep)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for reproducible plans",
    )
    parser.add_argument(
        "--catalog",
        type=str,
        default=None,
        help="Catalog JSON file (default: bundled catalog)",
    )
    return parser


def main(argv=None) -> int:
    """CLI entry point."""
    settings = get_settings()
    configure_logging(settings.log_level)

    parser = build_parser(settings.prep_days)
    args = parser.parse_args(argv)

    required = {"plan": "profile", "week": "profile", "prep": "plans", "targets": "metrics"}
    if not getattr(args, required[args.command]):
        parser.error(f"--{required[args.command]} is required for '{args.command}'")

    if args.days is None:
        args.days = settings.prep_days if args.command == "prep" else 7

    try:
        catalog = Catalog.load(args.catalog or settings.catalog_path)
        seed = args.seed if args.seed is not None else settings.seed
        planner = MealPlanner(catalog, seed=seed)
        return COMMANDS[args.command](planner, args)
    except (NutriplanError, OSError, json.JSONDecodeError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
