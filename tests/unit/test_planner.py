"""
Unit tests for the MealPlanner facade and the CLI.
"""

import json
from datetime import date

import pytest

from nutriplan.data.models import DatedPlan, Profile
from nutriplan.main import main
from nutriplan.planner import MealPlanner


@pytest.fixture
def planner(catalog):
    return MealPlanner(catalog, seed=3)


class TestMealPlanner:
    """Tests for MealPlanner."""

    def test_default_catalog(self):
        """Without a catalog the bundled one is used."""
        assert len(MealPlanner().catalog) >= 10

    def test_seeded_planners_agree(self, catalog, profile):
        """Two planners with the same seed produce the same plan."""
        first = MealPlanner(catalog, seed=9).plan_day(profile)
        second = MealPlanner(catalog, seed=9).plan_day(profile)
        assert first == second

    def test_fill_week_skips_stored_dates(self, planner, profile):
        """Only missing dates are planned."""
        plans = planner.fill_week(profile, ["2025-03-02"], start=date(2025, 3, 1), days=3)
        assert list(plans) == ["2025-03-01", "2025-03-03"]

    def test_prep_session(self, planner, profile):
        """Prep session covers the window and yields steps."""
        plans = planner.plan_dates(profile, ["2025-03-01", "2025-03-02", "2025-03-09"])
        stored = [DatedPlan(d, p) for d, p in plans.items()]

        session = planner.prep_session(stored, start=date(2025, 3, 1))
        assert session["dates"] == ["2025-03-01", "2025-03-02"]
        assert session["steps"][-1].id == "step_cool"

    def test_regenerate_and_swap(self, planner, profile):
        """Slot helpers keep totals consistent."""
        plan = planner.plan_day(profile)
        regenerated = planner.regenerate_slot(profile, plan, 0)
        assert regenerated.is_consistent()

        options = planner.alternatives(profile, "lunch", plan.plan[1])
        if options:
            assert planner.swap(plan, 1, options[0]).is_consistent()


class TestCli:
    """Tests for the command-line entry point."""

    def test_targets(self, tmp_path, capsys):
        """targets prints the calculated targets as JSON."""
        metrics = tmp_path / "metrics.json"
        metrics.write_text(json.dumps({
            "sex": "female", "weight": 60, "height": 165, "dob": "1995-01-01",
            "activity": "sedentary", "goal": "maintain", "weeklyTarget": 0,
        }))
        assert main(["targets", "--metrics", str(metrics)]) == 0
        assert json.loads(capsys.readouterr().out)["targetCalories"] > 0

    def test_plan(self, tmp_path, capsys):
        """plan prints a full day plan."""
        profile = tmp_path / "profile.json"
        profile.write_text(json.dumps({"targetCalories": 1800, "disliked_foods": ["dairy"]}))

        assert main(["plan", "--profile", str(profile), "--seed", "1"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [m["type"] for m in data["plan"]] == ["breakfast", "lunch", "dinner"]
        assert data["totals"]["calories"] == sum(m["total_calories"] for m in data["plan"])

    def test_plan_without_targets(self, tmp_path):
        """A profile without calorie target exits non-zero."""
        profile = tmp_path / "profile.json"
        profile.write_text(json.dumps(Profile().to_dict()))
        assert main(["plan", "--profile", str(profile)]) == 1

    def test_week_fills_gaps(self, tmp_path, capsys, profile):
        """week plans only the dates missing from the stored plans."""
        profile_file = tmp_path / "profile.json"
        profile_file.write_text(json.dumps(profile.to_dict()))
        stored = tmp_path / "plans.json"
        stored.write_text(json.dumps([{"plan_date": "2030-01-02", "plan_data": {}}]))

        code = main([
            "week", "--profile", str(profile_file), "--plans", str(stored),
            "--start", "2030-01-01", "--days", "3", "--seed", "4",
        ])
        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert [p["plan_date"] for p in data] == ["2030-01-01", "2030-01-03"]

    def test_prep(self, tmp_path, capsys, profile):
        """prep prints components and steps for stored plans."""
        plans = MealPlanner(seed=2).plan_dates(profile, ["2030-01-01"])
        stored = tmp_path / "plans.json"
        stored.write_text(json.dumps([DatedPlan(d, p).to_dict() for d, p in plans.items()]))

        assert main(["prep", "--plans", str(stored), "--start", "2030-01-01"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["dates"] == ["2030-01-01"]
        assert data["steps"][0]["id"] in ("step_preheat", "step_wash")

    def test_missing_catalog(self, tmp_path):
        """An unreadable catalog is reported, not raised."""
        profile = tmp_path / "profile.json"
        profile.write_text(json.dumps({"targetCalories": 1800}))
        code = main(["plan", "--profile", str(profile), "--catalog", str(tmp_path / "nope.json")])
        assert code == 1
