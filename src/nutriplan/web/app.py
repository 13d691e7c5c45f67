#!/usr/bin/env python3
"""
Flask JSON API for Nutriplan.

A stateless adapter over the planning core: every request carries the
profile and any stored plans it needs, and every response carries the
full updated plan for the caller to persist.
"""

import logging
from datetime import datetime
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS
from pydantic import ValidationError

from nutriplan import __version__
from nutriplan.config import Settings, configure_logging, get_settings
from nutriplan.data.catalog import Catalog
from nutriplan.data.models import DayPlan, Meal
from nutriplan.planner import MealPlanner
from nutriplan.prep.sequencer import build_prep_steps
from nutriplan.targets import calculate_targets
from nutriplan.web.schemas import (
    AlternativesRequest,
    ApplyAlternativeRequest,
    PlanRequest,
    PrepRequest,
    RegenerateMealRequest,
    TargetsRequest,
)

logger = logging.getLogger(__name__)

AWAITING_PROFILE = {
    "success": False,
    "status": "awaiting_profile",
    "error": "Profile has no calorie target yet",
}


def api_endpoint(func):
    """Map validation errors to 400 and anything unexpected to 500."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ValidationError as e:
            logger.warning(f"[API] {request.path} invalid request: {e.error_count()} errors")
            return jsonify({
                "success": False,
                "error": "Invalid request",
                "details": e.errors(include_url=False, include_context=False),
            }), 400
        except Exception as e:
            logger.error(f"[API] {request.path} failed: {e}", exc_info=True)
            return jsonify({"success": False, "error": str(e)}), 500
    return wrapper


def _body() -> dict:
    return request.get_json(silent=True) or {}


def create_app(catalog: Optional[Catalog] = None, settings: Optional[Settings] = None) -> Flask:
    """
    Build the Flask application.

    Args:
        catalog: Catalog to plan from (defaults to settings.catalog_path)
        settings: Runtime settings (defaults to get_settings())
    """
    settings = settings or get_settings()
    if catalog is None:
        catalog = Catalog.load(settings.catalog_path)

    app = Flask(__name__)
    CORS(app)
    app.config["NUTRIPLAN_SETTINGS"] = settings

    def request_planner() -> MealPlanner:
        # One generator per request; a seed makes each response reproducible
        return MealPlanner(catalog, seed=settings.seed)

    @app.route('/health')
    def health_check():
        """Health check endpoint."""
        return jsonify({
            "status": "healthy",
            "version": __version__,
            "recipes": len(catalog),
            "timestamp": datetime.now().isoformat(),
        }), 200

    @app.route('/api/targets', methods=['POST'])
    @api_endpoint
    def api_targets():
        """Daily calorie and macro targets from body metrics."""
        body = TargetsRequest.model_validate(_body())
        targets = calculate_targets(body.model_dump())
        if not targets.target_calories:
            return jsonify({**AWAITING_PROFILE, "targets": targets.to_dict()})
        return jsonify({"success": True, "targets": targets.to_dict()})

    @app.route('/api/plan', methods=['POST'])
    @api_endpoint
    def api_plan():
        """Generate one day plan."""
        body = PlanRequest.model_validate(_body())
        plan = request_planner().plan_day(body.profile.to_profile(), body.manifest())
        if plan is None:
            return jsonify(AWAITING_PROFILE)
        return jsonify({"success": True, "plan": plan.to_dict()})

    @app.route('/api/plan/regenerate-meal', methods=['POST'])
    @api_endpoint
    def api_regenerate_meal():
        """Replace one slot with a freshly selected recipe."""
        body = RegenerateMealRequest.model_validate(_body())
        updated = request_planner().regenerate_slot(
            body.profile.to_profile(), body.day_plan(), body.meal_index, body.manifest()
        )
        if updated is None:
            return jsonify(AWAITING_PROFILE)
        return jsonify({
            "success": True,
            "plan": updated.to_dict(),
            "meal": updated.plan[body.meal_index].to_dict(),
        })

    @app.route('/api/plan/alternatives', methods=['POST'])
    @api_endpoint
    def api_alternatives():
        """Ranked replacement options for one meal."""
        body = AlternativesRequest.model_validate(_body())
        profile = body.profile.to_profile() if body.profile else None
        alternatives = request_planner().alternatives(
            profile, body.meal_type, body.current_meal(), body.manifest()
        )
        return jsonify({
            "success": True,
            "alternatives": [m.to_dict() for m in alternatives],
        })

    @app.route('/api/plan/apply-alternative', methods=['POST'])
    @api_endpoint
    def api_apply_alternative():
        """Swap a chosen alternative into a plan."""
        body = ApplyAlternativeRequest.model_validate(_body())
        updated = request_planner().swap(
            DayPlan.from_dict(body.plan), body.meal_index, Meal.from_dict(body.meal)
        )
        return jsonify({"success": True, "plan": updated.to_dict()})

    @app.route('/api/prep', methods=['POST'])
    @api_endpoint
    def api_prep():
        """Prep list and ordered steps for the supplied stored plans."""
        body = PrepRequest.model_validate(_body())
        manifest = request_planner().prep(body.dated_plans())
        steps = build_prep_steps(manifest)
        return jsonify({
            "success": True,
            "components": [g.to_dict() for g in manifest],
            "unresolved": manifest.unresolved,
            "steps": [s.to_dict() for s in steps],
        })

    logger.info(f"Nutriplan API ready with {catalog!r}")
    return app


def main():
    settings = get_settings()
    configure_logging(settings.log_level)
    app = create_app(settings=settings)
    app.run(host="0.0.0.0", port=settings.port, debug=settings.debug)


if __name__ == '__main__':
    main()
