"""
Prep step sequencing.

Turns an aggregated prep manifest into an ordered list of steps:
optional oven preheat, washing, one merged chopping step, one step per
remaining item (in prep-group priority order), then cooling.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from nutriplan.data.models import PrepManifest, PreppedComponentGroup, PrepStep
from nutriplan.tag_canon import CHOP_GROUPS, OVEN_KEYWORDS, WASH_GROUP_MARKERS, prep_priority

logger = logging.getLogger(__name__)

STEP_PREHEAT = "step_preheat"
STEP_WASH = "step_wash"
STEP_CHOP_ALL = "step_chop_all"
STEP_COOL = "step_cool"


@dataclass
class _FlatItem:
    id: str
    name: str
    total_amount: float
    unit: str
    method: str
    group_name: str


def flatten_manifest(manifest: Iterable[PreppedComponentGroup]) -> List[_FlatItem]:
    """All manifest items tagged with their group, sorted by group priority (stable)."""
    items = [
        _FlatItem(
            id=item.id,
            name=item.name,
            total_amount=item.total_amount,
            unit=item.unit or "",
            method=item.method or "",
            group_name=group.group_name,
        )
        for group in manifest
        for item in group.items
    ]
    return sorted(items, key=lambda i: prep_priority(i.group_name))


def needs_oven(items: Sequence[_FlatItem]) -> bool:
    return any(
        keyword in item.method.lower()
        for item in items
        for keyword in OVEN_KEYWORDS
    )


def _item_step(item: _FlatItem) -> PrepStep:
    return PrepStep(
        id=f"step_{item.id}",
        text=f"{item.method} {item.total_amount}{item.unit} of {item.name}.",
        ingredient_ids=[item.id],
    )


def dedupe_steps(steps: Iterable[PrepStep]) -> List[PrepStep]:
    """Drop repeated step ids, keeping the first occurrence."""
    seen = set()
    unique = []
    for step in steps:
        if step.id in seen:
            continue
        seen.add(step.id)
        unique.append(step)
    return unique


def build_prep_steps(manifest) -> List[PrepStep]:
    """
    Build the ordered prep session for a manifest.

    Args:
        manifest: PrepManifest, or a list of PreppedComponentGroup / dicts

    Returns:
        Steps de-duplicated by id, first occurrence kept
    """
    items = flatten_manifest(PrepManifest.coerce(manifest))
    steps: List[PrepStep] = []

    if needs_oven(items):
        steps.append(PrepStep(
            id=STEP_PREHEAT,
            text="Preheat your oven to 200°C (400°F).",
        ))

    steps.append(PrepStep(
        id=STEP_WASH,
        text="Wash all vegetables and rinse grains/legumes.",
        ingredient_ids=[
            item.id for item in items
            if any(marker in item.group_name for marker in WASH_GROUP_MARKERS)
        ],
    ))

    chop_items = [item for item in items if item.group_name in CHOP_GROUPS]
    for item in items:
        if item.group_name in CHOP_GROUPS:
            # Emitted once for all chopped items; later repeats are deduped
            steps.append(PrepStep(
                id=STEP_CHOP_ALL,
                text=f"Chop all aromatics and vegetables: {', '.join(i.name for i in chop_items)}.",
                ingredient_ids=[i.id for i in chop_items],
            ))
            continue
        steps.append(_item_step(item))

    steps.append(PrepStep(
        id=STEP_COOL,
        text="Let all cooked components cool down before storing them in separate containers in the fridge.",
        ingredient_ids=[item.id for item in items],
    ))

    unique = dedupe_steps(steps)
    logger.info(f"[PREP] Built {len(unique)} prep steps from {len(items)} items")
    return unique
