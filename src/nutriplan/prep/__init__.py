"""
Batch meal-prep: aggregate upcoming plans into a prep list and sequence it.
"""

from nutriplan.prep.aggregator import aggregate_prep_list, select_prep_window
from nutriplan.prep.sequencer import build_prep_steps

__all__ = ["aggregate_prep_list", "build_prep_steps", "select_prep_window"]
