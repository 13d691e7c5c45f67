"""
Exception types for the planning core.

Expected conditions (missing profile targets, empty candidate pools,
no alternatives) are expressed through return values, not exceptions.
Only violations of load-time catalog invariants raise.
"""


class NutriplanError(Exception):
    """Base class for all nutriplan errors."""
    pass


class CatalogError(NutriplanError):
    """Raised when catalog data violates a load-time invariant."""
    pass
