"""Document loading and plan validation."""

from tokensync.document.loader import DocumentLoader
from tokensync.document.validator import (
    MAX_VARIABLES_PER_COLLECTION,
    PLAN_LIMITS,
    PlanValidator,
    check_fonts,
    check_libraries,
    detect_tier,
    measure_store,
)

__all__ = [
    "MAX_VARIABLES_PER_COLLECTION",
    "PLAN_LIMITS",
    "DocumentLoader",
    "PlanValidator",
    "check_fonts",
    "check_libraries",
    "detect_tier",
    "measure_store",
]
