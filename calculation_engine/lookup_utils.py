"""
calculation_engine/lookup_utils.py
Helpers shared by the tariff lookup modules.
"""
import math

from knowledge_base.records import is_wildcard
from monitoring import RATE_MISSES, get_logger

log = get_logger(__name__)

FOREIGN = "Foreign"
COASTAL = "Coastal"


def record_miss(lookup: str, **context) -> None:
    """A lookup found no matching record; the caller contributes zero."""
    log.warning("Rate lookup miss", lookup=lookup, **context)
    RATE_MISSES.labels(lookup=lookup).inc()


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def to_inr(amount: float, trade_type: str, inr_per_usd: float) -> float:
    """Foreign-trade rates are USD-denominated; coastal rates are already INR."""
    return amount * inr_per_usd if trade_type == FOREIGN else amount


def filter_matches(filter_value: str, actual: str, substring: bool = False) -> bool:
    if is_wildcard(filter_value):
        return True
    f, a = filter_value.strip().lower(), (actual or "").strip().lower()
    return f in a if substring else f == a
