"""monitoring package"""
from .logger import (
    start_metrics_server,
    get_logger,
    CALC_REQUESTS,
    CALC_LATENCY,
    RATE_MISSES,
    CURRENCY_RESOLUTIONS,
    EXCHANGE_RATE_GAUGE,
    GUARDRAIL_FAILURES,
)

__all__ = [
    "start_metrics_server",
    "get_logger", "CALC_REQUESTS", "CALC_LATENCY", "RATE_MISSES",
    "CURRENCY_RESOLUTIONS", "EXCHANGE_RATE_GAUGE", "GUARDRAIL_FAILURES",
]
