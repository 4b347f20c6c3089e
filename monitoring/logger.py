"""
monitoring/logger.py
Structured logging and Prometheus metrics.
"""
import logging


def get_logger(name: str):
    """Return a structlog logger. Imports structlog on first call only."""
    import structlog
    return structlog.get_logger(name)


def _ensure_configured():
    """Configure structlog once. Called lazily."""
    import structlog
    if structlog.is_configured():
        return
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    from config.settings import settings
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(message)s")


_ensure_configured()


# ── Prometheus Metrics (created lazily on first access) ───────────────────────

class _LazyMetric:
    """Wraps a Prometheus metric and creates it on first use."""
    def __init__(self, factory, *args, **kwargs):
        self._factory = factory
        self._args = args
        self._kwargs = kwargs
        self._metric = None

    def _get(self):
        if self._metric is None:
            self._metric = self._factory(*self._args, **self._kwargs)
        return self._metric

    def labels(self, **kw):
        return self._get().labels(**kw)

    def inc(self):
        self._get().inc()

    def observe(self, v):
        self._get().observe(v)

    def set(self, v):
        self._get().set(v)


def _make_counter(name, desc, labels=()):
    from prometheus_client import Counter
    return _LazyMetric(Counter, name, desc, list(labels))

def _make_histogram(name, desc, labels=(), buckets=None):
    from prometheus_client import Histogram
    kw = {}
    if buckets:
        kw["buckets"] = buckets
    return _LazyMetric(Histogram, name, desc, list(labels), **kw)

def _make_gauge(name, desc):
    from prometheus_client import Gauge
    return _LazyMetric(Gauge, name, desc)


CALC_REQUESTS        = _make_counter("spls_calculation_requests_total", "Total calculation requests", ["module", "status"])
CALC_LATENCY         = _make_histogram("spls_calculation_duration_seconds", "Latency", ["module"], [0.001, 0.005, 0.01, 0.05, 0.1, 0.5])
RATE_MISSES          = _make_counter("spls_rate_lookup_misses_total", "Rate lookups with no matching record", ["lookup"])
CURRENCY_RESOLUTIONS = _make_counter("spls_currency_resolutions_total", "INR/USD resolutions by source", ["source"])
EXCHANGE_RATE_GAUGE  = _make_gauge("spls_inr_per_usd", "Resolved INR per USD rate")
GUARDRAIL_FAILURES   = _make_counter("spls_guardrail_failures_total", "Guardrail failures", ["check_type"])


def start_metrics_server(port: int = 9090) -> None:
    try:
        from prometheus_client import start_http_server
        start_http_server(port)
        get_logger("monitoring").info("Prometheus metrics server started", port=port)
    except Exception as exc:
        get_logger("monitoring").warning("Could not start metrics server", error=str(exc))
