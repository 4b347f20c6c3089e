"""
calculation_engine/currency.py
INR-per-USD resolution.

Resolution order, each tier tried at most once per process:
  1. memoized value
  2. external exchange-rate API (only when EXCHANGE_RATE_ONLINE is set)
  3. last row of VM_currency_lookup
  4. DEFAULT_INR_PER_USD

The first resolution runs under a lock; concurrent callers wait for it and
all observe the same value. reset_currency_normalizer() drops the process
instance for tests.
"""
import asyncio
import threading
from typing import Callable, Optional, Sequence

import httpx

from config.settings import settings
from knowledge_base.records import ExchangeRateRecord
from monitoring import CURRENCY_RESOLUTIONS, EXCHANGE_RATE_GAUGE, get_logger

log = get_logger(__name__)

RateFetcher = Callable[[], Optional[float]]
RateRows = Callable[[], Sequence[ExchangeRateRecord]]


def fetch_online_rate(
    url: Optional[str] = None, timeout: Optional[float] = None
) -> Optional[float]:
    """Query the exchange-rate API once; expects JSON with rates.INR."""
    url = url or settings.exchange_rate_api_url
    timeout = timeout or settings.exchange_rate_timeout
    with httpx.Client(timeout=timeout) as client:
        r = client.get(url)
        r.raise_for_status()
        body = r.json()
    value = (body.get("rates") or {}).get("INR")
    return float(value) if value else None


def rate_from_table(rows: Sequence[ExchangeRateRecord]) -> Optional[float]:
    """The most recently listed row is authoritative."""
    if not rows:
        return None
    return rows[-1].inr_per_usd()


class CurrencyNormalizer:

    def __init__(
        self,
        rate_rows: Optional[RateRows] = None,
        fetcher: Optional[RateFetcher] = None,
        online: Optional[bool] = None,
        default: Optional[float] = None,
    ) -> None:
        self._rate_rows = rate_rows or (lambda: ())
        self._fetcher   = fetcher or fetch_online_rate
        self._online    = settings.exchange_rate_online if online is None else online
        self._default   = default if default is not None else settings.default_inr_per_usd
        self._lock      = threading.Lock()
        self._value: Optional[float] = None
        self.source: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self._value is not None

    def resolve(self) -> float:
        if self._value is not None:
            return self._value
        with self._lock:
            if self._value is None:
                self._value, self.source = self._resolve_once()
                CURRENCY_RESOLUTIONS.labels(source=self.source).inc()
                EXCHANGE_RATE_GAUGE.set(self._value)
                log.info("INR/USD resolved", inr_per_usd=self._value, source=self.source)
        return self._value

    async def aresolve(self) -> float:
        if self._value is not None:
            return self._value
        return await asyncio.to_thread(self.resolve)

    # ── Private ───────────────────────────────────────────────────────────────

    def _resolve_once(self) -> tuple[float, str]:
        if self._online:
            try:
                value = self._fetcher()
                if value and value > 0:
                    return value, "online"
                log.debug("Exchange-rate API returned no INR rate")
            except Exception as exc:
                log.warning("Exchange-rate API failed, using rate table", error=str(exc))

        try:
            value = rate_from_table(self._rate_rows())
            if value:
                return value, "table"
        except Exception as exc:
            log.warning("Currency lookup table unreadable, using default", error=str(exc))

        return self._default, "default"


# ── Process-wide normalizer ───────────────────────────────────────────────────

_normalizer: Optional[CurrencyNormalizer] = None
_normalizer_lock = threading.Lock()


def get_currency_normalizer() -> CurrencyNormalizer:
    global _normalizer
    if _normalizer is None:
        with _normalizer_lock:
            if _normalizer is None:
                from knowledge_base.table_store import get_table_store
                _normalizer = CurrencyNormalizer(
                    rate_rows=lambda: get_table_store().tables.exchange_rates,
                )
    return _normalizer


def reset_currency_normalizer(normalizer: Optional[CurrencyNormalizer] = None) -> None:
    """Drop (or replace) the process instance; used by tests."""
    global _normalizer
    with _normalizer_lock:
        _normalizer = normalizer
