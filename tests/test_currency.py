"""
tests/test_currency.py
INR/USD resolution: memoisation, fallback tiers, single-flight, reset hook.
"""
import asyncio
import sys
import threading
import time
from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from calculation_engine.currency import (
    CurrencyNormalizer,
    fetch_online_rate,
    get_currency_normalizer,
    rate_from_table,
    reset_currency_normalizer,
)
from knowledge_base.records import ExchangeRateRecord

TABLE = [ExchangeRateRecord(inr=1.0, usd=80.0), ExchangeRateRecord(inr=1.0, usd=83.2)]


class TestExchangeRateRecord:

    def test_usd_cell_above_one(self):
        assert ExchangeRateRecord(inr=1.0, usd=83.2).inr_per_usd() == 83.2

    def test_usd_cell_inverted(self):
        assert ExchangeRateRecord(inr=None, usd=0.0125).inr_per_usd() == pytest.approx(80.0)

    def test_inr_cell_fallback(self):
        assert ExchangeRateRecord(inr=83.0, usd=None).inr_per_usd() == 83.0
        assert ExchangeRateRecord(inr=1.0, usd=None).inr_per_usd() is None

    def test_column_names_case_insensitive(self):
        rec = ExchangeRateRecord.from_row({"inr": "1", "Usd": "83.2"})
        assert rec.inr_per_usd() == 83.2

    def test_last_row_is_authoritative(self):
        assert rate_from_table(TABLE) == 83.2
        assert rate_from_table([]) is None


class TestCurrencyNormalizer:

    def test_idempotent(self):
        fetcher = MagicMock(return_value=83.5)
        n = CurrencyNormalizer(rate_rows=lambda: TABLE, fetcher=fetcher, online=True)
        assert n.resolve() == 83.5
        assert n.resolve() == 83.5
        assert fetcher.call_count == 1
        assert n.source == "online"

    def test_online_failure_uses_table(self):
        fetcher = MagicMock(side_effect=httpx.ConnectError("offline"))
        n = CurrencyNormalizer(rate_rows=lambda: TABLE, fetcher=fetcher, online=True)
        assert n.resolve() == 83.2
        assert n.source == "table"

    def test_offline_never_calls_fetcher(self):
        fetcher = MagicMock(return_value=90.0)
        n = CurrencyNormalizer(rate_rows=lambda: TABLE, fetcher=fetcher, online=False)
        assert n.resolve() == 83.2
        fetcher.assert_not_called()

    def test_default_when_table_empty(self):
        n = CurrencyNormalizer(rate_rows=lambda: [], online=False, default=82.5)
        assert n.resolve() == 82.5
        assert n.source == "default"

    def test_unreadable_table_uses_default(self):
        def broken():
            raise RuntimeError("table gone")
        n = CurrencyNormalizer(rate_rows=broken, online=False, default=82.5)
        assert n.resolve() == 82.5

    def test_single_flight(self):
        calls = []

        def slow_fetch():
            calls.append(1)
            time.sleep(0.05)
            return 84.0

        n = CurrencyNormalizer(rate_rows=lambda: [], fetcher=slow_fetch, online=True)
        results = []
        threads = [threading.Thread(target=lambda: results.append(n.resolve())) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert results == [84.0] * 8
        assert len(calls) == 1

    def test_async_resolve(self):
        n = CurrencyNormalizer(rate_rows=lambda: TABLE, online=False)
        assert asyncio.run(n.aresolve()) == 83.2
        assert n.resolved


class TestProcessNormalizer:

    def test_singleton_and_reset(self):
        replacement = CurrencyNormalizer(rate_rows=lambda: TABLE, online=False)
        reset_currency_normalizer(replacement)
        assert get_currency_normalizer() is replacement
        reset_currency_normalizer()
        assert get_currency_normalizer() is not replacement
        assert get_currency_normalizer() is get_currency_normalizer()


class TestFetchOnlineRate:

    def _patch_client(self, monkeypatch, handler):
        real_client = httpx.Client

        def client(timeout=None):
            return real_client(transport=httpx.MockTransport(handler), timeout=timeout)

        monkeypatch.setattr(httpx, "Client", client)

    def test_reads_inr_rate(self, monkeypatch):
        self._patch_client(monkeypatch, lambda req: httpx.Response(200, json={"rates": {"INR": 83.4}}))
        assert fetch_online_rate("https://rates.test/latest", timeout=1) == 83.4

    def test_missing_rate(self, monkeypatch):
        self._patch_client(monkeypatch, lambda req: httpx.Response(200, json={"rates": {}}))
        assert fetch_online_rate("https://rates.test/latest", timeout=1) is None

    def test_http_error_raises(self, monkeypatch):
        self._patch_client(monkeypatch, lambda req: httpx.Response(503))
        with pytest.raises(httpx.HTTPStatusError):
            fetch_online_rate("https://rates.test/latest", timeout=1)
