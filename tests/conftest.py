"""
tests/conftest.py
Shared fixtures: an in-memory rate store over the bundled sample tables and an
offline currency normalizer that reads the store's currency lookup.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from calculation_engine.currency import CurrencyNormalizer, reset_currency_normalizer
from calculation_engine.engine import CalculationEngine
from knowledge_base.sample_data import SAMPLE_ROWS
from knowledge_base.table_store import TableStore


@pytest.fixture
def sample_store() -> TableStore:
    return TableStore.from_rows(SAMPLE_ROWS)


@pytest.fixture
def currency(sample_store) -> CurrencyNormalizer:
    return CurrencyNormalizer(
        rate_rows=lambda: sample_store.tables.exchange_rates,
        online=False,
        default=82.5,
    )


@pytest.fixture
def engine(sample_store, currency) -> CalculationEngine:
    return CalculationEngine(store=sample_store, currency=currency)


@pytest.fixture(autouse=True)
def _fresh_currency_normalizer():
    reset_currency_normalizer()
    yield
    reset_currency_normalizer()
