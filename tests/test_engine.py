"""
tests/test_engine.py
End-to-end module calculations over the bundled sample rate tables.
Run with: pytest tests/ -v
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from calculation_engine.calculators import CargoCalculator
from calculation_engine.engine import CalculationEngine
from knowledge_base.sample_data import SAMPLE_ROWS
from knowledge_base.table_store import TableStore
from query_processor.models import ScenarioValidationError
from query_processor.parser import ScenarioBuilder

INR_PER_USD = 83.2   # last VM_currency_lookup row in the sample tables


@pytest.fixture
def run(engine):
    builder = ScenarioBuilder()

    def _run(module, **raw):
        return engine.calculate(module, builder.build(module, raw))
    return _run


def _assert_consistent(result):
    assert result.subtotal == sum(result.charges.values())
    assert result.taxes == result.subtotal * 0.18
    assert result.total == result.subtotal + result.taxes
    assert result.total == pytest.approx(result.subtotal * 1.18)
    assert sum(item["amount"] for item in result.breakdown) == pytest.approx(result.subtotal)
    assert result.metadata["guardrails"]["passed"]


class TestCargoModule:

    def test_coal_end_to_end(self, run):
        r = run("cargo", cargo="Coal", weight=10000, trade_type="Foreign", days_after_free=0)
        assert r.charges == {"wharfage": 500000.0, "demurrage": 0.0}
        assert r.subtotal == 500000.0
        assert r.taxes == 90000.0
        assert r.total == 590000.0
        _assert_consistent(r)

    def test_tax_on_fractional_subtotal_is_not_rounded(self, run):
        r = run("cargo", cargo="Coal", weight=0.3702, trade_type="Foreign")
        assert r.subtotal == pytest.approx(18.51)
        assert r.taxes == pytest.approx(3.3318)
        assert r.total == pytest.approx(21.8418)
        assert r.total == pytest.approx(r.subtotal * 1.18)
        _assert_consistent(r)

    def test_slab_ladder(self, run):
        r = run("cargo", cargo="Coal", weight=10000, days_after_free=4,
                quantity_delivered=100, storage_type="Open")
        assert r.charges["demurrage"] == 7000.0
        _assert_consistent(r)

    def test_flat_rate_fallback(self, run):
        r = run("cargo", cargo="Sugar", weight=100, days_after_free=5)
        assert r.charges["demurrage"] == 2000.0
        assert r.metadata["demurrage_basis"] == "cargo master flat rate"

    def test_usd_slab(self, run):
        r = run("cargo", cargo="Machinery", weight=10, cargo_value=1_000_000,
                days_after_free=1, operation_type="Import")
        # value basis wharfage; USD slab over days 0..1 for 10 t
        assert r.charges["wharfage"] == 10000.0
        assert r.charges["demurrage"] == pytest.approx(round(10 * 2 * 0.05 * INR_PER_USD, 2))
        assert r.metadata["exchange_rate_source"] == "table"

    def test_unknown_cargo_warns(self, run):
        r = run("cargo", cargo="Bauxite", weight=100)
        assert r.charges["wharfage"] == 0.0
        assert any("not found in cargo master" in w for w in r.warnings)
        assert any("wharfage charged as 0" in w for w in r.warnings)

    def test_container_mode(self, run):
        r = run("cargo", cargo_mode="container", trade_type="Coastal", containers=[
            {"container_class": "Standard", "fill_state": "Laden", "size_band": "upto_20ft", "count": 4},
        ])
        assert r.charges["wharfage"] == 3960.0
        _assert_consistent(r)


class TestVesselModule:

    def test_foreign_call(self, run, currency):
        r = run("vessel", gross_tonnage=30000, loa=190, draft=11.5, beam=32,
                cargo="Coal", quantity=50000, trade_type="Foreign")
        assert r.logistics["eligible_berths"] == [{"dock": "Eastern Dock", "berths": ["EQ-1", "EQ-2"]}]
        assert r.logistics["stay_hours"] == 60
        assert r.charges["port_dues"] == pytest.approx(30000 * 0.10 * INR_PER_USD, abs=0.01)
        assert r.charges["pilotage"] == pytest.approx(30000 * 0.06 * INR_PER_USD, abs=0.01)
        assert r.charges["berth_hire"] == pytest.approx(30000 * 60 * 0.0006 * INR_PER_USD, abs=0.01)
        assert r.metadata["inr_per_usd"] == INR_PER_USD
        assert any("exceeds vessel GT" in w for w in r.warnings)
        _assert_consistent(r)

    def test_coastal_call_does_not_resolve_currency(self, run, currency):
        r = run("vessel", gross_tonnage=10000, loa=190, draft=11.5, beam=32,
                cargo="Dry Bulk", quantity=5000, trade_type="Coastal")
        assert r.charges["port_dues"] == pytest.approx(45000.0)
        assert "inr_per_usd" not in r.metadata
        assert not currency.resolved

    def test_logistics_only(self, run, currency):
        r = run("vessel", mode="logistics", loa=340, draft=14.5, beam=45, cargo="Container")
        assert r.charges == {}
        assert r.total == 0.0
        assert r.logistics["eligible_berths"] == [{"dock": "Container Terminal", "berths": ["CT-1"]}]
        assert not currency.resolved

    def test_invalid_scenario_is_rejected(self, run):
        with pytest.raises(ScenarioValidationError):
            run("vessel", gross_tonnage=0, loa=190, draft=11, beam=32)


class TestRailModule:

    def test_bulk_rake(self, run):
        r = run("rail", cargo_type="Coal", wagon_type="BOXN", num_wagons=58,
                operation_hours=40, cargo_weight=3800)
        assert r.charges == {"haulage": 456000.0, "terminal_handling": 76000.0, "demurrage": 17400.0}
        assert r.logistics["loading_type"] == "Full Rake"
        assert r.logistics["railway_yard"] == "Central Yard"
        assert r.logistics["chargeable_hours"] == 31
        _assert_consistent(r)

    def test_containers(self, run):
        r = run("rail", cargo_type="Container", wagon_type="BLC", num_wagons=10,
                operation_hours=4, cargo_weight=200,
                container_counts={"20ft_Container": 2, "40ft_Container": 1})
        assert r.charges["haulage"] == 33000.0
        assert r.charges["terminal_handling"] == 7000.0
        assert r.charges["demurrage"] == 0.0

    def test_unknown_wagon(self, run):
        with pytest.raises(ScenarioValidationError):
            run("rail", cargo_type="Coal", wagon_type="BCN", num_wagons=5)

    def test_unpriced_container_category_warns(self, currency):
        rows = dict(SAMPLE_ROWS)
        rows["RM_Haulage"] = [r for r in SAMPLE_ROWS["RM_Haulage"] if r["category"] != "Above 40ft_Container"]
        engine = CalculationEngine(store=TableStore.from_rows(rows), currency=currency)
        scenario = ScenarioBuilder().build("rail", {
            "cargo_type": "Container", "wagon_type": "BLC", "num_wagons": 10,
            "cargo_weight": 200, "container_counts": {"20ft_Container": 2, "Above 40ft_Container": 1},
        })
        r = engine.calculate("rail", scenario)
        assert r.charges["haulage"] == 18000.0
        assert any("Above 40ft_Container" in w for w in r.warnings)

    def test_no_container_haulage_rates(self, currency):
        rows = dict(SAMPLE_ROWS)
        rows["RM_Haulage"] = []
        engine = CalculationEngine(store=TableStore.from_rows(rows), currency=currency)
        scenario = ScenarioBuilder().build("rail", {
            "cargo_type": "Container", "wagon_type": "BLC", "num_wagons": 10,
            "cargo_weight": 200, "container_counts": {"40ft_Container": 2},
        })
        r = engine.calculate("rail", scenario)
        assert r.charges["haulage"] == 0.0
        assert any("haulage" in w for w in r.warnings)


class TestStorageModule:

    def test_immediate(self, run):
        r = run("storage", cargo="Coal", weight=5000, area_type="Covered", days=20)
        assert r.logistics["required_area_sqm"] == 2000.0
        assert r.charges["storage"] == 48000.0
        _assert_consistent(r)

    def test_lease(self, run):
        r = run("storage", storage_type="lease", cargo_mode="container",
                container_counts={"upto_20ft": 10}, lease_type="Open Plot", months=2)
        assert r.logistics["required_area_sqm"] == 148.0
        assert r.charges["storage"] == pytest.approx(148 * 45 * 2)

    def test_no_area(self, run):
        with pytest.raises(ScenarioValidationError):
            run("storage", cargo="Bauxite", weight=5000, area_type="Covered", days=20)


class TestStevedoreModule:

    def test_coal_gangs(self, run):
        r = run("stevedore", cargo="Coal", weight=10000, labour_line="1", mobile_crane="N")
        assert r.logistics["gangs_required"] == 25
        assert r.logistics["work_days"] == 1
        assert r.charges == {
            "composite_labour": 409500.0,
            "stevedoring_royalty": 120000.0,
            "shore_handling_royalty": 80000.0,
        }
        assert r.metadata["royalty_type"] == "Dry Bulk"
        _assert_consistent(r)

    def test_missing_datum(self, run):
        with pytest.raises(ScenarioValidationError):
            run("stevedore", cargo="Coal", weight=100, labour_line="7")


class TestEngine:

    def test_unknown_module(self, engine):
        with pytest.raises(ScenarioValidationError):
            engine.calculate("towage", object())

    def test_modules(self, engine):
        assert engine.modules == ["vessel", "cargo", "rail", "storage", "stevedore"]

    def test_calculator_on_its_own(self, currency):
        calc = CargoCalculator(TableStore.from_rows(SAMPLE_ROWS), currency)
        scenario = ScenarioBuilder().build("cargo", {"cargo": "Coal", "weight": 1})
        assert calc.calculate(scenario).total == 59.0
