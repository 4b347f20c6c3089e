"""
tests/test_cargo_charges.py
Wharfage (cargo and container modes) and slab demurrage.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from calculation_engine import cargo_charges
from knowledge_base.records import CargoRecord, DemurrageSlabRecord, WharfageRateRecord
from query_processor.models import ContainerLine


def _slab(start, end, rate, currency="INR", category="Both", operation="Both",
          trade="Both", storage="Both") -> DemurrageSlabRecord:
    return DemurrageSlabRecord(
        cargo_category=category, operation_type=operation, trade_type=trade,
        storage_type=storage, start_day=start, end_day=end, rate=rate, rate_currency=currency,
    )


class TestWharfage:

    def test_value_basis_ignores_weight(self):
        rec = WharfageRateRecord(sor_code="W-310", cost_basis="Value", coastal_rate=0.6, foreign_rate=1.0)
        light = cargo_charges.wharfage(rec, 1, 2_000_000, "Foreign")
        heavy = cargo_charges.wharfage(rec, 50_000, 2_000_000, "Foreign")
        assert light == heavy == pytest.approx(20_000.0)

    @pytest.mark.parametrize("basis", ["Weight", "Unit"])
    def test_weight_and_unit_basis(self, basis):
        rec = WharfageRateRecord(sor_code="W-101", cost_basis=basis, coastal_rate=30.0, foreign_rate=50.0)
        assert cargo_charges.wharfage(rec, 10_000, 999, "Foreign") == pytest.approx(500_000.0)
        assert cargo_charges.wharfage(rec, 10_000, 999, "Coastal") == pytest.approx(300_000.0)

    def test_basis_is_normalised_and_defaulted(self):
        assert WharfageRateRecord.from_row({"sor_item": "X", "cost_basis": "value"}).cost_basis == "Value"
        assert WharfageRateRecord.from_row({"sor_item": "X"}).cost_basis == "Weight"

    def test_missing_record_or_rate(self):
        assert cargo_charges.wharfage(None, 10, 0, "Foreign") is None
        rec = WharfageRateRecord(sor_code="X", cost_basis="Weight", coastal_rate=None, foreign_rate=5.0)
        assert cargo_charges.wharfage(rec, 10, 0, "Coastal") is None

    def test_cargo_wharfage_via_sor_code(self):
        cargo = CargoRecord(
            description="Coal", category_name="Dry Bulk", sor_code="W-101",
            discharge_rate_per_day=None, load_rate_per_day=None, demurrage_rate_per_day=None,
        )
        rates = [WharfageRateRecord(sor_code="W-101", cost_basis="Weight", coastal_rate=30.0, foreign_rate=50.0)]
        assert cargo_charges.cargo_wharfage(cargo, rates, 10_000, 0, "Foreign") == pytest.approx(500_000.0)
        assert cargo_charges.cargo_wharfage(None, rates, 10_000, 0, "Foreign") is None


class TestContainerWharfage:

    def test_schedule(self):
        lines = [
            ContainerLine("Standard", "Laden", "upto_20ft", 10),
            ContainerLine("MAFI", "Empty", "20_to_40ft", 2),
        ]
        assert cargo_charges.container_wharfage(lines, "Foreign") == pytest.approx(16_500 + 3_720)

    def test_coastal_schedule(self):
        lines = [ContainerLine("Standard", "Empty", "above_40ft", 3)]
        assert cargo_charges.container_wharfage(lines, "Coastal") == pytest.approx(2_970.0)

    def test_shipper_own_ad_valorem(self):
        lines = [ContainerLine("Shipper-Own", "Laden", "upto_20ft", 5)]
        amount = cargo_charges.container_wharfage(lines, "Foreign", cargo_value=1_000_000)
        assert amount == pytest.approx(4_250.0)

    def test_no_ad_valorem_without_shipper_own_boxes(self):
        lines = [ContainerLine("Standard", "Laden", "upto_20ft", 1)]
        assert cargo_charges.container_wharfage(lines, "Foreign", cargo_value=1_000_000) == pytest.approx(1_650.0)

    def test_unknown_class_contributes_nothing(self):
        lines = [ContainerLine("Reefer", "Laden", "upto_20ft", 4)]
        assert cargo_charges.container_wharfage(lines, "Foreign") == 0.0


class TestSlabDemurrage:

    def test_ladder(self):
        slabs = [_slab(0, 2, 10), _slab(3, 5, 20)]
        assert cargo_charges.slab_demurrage(slabs, 4, 100, 1.0) == pytest.approx(7_000.0)

    def test_usd_slab_converted(self):
        slabs = [_slab(0, 0, 5, currency="USD")]
        assert cargo_charges.slab_demurrage(slabs, 1, 1, 80.0) == pytest.approx(400.0)

    def test_nothing_to_charge_skips_lookup(self):
        # slabs are never touched, so None would fail if iterated
        assert cargo_charges.slab_demurrage(None, 0, 100, 80.0) == 0.0
        assert cargo_charges.slab_demurrage(None, -3, 100, 80.0) == 0.0
        assert cargo_charges.slab_demurrage(None, 5, 0, 80.0) == 0.0

    def test_no_matching_slab(self):
        slabs = [_slab(0, 10, 10, trade="Coastal")]
        assert cargo_charges.slab_demurrage(slabs, 3, 100, 1.0, trade_type="Foreign") is None

    def test_category_is_a_substring_match(self):
        slabs = [_slab(0, 10, 10, category="Bulk")]
        amount = cargo_charges.slab_demurrage(slabs, 1, 10, 1.0, cargo_category="Dry Bulk")
        assert amount == pytest.approx(200.0)

    def test_uncovered_days_not_charged(self):
        slabs = [_slab(0, 1, 10)]
        assert cargo_charges.slab_demurrage(slabs, 5, 10, 1.0) == pytest.approx(200.0)

    def test_slabs_sorted_by_start(self):
        slabs = [_slab(3, 5, 20), _slab(0, 2, 10)]
        ladder = cargo_charges.matching_slabs(slabs, "", "", "", "")
        assert [s.start_day for s in ladder] == [0, 3]

    def test_flat_rate(self):
        assert cargo_charges.flat_demurrage(2, 5, 100) == pytest.approx(1_000.0)
        assert cargo_charges.flat_demurrage(None, 5, 100) == 0.0
        assert cargo_charges.flat_demurrage(2, 0, 100) == 0.0
