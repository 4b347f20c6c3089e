"""
tests/test_berths.py
Berth eligibility filter.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from calculation_engine.berths import MAX_BERTHS_PER_DOCK, UNKNOWN_DOCK, find_eligible_berths
from knowledge_base.records import BerthRecord


def _berth(name="B1", dock="Main Dock", quay="300", draft="14", beam="40", **flags) -> BerthRecord:
    row = {"BerthName": name, "Dock_Name": dock, "Quay_Len": quay, "Draft": draft, "Beam": beam}
    row.update({k: ("Yes" if v else "No") for k, v in flags.items()})
    return BerthRecord.from_row(row)


class TestBerthRecord:

    def test_blank_beam_means_unlimited(self):
        assert _berth(beam="").beam == 999.0

    def test_yes_flags(self):
        b = _berth(Bulk=True, Container=False)
        assert b.bulk and not b.container
        assert not b.is_specialised


class TestEligibility:

    def test_bulk_berth_takes_dry_bulk(self):
        berth = _berth(Bulk=True, Container=False)
        groups = find_eligible_berths([berth], loa=250, draft=12, beam=35, cargo="Dry Bulk")
        assert len(groups) == 1
        assert groups[0].dock_name == "Main Dock"
        assert groups[0].berths == ["B1"]

    def test_bulk_berth_refuses_container(self):
        berth = _berth(Bulk=True, Container=False)
        assert find_eligible_berths([berth], loa=250, draft=12, beam=35, cargo="Container") == []

    def test_dimensions(self):
        berth = _berth(Bulk=True)
        assert find_eligible_berths([berth], 301, 12, 35, "Coal") == []
        assert find_eligible_berths([berth], 250, 14.5, 35, "Coal") == []
        assert find_eligible_berths([berth], 250, 12, 41, "Coal") == []
        # limits are inclusive
        assert find_eligible_berths([berth], 300, 14, 40, "Coal")[0].berths == ["B1"]

    def test_general_cargo_avoids_specialised_berths(self):
        plain = _berth("P1", Bulk=True)
        roro = _berth("R1", Bulk=True, RORO=True)
        groups = find_eligible_berths([plain, roro], 200, 10, 30, "Machinery")
        assert groups[0].berths == ["P1"]

    def test_table_order_and_dock_cap(self):
        berths = [_berth(f"B{i}", Bulk=True) for i in range(7)]
        berths.insert(0, _berth("X1", dock="Outer Dock", Bulk=True))
        groups = find_eligible_berths(berths, 200, 10, 30, "Coal")
        assert [g.dock_name for g in groups] == ["Outer Dock", "Main Dock"]
        assert groups[1].berths == [f"B{i}" for i in range(MAX_BERTHS_PER_DOCK)]

    def test_blank_dock_name(self):
        groups = find_eligible_berths([_berth(dock="", Bulk=True)], 200, 10, 30, "Coal")
        assert groups[0].dock_name == UNKNOWN_DOCK
