"""
tests/test_table_store.py
Rate table loading: SQLite first, CSV second, in-memory rows for tests.
"""
import sqlite3
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from knowledge_base.records import BerthRecord, CargoRecord
from knowledge_base.sample_data import SAMPLE_ROWS
from knowledge_base.sqlite_store import SQLiteStore
from knowledge_base.table_store import TableStore, read_csv_table
from knowledge_base.tables import TABLE_NAMES, RateTables


@pytest.fixture
def spls_db(tmp_path) -> Path:
    path = tmp_path / "spls.db"
    conn = sqlite3.connect(path)
    conn.execute(
        'CREATE TABLE "VM_berth_master" (BerthName TEXT, Dock_Name TEXT, Quay_Len REAL, '
        "Draft REAL, Beam REAL, Bulk TEXT, Container TEXT)"
    )
    conn.execute(
        "INSERT INTO VM_berth_master VALUES ('EQ-1', 'Eastern Dock', 300, 14, 40, 'Yes', 'No')"
    )
    conn.commit()
    conn.close()
    return path


class TestCsv:

    def test_headers_and_cells_stripped(self, tmp_path):
        path = tmp_path / "CM_CargoMaster.csv"
        path.write_text(
            "\ufeff CargoDescription , SoRNoCode \n Coal , W-101 \n", encoding="utf-8",
        )
        assert read_csv_table(path) == [{"CargoDescription": "Coal", "SoRNoCode": "W-101"}]


class TestSQLiteStore:

    def test_missing_database(self, tmp_path):
        store = SQLiteStore(tmp_path / "absent.db")
        assert not store.exists
        assert store.read_table("VM_berth_master") is None
        assert not (tmp_path / "absent.db").exists()

    def test_read_and_stats(self, spls_db):
        store = SQLiteStore(spls_db)
        assert store.has_table("VM_berth_master")
        assert store.read_table("VM_berth_master")[0]["BerthName"] == "EQ-1"
        assert store.stats() == {"VM_berth_master": 1}


class TestTableStore:

    def test_sqlite_then_csv_then_missing(self, tmp_path, spls_db):
        (tmp_path / "CM_CargoMaster.csv").write_text(
            "CargoDescription,CargoCategoryName,SoRNoCode\nCoal,Dry Bulk,W-101\n", encoding="utf-8",
        )
        store = TableStore(data_dir=tmp_path, sqlite=SQLiteStore(spls_db))
        sources = store.sources()
        assert sources["VM_berth_master"] == "sqlite"
        assert sources["CM_CargoMaster"] == "csv"
        assert sources["RM_Haulage"] == "missing"
        assert store.tables.berths[0] == BerthRecord.from_row(
            {"BerthName": "EQ-1", "Dock_Name": "Eastern Dock", "Quay_Len": 300, "Draft": 14,
             "Beam": 40, "Bulk": "Yes", "Container": "No"}
        )
        assert store.tables.haulage == ()
        assert sorted(store.loaded_tables()) == ["CM_CargoMaster", "VM_berth_master"]

    def test_reload(self, tmp_path):
        store = TableStore(data_dir=tmp_path, sqlite=SQLiteStore(tmp_path / "absent.db"))
        assert store.tables.cargo_master == ()
        (tmp_path / "CM_CargoMaster.csv").write_text(
            "CargoDescription,SoRNoCode\nSugar,W-205\n", encoding="utf-8",
        )
        store.reload()
        assert store.tables.cargo_master[0].description == "Sugar"

    def test_from_rows(self):
        store = TableStore.from_rows({"VM_currency_lookup": [{"INR": "1", "USD": "83"}]})
        assert store.sources()["VM_currency_lookup"] == "memory"
        assert store.sources()["VM_berth_master"] == "missing"
        assert store.loaded_tables() == ["VM_currency_lookup"]


class TestRateTables:

    def test_every_sample_table_is_typed(self):
        tables = RateTables.from_rows(SAMPLE_ROWS)
        counts = tables.counts()
        assert set(counts) == set(TABLE_NAMES)
        assert all(n > 0 for n in counts.values())

    def test_find_cargo_case_insensitive(self):
        tables = RateTables.from_rows(SAMPLE_ROWS)
        found = tables.find_cargo("  coal ")
        assert isinstance(found, CargoRecord)
        assert found.sor_code == "W-101"
        assert tables.find_cargo("Bauxite") is None
        assert tables.find_cargo("") is None
