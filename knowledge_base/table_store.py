"""
knowledge_base/table_store.py
Rate table provider.

Each rate master is read from the SQLite database first and from
`<DATA_DIR>/<table>.csv` second. A table found in neither place is empty.
"""
import csv
from pathlib import Path
from typing import Any, Optional

from config.settings import settings
from knowledge_base.sqlite_store import SQLiteStore
from knowledge_base.tables import TABLE_NAMES, RateTables
from monitoring import get_logger

log = get_logger(__name__)


def read_csv_table(path: Path) -> list[dict[str, Any]]:
    """Read a delimited-text table; header cells and values are stripped."""
    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        rows = []
        for raw in reader:
            rows.append({
                (k or "").strip(): (v.strip() if isinstance(v, str) else v)
                for k, v in raw.items()
                if k is not None
            })
        return rows


class TableStore:
    """
    Read-optimised interface to the SPLS rate tables.
    Lazy-loads on first access and caches in memory.
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        sqlite: Optional[SQLiteStore] = None,
    ) -> None:
        self.data_dir = Path(data_dir or settings.data_dir)
        self.sqlite = sqlite
        self._raw: Optional[dict[str, list[dict[str, Any]]]] = None
        self._tables: Optional[RateTables] = None
        self._sources: dict[str, str] = {}

    @classmethod
    def from_rows(cls, raw: dict[str, list[dict[str, Any]]]) -> "TableStore":
        """A store over rows already in memory (nothing is read from disk)."""
        store = cls()
        store._raw = {name: list(raw.get(name) or []) for name in TABLE_NAMES}
        store._sources = {
            name: ("memory" if raw.get(name) else "missing") for name in TABLE_NAMES
        }
        return store

    # ── Public API ────────────────────────────────────────────────────────────

    @property
    def raw(self) -> dict[str, list[dict[str, Any]]]:
        if self._raw is None:
            self._raw = self._load()
        return self._raw

    @property
    def tables(self) -> RateTables:
        if self._tables is None:
            self._tables = RateTables.from_rows(self.raw)
        return self._tables

    def reload(self) -> None:
        """Drop the cache; tables are re-read on next access."""
        self._raw = None
        self._tables = None
        self._sources = {}
        log.info("Rate table cache cleared, will reload on next access")

    def sources(self) -> dict[str, str]:
        """Table name → where it was loaded from (sqlite | csv | missing)."""
        _ = self.raw
        return dict(self._sources)

    def loaded_tables(self) -> list[str]:
        return [name for name, src in self.sources().items() if src != "missing"]

    # ── Private ───────────────────────────────────────────────────────────────

    def _load(self) -> dict[str, list[dict[str, Any]]]:
        store = self.sqlite
        if store is None:
            store = self.sqlite = SQLiteStore()

        raw: dict[str, list[dict[str, Any]]] = {}
        for name in TABLE_NAMES:
            rows = self._load_one(store, name)
            raw[name] = rows if rows is not None else []

        log.info(
            "Rate tables loaded",
            sqlite=sum(1 for s in self._sources.values() if s == "sqlite"),
            csv=sum(1 for s in self._sources.values() if s == "csv"),
            missing=sum(1 for s in self._sources.values() if s == "missing"),
        )
        return raw

    def _load_one(self, store: SQLiteStore, name: str) -> Optional[list[dict[str, Any]]]:
        try:
            rows = store.read_table(name)
        except Exception as exc:
            log.warning("SQLite read failed, trying CSV", table=name, error=str(exc))
            rows = None
        if rows is not None:
            self._sources[name] = "sqlite"
            return rows

        csv_path = self.data_dir / f"{name}.csv"
        if csv_path.is_file():
            self._sources[name] = "csv"
            return read_csv_table(csv_path)

        self._sources[name] = "missing"
        log.warning("Rate table not found in SQLite or CSV", table=name)
        return None


# ── Process-wide store ────────────────────────────────────────────────────────

_store: Optional[TableStore] = None


def get_table_store() -> TableStore:
    global _store
    if _store is None:
        _store = TableStore()
    return _store
