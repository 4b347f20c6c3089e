"""
knowledge_base/sqlite_store.py
Rate tables: SQLite layer.

The SPLS database holds one table per rate master (VM_berth_master,
CM_DemurrageSlabs, ...). The estimator only ever reads from it; rows come back
as plain dicts keyed by the column names exactly as stored.
"""
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Optional

from config.settings import settings
from monitoring import get_logger

log = get_logger(__name__)

DB_PATH = Path(settings.sqlite_db_path)


class SQLiteStore:
    """
    Read-only interface to the SPLS rate database.
    Used by:
      - TableStore:  loads each rate master by name
      - /health:     reports row counts
    """

    def __init__(self, db_path: Optional[Path] = None) -> None:
        self.db_path = Path(db_path) if db_path else DB_PATH
        log.info("SQLite store ready", path=str(self.db_path), exists=self.exists)

    @property
    def exists(self) -> bool:
        return self.db_path.is_file()

    @contextmanager
    def _conn(self):
        # mode=ro so a missing database is never created as a side effect
        conn = sqlite3.connect(f"file:{self.db_path}?mode=ro", uri=True)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    # ── Read ──────────────────────────────────────────────────────────────────

    def table_names(self) -> list[str]:
        if not self.exists:
            return []
        with self._conn() as conn:
            rows = conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
            ).fetchall()
            return [r["name"] for r in rows]

    def has_table(self, name: str) -> bool:
        return name in self.table_names()

    def read_table(self, name: str) -> Optional[list[dict[str, Any]]]:
        """Return every row of `name` in rowid order, or None if the table is absent."""
        if not self.has_table(name):
            return None
        with self._conn() as conn:
            # name is checked against sqlite_master above, quoting handles spaces
            rows = conn.execute(f'SELECT * FROM "{name}"').fetchall()
            return [dict(r) for r in rows]

    def stats(self) -> dict[str, int]:
        """Return row counts per table."""
        result = {}
        names = self.table_names()
        if not names:
            return result
        with self._conn() as conn:
            for t in names:
                result[t] = conn.execute(f'SELECT COUNT(*) AS n FROM "{t}"').fetchone()["n"]
        return result
