import json
import sqlite3
from datetime import UTC, datetime
from typing import Any

from loadrush.domain.entities import LoadRecord


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def _iso(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat()


class SQLiteLoadRepo:
    """
    SQLite adapter for loads.

    The full document is stored as JSON; the columns duplicated beside it
    exist only for filtering.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        return conn

    def save(self, load: LoadRecord) -> LoadRecord:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO loads (
                    id, created_by, status, delivery_date,
                    is_archived, archived_at, archived_reason,
                    doc_json, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    created_by=excluded.created_by,
                    status=excluded.status,
                    delivery_date=excluded.delivery_date,
                    is_archived=excluded.is_archived,
                    archived_at=excluded.archived_at,
                    archived_reason=excluded.archived_reason,
                    doc_json=excluded.doc_json,
                    updated_at=excluded.updated_at
            """,
                (
                    load.id,
                    load.created_by,
                    load.status,
                    _iso(load.delivery_date),
                    1 if load.is_archived else 0,
                    _iso(load.archived_at),
                    load.archived_reason,
                    json.dumps(load.to_document()),
                    datetime.now(UTC).isoformat(),
                ),
            )
            conn.commit()
            return load
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_id(self, load_id: str) -> LoadRecord | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT doc_json FROM loads WHERE id = ?", (load_id,)).fetchone()
            if not row:
                return None
            return self._map_row(row)
        finally:
            conn.close()

    def list_archive_candidates(
        self,
        statuses: tuple[str, ...],
        delivered_before: datetime,
        limit: int,
    ) -> list[LoadRecord]:
        if not statuses:
            return []
        placeholders = ", ".join("?" for _ in statuses)
        conn = self._get_conn()
        try:
            rows = conn.execute(
                f"""
                SELECT doc_json FROM loads
                WHERE is_archived = 0
                  AND status IN ({placeholders})
                  AND delivery_date IS NOT NULL
                  AND delivery_date < ?
                ORDER BY delivery_date ASC, id ASC
                LIMIT ?
            """,
                (*statuses, _iso(delivered_before), limit),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def list_purge_candidates(
        self,
        archived_before: datetime,
        archived_reason: str | None,
        limit: int,
    ) -> list[LoadRecord]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT doc_json FROM loads
                WHERE is_archived = 1
                  AND archived_at IS NOT NULL
                  AND archived_at < ?
                  AND (? IS NULL OR archived_reason = ?)
                ORDER BY archived_at ASC, id ASC
                LIMIT ?
            """,
                (_iso(archived_before), archived_reason, archived_reason, limit),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def list_by_owner(self, owner_id: str) -> list[LoadRecord]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT doc_json FROM loads WHERE created_by = ? ORDER BY id ASC",
                (owner_id,),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def delete(self, load_id: str) -> bool:
        conn = self._get_conn()
        try:
            cursor = conn.execute("DELETE FROM loads WHERE id = ?", (load_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> LoadRecord:
        return LoadRecord.from_document(json.loads(row["doc_json"]))


class SQLiteKeyValueStore:
    """SQLite adapter for string key/value pairs (cache and event log backing)."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        return conn

    def get_item(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
            return row["value"] if row else None
        finally:
            conn.close()

    def set_item(self, key: str, value: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value=excluded.value,
                    updated_at=excluded.updated_at
            """,
                (key, value, datetime.now(UTC).isoformat()),
            )
            conn.commit()
        finally:
            conn.close()

    def remove_item(self, key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()
