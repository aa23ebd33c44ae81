from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from .errors import StorageError
from .storage_schema import initialize_sqlite

_CREATOR_COLUMNS = (
    "id, url, platform, profile_data, posts_data, profile_score, "
    "config_hash, scrape_errors, scraped_at, created_at, updated_at"
)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _json_dumps(value: Any) -> str:
    return json.dumps(
        value,
        ensure_ascii=False,
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )


def _json_loads(raw: str | None) -> Any:
    text = (raw or "").strip()
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise StorageError(f"Stored JSON could not be parsed: {e}") from e


@dataclass(frozen=True)
class CreatorRecord:
    id: int
    url: str
    platform: str | None
    profile_data: Any
    posts_data: Any
    profile_score: int | None
    config_hash: str | None
    scraped_at: str | None
    created_at: str
    updated_at: str
    # Stage name to error message for the scrape that filled this row.
    scrape_errors: dict[str, str] = field(default_factory=dict)


class SQLiteCreatorStore:
    """
    Key-value style store for submitted creator profiles and their scrape results.

    One row per submission; rows are created first and filled in once scraping completes.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._conn.row_factory = sqlite3.Row

    @classmethod
    def open(cls, path: str | Path) -> "SQLiteCreatorStore":
        db_path = str(path)
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        try:
            conn = sqlite3.connect(db_path)
        except sqlite3.DatabaseError as e:
            raise StorageError(f"Failed to open sqlite database: {db_path}: {e}") from e

        try:
            initialize_sqlite(conn)
        except Exception as e:
            conn.close()
            raise StorageError(f"Failed to initialize sqlite schema: {e}") from e

        return cls(conn)

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "SQLiteCreatorStore":
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    @property
    def conn(self) -> sqlite3.Connection:
        return self._conn

    def create_creator(
        self,
        url: str,
        *,
        platform: str | None = None,
        created_at: str | None = None,
    ) -> CreatorRecord:
        u = (url or "").strip()
        if not u:
            raise ValueError("url must be non-empty")

        ts = (created_at or _utc_now_iso()).strip()

        try:
            with self._conn:
                cur = self._conn.execute(
                    "INSERT INTO creators(url, platform, created_at, updated_at) VALUES (?, ?, ?, ?)",
                    (u, platform, ts, ts),
                )
        except sqlite3.DatabaseError as e:
            raise StorageError(f"Failed to save creator data: {e}") from e

        creator_id = cur.lastrowid
        record = self.get_creator(int(creator_id)) if creator_id is not None else None
        if record is None:
            raise StorageError("Failed to read creator record after insert")
        return record

    def get_creator(self, creator_id: int) -> CreatorRecord | None:
        try:
            row = self._conn.execute(
                f"SELECT {_CREATOR_COLUMNS} FROM creators WHERE id = ?",
                (int(creator_id),),
            ).fetchone()
        except sqlite3.DatabaseError as e:
            raise StorageError(f"Failed to read creator {creator_id}: {e}") from e

        if row is None:
            return None
        return _record_from_row(row)

    def save_scrape_results(
        self,
        creator_id: int,
        *,
        profile_data: Any,
        posts_data: Any,
        profile_score: int | None,
        config_hash: str | None = None,
        scrape_errors: Mapping[str, str] | None = None,
        scraped_at: str | None = None,
    ) -> None:
        ts = (scraped_at or _utc_now_iso()).strip()

        try:
            with self._conn:
                cur = self._conn.execute(
                    """
                    UPDATE creators SET
                      profile_data = ?,
                      posts_data = ?,
                      profile_score = ?,
                      config_hash = ?,
                      scrape_errors = ?,
                      scraped_at = ?,
                      updated_at = ?
                    WHERE id = ?
                    """.strip(),
                    (
                        _json_dumps(profile_data) if profile_data is not None else None,
                        _json_dumps(posts_data) if posts_data is not None else None,
                        profile_score,
                        config_hash,
                        _json_dumps(dict(scrape_errors)) if scrape_errors else None,
                        ts,
                        ts,
                        int(creator_id),
                    ),
                )
        except sqlite3.DatabaseError as e:
            raise StorageError(f"Failed to save scrape results: {e}") from e

        if cur.rowcount == 0:
            raise StorageError(f"Creator not found: {creator_id}")

    def creator_count(self) -> int:
        row = self._conn.execute("SELECT COUNT(1) AS n FROM creators").fetchone()
        return int(row["n"]) if row is not None else 0


def _record_from_row(row: sqlite3.Row) -> CreatorRecord:
    return CreatorRecord(
        id=int(row["id"]),
        url=str(row["url"]),
        platform=str(row["platform"]) if row["platform"] is not None else None,
        profile_data=_json_loads(row["profile_data"]),
        posts_data=_json_loads(row["posts_data"]),
        profile_score=int(row["profile_score"]) if row["profile_score"] is not None else None,
        config_hash=str(row["config_hash"]) if row["config_hash"] is not None else None,
        scraped_at=str(row["scraped_at"]) if row["scraped_at"] is not None else None,
        created_at=str(row["created_at"]),
        updated_at=str(row["updated_at"]),
        scrape_errors=_errors_from_json(row["scrape_errors"]),
    )


def _errors_from_json(raw: str | None) -> dict[str, str]:
    value = _json_loads(raw)
    if not isinstance(value, dict):
        return {}
    return {str(k): str(v) for k, v in value.items()}
