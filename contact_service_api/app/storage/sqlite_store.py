"""
Directory store backed by the SQLite ``records`` table.

Conditional writes are a single ``UPDATE ... WHERE version = ?`` so two
writers racing on the same key cannot both succeed; the loser receives a
``VersionConflictError`` and retries from a fresh fetch.
"""

import json
import logging
import sqlite3
from typing import Any, Dict, Optional

from contact_service_api.app.core.db import get_connection
from contact_service_api.app.core.errors import (
    AuthorizationError,
    RecordExistsError,
    StorageFailure,
    VersionConflictError,
)
from contact_service_api.app.storage.directory_store import DirectoryStore, Record

logger = logging.getLogger(__name__)


class SQLiteDirectoryStore(DirectoryStore):
    """Directory store using one SQLite connection per call."""

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path

    def fetch(self, key: str) -> Optional[Record]:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT key, content, owner, public, version FROM records WHERE key = ?",
                (key,),
            ).fetchone()
            if not row:
                return None
            return self._to_record(row)
        except sqlite3.Error as e:
            logger.exception("Failed to fetch record %s", key)
            raise StorageFailure(f"Could not fetch {key}: {e}") from e
        finally:
            conn.close()

    def create(self, key: str, content: Dict[str, Any], owner: str, public: bool = False) -> Record:
        conn = self._connect()
        try:
            conn.execute(
                "INSERT INTO records (key, content, owner, public, version) VALUES (?, ?, ?, ?, 1)",
                (key, json.dumps(content), owner, int(public)),
            )
            conn.commit()
            return Record(key=key, owner=owner, content=content, version=1, public=public)
        except sqlite3.IntegrityError as e:
            conn.rollback()
            raise RecordExistsError(f"Record {key} already exists") from e
        except sqlite3.Error as e:
            conn.rollback()
            logger.exception("Failed to create record %s", key)
            raise StorageFailure(f"Could not create {key}: {e}") from e
        finally:
            conn.close()

    def store(self, record: Record, content: Dict[str, Any], writer: str) -> Record:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT owner, version FROM records WHERE key = ?", (record.key,)
            ).fetchone()
            if not row:
                raise VersionConflictError(f"Record {record.key} does not exist")
            if row["owner"] != writer:
                raise AuthorizationError(f"{writer} may not write {record.key}")
            cursor = conn.execute(
                "UPDATE records SET content = ?, version = version + 1, updated_at = CURRENT_TIMESTAMP "
                "WHERE key = ? AND version = ?",
                (json.dumps(content), record.key, record.version),
            )
            if cursor.rowcount != 1:
                conn.rollback()
                raise VersionConflictError(
                    f"Record {record.key} changed since version {record.version}"
                )
            conn.commit()
            return Record(
                key=record.key,
                owner=row["owner"],
                content=content,
                version=record.version + 1,
                public=record.public,
            )
        except sqlite3.Error as e:
            conn.rollback()
            logger.exception("Failed to store record %s", record.key)
            raise StorageFailure(f"Could not store {record.key}: {e}") from e
        finally:
            conn.close()

    def delete(self, record: Record, writer: str) -> None:
        conn = self._connect()
        try:
            row = conn.execute("SELECT owner FROM records WHERE key = ?", (record.key,)).fetchone()
            if not row:
                raise VersionConflictError(f"Record {record.key} does not exist")
            if row["owner"] != writer:
                raise AuthorizationError(f"{writer} may not delete {record.key}")
            cursor = conn.execute(
                "DELETE FROM records WHERE key = ? AND version = ?", (record.key, record.version)
            )
            if cursor.rowcount != 1:
                conn.rollback()
                raise VersionConflictError(
                    f"Record {record.key} changed since version {record.version}"
                )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.exception("Failed to delete record %s", record.key)
            raise StorageFailure(f"Could not delete {record.key}: {e}") from e
        finally:
            conn.close()

    def _connect(self) -> sqlite3.Connection:
        try:
            return get_connection(self.db_path)
        except sqlite3.Error as e:
            raise StorageFailure(f"Directory database unavailable: {e}") from e

    @staticmethod
    def _to_record(row: sqlite3.Row) -> Record:
        return Record(
            key=row["key"],
            owner=row["owner"],
            content=json.loads(row["content"]) if row["content"] else {},
            version=row["version"],
            public=bool(row["public"]),
        )
