"""
Directory store contract and an in-memory implementation.

A directory store is a key-addressed store of versioned records.  Each
record carries JSON content, the identity that owns it (the only identity
allowed to overwrite it) and a ``public`` flag that makes it readable by
any caller.  Writes are optimistic: ``store`` is rejected when the record
it was given is not the current version, which is what lets the
fetch-modify-store cycle in ``services.container_repository`` detect and
retry lost updates instead of silently overwriting them.
"""

import copy
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from contact_service_api.app.core.errors import (
    AuthorizationError,
    RecordExistsError,
    VersionConflictError,
)


@dataclass(frozen=True)
class Record:
    """A record as returned by the store.

    ``version`` is ``None`` for a record that was fabricated locally and
    has never been written.
    """

    key: str
    owner: str
    content: Dict[str, Any] = field(default_factory=dict)
    version: Optional[int] = None
    public: bool = False

    @property
    def stored(self) -> bool:
        return self.version is not None


class DirectoryStore(ABC):
    """Operations every directory store backend provides."""

    @abstractmethod
    def fetch(self, key: str) -> Optional[Record]:
        """Return the current record for ``key`` or ``None`` when absent."""

    @abstractmethod
    def create(self, key: str, content: Dict[str, Any], owner: str, public: bool = False) -> Record:
        """Create ``key``; raises ``RecordExistsError`` if it is taken."""

    @abstractmethod
    def store(self, record: Record, content: Dict[str, Any], writer: str) -> Record:
        """Overwrite ``record`` with ``content`` on behalf of ``writer``.

        Raises ``AuthorizationError`` when ``writer`` does not own the
        record and ``VersionConflictError`` when ``record.version`` is
        stale.  Returns the record at its new version.
        """

    @abstractmethod
    def delete(self, record: Record, writer: str) -> None:
        """Remove ``record`` so its key can be created again.

        Same ownership and version rules as ``store``.
        """


class InMemoryDirectoryStore(DirectoryStore):
    """Thread-safe store kept in a dictionary.

    Used by the test-suite and for running the service without a
    database.  Content is deep-copied on the way in and out so callers
    never share state with the store.
    """

    def __init__(self) -> None:
        self._records: Dict[str, Record] = {}
        self._lock = threading.Lock()

    def fetch(self, key: str) -> Optional[Record]:
        with self._lock:
            record = self._records.get(key)
            if record is None:
                return None
            return replace(record, content=copy.deepcopy(record.content))

    def create(self, key: str, content: Dict[str, Any], owner: str, public: bool = False) -> Record:
        with self._lock:
            if key in self._records:
                raise RecordExistsError(f"Record {key} already exists")
            record = Record(key=key, owner=owner, content=copy.deepcopy(content), version=1, public=public)
            self._records[key] = record
            return replace(record, content=copy.deepcopy(content))

    def store(self, record: Record, content: Dict[str, Any], writer: str) -> Record:
        with self._lock:
            current = self._check_write(record, writer)
            updated = replace(current, content=copy.deepcopy(content), version=current.version + 1)
            self._records[record.key] = updated
            return replace(updated, content=copy.deepcopy(content))

    def delete(self, record: Record, writer: str) -> None:
        with self._lock:
            self._check_write(record, writer)
            del self._records[record.key]

    def _check_write(self, record: Record, writer: str) -> Record:
        current = self._records.get(record.key)
        if current is None:
            raise VersionConflictError(f"Record {record.key} does not exist")
        if writer != current.owner:
            raise AuthorizationError(f"{writer} may not write {record.key}")
        if record.version != current.version:
            raise VersionConflictError(
                f"Record {record.key} is at version {current.version}, write was based on {record.version}"
            )
        return current
