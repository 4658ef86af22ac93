"""
Fetch-modify-store over directory records.

All directory mutations follow the same cycle: fetch the record for a key
(or fabricate an empty, unsaved one), change the ``ContactContainer`` in
memory and write it back.  Nothing is locked.  Instead every write names
the version it was based on; if another writer got there first the store
rejects it and ``update`` starts over from a fresh fetch.  After
``commit_retries`` lost races the operation fails with
``CommitConflictError`` and the in-memory change is discarded, so a
concurrent addition is never silently lost.
"""

import logging
from typing import Callable, Optional, Tuple, TypeVar

from contact_service_api.app.core.config import settings
from contact_service_api.app.core.errors import (
    CommitConflictError,
    ForbiddenError,
    RecordExistsError,
    VersionConflictError,
)
from contact_service_api.app.identity.resolver import IdentityResolver
from contact_service_api.app.schemas.container import ContactContainer
from contact_service_api.app.storage.directory_store import DirectoryStore, Record

logger = logging.getLogger(__name__)

T = TypeVar("T")

# A mutation returns whether it changed the container and the value to hand back.
Mutation = Callable[[ContactContainer], Tuple[bool, T]]


class ContainerRepository:
    """Loads, mutates and commits ``ContactContainer`` records."""

    def __init__(
        self,
        store: DirectoryStore,
        resolver: IdentityResolver,
        commit_retries: Optional[int] = None,
    ) -> None:
        self.store = store
        self.resolver = resolver
        self.commit_retries = max(1, commit_retries if commit_retries is not None else settings.commit_retries)

    def fetch(self, key: str, reader: Optional[str] = None) -> Optional[Tuple[Record, ContactContainer]]:
        """Return the stored record and its container, or ``None`` if absent."""
        record = self.store.fetch(key)
        if record is None:
            return None
        if reader is not None:
            self.ensure_readable(record, reader)
        return record, ContactContainer.from_content(record.content)

    def load(
        self,
        key: str,
        owner: str,
        public: bool = False,
        reader: Optional[str] = None,
    ) -> Tuple[Record, ContactContainer]:
        """Fetch ``key`` or fabricate an unsaved record owned by ``owner``."""
        found = self.fetch(key, reader)
        if found is not None:
            return found
        return Record(key=key, owner=owner, public=public), ContactContainer()

    def commit(self, record: Record, container: ContactContainer, writer: str) -> Record:
        """Write ``container`` into ``record``; creates the key if it was never stored."""
        content = container.to_content()
        if not record.stored:
            return self.store.create(record.key, content, owner=record.owner, public=record.public)
        return self.store.store(record, content, writer)

    def discard(self, record: Record, writer: str) -> None:
        """Delete a stored record; the key can be created again afterwards."""
        self.store.delete(record, writer)

    def update(
        self,
        key: str,
        owner: str,
        mutate: Mutation,
        writer: Optional[str] = None,
        public: bool = False,
        create_missing: bool = True,
    ) -> T:
        """Run a fetch-modify-store cycle with retry on lost version races.

        ``mutate`` may run several times and must only depend on the
        container it receives.  When it reports no change nothing is
        written.  With ``create_missing=False`` an absent key is handed
        to ``mutate`` as an empty container but never created.
        """
        writer = writer or owner
        for attempt in range(1, self.commit_retries + 1):
            record, container = self.load(key, owner, public=public)
            changed, result = mutate(container)
            if not changed or (not record.stored and not create_missing):
                return result
            try:
                self.commit(record, container, writer)
                return result
            except (VersionConflictError, RecordExistsError):
                logger.warning(
                    "Lost write race on %s (attempt %d of %d)", key, attempt, self.commit_retries
                )
        raise CommitConflictError(f"Could not commit {key} after {self.commit_retries} attempts")

    def ensure_readable(self, record: Record, reader: str) -> None:
        """Public records are readable by anyone, others by the owner or members of an owning group."""
        if record.public or record.owner == reader:
            return
        if self.resolver.is_group_member(record.owner, reader):
            return
        raise ForbiddenError(f"Not allowed to read {record.key}")
