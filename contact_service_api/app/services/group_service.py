"""
Service layer for named groups.

A group is an identity created through the resolver.  Its name is
claimed by a per-name record, ``groups_<name>``, which is owned by the
group itself so only members can later change or delete it.  A second,
public record, the registry, maps every name to its group handle for
discovery and is written by the service identity.

Creating and deleting a group touch both records.  When the second write
fails the first one is undone, so callers either see the full change or
a ``StorageFailure`` and the previous state:

* create: the per-name record is deleted again and the creator's
  membership revoked.  The group identity itself stays behind, empty.
* delete: the per-name record is recreated with its old mapping.

Deleting a group only revokes the caller.  Remaining members keep a
group that can no longer be found by name.

A name whose group identity no longer resolves counts as free: the next
``create_group`` deletes the stale per-name record and its registry entry
before claiming it.
"""

import logging
from typing import Optional, Tuple

from contact_service_api.app.core.config import settings
from contact_service_api.app.core.errors import (
    AlreadyExistsError,
    GroupNotFoundError,
    RecordExistsError,
    StorageFailure,
    UnknownAgentError,
    VersionConflictError,
)
from contact_service_api.app.identity.resolver import GroupHandle
from contact_service_api.app.schemas.container import ContactContainer
from contact_service_api.app.schemas.listing import Entry, Listing
from contact_service_api.app.schemas.outcome import Outcome
from contact_service_api.app.services.container_repository import ContainerRepository
from contact_service_api.app.services.keys import GROUP_REGISTRY_KEY, group_key
from contact_service_api.app.storage.directory_store import Record

logger = logging.getLogger(__name__)


def lookup_group(repository: ContainerRepository, name: str) -> Tuple[Record, GroupHandle]:
    """Find the per-name record of ``name`` and the group it maps to.

    Raises ``GroupNotFoundError`` when the name is not claimed or its
    group identity no longer resolves.  The returned handle is locked.
    """
    found = repository.fetch(group_key(name))
    if found is None:
        raise GroupNotFoundError(f"Group {name} not found")
    record, container = found
    group_id = container.get_group_id(name)
    if group_id is None:
        raise GroupNotFoundError(f"Group {name} not found")
    try:
        return record, repository.resolver.get_group(group_id)
    except UnknownAgentError as e:
        raise GroupNotFoundError(f"Group {name} no longer exists") from e


class GroupService:
    """Create, look up, list and delete groups by name."""

    def __init__(self, repository: ContainerRepository, service_agent_id: str = "") -> None:
        self.repository = repository
        self.resolver = repository.resolver
        self.service_agent_id = service_agent_id or settings.service_agent_id

    def create_group(self, owner_id: str, name: str) -> str:
        """Create group ``name`` with ``owner_id`` as its only member; returns the handle."""
        found = self.repository.fetch(group_key(name))
        if found is not None:
            record, container = found
            if self._resolves(container.get_group_id(name)):
                raise AlreadyExistsError("Group already exists")
            self._release_stale_claim(name, record, container)

        group = self.resolver.create_group([owner_id]).unlock(owner_id)
        claim = ContactContainer()
        claim.add_group(name, group.id)
        try:
            record = self.repository.commit(
                Record(key=group_key(name), owner=group.id), claim, writer=group.id
            )
        except StorageFailure as e:
            self._revoke(group, owner_id)
            if isinstance(e, RecordExistsError):
                # Another caller claimed the name between our check and the create.
                raise AlreadyExistsError("Group already exists") from e
            raise

        try:
            self._register(name, group.id)
        except StorageFailure:
            logger.exception("Registry update for group %s failed, releasing the name", name)
            try:
                self.repository.discard(record, writer=group.id)
            except StorageFailure:
                logger.exception("Could not release the name of group %s", name)
            self._revoke(group, owner_id)
            raise

        logger.info("Agent %s created group %s (%s)", owner_id, name, group.id)
        return group.id

    def get_group(self, caller_id: str, name: str) -> Entry:
        """Return the handle of ``name``; only members may read it."""
        record, group = lookup_group(self.repository, name)
        self.repository.ensure_readable(record, caller_id)
        return Entry(id=group.id, name=name)

    def list_groups(self, caller_id: str) -> Listing:
        """Registered groups that ``caller_id`` is a member of."""
        listing = Listing()
        found = self.repository.fetch(GROUP_REGISTRY_KEY)
        if found is None:
            return listing
        _, registry = found
        for name, group_id in sorted(registry.groups.items()):
            try:
                group = self.resolver.get_group(group_id)
            except UnknownAgentError:
                listing.stale += 1
                continue
            if group.is_member(caller_id):
                listing.items.append(Entry(id=group_id, name=name))
        if listing.stale:
            logger.warning("Skipped %d stale group(s) in the registry", listing.stale)
        return listing

    def delete_group(self, caller_id: str, name: str) -> Outcome:
        record, group = lookup_group(self.repository, name)
        group.unlock(caller_id)

        self.repository.discard(record, writer=group.id)
        try:
            self._unregister(name, group.id)
        except StorageFailure:
            logger.exception("Registry update for group %s failed, restoring the name", name)
            try:
                self.repository.commit(
                    Record(key=record.key, owner=group.id),
                    ContactContainer.from_content(record.content),
                    writer=group.id,
                )
            except StorageFailure:
                logger.exception("Could not restore the name of group %s", name)
            raise

        group.remove_member(caller_id)
        logger.info("Agent %s deleted group %s (%s)", caller_id, name, group.id)
        return Outcome.REMOVED

    def _resolves(self, group_id: Optional[str]) -> bool:
        if not group_id:
            return False
        try:
            self.resolver.get_group(group_id)
        except UnknownAgentError:
            return False
        return True

    def _release_stale_claim(self, name: str, record: Record, container: ContactContainer) -> None:
        """Free a name whose group identity no longer resolves."""
        stale_id = container.get_group_id(name)
        logger.warning("Group %s maps to unknown group %s, releasing the name", name, stale_id)
        try:
            self.repository.discard(record, writer=record.owner)
        except VersionConflictError as e:
            raise AlreadyExistsError("Group already exists") from e
        if stale_id:
            self._unregister(name, stale_id)

    @staticmethod
    def _revoke(group: GroupHandle, agent_id: str) -> None:
        try:
            group.remove_member(agent_id)
        except StorageFailure:
            logger.exception("Could not revoke %s from group %s", agent_id, group.id)

    def _register(self, name: str, group_id: str) -> None:
        def mutate(registry: ContactContainer) -> Tuple[bool, None]:
            registry.add_group(name, group_id)
            return True, None

        self.repository.update(GROUP_REGISTRY_KEY, self.service_agent_id, mutate, public=True)

    def _unregister(self, name: str, group_id: str) -> None:
        def mutate(registry: ContactContainer) -> Tuple[bool, None]:
            # Leave the entry alone if the name already points at a newer group.
            if registry.get_group_id(name) != group_id:
                return False, None
            registry.remove_group(name)
            return True, None

        self.repository.update(
            GROUP_REGISTRY_KEY, self.service_agent_id, mutate, public=True, create_missing=False
        )
