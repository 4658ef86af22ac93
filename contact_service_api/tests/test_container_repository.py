"""Fetch-modify-store cycle: fabrication, conditional writes and retry on lost races."""

from __future__ import annotations

import logging
import threading

import pytest

from contact_service_api.app.core.errors import (
    AuthorizationError,
    CommitConflictError,
    ForbiddenError,
    StorageFailure,
)
from contact_service_api.app.schemas.container import ContactContainer
from contact_service_api.app.services.container_repository import ContainerRepository
from contact_service_api.app.storage.directory_store import InMemoryDirectoryStore


def add(handle):
    def mutate(container: ContactContainer):
        added = container.add_contact(handle)
        return added, added

    return mutate


def test_load_fabricates_unsaved_record(repository, store):
    record, container = repository.load("contacts_adam-id", "adam-id")

    assert not record.stored
    assert record.owner == "adam-id"
    assert container.contacts == set()
    assert store.fetch("contacts_adam-id") is None


def test_commit_creates_then_overwrites(repository, store):
    record, container = repository.load("contacts_adam-id", "adam-id")
    container.add_contact("eve-id")
    record = repository.commit(record, container, "adam-id")
    assert record.version == 1

    container.add_contact("abel-id")
    record = repository.commit(record, container, "adam-id")

    assert record.version == 2
    assert store.fetch("contacts_adam-id").content["contacts"] == ["abel-id", "eve-id"]


def test_update_without_change_does_not_write(repository, store):
    repository.update("contacts_adam-id", "adam-id", add("eve-id"))
    store.writes.clear()

    assert repository.update("contacts_adam-id", "adam-id", add("eve-id")) is False
    assert store.writes == []


def test_update_without_create_missing_leaves_key_absent(repository, store):
    result = repository.update("contacts_adam-id", "adam-id", add("eve-id"), create_missing=False)

    assert result is True
    assert store.fetch("contacts_adam-id") is None


def test_concurrent_write_is_retried_not_lost(repository, store, caplog):
    repository.update("contacts_adam-id", "adam-id", add("eve-id"))

    def other_writer(s: InMemoryDirectoryStore) -> None:
        current = s.fetch("contacts_adam-id")
        content = {"contacts": current.content["contacts"] + ["abel-id"], "groups": {}}
        InMemoryDirectoryStore.store(s, current, content, "adam-id")

    store.before_write.append(other_writer)
    with caplog.at_level(logging.WARNING):
        repository.update("contacts_adam-id", "adam-id", add("cain-id"))

    stored = store.fetch("contacts_adam-id")
    assert sorted(stored.content["contacts"]) == ["abel-id", "cain-id", "eve-id"]
    assert stored.version == 3
    assert "Lost write race on contacts_adam-id" in caplog.text


def test_concurrent_create_is_retried_as_update(repository, store):
    def other_creator(s: InMemoryDirectoryStore) -> None:
        InMemoryDirectoryStore.create(
            s, "contacts_adam-id", {"contacts": ["abel-id"], "groups": {}}, "adam-id"
        )

    store.before_write.append(other_creator)
    repository.update("contacts_adam-id", "adam-id", add("eve-id"))

    assert sorted(store.fetch("contacts_adam-id").content["contacts"]) == ["abel-id", "eve-id"]


def test_retries_are_bounded(repository, store):
    repository.update("contacts_adam-id", "adam-id", add("eve-id"))

    def bump(s: InMemoryDirectoryStore) -> None:
        current = s.fetch("contacts_adam-id")
        InMemoryDirectoryStore.store(s, current, current.content, "adam-id")

    store.before_write.extend([bump] * repository.commit_retries)
    with pytest.raises(CommitConflictError):
        repository.update("contacts_adam-id", "adam-id", add("abel-id"))

    assert "abel-id" not in store.fetch("contacts_adam-id").content["contacts"]


def test_write_by_non_owner_is_a_storage_failure(repository):
    repository.update("addressbook", "contactservice", add("adam-id"), public=True)

    with pytest.raises(AuthorizationError) as exc_info:
        repository.update("addressbook", "contactservice", add("eve-id"), writer="eve-id")
    assert isinstance(exc_info.value, StorageFailure)


def test_private_record_is_forbidden_to_other_readers(repository):
    repository.update("contacts_adam-id", "adam-id", add("eve-id"))

    with pytest.raises(ForbiddenError):
        repository.fetch("contacts_adam-id", reader="eve-id")
    assert repository.fetch("contacts_adam-id", reader="adam-id") is not None


def test_parallel_writers_on_one_key_lose_nothing(store, resolver):
    repository = ContainerRepository(store, resolver, commit_retries=200)
    handles = [f"agent-{i}" for i in range(8)]
    threads = [
        threading.Thread(target=repository.update, args=("addressbook", "contactservice", add(h)))
        for h in handles
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(store.fetch("addressbook").content["contacts"]) == sorted(handles)
