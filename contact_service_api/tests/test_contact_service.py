import logging

import pytest

from contact_service_api.app.core.errors import UnknownAgentError
from contact_service_api.app.schemas.outcome import Outcome


def test_add_then_list(contacts):
    assert contacts.add_contact("adam-id", "eve") is Outcome.ADDED
    assert contacts.add_contact("adam-id", "abel") is Outcome.ADDED

    listing = contacts.list_contacts("adam-id")

    assert listing.names() == ["abel", "eve"]
    assert listing.ids() == ["abel-id", "eve-id"]
    assert listing.stale == 0


def test_add_is_idempotent(contacts, store):
    contacts.add_contact("adam-id", "eve")
    store.writes.clear()

    assert contacts.add_contact("adam-id", "eve") is Outcome.ALREADY
    assert store.writes == []
    assert contacts.list_contacts("adam-id").names() == ["eve"]


def test_remove_reverses_add(contacts):
    contacts.add_contact("adam-id", "eve")

    assert contacts.remove_contact("adam-id", "eve") is Outcome.REMOVED
    assert contacts.remove_contact("adam-id", "eve") is Outcome.NOT_FOUND
    assert contacts.list_contacts("adam-id").items == []


def test_remove_from_missing_list_creates_nothing(contacts, store):
    assert contacts.remove_contact("adam-id", "eve") is Outcome.NOT_FOUND
    assert store.fetch("contacts_adam-id") is None


def test_unknown_login_changes_nothing(contacts, store):
    contacts.add_contact("adam-id", "eve")
    before = store.fetch("contacts_adam-id")

    with pytest.raises(UnknownAgentError):
        contacts.add_contact("adam-id", "nobody")
    with pytest.raises(UnknownAgentError):
        contacts.remove_contact("adam-id", "nobody")

    assert store.fetch("contacts_adam-id") == before


def test_lists_are_per_owner(contacts):
    contacts.add_contact("adam-id", "eve")
    contacts.add_contact("adam-id", "abel")
    contacts.add_contact("eve-id", "adam")

    assert contacts.list_contacts("adam-id").names() == ["abel", "eve"]
    assert contacts.list_contacts("eve-id").names() == ["adam"]
    assert contacts.list_contacts("abel-id").items == []


def test_list_without_record_does_not_persist(contacts, store):
    assert contacts.list_contacts("cain-id").items == []
    assert store.fetch("contacts_cain-id") is None


def test_stale_contact_is_skipped_and_counted(contacts, resolver, caplog):
    contacts.add_contact("adam-id", "eve")
    contacts.add_contact("adam-id", "cain")
    resolver.forget("cain-id")

    with caplog.at_level(logging.WARNING):
        listing = contacts.list_contacts("adam-id")

    assert listing.names() == ["eve"]
    assert listing.stale == 1
    assert "Skipped 1 stale handle(s)" in caplog.text


def test_contact_record_is_owned_by_the_agent(contacts, store):
    contacts.add_contact("adam-id", "eve")

    record = store.fetch("contacts_adam-id")

    assert record.owner == "adam-id"
    assert record.public is False
