"""Group lifecycle, rosters and the two-record consistency of create/delete."""

import pytest

from contact_service_api.app.core.errors import (
    AccessDeniedError,
    AlreadyExistsError,
    ForbiddenError,
    GroupNotFoundError,
    StorageFailure,
    UnknownAgentError,
)
from contact_service_api.app.schemas.outcome import Outcome
from contact_service_api.app.services.keys import GROUP_REGISTRY_KEY, group_key
from contact_service_api.app.storage.directory_store import InMemoryDirectoryStore


def registry(store):
    record = store.fetch("groups")
    return record.content["groups"] if record else {}


def fail_from_next_write(*keys):
    def arm(s):
        s.failing.update(keys)

    return arm


@pytest.fixture
def created_groups(resolver, monkeypatch):
    created = []
    create = resolver.create_group

    def recording(members):
        group = create(members)
        created.append(group.id)
        return group

    monkeypatch.setattr(resolver, "create_group", recording)
    return created


def test_create_group_claims_name_and_registers_it(groups, store, resolver):
    group_id = groups.create_group("adam-id", "friends")

    claim = store.fetch("groups_friends")
    assert claim.owner == group_id
    assert claim.content["groups"] == {"friends": group_id}
    assert registry(store) == {"friends": group_id}
    assert store.fetch("groups").public is True
    assert resolver.get_group(group_id).is_member("adam-id")


def test_group_names_are_unique(groups, store):
    first = groups.create_group("adam-id", "friends")

    with pytest.raises(AlreadyExistsError):
        groups.create_group("eve-id", "friends")

    assert registry(store) == {"friends": first}


def test_losing_the_create_race_releases_the_new_group(groups, store, resolver):
    def other_claim(s):
        InMemoryDirectoryStore.create(
            s, "groups_friends", {"contacts": [], "groups": {"friends": "other"}}, "other"
        )

    store.before_write.append(other_claim)
    with pytest.raises(AlreadyExistsError):
        groups.create_group("adam-id", "friends")

    assert registry(store) == {}
    assert groups.list_groups("adam-id").items == []


def test_list_groups_only_shows_memberships(groups, members):
    groups.create_group("adam-id", "friends")
    groups.create_group("eve-id", "family")
    members.add_member("eve-id", "family", "adam")
    groups.create_group("abel-id", "work")

    assert groups.list_groups("adam-id").names() == ["family", "friends"]
    assert groups.list_groups("eve-id").names() == ["family"]
    assert groups.list_groups("cain-id").items == []


def test_get_group_is_member_only(groups):
    group_id = groups.create_group("adam-id", "friends")

    entry = groups.get_group("adam-id", "friends")
    assert (entry.id, entry.name) == (group_id, "friends")

    with pytest.raises(ForbiddenError):
        groups.get_group("eve-id", "friends")
    with pytest.raises(GroupNotFoundError):
        groups.get_group("adam-id", "enemies")


def test_delete_group_releases_the_name(groups, store, resolver):
    old_id = groups.create_group("adam-id", "friends")

    assert groups.delete_group("adam-id", "friends") is Outcome.REMOVED

    assert store.fetch("groups_friends") is None
    assert registry(store) == {}
    assert not resolver.get_group(old_id).is_member("adam-id")
    with pytest.raises(GroupNotFoundError):
        groups.get_group("adam-id", "friends")

    new_id = groups.create_group("eve-id", "friends")
    assert new_id != old_id
    assert registry(store) == {"friends": new_id}


def test_delete_group_requires_membership(groups, store):
    groups.create_group("adam-id", "friends")

    with pytest.raises(AccessDeniedError):
        groups.delete_group("eve-id", "friends")

    assert store.fetch("groups_friends") is not None


def test_delete_unknown_group(groups):
    with pytest.raises(GroupNotFoundError):
        groups.delete_group("adam-id", "friends")


def test_failed_registration_undoes_the_claim(groups, store, resolver):
    store.failing.add("groups")

    with pytest.raises(StorageFailure):
        groups.create_group("adam-id", "friends")

    assert store.fetch("groups_friends") is None
    store.failing.clear()
    assert groups.create_group("eve-id", "friends")


def test_failed_unregistration_restores_the_claim(groups, store):
    group_id = groups.create_group("adam-id", "friends")
    store.failing.add("groups")

    with pytest.raises(StorageFailure):
        groups.delete_group("adam-id", "friends")

    store.failing.clear()
    assert registry(store) == {"friends": group_id}
    assert groups.get_group("adam-id", "friends").id == group_id


def test_stale_registry_entry_is_counted(groups, resolver):
    group_id = groups.create_group("adam-id", "friends")
    groups.create_group("adam-id", "family")
    resolver.forget(group_id)

    listing = groups.list_groups("adam-id")

    assert listing.names() == ["family"]
    assert listing.stale == 1


def test_roster_add_list_remove(groups, members):
    groups.create_group("adam-id", "friends")

    assert members.add_member("adam-id", "friends", "eve") is Outcome.ADDED
    assert members.add_member("adam-id", "friends", "eve") is Outcome.ALREADY
    assert members.list_members("eve-id", "friends").names() == ["adam", "eve"]

    assert members.remove_member("eve-id", "friends", "adam") is Outcome.REMOVED
    assert members.remove_member("eve-id", "friends", "adam") is Outcome.NOT_FOUND
    assert members.list_members("eve-id", "friends").names() == ["eve"]


def test_non_member_cannot_touch_roster(groups, members):
    groups.create_group("adam-id", "friends")

    with pytest.raises(ForbiddenError):
        members.list_members("eve-id", "friends")
    with pytest.raises(ForbiddenError):
        members.add_member("eve-id", "friends", "eve")
    assert members.list_members("adam-id", "friends").names() == ["adam"]


def test_roster_of_unknown_group_or_agent(groups, members):
    groups.create_group("adam-id", "friends")

    with pytest.raises(GroupNotFoundError):
        members.add_member("adam-id", "enemies", "eve")
    with pytest.raises(UnknownAgentError):
        members.add_member("adam-id", "friends", "nobody")


def test_new_member_can_see_the_group(groups, members):
    group_id = groups.create_group("adam-id", "friends")
    members.add_member("adam-id", "friends", "eve")

    assert groups.get_group("eve-id", "friends").id == group_id
    assert groups.list_groups("eve-id").names() == ["friends"]


def test_registry_key_differs_from_every_name_key():
    assert GROUP_REGISTRY_KEY != group_key("")


def test_group_whose_identity_vanished_is_not_found(groups, resolver):
    group_id = groups.create_group("adam-id", "friends")
    resolver.forget(group_id)

    with pytest.raises(GroupNotFoundError):
        groups.get_group("adam-id", "friends")
    with pytest.raises(GroupNotFoundError):
        groups.delete_group("adam-id", "friends")


def test_name_of_vanished_group_can_be_claimed_again(groups, resolver, store):
    old_id = groups.create_group("adam-id", "friends")
    resolver.forget(old_id)

    new_id = groups.create_group("eve-id", "friends")

    assert registry(store) == {"friends": new_id}
    assert store.fetch("groups_friends").owner == new_id
    assert groups.get_group("eve-id", "friends").id == new_id
    assert groups.list_groups("eve-id").stale == 0


def test_failed_claim_revokes_the_creator(groups, store, resolver, created_groups):
    store.failing.add("groups_friends")

    with pytest.raises(StorageFailure):
        groups.create_group("adam-id", "friends")

    assert not resolver.is_group_member(created_groups[0], "adam-id")
    assert registry(store) == {}


def test_lost_claim_race_revokes_the_creator(groups, store, resolver, created_groups):
    def other_claim(s):
        InMemoryDirectoryStore.create(s, "groups_friends", {"groups": {"friends": "other"}}, "other")

    store.before_write.append(other_claim)
    with pytest.raises(AlreadyExistsError):
        groups.create_group("adam-id", "friends")

    assert not resolver.is_group_member(created_groups[0], "adam-id")


def test_failed_release_keeps_the_registry_error(groups, store, resolver, created_groups, caplog):
    store.before_write.append(fail_from_next_write("groups", "groups_friends"))

    with pytest.raises(StorageFailure) as exc_info:
        groups.create_group("adam-id", "friends")

    assert str(exc_info.value).endswith("writing groups")
    assert not resolver.is_group_member(created_groups[0], "adam-id")
    assert "Could not release the name of group friends" in caplog.text


def test_failed_restore_keeps_the_registry_error(groups, store, caplog):
    groups.create_group("adam-id", "friends")
    store.before_write.append(fail_from_next_write("groups", "groups_friends"))

    with pytest.raises(StorageFailure) as exc_info:
        groups.delete_group("adam-id", "friends")

    assert str(exc_info.value).endswith("writing groups")
    assert "Could not restore the name of group friends" in caplog.text
