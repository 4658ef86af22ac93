"""Shared fixtures: isolated in-memory collaborators and the services built on them."""

from __future__ import annotations

from typing import Any, Callable, Dict, List

import pytest
from fastapi.testclient import TestClient

from contact_service_api.app.core.errors import StorageFailure
from contact_service_api.app.core.security import create_access_token
from contact_service_api.app.identity.resolver import InMemoryIdentityResolver
from contact_service_api.app.main import create_app
from contact_service_api.app.services.address_book_service import AddressBookService
from contact_service_api.app.services.contact_service import ContactService
from contact_service_api.app.services.container_repository import ContainerRepository
from contact_service_api.app.services.group_service import GroupService
from contact_service_api.app.services.membership_service import MembershipService
from contact_service_api.app.storage.directory_store import InMemoryDirectoryStore, Record

SERVICE_AGENT = "contactservice"
AGENTS = ("adam", "eve", "abel", "cain")


class ScriptedStore(InMemoryDirectoryStore):
    """In-memory store that can simulate other writers and failing keys.

    ``before_write`` callbacks run, one per write, right before the next
    ``create``/``store`` call; they write through the base class so they
    act like a concurrent client.  Writes to keys in ``failing`` raise
    ``StorageFailure``.
    """

    def __init__(self) -> None:
        super().__init__()
        self.before_write: List[Callable[[InMemoryDirectoryStore], None]] = []
        self.failing: set[str] = set()
        self.writes: List[str] = []

    def _intercept(self, key: str) -> None:
        if key in self.failing:
            raise StorageFailure(f"Simulated failure writing {key}")
        if self.before_write:
            self.before_write.pop(0)(self)

    def create(self, key: str, content: Dict[str, Any], owner: str, public: bool = False) -> Record:
        self._intercept(key)
        self.writes.append(key)
        return super().create(key, content, owner, public)

    def store(self, record: Record, content: Dict[str, Any], writer: str) -> Record:
        self._intercept(record.key)
        self.writes.append(record.key)
        return super().store(record, content, writer)

    def delete(self, record: Record, writer: str) -> None:
        self._intercept(record.key)
        self.writes.append(record.key)
        super().delete(record, writer)


@pytest.fixture
def store() -> ScriptedStore:
    return ScriptedStore()


@pytest.fixture
def resolver() -> InMemoryIdentityResolver:
    resolver = InMemoryIdentityResolver()
    for login in AGENTS:
        resolver.register(login, agent_id=f"{login}-id")
    return resolver


@pytest.fixture
def repository(store, resolver) -> ContainerRepository:
    return ContainerRepository(store, resolver, commit_retries=3)


@pytest.fixture
def contacts(repository) -> ContactService:
    return ContactService(repository)


@pytest.fixture
def groups(repository) -> GroupService:
    return GroupService(repository, SERVICE_AGENT)


@pytest.fixture
def members(repository) -> MembershipService:
    return MembershipService(repository)


@pytest.fixture
def address_book(repository) -> AddressBookService:
    return AddressBookService(repository, SERVICE_AGENT)


@pytest.fixture
def app(store, resolver):
    return create_app(store=store, resolver=resolver, service_agent_id=SERVICE_AGENT)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth() -> Callable[[str], Dict[str, str]]:
    def _headers(login: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(f'{login}-id')}"}

    return _headers
