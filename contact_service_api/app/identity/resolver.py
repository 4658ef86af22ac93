"""
Identity resolver contract, group handles and an in-memory resolver.

The resolver maps login names to stable agent ids and back, creates
group identities and hands out ``GroupHandle`` objects for them.  A
group handle must be unlocked by one of its members before its roster
can be read or changed; that is the only access control on group
membership and it lives here, not in the services.
"""

import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set

from contact_service_api.app.core.errors import AccessDeniedError, UnknownAgentError


@dataclass(frozen=True)
class AgentProfile:
    id: str
    login_name: str


class GroupHandle(ABC):
    """A group identity with a member list."""

    def __init__(self, group_id: str) -> None:
        self.id = group_id
        self._unlocked_by: Optional[str] = None

    def unlock(self, agent_id: str) -> "GroupHandle":
        """Act as the group on behalf of ``agent_id``, who must be a member."""
        if not self.is_member(agent_id):
            raise AccessDeniedError(f"Agent {agent_id} is not a member of group {self.id}")
        self._unlocked_by = agent_id
        return self

    def _require_unlocked(self) -> None:
        if self._unlocked_by is None:
            raise AccessDeniedError(f"Group {self.id} is locked")

    def add_member(self, agent_id: str) -> bool:
        """Add ``agent_id``; returns False if it was a member already."""
        self._require_unlocked()
        return self._add(agent_id)

    def remove_member(self, agent_id: str) -> bool:
        """Revoke ``agent_id``; returns False if it was not a member."""
        self._require_unlocked()
        return self._remove(agent_id)

    def list_members(self) -> List[str]:
        self._require_unlocked()
        return sorted(self._members())

    @abstractmethod
    def is_member(self, agent_id: str) -> bool: ...

    @abstractmethod
    def _members(self) -> Iterable[str]: ...

    @abstractmethod
    def _add(self, agent_id: str) -> bool: ...

    @abstractmethod
    def _remove(self, agent_id: str) -> bool: ...


class IdentityResolver(ABC):
    """Lookups and group creation provided by the identity system."""

    @abstractmethod
    def resolve_login(self, login_name: str) -> str:
        """Return the agent id for ``login_name`` or raise ``UnknownAgentError``."""

    @abstractmethod
    def resolve_profile(self, agent_id: str) -> AgentProfile:
        """Return the profile of a user agent or raise ``UnknownAgentError``."""

    @abstractmethod
    def create_group(self, members: Iterable[str]) -> GroupHandle:
        """Create a new group identity with ``members`` as its initial roster."""

    @abstractmethod
    def get_group(self, group_id: str) -> GroupHandle:
        """Return a locked handle for ``group_id`` or raise ``UnknownAgentError``."""

    def is_group_member(self, group_id: str, agent_id: str) -> bool:
        try:
            return self.get_group(group_id).is_member(agent_id)
        except UnknownAgentError:
            return False


class InMemoryGroup(GroupHandle):
    def __init__(self, group_id: str, roster: Set[str], lock: threading.Lock) -> None:
        super().__init__(group_id)
        self._roster = roster
        self._lock = lock

    def is_member(self, agent_id: str) -> bool:
        with self._lock:
            return agent_id in self._roster

    def _members(self) -> Iterable[str]:
        with self._lock:
            return list(self._roster)

    def _add(self, agent_id: str) -> bool:
        with self._lock:
            if agent_id in self._roster:
                return False
            self._roster.add(agent_id)
            return True

    def _remove(self, agent_id: str) -> bool:
        with self._lock:
            if agent_id not in self._roster:
                return False
            self._roster.discard(agent_id)
            return True


class InMemoryIdentityResolver(IdentityResolver):
    """Resolver keeping agents and group rosters in dictionaries."""

    def __init__(self) -> None:
        self._logins: Dict[str, str] = {}
        self._profiles: Dict[str, AgentProfile] = {}
        self._groups: Dict[str, Set[str]] = {}
        self._lock = threading.Lock()

    def register(self, login_name: str, agent_id: Optional[str] = None) -> str:
        """Register a user agent and return its id."""
        agent_id = agent_id or uuid.uuid4().hex
        with self._lock:
            self._logins[login_name] = agent_id
            self._profiles[agent_id] = AgentProfile(id=agent_id, login_name=login_name)
        return agent_id

    def forget(self, agent_id: str) -> None:
        """Drop an agent, leaving any stored references to it stale."""
        with self._lock:
            profile = self._profiles.pop(agent_id, None)
            if profile:
                self._logins.pop(profile.login_name, None)
            self._groups.pop(agent_id, None)

    def resolve_login(self, login_name: str) -> str:
        with self._lock:
            agent_id = self._logins.get(login_name)
        if agent_id is None:
            raise UnknownAgentError(f"Agent {login_name} does not exist.")
        return agent_id

    def resolve_profile(self, agent_id: str) -> AgentProfile:
        with self._lock:
            profile = self._profiles.get(agent_id)
        if profile is None:
            raise UnknownAgentError(f"Agent {agent_id} does not exist.")
        return profile

    def create_group(self, members: Iterable[str]) -> GroupHandle:
        group_id = uuid.uuid4().hex
        with self._lock:
            self._groups[group_id] = set(members)
        return InMemoryGroup(group_id, self._groups[group_id], self._lock)

    def get_group(self, group_id: str) -> GroupHandle:
        with self._lock:
            roster = self._groups.get(group_id)
        if roster is None:
            raise UnknownAgentError(f"Group {group_id} does not exist.")
        return InMemoryGroup(group_id, roster, self._lock)
