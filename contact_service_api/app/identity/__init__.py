"""Identity resolvers: login name lookup, agent profiles and group identities."""

from .resolver import AgentProfile, GroupHandle, IdentityResolver, InMemoryIdentityResolver  # noqa: F401
from .sqlite_resolver import SQLiteIdentityResolver  # noqa: F401
