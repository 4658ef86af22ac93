"""
Identity resolver backed by the SQLite ``agents`` and ``group_members`` tables.

User agents are registered out of band (see ``register_agent.py``); the
service itself only creates group agents.  Roster changes are written
immediately, there is no separate "store agent" step.
"""

import logging
import sqlite3
import uuid
from typing import Iterable, List, Optional

from contact_service_api.app.core.db import get_connection
from contact_service_api.app.core.errors import StorageFailure, UnknownAgentError
from contact_service_api.app.identity.resolver import AgentProfile, GroupHandle, IdentityResolver

logger = logging.getLogger(__name__)


class SQLiteGroup(GroupHandle):
    def __init__(self, group_id: str, resolver: "SQLiteIdentityResolver") -> None:
        super().__init__(group_id)
        self._resolver = resolver

    def is_member(self, agent_id: str) -> bool:
        row = self._resolver._query_one(
            "SELECT 1 FROM group_members WHERE group_id = ? AND agent_id = ?",
            (self.id, agent_id),
        )
        return row is not None

    def _members(self) -> Iterable[str]:
        rows = self._resolver._query_all(
            "SELECT agent_id FROM group_members WHERE group_id = ?", (self.id,)
        )
        return [row["agent_id"] for row in rows]

    def _add(self, agent_id: str) -> bool:
        changed = self._resolver._execute(
            "INSERT OR IGNORE INTO group_members (group_id, agent_id) VALUES (?, ?)",
            (self.id, agent_id),
        )
        if changed:
            logger.info("Agent %s added to group %s", agent_id, self.id)
        return changed > 0

    def _remove(self, agent_id: str) -> bool:
        changed = self._resolver._execute(
            "DELETE FROM group_members WHERE group_id = ? AND agent_id = ?",
            (self.id, agent_id),
        )
        if changed:
            logger.info("Agent %s revoked from group %s", agent_id, self.id)
        return changed > 0


class SQLiteIdentityResolver(IdentityResolver):
    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path

    def register(self, login_name: str, agent_id: Optional[str] = None) -> str:
        """Register a user agent; used by the ``register_agent.py`` script and tests."""
        agent_id = agent_id or uuid.uuid4().hex
        self._execute(
            "INSERT INTO agents (id, login_name, kind) VALUES (?, ?, 'user')",
            (agent_id, login_name),
        )
        return agent_id

    def resolve_login(self, login_name: str) -> str:
        row = self._query_one(
            "SELECT id FROM agents WHERE login_name = ? AND kind = 'user'", (login_name,)
        )
        if not row:
            raise UnknownAgentError(f"Agent {login_name} does not exist.")
        return row["id"]

    def resolve_profile(self, agent_id: str) -> AgentProfile:
        row = self._query_one(
            "SELECT id, login_name FROM agents WHERE id = ? AND kind = 'user'", (agent_id,)
        )
        if not row:
            raise UnknownAgentError(f"Agent {agent_id} does not exist.")
        return AgentProfile(id=row["id"], login_name=row["login_name"])

    def create_group(self, members: Iterable[str]) -> GroupHandle:
        group_id = uuid.uuid4().hex
        conn = self._connect()
        try:
            conn.execute("INSERT INTO agents (id, kind) VALUES (?, 'group')", (group_id,))
            conn.executemany(
                "INSERT INTO group_members (group_id, agent_id) VALUES (?, ?)",
                [(group_id, member) for member in members],
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.exception("Failed to create group agent")
            raise StorageFailure(f"Could not create group: {e}") from e
        finally:
            conn.close()
        return SQLiteGroup(group_id, self)

    def get_group(self, group_id: str) -> GroupHandle:
        row = self._query_one(
            "SELECT id FROM agents WHERE id = ? AND kind = 'group'", (group_id,)
        )
        if not row:
            raise UnknownAgentError(f"Group {group_id} does not exist.")
        return SQLiteGroup(group_id, self)

    # ------------------------------------------------------------------
    # Low level helpers
    # ------------------------------------------------------------------
    def _connect(self) -> sqlite3.Connection:
        try:
            return get_connection(self.db_path)
        except sqlite3.Error as e:
            raise StorageFailure(f"Agent database unavailable: {e}") from e

    def _query_one(self, sql: str, params: tuple) -> Optional[sqlite3.Row]:
        conn = self._connect()
        try:
            return conn.execute(sql, params).fetchone()
        except sqlite3.Error as e:
            raise StorageFailure(str(e)) from e
        finally:
            conn.close()

    def _query_all(self, sql: str, params: tuple) -> List[sqlite3.Row]:
        conn = self._connect()
        try:
            return conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StorageFailure(str(e)) from e
        finally:
            conn.close()

    def _execute(self, sql: str, params: tuple) -> int:
        conn = self._connect()
        try:
            cursor = conn.execute(sql, params)
            conn.commit()
            return cursor.rowcount
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageFailure(str(e)) from e
        finally:
            conn.close()
