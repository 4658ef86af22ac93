"""User information service client.

This module wraps the REST API of the user information (profile)
service.  The contact service forwards profile reads and writes to it on
behalf of the authenticated agent:

* :meth:`UserInformationClient.get` – read profile fields of an agent.
* :meth:`UserInformationClient.set` – update the caller's profile fields.
* :meth:`UserInformationClient.get_permissions` – read which fields the
  caller shares with other users.
* :meth:`UserInformationClient.set_permissions` – update those flags.

Every request is made with the ``X-Agent-Id`` header naming the agent the
call is made for, and optionally an ``Authorization`` bearer token that
identifies the contact service to the profile service.  Like the rest of
the HTTP helpers in this project, methods return ``(data, error)``
tuples instead of raising.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence, Tuple

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]


class UserInformationClient:
    """Client for the user information service."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: int = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialise the client.

        Args:
            base_url: Base URL of the profile service, e.g.
                ``http://profiles:8080/api``.
            api_key: Optional token sent as ``Authorization: Bearer``.
            timeout: Per-request timeout in seconds.
            session: Optional requests session, created if omitted.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # Low level HTTP helper
    # ------------------------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        agent_id: str,
        params: Dict[str, Any] | None = None,
        json_body: Any | None = None,
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request to the profile service.

        Returns:
            A tuple ``(data, error)``.  ``data`` holds the parsed JSON
            body on success.  On failure ``data`` is ``None`` and
            ``error`` has the keys ``status_code`` and ``message``.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {"X-Agent-Id": agent_id}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("detail") or err_json.get("message") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("User information request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("User information request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}
        except ValueError as exc:
            logger.error("User information service sent invalid JSON: %s", exc)
            return None, {"status_code": None, "message": "Invalid JSON in response"}

    # ------------------------------------------------------------------
    # Profile operations
    # ------------------------------------------------------------------
    def get(self, agent_id: str, subject_id: str, fields: Sequence[str]) -> Tuple[Optional[Any], Optional[Error]]:
        """Read ``fields`` of ``subject_id`` as seen by ``agent_id``.

        The profile service applies the subject's permission flags, so
        fields the subject does not share may be missing.
        """
        return self._request(
            "GET", f"/users/{subject_id}", agent_id=agent_id, params={"fields": ",".join(fields)}
        )

    def set(self, agent_id: str, values: Dict[str, Any]) -> Tuple[Optional[Any], Optional[Error]]:
        """Update the profile of ``agent_id``; the service answers with a boolean."""
        return self._request("PUT", f"/users/{agent_id}", agent_id=agent_id, json_body=values)

    def get_permissions(self, agent_id: str, fields: Sequence[str]) -> Tuple[Optional[Any], Optional[Error]]:
        return self._request(
            "GET",
            f"/users/{agent_id}/permissions",
            agent_id=agent_id,
            params={"fields": ",".join(fields)},
        )

    def set_permissions(self, agent_id: str, permissions: Dict[str, bool]) -> Tuple[Optional[Any], Optional[Error]]:
        return self._request(
            "PUT", f"/users/{agent_id}/permissions", agent_id=agent_id, json_body=permissions
        )
