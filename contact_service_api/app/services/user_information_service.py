"""
Service layer for profile information.

Profiles are owned by the user information service; this layer only
resolves login names, forwards the call and checks the shape of the
answer.  ``None`` or a payload of the wrong type is reported as a
``ProfileServiceError`` just like a transport failure.
"""

import logging
from typing import Any, Dict, Optional

from contact_service_api.app.clients.user_information import UserInformationClient
from contact_service_api.app.core.errors import ProfileServiceError, ProfileServiceUnavailable
from contact_service_api.app.identity.resolver import IdentityResolver
from contact_service_api.app.schemas.user import PROFILE_FIELDS, UserInformation, UserPermissions

logger = logging.getLogger(__name__)


class UserInformationService:
    def __init__(self, client: Optional[UserInformationClient], resolver: IdentityResolver) -> None:
        self.client = client
        self.resolver = resolver

    def _client(self) -> UserInformationClient:
        if self.client is None:
            raise ProfileServiceUnavailable("User information service is not configured")
        return self.client

    @staticmethod
    def _expect(data: Any, error: Optional[Dict[str, Any]], kind: type, action: str) -> Any:
        if error:
            raise ProfileServiceError(f"{action} failed: {error['message']}")
        if data is None:
            raise ProfileServiceError(f"{action} failed. No result.")
        if not isinstance(data, kind):
            raise ProfileServiceError(f"{action} failed. Wrong type.")
        return data

    def get_information(self, caller_id: str, login_name: Optional[str] = None) -> Dict[str, Any]:
        """Profile of the caller, or of ``login_name`` as visible to the caller."""
        subject_id = self.resolver.resolve_login(login_name) if login_name else caller_id
        data, error = self._client().get(caller_id, subject_id, PROFILE_FIELDS)
        return self._expect(data, error, dict, "Getting user information")

    def update_information(self, caller_id: str, info: UserInformation) -> bool:
        data, error = self._client().set(caller_id, info.model_dump())
        result = self._expect(data, error, bool, "Setting user information")
        logger.info("Agent %s updated profile information", caller_id)
        return result

    def get_permissions(self, caller_id: str) -> Dict[str, Any]:
        data, error = self._client().get_permissions(caller_id, PROFILE_FIELDS)
        return self._expect(data, error, dict, "Getting permissions")

    def update_permissions(self, caller_id: str, permissions: UserPermissions) -> bool:
        data, error = self._client().set_permissions(caller_id, permissions.model_dump())
        result = self._expect(data, error, bool, "Setting permissions")
        logger.info("Agent %s updated profile permissions: %s", caller_id, permissions.model_dump())
        return result
