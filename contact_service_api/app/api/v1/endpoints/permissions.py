"""
Permission endpoints for API v1.

Permissions decide which of your profile fields other users can read.
They are stored by the user information service.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from contact_service_api.app.core.dependencies import get_user_information_service
from contact_service_api.app.core.security import get_current_agent
from contact_service_api.app.identity.resolver import AgentProfile
from contact_service_api.app.schemas.user import UserPermissions
from contact_service_api.app.services.user_information_service import UserInformationService

router = APIRouter()


@router.get("/", response_model=Dict[str, Any])
def get_permissions(
    current_agent: AgentProfile = Depends(get_current_agent),
    service: UserInformationService = Depends(get_user_information_service),
) -> Dict[str, Any]:
    return service.get_permissions(current_agent.id)


@router.post("/", response_model=Dict[str, Any])
def update_permissions(
    permissions: UserPermissions,
    current_agent: AgentProfile = Depends(get_current_agent),
    service: UserInformationService = Depends(get_user_information_service),
) -> Dict[str, Any]:
    """Set which profile fields are visible to other users."""
    return {"updated": service.update_permissions(current_agent.id, permissions)}
