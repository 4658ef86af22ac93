"""
User information endpoints for API v1.

These routes forward to the user information service.  Reading another
agent's profile returns only the fields that agent shares.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path

from contact_service_api.app.core.dependencies import get_user_information_service
from contact_service_api.app.core.security import get_current_agent
from contact_service_api.app.identity.resolver import AgentProfile
from contact_service_api.app.schemas.user import UserInformation
from contact_service_api.app.services.user_information_service import UserInformationService

router = APIRouter()


@router.get("/", response_model=Dict[str, Any])
def get_own_information(
    current_agent: AgentProfile = Depends(get_current_agent),
    service: UserInformationService = Depends(get_user_information_service),
) -> Dict[str, Any]:
    """Return your first name, last name and user image."""
    return service.get_information(current_agent.id)


@router.post("/", response_model=Dict[str, Any])
def update_information(
    info: UserInformation,
    current_agent: AgentProfile = Depends(get_current_agent),
    service: UserInformationService = Depends(get_user_information_service),
) -> Dict[str, Any]:
    """Update your first name, last name and user image."""
    return {"updated": service.update_information(current_agent.id, info)}


@router.get("/{name}", response_model=Dict[str, Any])
def get_information(
    name: str = Path(..., min_length=1, description="Login name of the user"),
    current_agent: AgentProfile = Depends(get_current_agent),
    service: UserInformationService = Depends(get_user_information_service),
) -> Dict[str, Any]:
    """Return the profile fields another user shares."""
    return service.get_information(current_agent.id, name)
