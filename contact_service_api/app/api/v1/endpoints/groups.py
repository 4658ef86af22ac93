"""
Group endpoints for API v1.

Groups are looked up by their globally unique name.  Only members can
see a group, read its roster or change it; anybody can create a new
group and becomes its first member.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse

from contact_service_api.app.core.dependencies import get_group_service, get_membership_service
from contact_service_api.app.core.security import get_current_agent
from contact_service_api.app.identity.resolver import AgentProfile
from contact_service_api.app.schemas.listing import Entry, Listing
from contact_service_api.app.schemas.outcome import OperationResult, Outcome
from contact_service_api.app.services.group_service import GroupService
from contact_service_api.app.services.membership_service import MembershipService
from .results import respond

router = APIRouter()

GroupName = Annotated[str, Path(min_length=1, max_length=200, description="Name of the group")]

_GROUP_MESSAGES = {
    Outcome.ADDED: "Group created.",
    Outcome.REMOVED: "Group removed.",
}
_MEMBER_MESSAGES = {
    Outcome.ADDED: "Added to group.",
    Outcome.ALREADY: "Agent is already a member.",
    Outcome.REMOVED: "Removed from group.",
    Outcome.NOT_FOUND: "Agent is not a member.",
}


@router.get("/", response_model=Listing)
def list_groups(
    current_agent: AgentProfile = Depends(get_current_agent),
    service: GroupService = Depends(get_group_service),
) -> Listing:
    """List the groups you are a member of."""
    return service.list_groups(current_agent.id)


@router.get("/{name}", response_model=Entry)
def get_group(
    name: GroupName,
    current_agent: AgentProfile = Depends(get_current_agent),
    service: GroupService = Depends(get_group_service),
) -> Entry:
    """Return the handle of a group.  404 if it does not exist, 403 if you are not a member."""
    return service.get_group(current_agent.id, name)


@router.post("/{name}", response_model=OperationResult)
def create_group(
    name: GroupName,
    current_agent: AgentProfile = Depends(get_current_agent),
    service: GroupService = Depends(get_group_service),
) -> JSONResponse:
    """Create a group with yourself as the only member.  409 if the name is taken."""
    group_id = service.create_group(current_agent.id, name)
    return respond(Outcome.ADDED, _GROUP_MESSAGES, id=group_id)


@router.delete("/{name}", response_model=OperationResult)
def delete_group(
    name: GroupName,
    current_agent: AgentProfile = Depends(get_current_agent),
    service: GroupService = Depends(get_group_service),
) -> JSONResponse:
    """Release the group name and leave the group."""
    return respond(service.delete_group(current_agent.id, name), _GROUP_MESSAGES)


@router.get("/{name}/members", response_model=Listing)
def list_group_members(
    name: GroupName,
    current_agent: AgentProfile = Depends(get_current_agent),
    service: MembershipService = Depends(get_membership_service),
) -> Listing:
    """List the members of a group you belong to."""
    return service.list_members(current_agent.id, name)


@router.post("/{name}/members/{user}", response_model=OperationResult)
def add_group_member(
    name: GroupName,
    user: str = Path(..., min_length=1, description="Login name of the new member"),
    current_agent: AgentProfile = Depends(get_current_agent),
    service: MembershipService = Depends(get_membership_service),
) -> JSONResponse:
    """Add an agent to a group you belong to."""
    return respond(service.add_member(current_agent.id, name, user), _MEMBER_MESSAGES)


@router.delete("/{name}/members/{user}", response_model=OperationResult)
def remove_group_member(
    name: GroupName,
    user: str = Path(..., min_length=1, description="Login name of the member"),
    current_agent: AgentProfile = Depends(get_current_agent),
    service: MembershipService = Depends(get_membership_service),
) -> JSONResponse:
    """Remove an agent from a group you belong to."""
    return respond(service.remove_member(current_agent.id, name, user), _MEMBER_MESSAGES)
