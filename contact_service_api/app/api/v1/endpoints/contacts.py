"""
Contact endpoints for API v1.

Every authenticated agent has one contact list.  Adding a contact that
is already in the list answers 409 and removing one that is not answers
404; neither changes the stored list.
"""

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse

from contact_service_api.app.core.dependencies import get_contact_service
from contact_service_api.app.core.security import get_current_agent
from contact_service_api.app.identity.resolver import AgentProfile
from contact_service_api.app.schemas.listing import Listing
from contact_service_api.app.schemas.outcome import OperationResult, Outcome
from contact_service_api.app.services.contact_service import ContactService
from .results import respond

router = APIRouter()

_MESSAGES = {
    Outcome.ADDED: "Contact added.",
    Outcome.ALREADY: "Contact already in list.",
    Outcome.REMOVED: "Contact removed.",
    Outcome.NOT_FOUND: "User is not one of your contacts.",
}


@router.get("/", response_model=Listing)
def list_contacts(
    current_agent: AgentProfile = Depends(get_current_agent),
    service: ContactService = Depends(get_contact_service),
) -> Listing:
    """List your contacts as ``{id, name}`` entries.

    Contacts whose agent no longer exists are left out and counted in
    ``stale``.
    """
    return service.list_contacts(current_agent.id)


@router.post("/{name}", response_model=OperationResult)
def add_contact(
    name: str = Path(..., min_length=1, description="Login name of the contact"),
    current_agent: AgentProfile = Depends(get_current_agent),
    service: ContactService = Depends(get_contact_service),
) -> JSONResponse:
    """Add an agent to your contact list."""
    return respond(service.add_contact(current_agent.id, name), _MESSAGES)


@router.delete("/{name}", response_model=OperationResult)
def remove_contact(
    name: str = Path(..., min_length=1, description="Login name of the contact"),
    current_agent: AgentProfile = Depends(get_current_agent),
    service: ContactService = Depends(get_contact_service),
) -> JSONResponse:
    """Remove an agent from your contact list."""
    return respond(service.remove_contact(current_agent.id, name), _MESSAGES)
