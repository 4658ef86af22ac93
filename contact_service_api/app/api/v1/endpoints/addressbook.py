"""
Address book endpoints for API v1.

The address book is shared by all agents: joining adds you to the one
public list, and every caller sees the same entries.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from contact_service_api.app.core.dependencies import get_address_book_service
from contact_service_api.app.core.security import get_current_agent
from contact_service_api.app.identity.resolver import AgentProfile
from contact_service_api.app.schemas.listing import Listing
from contact_service_api.app.schemas.outcome import OperationResult, Outcome
from contact_service_api.app.services.address_book_service import AddressBookService
from .results import respond

router = APIRouter()

_MESSAGES = {
    Outcome.ADDED: "Added to addressbook.",
    Outcome.ALREADY: "Already in list.",
    Outcome.REMOVED: "Removed from list.",
    Outcome.NOT_FOUND: "You were not in the list.",
}


@router.get("/", response_model=Listing)
def list_address_book(
    current_agent: AgentProfile = Depends(get_current_agent),
    service: AddressBookService = Depends(get_address_book_service),
) -> Listing:
    """List every agent that joined the address book."""
    return service.list()


@router.post("/", response_model=OperationResult)
def join_address_book(
    current_agent: AgentProfile = Depends(get_current_agent),
    service: AddressBookService = Depends(get_address_book_service),
) -> JSONResponse:
    return respond(service.join(current_agent.id), _MESSAGES)


@router.delete("/", response_model=OperationResult)
def leave_address_book(
    current_agent: AgentProfile = Depends(get_current_agent),
    service: AddressBookService = Depends(get_address_book_service),
) -> JSONResponse:
    return respond(service.leave(current_agent.id), _MESSAGES)
