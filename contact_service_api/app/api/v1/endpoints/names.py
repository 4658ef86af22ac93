"""
Name lookup endpoint for API v1.

Clients that only hold an agent id (for example from a group roster
stored elsewhere) use this to display a login name.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from contact_service_api.app.core.dependencies import get_resolver
from contact_service_api.app.core.errors import UnknownAgentError
from contact_service_api.app.core.security import get_current_agent
from contact_service_api.app.identity.resolver import AgentProfile, IdentityResolver
from contact_service_api.app.schemas.listing import Entry

router = APIRouter()


@router.get("/{agent_id}", response_model=Entry)
def get_name(
    agent_id: str,
    current_agent: AgentProfile = Depends(get_current_agent),
    resolver: IdentityResolver = Depends(get_resolver),
) -> Entry:
    """Return the login name of an agent; 404 if the id is unknown."""
    try:
        profile = resolver.resolve_profile(agent_id)
    except UnknownAgentError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Agent not found")
    return Entry(id=profile.id, name=profile.login_name)
