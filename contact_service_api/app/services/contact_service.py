"""
Service layer for personal contact lists.

Each agent owns one record, ``contacts_<agentId>``, holding the set of
agent ids it added.  Adding and removing are idempotent: repeating an
add reports ``ALREADY`` and repeating a remove reports ``NOT_FOUND``,
neither of which writes to the store.
"""

import logging
from typing import Iterable, Tuple

from contact_service_api.app.core.errors import UnknownAgentError
from contact_service_api.app.identity.resolver import IdentityResolver
from contact_service_api.app.schemas.container import ContactContainer
from contact_service_api.app.schemas.listing import Entry, Listing
from contact_service_api.app.schemas.outcome import Outcome
from contact_service_api.app.services.container_repository import ContainerRepository
from contact_service_api.app.services.keys import contacts_key

logger = logging.getLogger(__name__)


def resolve_entries(resolver: IdentityResolver, handles: Iterable[str], source: str) -> Listing:
    """Resolve agent ids to names, skipping and counting ids that no longer resolve."""
    listing = Listing()
    for handle in sorted(handles):
        try:
            profile = resolver.resolve_profile(handle)
        except UnknownAgentError:
            listing.stale += 1
            continue
        listing.items.append(Entry(id=profile.id, name=profile.login_name))
    if listing.stale:
        logger.warning("Skipped %d stale handle(s) while listing %s", listing.stale, source)
    return listing


class ContactService:
    """Add, remove and list the contacts of an agent."""

    def __init__(self, repository: ContainerRepository) -> None:
        self.repository = repository
        self.resolver = repository.resolver

    def add_contact(self, owner_id: str, login_name: str) -> Outcome:
        contact_id = self.resolver.resolve_login(login_name)

        def mutate(container: ContactContainer) -> Tuple[bool, Outcome]:
            added = container.add_contact(contact_id)
            return added, Outcome.ADDED if added else Outcome.ALREADY

        outcome = self.repository.update(contacts_key(owner_id), owner_id, mutate)
        if outcome is Outcome.ADDED:
            logger.info("Agent %s added contact %s", owner_id, contact_id)
        return outcome

    def remove_contact(self, owner_id: str, login_name: str) -> Outcome:
        contact_id = self.resolver.resolve_login(login_name)

        def mutate(container: ContactContainer) -> Tuple[bool, Outcome]:
            removed = container.remove_contact(contact_id)
            return removed, Outcome.REMOVED if removed else Outcome.NOT_FOUND

        # A list that was never created simply does not contain the contact.
        outcome = self.repository.update(
            contacts_key(owner_id), owner_id, mutate, create_missing=False
        )
        if outcome is Outcome.REMOVED:
            logger.info("Agent %s removed contact %s", owner_id, contact_id)
        return outcome

    def list_contacts(self, owner_id: str) -> Listing:
        found = self.repository.fetch(contacts_key(owner_id), reader=owner_id)
        if found is None:
            return Listing()
        _, container = found
        return resolve_entries(self.resolver, container.contacts, contacts_key(owner_id))
