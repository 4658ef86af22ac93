"""
Service layer for the shared address book.

The address book is one public record owned by the service identity.
Every agent that joins is added to the same container, so unlike the
per-agent contact lists all callers contend on a single key; the
version check in ``ContainerRepository.update`` keeps concurrent joins
from overwriting each other.
"""

import logging
from typing import Optional, Tuple

from contact_service_api.app.core.config import settings
from contact_service_api.app.schemas.container import ContactContainer
from contact_service_api.app.schemas.listing import Listing
from contact_service_api.app.schemas.outcome import Outcome
from contact_service_api.app.services.contact_service import resolve_entries
from contact_service_api.app.services.container_repository import ContainerRepository
from contact_service_api.app.services.keys import ADDRESS_BOOK_KEY

logger = logging.getLogger(__name__)


class AddressBookService:
    def __init__(self, repository: ContainerRepository, service_agent_id: Optional[str] = None) -> None:
        self.repository = repository
        self.service_agent_id = service_agent_id or settings.service_agent_id

    def join(self, agent_id: str) -> Outcome:
        def mutate(container: ContactContainer) -> Tuple[bool, Outcome]:
            added = container.add_contact(agent_id)
            return added, Outcome.ADDED if added else Outcome.ALREADY

        outcome = self.repository.update(
            ADDRESS_BOOK_KEY, self.service_agent_id, mutate, public=True
        )
        if outcome is Outcome.ADDED:
            logger.info("Agent %s joined the address book", agent_id)
        return outcome

    def leave(self, agent_id: str) -> Outcome:
        def mutate(container: ContactContainer) -> Tuple[bool, Outcome]:
            removed = container.remove_contact(agent_id)
            return removed, Outcome.REMOVED if removed else Outcome.NOT_FOUND

        outcome = self.repository.update(
            ADDRESS_BOOK_KEY, self.service_agent_id, mutate, public=True, create_missing=False
        )
        if outcome is Outcome.REMOVED:
            logger.info("Agent %s left the address book", agent_id)
        return outcome

    def list(self) -> Listing:
        found = self.repository.fetch(ADDRESS_BOOK_KEY)
        if found is None:
            return Listing()
        _, container = found
        return resolve_entries(self.repository.resolver, container.contacts, ADDRESS_BOOK_KEY)
