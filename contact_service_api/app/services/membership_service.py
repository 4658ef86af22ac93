"""
Service layer for group rosters.

The roster lives on the group identity, not in the directory.  Every
operation first finds the group by name and unlocks it as the caller;
a caller who is not a member is refused by the group handle itself.
"""

import logging

from contact_service_api.app.identity.resolver import GroupHandle
from contact_service_api.app.schemas.listing import Listing
from contact_service_api.app.schemas.outcome import Outcome
from contact_service_api.app.services.contact_service import resolve_entries
from contact_service_api.app.services.container_repository import ContainerRepository
from contact_service_api.app.services.group_service import lookup_group

logger = logging.getLogger(__name__)


class MembershipService:
    def __init__(self, repository: ContainerRepository) -> None:
        self.repository = repository
        self.resolver = repository.resolver

    def _open(self, caller_id: str, group_name: str) -> GroupHandle:
        _, group = lookup_group(self.repository, group_name)
        return group.unlock(caller_id)

    def list_members(self, caller_id: str, group_name: str) -> Listing:
        group = self._open(caller_id, group_name)
        return resolve_entries(self.resolver, group.list_members(), f"group {group_name}")

    def add_member(self, caller_id: str, group_name: str, login_name: str) -> Outcome:
        group = self._open(caller_id, group_name)
        member_id = self.resolver.resolve_login(login_name)
        if not group.add_member(member_id):
            return Outcome.ALREADY
        logger.info("Agent %s added %s to group %s", caller_id, member_id, group_name)
        return Outcome.ADDED

    def remove_member(self, caller_id: str, group_name: str, login_name: str) -> Outcome:
        group = self._open(caller_id, group_name)
        member_id = self.resolver.resolve_login(login_name)
        if not group.remove_member(member_id):
            return Outcome.NOT_FOUND
        logger.info("Agent %s removed %s from group %s", caller_id, member_id, group_name)
        return Outcome.REMOVED
