"""
FastAPI dependencies for the collaborators and services.

The store, resolver and profile client are created once by
``create_app`` and kept on ``app.state``; services are cheap wrappers
built per request around them.  Tests build an app with in-memory
collaborators instead of overriding these functions.
"""

from typing import Optional

from fastapi import Depends, Request

from contact_service_api.app.clients.user_information import UserInformationClient
from contact_service_api.app.identity.resolver import IdentityResolver
from contact_service_api.app.services.address_book_service import AddressBookService
from contact_service_api.app.services.contact_service import ContactService
from contact_service_api.app.services.container_repository import ContainerRepository
from contact_service_api.app.services.group_service import GroupService
from contact_service_api.app.services.membership_service import MembershipService
from contact_service_api.app.services.user_information_service import UserInformationService


def get_resolver(request: Request) -> IdentityResolver:
    return request.app.state.resolver


def get_repository(request: Request) -> ContainerRepository:
    return request.app.state.repository


def get_user_information_client(request: Request) -> Optional[UserInformationClient]:
    return request.app.state.user_information_client


def get_contact_service(repository: ContainerRepository = Depends(get_repository)) -> ContactService:
    return ContactService(repository)


def get_group_service(request: Request, repository: ContainerRepository = Depends(get_repository)) -> GroupService:
    return GroupService(repository, request.app.state.service_agent_id)


def get_membership_service(repository: ContainerRepository = Depends(get_repository)) -> MembershipService:
    return MembershipService(repository)


def get_address_book_service(
    request: Request, repository: ContainerRepository = Depends(get_repository)
) -> AddressBookService:
    return AddressBookService(repository, request.app.state.service_agent_id)


def get_user_information_service(
    client: Optional[UserInformationClient] = Depends(get_user_information_client),
    resolver: IdentityResolver = Depends(get_resolver),
) -> UserInformationService:
    return UserInformationService(client, resolver)
