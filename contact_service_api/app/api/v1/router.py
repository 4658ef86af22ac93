"""
Top-level router for version 1 of the API.

This router aggregates the resource routers under a unified prefix.
When a new resource is added, include its router here.
"""

from fastapi import APIRouter

from .endpoints import (
    addressbook,
    contacts,
    groups,
    names,
    permissions,
    users,
)

router = APIRouter()

router.include_router(contacts.router, prefix="/contacts", tags=["contacts"])
router.include_router(groups.router, prefix="/groups", tags=["groups"])
router.include_router(addressbook.router, prefix="/addressbook", tags=["addressbook"])
router.include_router(users.router, prefix="/user", tags=["user"])
router.include_router(permissions.router, prefix="/permission", tags=["permission"])
router.include_router(names.router, prefix="/name", tags=["name"])
