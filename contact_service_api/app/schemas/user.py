"""
Pydantic models for the user information endpoints.

The profile data itself lives in the user information service; these
schemas only validate what is forwarded to it.  Field names follow that
service's wire format (``firstName``, ``lastName``, ``userImage``).
"""

from typing import Optional

from pydantic import BaseModel, Field

PROFILE_FIELDS = ("firstName", "lastName", "userImage")


class UserInformation(BaseModel):
    firstName: Optional[str] = Field(None, example="Adam")
    lastName: Optional[str] = Field(None, example="Smith")
    userImage: Optional[str] = Field(None, example="https://example.com/adam.png")


class UserPermissions(BaseModel):
    """Which profile fields other users may see."""

    firstName: bool = Field(False, example=True)
    lastName: bool = Field(False, example=True)
    userImage: bool = Field(False, example=False)
