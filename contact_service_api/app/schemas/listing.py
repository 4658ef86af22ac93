"""
Pydantic models for directory listings.

Listings resolve stored handles to display names.  Handles that no longer
resolve are left out and only counted in ``stale`` so callers can observe
staleness without it being an error.
"""

from typing import List

from pydantic import BaseModel, Field


class Entry(BaseModel):
    id: str = Field(..., example="5f0c2a9e")
    name: str = Field(..., example="eve")


class Listing(BaseModel):
    """Resolved entries of a contact list, address book, roster or group list."""

    items: List[Entry] = Field(default_factory=list)
    stale: int = Field(0, description="Number of stored handles that no longer resolve")

    def names(self) -> List[str]:
        return sorted(entry.name for entry in self.items)

    def ids(self) -> List[str]:
        return sorted(entry.id for entry in self.items)
