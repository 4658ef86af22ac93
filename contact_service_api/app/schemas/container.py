"""
The persisted value type of the directory.

A ``ContactContainer`` is stored as JSON inside a directory record.  The
same shape is used for contact lists, the address book, the per-name
group records and the global group registry; each use only fills the
part it needs.
"""

from typing import Any, Dict, Optional, Set

from pydantic import BaseModel, Field


class ContactContainer(BaseModel):
    contacts: Set[str] = Field(default_factory=set, description="Identity handles")
    groups: Dict[str, str] = Field(default_factory=dict, description="Group name to group handle")

    def add_contact(self, handle: str) -> bool:
        """Insert ``handle``; returns False when it was already present."""
        if handle in self.contacts:
            return False
        self.contacts.add(handle)
        return True

    def remove_contact(self, handle: str) -> bool:
        if handle not in self.contacts:
            return False
        self.contacts.discard(handle)
        return True

    def add_group(self, name: str, handle: str) -> None:
        self.groups[name] = handle

    def remove_group(self, name: str) -> Optional[str]:
        return self.groups.pop(name, None)

    def get_group_id(self, name: str) -> Optional[str]:
        return self.groups.get(name)

    def to_content(self) -> Dict[str, Any]:
        """Serialize for storage.  Handles are sorted so equal containers store equal JSON."""
        return {"contacts": sorted(self.contacts), "groups": dict(sorted(self.groups.items()))}

    @classmethod
    def from_content(cls, content: Optional[Dict[str, Any]]) -> "ContactContainer":
        if not content:
            return cls()
        return cls.model_validate(content)
