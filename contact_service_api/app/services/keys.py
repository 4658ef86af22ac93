"""Directory keys used by the services."""

CONTACT_PREFIX = "contacts"
GROUP_PREFIX = "groups"
ADDRESS_BOOK_KEY = "addressbook"

# Global name -> handle index of all groups, owned by the service identity.
# Plain "groups" rather than "groups_" so it never equals group_key("").
GROUP_REGISTRY_KEY = GROUP_PREFIX


def contacts_key(owner_id: str) -> str:
    return f"{CONTACT_PREFIX}_{owner_id}"


def group_key(name: str) -> str:
    return f"{GROUP_PREFIX}_{name}"
