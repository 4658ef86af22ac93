"""
Directory store backends.

``DirectoryStore`` defines fetch, conditional create, versioned store and
delete of records; ``InMemoryDirectoryStore`` and ``SQLiteDirectoryStore``
implement it.
"""

from .directory_store import DirectoryStore, InMemoryDirectoryStore, Record  # noqa: F401
from .sqlite_store import SQLiteDirectoryStore  # noqa: F401
