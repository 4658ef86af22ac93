"""
Top-level package for the Contact Service API.

All functionality lives in submodules under ``app``: the FastAPI
application, the directory store and identity collaborators, and the
services implementing contact lists, groups and the address book.
"""

__all__ = []
