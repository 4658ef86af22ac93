"""
Application package initializer.

The contact service is organised in layers: ``storage`` and
``identity`` hold the collaborators the service builds on, ``services``
implements the directory operations over them and ``api`` exposes those
operations over HTTP.  Versioning is handled by grouping routers under
``api/<version>/``.
"""

from .main import app  # noqa: F401
