"""
Pydantic schema definitions.

``container`` is the persisted value type of the directory; the other
modules describe request and response bodies of the API.
"""
