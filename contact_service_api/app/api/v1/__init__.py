"""Version 1 of the Contact Service API."""
