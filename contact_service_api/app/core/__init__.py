"""Configuration, logging, database access, authentication and errors."""
