"""HTTP clients for collaborating services."""
