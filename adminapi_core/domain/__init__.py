"""Domain models, exceptions and persistence contracts."""
