"""Store implementations for the admin API."""
