"""Claim sets: resource-claim validation, queries and validators."""
