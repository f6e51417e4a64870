"""Applications: commands, queries and validators."""
