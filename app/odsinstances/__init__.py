"""ODS instances: commands, queries and validators."""
