"""
Core domain, validation and persistence contracts for the ODS admin API.
"""
