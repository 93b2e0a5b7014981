"""
Pydantic schema definitions for API payloads.

Schemas are kept apart from the SQL rows in ``core.db`` so the HTTP
representation can change without touching persistence.
"""
