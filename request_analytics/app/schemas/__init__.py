"""
Pydantic schema definitions for API payloads.

Schemas are separated from the stores so that the API representation
of a record stays independent of how it is persisted.
"""
