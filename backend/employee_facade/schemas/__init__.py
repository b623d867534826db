"""Pydantic Schemas — upstream wire models and facade request validation.

Invariants:
    - Schemas validate at system boundaries (client requests, upstream responses)
"""
