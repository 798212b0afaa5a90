"""Pydantic Schemas: request/response validation for the HTTP surface.

Invariants:
    - Schemas validate at the system boundary; services re-check what they depend on
    - Money is Decimal on the wire, never float

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
