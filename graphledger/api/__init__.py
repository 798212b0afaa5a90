"""API Layer: FastAPI routes, caller resolution and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses

Design Decisions:
    - Thin routes delegate to services; ownership and admin checks live here
"""
