"""Graph Ledger: versioned weighted-graph models with a token ledger.

Invariants:
    - Package root contains no executable code (no import side effects)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
