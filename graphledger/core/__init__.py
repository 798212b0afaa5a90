"""Core Layer: pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, repositories/, infrastructure/ or db/
    - All functions are deterministic given their inputs (wall-clock timing in sweep aside)

Design Decisions:
    - Functional core separated from the imperative shell: services open transactions,
      call stores, and hand plain data to the functions here
"""
