"""SQL Stores: SQLAlchemy implementations of core/repository_protocols.py.

Invariants:
    - Stores never commit or roll back: transaction scope belongs to the calling service
    - Inserts flush so generated ids are available inside the same transaction
    - Conditional writes are explicit UPDATE ... WHERE statements returning rowcount

Design Decisions:
    - One store per entity, each constructed with the request's AsyncSession
"""
