"""Infrastructure: database session management and logging setup.

Invariants:
    - One async engine per process (created by init_db in the lifespan)
    - All sessions are async (AsyncSession)

Design Decisions:
    - asyncpg driver for PostgreSQL in production, aiosqlite for tests
"""
