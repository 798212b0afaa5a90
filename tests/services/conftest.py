"""Service test fixtures: file-backed async SQLite + FastAPI test client.

Invariants:
    - Every test gets a fresh SQLite file under tmp_path with all tables created
    - Sessions come from DatabaseSessionManager, so SQLite writers take BEGIN IMMEDIATE
      and concurrent sessions serialize like row-locked writers
    - Seeding, the code under test and verification use separate sessions
    - get_db overridden and db_manager patched for the client fixture

Design Decisions:
    - File over :memory: so concurrent sessions get their own connections
"""

from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient

import graphledger.infrastructure.database as db_module
from graphledger.core.domain_types import LedgerReason, UserRole
from graphledger.db.base import Base
from graphledger.infrastructure.database import DatabaseSessionManager, get_db
from graphledger.main import app
from graphledger.services.token_ledger import TokenLedger
from graphledger.services.user_accounts import UserAccountService


@pytest.fixture
def example_graph() -> dict:
    return {
        "A": {"B": 2, "C": 4},
        "B": {"A": 2, "D": 1},
        "C": {"A": 4, "D": 3},
        "D": {"B": 1, "C": 3},
    }


@pytest.fixture
async def manager(tmp_path):
    mgr = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    async with mgr.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield mgr
    await mgr.close()


@pytest.fixture
def session_factory(manager):
    return manager.session


@pytest.fixture
def make_user(session_factory):
    """Provision a user and optionally credit a starting balance."""
    counter = {"n": 0}

    async def _make(tokens: object = 0, role: UserRole = UserRole.USER):
        counter["n"] += 1
        async with session_factory() as db:
            user = await UserAccountService(db, initial_tokens=0).provision_user(
                f"user{counter['n']}@example.com", role,
            )
            if Decimal(str(tokens)) > 0:
                await TokenLedger(db).set_absolute(
                    user.id, tokens, None, LedgerReason.SEED_GRANT,
                )
        return user

    return _make


@pytest.fixture
async def client(manager):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    db_module.db_manager = manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def auth():
    """Caller identity headers for a user row."""
    def _headers(user, role: str = "user") -> dict:
        return {"X-User-Id": str(user.id), "X-User-Role": role}
    return _headers
