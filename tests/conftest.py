# 📄 File: tests/conftest.py
#
# 🧭 Purpose (Layman Explanation):
# Sets up a throwaway database and a fake web client so every test starts from a clean farm.
#
# 🧪 Purpose (Technical Summary):
# Test configuration: environment is pinned before farmx is imported (SQLite via aiosqlite,
# ENVIRONMENT=test so slowapi limits are off), tables are created and dropped per test,
# and requests go through httpx.AsyncClient over ASGITransport with python-jose tokens.
#
# 🔗 Dependencies:
# - pytest, pytest-asyncio, httpx, python-jose
#
# 🔄 Connected Modules / Calls From:
# - every tests/test_*.py module

import os
import tempfile
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import uuid4

_DB_PATH = os.path.join(tempfile.gettempdir(), f"farmx_test_{os.getpid()}.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-farmx"
os.environ["LOG_FORMAT"] = "text"
os.environ["LOG_LEVEL"] = "WARNING"

import httpx  # noqa: E402
import pytest  # noqa: E402
from jose import jwt  # noqa: E402

from farmx.main import app  # noqa: E402
from farmx.modules.analytics.infrastructure.database.models import (  # noqa: E402
    FarmModel,
    PondModel,
    ScanResultModel,
)
from farmx.modules.storefront.infrastructure.database.models import ProductModel  # noqa: E402
from farmx.modules.user_management.domain.models.user import CartLine, User  # noqa: E402
from farmx.modules.user_management.infrastructure.database.user_repository_impl import (  # noqa: E402
    UserRepositoryImpl,
)
from farmx.shared.config.database import DatabaseBase  # noqa: E402
from farmx.shared.config.settings import get_settings  # noqa: E402
from farmx.shared.infrastructure.database.connection import (  # noqa: E402
    close_database,
    get_database_engine,
    init_database,
)
from farmx.shared.infrastructure.database.session import (  # noqa: E402
    initialize_sessions,
    session_manager,
)


@pytest.fixture
async def database():
    await init_database()
    await initialize_sessions()
    engine = await get_database_engine()
    async with engine.begin() as conn:
        await conn.run_sync(DatabaseBase.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(DatabaseBase.metadata.drop_all)
    session_manager.reset()
    await close_database()


@pytest.fixture
async def client(database):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


def make_token(user_id: str, role: str = "user", expires_in: int = 3600) -> str:
    settings = get_settings()
    payload = {
        "sub": user_id,
        "role": role,
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def auth_headers(user_id: str, role: str = "user") -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, role)}"}


# Seed helpers


async def create_user(
    role: str = "user",
    cart: Optional[List[Dict[str, Any]]] = None,
    is_active: bool = True,
) -> User:
    user_id = str(uuid4())
    user = User(
        user_id=user_id,
        username=f"farmer-{user_id[:8]}",
        email=f"{user_id[:8]}@farmx.test",
        role=role,
        cart_items=[CartLine(**line) for line in (cart or [])],
        is_active=is_active,
    )
    async with session_manager.get_session() as session:
        return await UserRepositoryImpl(session).create(user)


async def get_user(user_id: str) -> Optional[User]:
    async with session_manager.get_session() as session:
        return await UserRepositoryImpl(session).get_by_id(user_id)


async def add_rows(*rows) -> None:
    async with session_manager.get_session() as session:
        session.add_all(rows)


async def create_product(
    name: str = "Aerator",
    price: str = "10.00",
    currency: str = "USD",
    is_active: bool = True,
) -> str:
    product_id = str(uuid4())
    await add_rows(ProductModel(
        product_id=product_id,
        name=name,
        price=Decimal(price),
        currency=currency,
        is_active=is_active,
    ))
    return product_id


async def create_farm(owner_id: str, is_active: bool = True) -> str:
    farm_id = str(uuid4())
    await add_rows(FarmModel(farm_id=farm_id, owner_id=owner_id, name="North Farm", is_active=is_active))
    return farm_id


async def create_pond(farm_id: str, is_active: bool = True, status: str = "active") -> str:
    pond_id = str(uuid4())
    await add_rows(PondModel(pond_id=pond_id, farm_id=farm_id, name="Pond A", is_active=is_active, status=status))
    return pond_id


async def create_scan(
    pond_id: Optional[str],
    timestamp: datetime,
    health_score: Any = None,
    metrics: Any = None,
    device_id: str = "dev-1",
) -> str:
    scan_id = str(uuid4())
    await add_rows(ScanResultModel(
        scan_id=scan_id,
        pond_id=pond_id,
        device_id=device_id,
        timestamp=timestamp,
        health_score=health_score,
        metrics=metrics if metrics is not None else {},
    ))
    return scan_id
