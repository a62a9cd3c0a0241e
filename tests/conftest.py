"""Pytest configuration and fixtures."""

import pytest_asyncio
from tortoise import Tortoise

from tenantbill.core.repositories.reading import ReadingRepository
from tenantbill.core.repositories.tenant import TenantRepository
from tenantbill.services.store import ReadingStore


@pytest_asyncio.fixture(scope="function", autouse=True)
async def db_session():
    """
    Provides a clean in-memory SQLite database for each test function.
    """
    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={"models": ["tenantbill.core.models"]},
    )
    await Tortoise.generate_schemas()

    yield

    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def store() -> ReadingStore:
    return ReadingStore(
        tenant_repo=TenantRepository(),
        reading_repo=ReadingRepository(),
    )
