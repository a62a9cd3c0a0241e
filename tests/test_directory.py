"""Tests for the tenant directory."""

from decimal import Decimal

import pytest

from tenantbill.core.exceptions import NotFoundError, ValidationError
from tenantbill.core.models import Reading
from tenantbill.services.directory import TenantDirectory


@pytest.fixture
def directory(store):
    return TenantDirectory(store)


@pytest.mark.asyncio
@pytest.mark.parametrize("name", [None, "", "  "])
async def test_add_tenant_requires_name(directory, name):
    with pytest.raises(ValidationError):
        await directory.add_tenant(name)


@pytest.mark.asyncio
async def test_edit_tenant_requires_id_and_name(directory):
    tenant = await directory.add_tenant("Dada")

    with pytest.raises(ValidationError):
        await directory.edit_tenant(None, "New")
    with pytest.raises(ValidationError):
        await directory.edit_tenant(tenant.id, None)


@pytest.mark.asyncio
async def test_rename_and_delete_cascade(directory, store):
    tenant = await directory.add_tenant("Room 22")
    await store.save_reading("Room 22", 4, 2025, Decimal("321"))

    await directory.edit_tenant(tenant.id, "Room 23")
    assert await store.get_previous_reading("Room 23", 5, 2025) == Decimal("321")

    await directory.delete_tenant(tenant.id)
    assert await directory.list_tenants() == []
    assert await Reading.all().count() == 0


@pytest.mark.asyncio
async def test_delete_requires_existing_tenant(directory):
    with pytest.raises(ValidationError):
        await directory.delete_tenant(None)
    with pytest.raises(NotFoundError):
        await directory.delete_tenant(7)
