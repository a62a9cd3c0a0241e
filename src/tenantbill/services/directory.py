"""Tenant directory management."""

from __future__ import annotations

from tenantbill.core.exceptions import ValidationError
from tenantbill.core.models import Tenant
from tenantbill.services.store import ReadingStore


class TenantDirectory:
    """Add, rename and delete tenants on top of the reading store."""

    def __init__(self, store: ReadingStore):
        self._store = store

    async def list_tenants(self) -> list[Tenant]:
        return await self._store.list_tenants()

    async def add_tenant(self, name: str | None) -> Tenant:
        """Adds a tenant; the name must be given."""
        if not name or not name.strip():
            raise ValidationError("Tenant name cannot be empty.")
        return await self._store.add_tenant(name)

    async def edit_tenant(self, tenant_id: int | None, new_name: str | None) -> Tenant:
        """Renames a tenant; readings follow the new name."""
        if tenant_id is None:
            raise ValidationError("Tenant id is required.")
        if not new_name or not new_name.strip():
            raise ValidationError("Tenant name cannot be empty.")
        return await self._store.edit_tenant(tenant_id, new_name)

    async def delete_tenant(self, tenant_id: int | None) -> None:
        """Deletes a tenant and its reading history."""
        if tenant_id is None:
            raise ValidationError("Tenant id is required.")
        await self._store.delete_tenant(tenant_id)
