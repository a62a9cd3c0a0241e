"""Repository for Tenant model."""

from __future__ import annotations

from tenantbill.core.models import Tenant
from tenantbill.core.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    """Tenant-specific repository operations."""

    def __init__(self) -> None:
        super().__init__(Tenant)

    async def all_by_name(self) -> list[Tenant]:
        """Get all tenants ordered by name."""
        return await self.model.all().order_by("name")

    async def find_by_name(
        self, name: str, exclude_id: int | None = None
    ) -> Tenant | None:
        """Find a tenant whose name matches ignoring case."""
        query = self.model.filter(name_key=name.casefold())
        if exclude_id is not None:
            query = query.exclude(id=exclude_id)
        return await query.first()
