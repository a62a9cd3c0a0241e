"""Repository for Reading model."""

from __future__ import annotations

from decimal import Decimal

from tenantbill.core.models import Reading, ReadingType
from tenantbill.core.repositories.base import BaseRepository


class ReadingRepository(BaseRepository[Reading]):
    """Reading-specific repository operations."""

    def __init__(self) -> None:
        super().__init__(Reading)

    async def get_for_period(
        self, tenant_name: str, month: int, year: int, reading_type: ReadingType
    ) -> Reading | None:
        """Get the reading stored for a tenant, period and meter type."""
        return await self.model.get_or_none(
            tenant_name=tenant_name, month=month, year=year, type=reading_type
        )

    async def upsert(
        self,
        tenant_name: str,
        month: int,
        year: int,
        reading_type: ReadingType,
        value: Decimal,
    ) -> tuple[Reading, bool]:
        """Overwrite the value for this key, or insert a new reading."""
        return await self.model.update_or_create(
            defaults={"reading": value},
            tenant_name=tenant_name,
            month=month,
            year=year,
            type=reading_type,
        )

    async def for_year(self, year: int) -> list[Reading]:
        """Get readings of one year, or of every year when ``year`` is 0."""
        query = self.model.all()
        if year != 0:
            query = query.filter(year=year)
        return await query.order_by("tenant_name", "year", "month")

    async def rename_tenant(self, old_name: str, new_name: str) -> int:
        """Move every reading filed under ``old_name`` to ``new_name``."""
        return await self.model.filter(tenant_name=old_name).update(
            tenant_name=new_name
        )

    async def delete_for_tenant(self, tenant_name: str) -> int:
        """Delete every reading filed under ``tenant_name``."""
        return await self.model.filter(tenant_name=tenant_name).delete()
