"""In-process store for tenants and their monthly meter readings."""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal

from tortoise.transactions import in_transaction

from tenantbill.core.calculations import CENT
from tenantbill.core.exceptions import DuplicateNameError, NotFoundError, ValidationError
from tenantbill.core.models import COMMON_WATER_METER, Reading, ReadingType, Tenant
from tenantbill.core.periods import previous_period
from tenantbill.core.repositories.reading import ReadingRepository
from tenantbill.core.repositories.tenant import TenantRepository

logger = logging.getLogger(__name__)


class ReadingStore:
    """
    Single owner of tenant and reading records.

    Readings point at tenants by name, so renaming or deleting a tenant is
    cascaded to its readings here. Mutations are serialised with one lock and
    cascades run in a single transaction.
    """

    def __init__(
        self,
        tenant_repo: TenantRepository,
        reading_repo: ReadingRepository,
    ):
        self._tenant_repo = tenant_repo
        self._reading_repo = reading_repo
        self._lock = asyncio.Lock()

    # --- Tenants ---

    async def list_tenants(self) -> list[Tenant]:
        """Returns all tenants ordered by name."""
        return await self._tenant_repo.all_by_name()

    async def get_tenant(self, tenant_id: int) -> Tenant | None:
        return await self._tenant_repo.get(pk=tenant_id)

    async def add_tenant(self, name: str) -> Tenant:
        """
        Creates a tenant with a trimmed name.

        Raises:
            ValidationError: if the name is blank or reserved.
            DuplicateNameError: if a tenant with that name exists, ignoring case.
        """
        name = self._clean_name(name)
        async with self._lock:
            if await self._tenant_repo.find_by_name(name):
                raise DuplicateNameError(f"Tenant '{name}' already exists.")
            tenant = await self._tenant_repo.create(
                name=name, name_key=name.casefold()
            )
        logger.info(f"Tenant {tenant.id} '{tenant.name}' added.")
        return tenant

    async def edit_tenant(self, tenant_id: int, new_name: str) -> Tenant:
        """
        Renames a tenant and every reading filed under its old name.

        Raises:
            NotFoundError: if no tenant has this id.
            ValidationError: if the new name is blank or reserved.
            DuplicateNameError: if another tenant already uses the name.
        """
        async with self._lock:
            tenant = await self._tenant_repo.get(pk=tenant_id)
            if not tenant:
                raise NotFoundError("Tenant not found.")

            new_name = self._clean_name(new_name)
            if await self._tenant_repo.find_by_name(new_name, exclude_id=tenant.id):
                raise DuplicateNameError(
                    f"Tenant with name '{new_name}' already exists."
                )

            old_name = tenant.name
            async with in_transaction():
                tenant.name = new_name
                tenant.name_key = new_name.casefold()
                await tenant.save(
                    update_fields=["name", "name_key", "updated_at"]
                )
                moved = await self._reading_repo.rename_tenant(old_name, new_name)

        logger.info(
            f"Tenant {tenant.id} renamed from '{old_name}' to '{new_name}' "
            f"({moved} readings moved)."
        )
        return tenant

    async def delete_tenant(self, tenant_id: int) -> None:
        """
        Deletes a tenant together with all readings filed under its name.

        Raises:
            NotFoundError: if no tenant has this id.
        """
        async with self._lock:
            tenant = await self._tenant_repo.get(pk=tenant_id)
            if not tenant:
                raise NotFoundError("Tenant not found.")

            async with in_transaction():
                await self._tenant_repo.delete(pk=tenant.id)
                removed = await self._reading_repo.delete_for_tenant(tenant.name)

        logger.info(
            f"Tenant {tenant_id} '{tenant.name}' deleted with {removed} readings."
        )

    async def seed_default_tenants(self, names: list[str]) -> None:
        """Adds each of ``names`` that is not yet a tenant."""
        for name in names:
            if await self._tenant_repo.find_by_name(name.strip()):
                continue
            await self.add_tenant(name)

    @staticmethod
    def _clean_name(name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Tenant name cannot be empty.")
        if name.casefold() == COMMON_WATER_METER:
            raise ValidationError(f"'{name}' is reserved for the shared water meter.")
        return name

    # --- Readings ---

    async def save_reading(
        self,
        tenant_name: str,
        month: int,
        year: int,
        reading: Decimal,
        reading_type: ReadingType = ReadingType.ELECTRICITY,
    ) -> Reading:
        """
        Stores a reading, overwriting any reading with the same
        tenant name, month, year and type.

        The tenant name is not checked against the tenant list; the shared
        water meter is filed under a name that is not a tenant.
        """
        if not tenant_name:
            raise ValidationError("Tenant name is required to save a reading.")
        if not 1 <= month <= 12:
            raise ValidationError(f"Month must be between 1 and 12, got {month}.")
        if reading < 0:
            raise ValidationError("Reading cannot be negative.")
        if reading != reading.quantize(CENT):
            raise ValidationError("Reading can have at most two decimal places.")

        async with self._lock:
            record, created = await self._reading_repo.upsert(
                tenant_name, month, year, ReadingType(reading_type), reading
            )
        logger.info(
            f"{'Saved' if created else 'Updated'} {record.type.value} reading "
            f"{reading} for '{tenant_name}' {month:02d}/{year}."
        )
        return record

    async def get_reading(
        self,
        tenant_name: str,
        month: int,
        year: int,
        reading_type: ReadingType = ReadingType.ELECTRICITY,
    ) -> Reading | None:
        """Returns the reading stored for exactly this key, if any."""
        return await self._reading_repo.get_for_period(
            tenant_name, month, year, ReadingType(reading_type)
        )

    async def get_previous_reading(
        self,
        tenant_name: str,
        month: int,
        year: int,
        reading_type: ReadingType = ReadingType.ELECTRICITY,
    ) -> Decimal:
        """
        Returns the reading of the month before ``month``/``year``
        (December of the previous year for January), or 0 if none was saved.
        """
        prev_month, prev_year = previous_period(month, year)
        record = await self._reading_repo.get_for_period(
            tenant_name, prev_month, prev_year, ReadingType(reading_type)
        )
        return record.reading if record else Decimal("0")

    async def list_readings_for_year(self, year: int) -> list[Reading]:
        """
        Returns the readings of ``year`` (all readings when ``year`` is 0),
        ordered by tenant name, year and month.
        """
        return await self._reading_repo.for_year(year)
