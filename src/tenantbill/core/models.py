"""Domain models for tenant billing."""

from __future__ import annotations

import enum

from tortoise import fields, models

# Shared water meter readings are filed under this name instead of a tenant.
COMMON_WATER_METER = "common_water_meter"


class ReadingType(str, enum.Enum):
    """Kind of meter a reading was taken from."""

    ELECTRICITY = "electricity"
    WATER = "water"


class BaseModel(models.Model):
    """Abstract base model with common fields."""

    id = fields.IntField(pk=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        abstract = True


class Tenant(BaseModel):
    """Represents a tenant (room, shop or occupant) billed for utilities."""

    name = fields.CharField(max_length=255)
    # Casefolded name; tenants are unique on it.
    name_key = fields.CharField(max_length=255, unique=True)

    def __str__(self) -> str:
        return self.name


class Reading(BaseModel):
    """A meter value recorded for a tenant for one month of one year.

    Readings reference tenants by name, not by id; renaming or deleting a
    tenant is cascaded by the store.
    """

    tenant_name = fields.CharField(max_length=255, index=True)
    month = fields.SmallIntField()
    year = fields.IntField()
    reading = fields.DecimalField(max_digits=12, decimal_places=2)
    type = fields.CharEnumField(ReadingType, default=ReadingType.ELECTRICITY)

    class Meta:
        unique_together = ("tenant_name", "month", "year", "type")

    def __str__(self) -> str:
        return (
            f"{self.type.value} reading for {self.tenant_name} "
            f"on {self.month:02d}/{self.year}: {self.reading}"
        )
