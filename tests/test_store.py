"""Tests for the tenant and reading store."""

from decimal import Decimal

import pytest

from tenantbill.core.exceptions import DuplicateNameError, NotFoundError, ValidationError
from tenantbill.core.models import COMMON_WATER_METER, Reading, ReadingType


@pytest.mark.asyncio
async def test_add_tenant_trims_name_and_assigns_increasing_ids(store):
    first = await store.add_tenant("  Room 22 ")
    second = await store.add_tenant("Shop 195")

    assert first.name == "Room 22"
    assert second.id > first.id
    assert [t.name for t in await store.list_tenants()] == ["Room 22", "Shop 195"]


@pytest.mark.asyncio
async def test_add_tenant_rejects_duplicates_ignoring_case(store):
    await store.add_tenant("Dada")

    with pytest.raises(DuplicateNameError):
        await store.add_tenant("dada")
    assert len(await store.list_tenants()) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["", "   ", COMMON_WATER_METER])
async def test_add_tenant_rejects_blank_and_reserved_names(store, name):
    with pytest.raises(ValidationError):
        await store.add_tenant(name)


@pytest.mark.asyncio
async def test_save_reading_overwrites_same_key(store):
    await store.save_reading("Dada", 5, 2025, Decimal("100"))
    await store.save_reading("Dada", 5, 2025, Decimal("140"))

    count = await Reading.filter(tenant_name="Dada", month=5, year=2025).count()
    assert count == 1
    saved = await store.get_reading("Dada", 5, 2025)
    assert saved.reading == Decimal("140")


@pytest.mark.asyncio
async def test_electricity_and_water_readings_are_separate(store):
    await store.save_reading(COMMON_WATER_METER, 5, 2025, Decimal("30"), ReadingType.WATER)
    await store.save_reading(COMMON_WATER_METER, 5, 2025, Decimal("70"))

    water = await store.get_reading(COMMON_WATER_METER, 5, 2025, ReadingType.WATER)
    electricity = await store.get_reading(COMMON_WATER_METER, 5, 2025)
    assert water.reading == Decimal("30")
    assert electricity.reading == Decimal("70")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "month, year, reading",
    [(0, 2025, Decimal("1")), (13, 2025, Decimal("1")), (5, 2025, Decimal("-1"))],
)
async def test_save_reading_validation(store, month, year, reading):
    with pytest.raises(ValidationError):
        await store.save_reading("Dada", month, year, reading)


@pytest.mark.asyncio
async def test_previous_reading_for_january_uses_december(store):
    await store.save_reading("Dada", 12, 2024, Decimal("500"))

    assert await store.get_previous_reading("Dada", 1, 2025) == Decimal("500")


@pytest.mark.asyncio
async def test_previous_reading_defaults_to_zero(store):
    await store.save_reading("Dada", 3, 2025, Decimal("500"))

    assert await store.get_previous_reading("Dada", 3, 2025) == Decimal("0")
    assert await store.get_previous_reading("Nobody", 4, 2025) == Decimal("0")


@pytest.mark.asyncio
async def test_edit_tenant_moves_readings(store):
    tenant = await store.add_tenant("Radhe room")
    await store.save_reading("Radhe room", 1, 2025, Decimal("10"))
    await store.save_reading("Radhe room", 2, 2025, Decimal("20"))

    renamed = await store.edit_tenant(tenant.id, "Radhe Shop")

    assert renamed.name == "Radhe Shop"
    assert await Reading.filter(tenant_name="Radhe room").count() == 0
    assert await Reading.filter(tenant_name="Radhe Shop").count() == 2


@pytest.mark.asyncio
async def test_edit_tenant_allows_case_change_of_own_name(store):
    tenant = await store.add_tenant("dagi room")

    renamed = await store.edit_tenant(tenant.id, "Dagi Room")

    assert renamed.name == "Dagi Room"


@pytest.mark.asyncio
async def test_edit_tenant_rejects_name_of_another_tenant(store):
    await store.add_tenant("Dada")
    other = await store.add_tenant("Dharmendra")

    with pytest.raises(DuplicateNameError):
        await store.edit_tenant(other.id, "DADA")


@pytest.mark.asyncio
async def test_edit_unknown_tenant(store):
    with pytest.raises(NotFoundError):
        await store.edit_tenant(999, "Someone")


@pytest.mark.asyncio
async def test_delete_tenant_removes_readings(store):
    tenant = await store.add_tenant("ankurbha")
    await store.add_tenant("Dada")
    await store.save_reading("ankurbha", 1, 2025, Decimal("10"))
    await store.save_reading("Dada", 1, 2025, Decimal("15"))

    await store.delete_tenant(tenant.id)

    assert [t.name for t in await store.list_tenants()] == ["Dada"]
    assert await Reading.filter(tenant_name="ankurbha").count() == 0
    assert await Reading.filter(tenant_name="Dada").count() == 1


@pytest.mark.asyncio
async def test_delete_unknown_tenant(store):
    with pytest.raises(NotFoundError):
        await store.delete_tenant(42)


@pytest.mark.asyncio
async def test_list_readings_for_year_is_ordered(store):
    await store.save_reading("b", 2, 2025, Decimal("2"))
    await store.save_reading("a", 3, 2025, Decimal("3"))
    await store.save_reading("a", 1, 2025, Decimal("1"))
    await store.save_reading("a", 12, 2024, Decimal("0"))

    readings = await store.list_readings_for_year(2025)
    assert [(r.tenant_name, r.month) for r in readings] == [("a", 1), ("a", 3), ("b", 2)]

    everything = await store.list_readings_for_year(0)
    assert [(r.tenant_name, r.year, r.month) for r in everything] == [
        ("a", 2024, 12),
        ("a", 2025, 1),
        ("a", 2025, 3),
        ("b", 2025, 2),
    ]


@pytest.mark.asyncio
async def test_seed_default_tenants_skips_existing(store):
    await store.add_tenant("dada")

    await store.seed_default_tenants(["Dada", "Room 22", "Room 22"])

    assert [t.name for t in await store.list_tenants()] == ["Room 22", "dada"]


@pytest.mark.asyncio
async def test_add_tenant_rejects_duplicates_with_accented_letters(store):
    await store.add_tenant("Émile")

    with pytest.raises(DuplicateNameError):
        await store.add_tenant("émile")
    assert [t.name for t in await store.list_tenants()] == ["Émile"]


@pytest.mark.asyncio
async def test_edit_tenant_rejects_accented_name_of_another_tenant(store):
    await store.add_tenant("Ölmühle")
    other = await store.add_tenant("Dada")

    with pytest.raises(DuplicateNameError):
        await store.edit_tenant(other.id, "ÖLMÜHLE")


@pytest.mark.asyncio
@pytest.mark.parametrize("new_name", ["", "   ", COMMON_WATER_METER, "Common_Water_Meter"])
async def test_edit_tenant_rejects_blank_and_reserved_names(store, new_name):
    tenant = await store.add_tenant("Dada")

    with pytest.raises(ValidationError):
        await store.edit_tenant(tenant.id, new_name)
    assert (await store.get_tenant(tenant.id)).name == "Dada"


@pytest.mark.asyncio
async def test_edit_tenant_trims_new_name(store):
    tenant = await store.add_tenant("A")
    await store.save_reading("A", 1, 2025, Decimal("10"))

    renamed = await store.edit_tenant(tenant.id, "  B  ")

    assert renamed.name == "B"
    assert (await store.get_tenant(tenant.id)).name == "B"
    assert await store.get_previous_reading("B", 2, 2025) == Decimal("10")


@pytest.mark.asyncio
async def test_save_reading_rejects_more_than_two_decimal_places(store):
    with pytest.raises(ValidationError):
        await store.save_reading("Dada", 5, 2025, Decimal("100.555"))
    assert await store.get_reading("Dada", 5, 2025) is None


@pytest.mark.asyncio
async def test_saved_reading_reads_back_unchanged(store):
    await store.save_reading("Dada", 5, 2025, Decimal("100.55"))
    await store.save_reading("Dada", 5, 2025, Decimal("100.50"))

    saved = await store.get_reading("Dada", 5, 2025)
    assert saved.reading == Decimal("100.5")
