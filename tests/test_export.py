"""Tests for the yearly readings export."""

from decimal import Decimal

import pytest

from tenantbill.core.models import COMMON_WATER_METER, ReadingType
from tenantbill.services.export import (
    WATER_ROW_LABEL,
    ExportService,
    build_yearly_grid,
    render_yearly_text,
)


@pytest.mark.asyncio
async def test_build_yearly_grid(store):
    await store.add_tenant("Dada")
    await store.add_tenant("Room 22")
    await store.save_reading("Dada", 1, 2025, Decimal("100"))
    await store.save_reading("Dada", 3, 2025, Decimal("130"))
    await store.save_reading("Former", 2, 2025, Decimal("50"))
    await store.save_reading("Dada", 12, 2024, Decimal("90"))
    await store.save_reading(COMMON_WATER_METER, 2, 2025, Decimal("700"), ReadingType.WATER)

    grid = build_yearly_grid(
        await store.list_readings_for_year(2025), await store.list_tenants(), 2025
    )

    assert [row.label for row in grid.rows] == ["Dada", "Former", "Room 22"]
    dada = grid.rows[0]
    assert dada.cells[0] == Decimal("100")
    assert dada.cells[1] is None
    assert dada.cells[2] == Decimal("130")
    assert all(cell is None for cell in grid.rows[2].cells)
    assert grid.water_row.label == WATER_ROW_LABEL
    assert grid.water_row.cells[1] == Decimal("700")


@pytest.mark.asyncio
async def test_render_yearly_text(store):
    await store.add_tenant("Dada")
    await store.save_reading("Dada", 1, 2025, Decimal("100.5"))

    grid = build_yearly_grid(
        await store.list_readings_for_year(2025), await store.list_tenants(), 2025
    )
    lines = render_yearly_text(grid).splitlines()

    assert lines[0] == "Readings 2025"
    assert "Jan" in lines[1] and "Dec" in lines[1]
    assert lines[2].startswith("Dada")
    assert "100.5" in lines[2]
    assert lines[3].startswith(WATER_ROW_LABEL)
    assert len(lines) == 4


@pytest.mark.asyncio
async def test_render_yearly_html_escapes_names(store):
    await store.add_tenant("<Shop>")

    grid = build_yearly_grid([], await store.list_tenants(), 2025)
    html = ExportService().render_yearly_html(grid)

    assert "Yearly Readings 2025" in html
    assert "&lt;Shop&gt;" in html
    assert WATER_ROW_LABEL in html
