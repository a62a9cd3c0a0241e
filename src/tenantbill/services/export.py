"""Service for exporting the yearly readings overview as text or PDF."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

from tenantbill.core.calculations import format_amount
from tenantbill.core.models import COMMON_WATER_METER, Reading, ReadingType, Tenant
from tenantbill.core.periods import MONTH_ABBREVIATIONS
from tenantbill.services.templating import get_environment

WATER_ROW_LABEL = "Common Water Meter"


@dataclass(frozen=True)
class GridRow:
    """One tenant (or the shared water meter) with a cell per month."""

    label: str
    cells: tuple[Decimal | None, ...]  # January first, None where missing


@dataclass(frozen=True)
class YearlyGrid:
    year: int
    rows: tuple[GridRow, ...]
    water_row: GridRow


def build_yearly_grid(
    readings: list[Reading], tenants: list[Tenant], year: int
) -> YearlyGrid:
    """
    Lays out a year of readings as a tenant-by-month grid.

    Rows cover current tenants as well as names that only appear in the
    readings; the shared water meter gets its own row at the bottom.
    """
    electricity: dict[tuple[str, int], Decimal] = {}
    water: dict[int, Decimal] = {}
    names: set[str] = {t.name for t in tenants}
    for r in readings:
        if r.year != year:
            continue
        names.add(r.tenant_name)
        if r.type == ReadingType.ELECTRICITY:
            electricity[(r.tenant_name, r.month)] = r.reading
        elif r.tenant_name == COMMON_WATER_METER:
            water[r.month] = r.reading

    names.discard(COMMON_WATER_METER)

    rows = tuple(
        GridRow(
            label=name,
            cells=tuple(electricity.get((name, m)) for m in range(1, 13)),
        )
        for name in sorted(names)
    )
    water_row = GridRow(
        label=WATER_ROW_LABEL, cells=tuple(water.get(m) for m in range(1, 13))
    )
    return YearlyGrid(year=year, rows=rows, water_row=water_row)


def render_yearly_text(grid: YearlyGrid) -> str:
    """Renders the grid as a fixed-width table for chat messages."""
    all_rows = [*grid.rows, grid.water_row]
    label_width = max(len(row.label) for row in all_rows)

    def cell(value: Decimal | None) -> str:
        return format_amount(value) if value is not None else "-"

    cell_width = max(
        [3] + [len(cell(v)) for row in all_rows for v in row.cells]
    )

    header = " ".join(
        ["".ljust(label_width)] + [m.rjust(cell_width) for m in MONTH_ABBREVIATIONS]
    )
    lines = [f"Readings {grid.year}", header]
    for row in all_rows:
        lines.append(
            " ".join(
                [row.label.ljust(label_width)]
                + [cell(v).rjust(cell_width) for v in row.cells]
            )
        )
    return "\n".join(lines)


class ExportService:
    """Handles exporting reading data to files."""

    def __init__(self):
        self._env = get_environment()

    def render_yearly_html(self, grid: YearlyGrid) -> str:
        template = self._env.get_template("yearly_readings.html")
        return template.render(grid=grid, months=MONTH_ABBREVIATIONS)

    def generate_pdf_yearly(self, grid: YearlyGrid, output_path: Path | str) -> Path:
        """
        Generates a PDF with the yearly readings table.

        Args:
            grid: The readings grid to export.
            output_path: The path where the PDF file will be saved.

        Returns:
            The path to the generated PDF file.
        """
        # WeasyPrint loads the native Pango libraries on import.
        from weasyprint import HTML

        rendered_html = self.render_yearly_html(grid)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        HTML(string=rendered_html).write_pdf(output_path)

        return output_path
