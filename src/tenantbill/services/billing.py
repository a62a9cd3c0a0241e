"""Service responsible for generating tenant bills."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from tenantbill.core import calculations
from tenantbill.core.calculations import ChargeBreakdown, WaterSplit
from tenantbill.core.exceptions import BillTextError, ValidationError
from tenantbill.core.models import COMMON_WATER_METER, Reading, ReadingType
from tenantbill.core.periods import format_bill_date
from tenantbill.services.bill_text import BillSummary, BillTextGenerator, BillTexts
from tenantbill.services.store import ReadingStore
from tenantbill.services.templating import get_environment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BillRequest:
    """Everything needed to bill one tenant for one month."""

    tenant_name: str
    month: int
    year: int
    bill_date: date
    due_date: date
    current_reading: Decimal
    previous_reading: Decimal
    previous_due: Decimal
    unit_rate: Decimal
    water_charges: Decimal = Decimal("0")
    apply_water_charges: bool = True
    penalty: Decimal | None = None
    round_off: bool = False


@dataclass(frozen=True)
class GeneratedBill:
    """A computed bill together with its bilingual text."""

    request: BillRequest
    charges: ChargeBreakdown
    summary: BillSummary
    texts: BillTexts


@dataclass(frozen=True)
class GeneratedWaterBill:
    """Shared water meter split together with its bilingual text."""

    split: WaterSplit
    tenant_names: tuple[str, ...]
    texts: BillTexts


class BillingService:
    """Orchestrates bill calculation and bill text generation."""

    def __init__(self, store: ReadingStore, text_generator: BillTextGenerator):
        self._store = store
        self._text_generator = text_generator

    async def prefill(
        self, tenant_name: str, month: int, year: int
    ) -> tuple[Decimal, Reading | None]:
        """
        Returns the previous month's electricity reading (0 if none) and the
        reading already saved for this month, if any.
        """
        previous = await self._store.get_previous_reading(tenant_name, month, year)
        current = await self._store.get_reading(tenant_name, month, year)
        return previous, current

    async def generate_bill(self, request: BillRequest) -> GeneratedBill:
        """
        Computes the charges, saves the current reading and renders the bill.

        Nothing is saved when the figures are rejected.

        Raises:
            ValidationError: on missing tenant or inconsistent figures.
            BillTextError: if the text generator fails.
        """
        if not request.tenant_name:
            raise ValidationError("Tenant is required.")
        if request.current_reading < 0 or request.previous_reading < 0:
            raise ValidationError("Readings cannot be negative.")

        charges = calculations.compute_charges(
            current_reading=request.current_reading,
            previous_reading=request.previous_reading,
            previous_due=request.previous_due,
            unit_rate=request.unit_rate,
            water_charges=request.water_charges,
            apply_water_charges=request.apply_water_charges,
            penalty=request.penalty,
            round_off=request.round_off,
        )

        # The reading is kept even if the bill text cannot be produced.
        await self._store.save_reading(
            request.tenant_name,
            request.month,
            request.year,
            request.current_reading,
            ReadingType.ELECTRICITY,
        )

        summary = BillSummary(
            tenant_name=request.tenant_name,
            bill_date=format_bill_date(request.bill_date),
            due_date=format_bill_date(request.due_date),
            current_reading=request.current_reading,
            previous_reading=request.previous_reading,
            units_consumed=charges.units_consumed,
            unit_rate=request.unit_rate,
            previous_due=request.previous_due,
            electricity_charges=charges.electricity_charges,
            water_charges=request.water_charges,
            apply_water_charges=request.apply_water_charges,
            penalty=charges.penalty,
            total_amount=charges.total_amount,
        )

        logger.info(
            f"Generating bill for '{request.tenant_name}' "
            f"{request.month:02d}/{request.year}: total {charges.total_amount}."
        )
        try:
            texts = await self._text_generator.generate(summary)
        except BillTextError:
            raise
        except Exception as e:
            logger.error(
                f"Unexpected bill text failure for '{request.tenant_name}': {e}",
                exc_info=True,
            )
            raise BillTextError(
                "An unexpected error occurred during bill generation."
            ) from e

        return GeneratedBill(
            request=request, charges=charges, summary=summary, texts=texts
        )

    async def get_previous_water_reading(self, month: int, year: int) -> Decimal:
        """Previous month's reading of the shared water meter (0 if none)."""
        return await self._store.get_previous_reading(
            COMMON_WATER_METER, month, year, ReadingType.WATER
        )

    async def save_water_reading(
        self, month: int, year: int, reading: Decimal
    ) -> Reading:
        """Saves the shared water meter's reading for a month."""
        if reading <= 0:
            raise ValidationError("Please enter a valid current reading for water.")
        return await self._store.save_reading(
            COMMON_WATER_METER, month, year, reading, ReadingType.WATER
        )

    def generate_water_bill(
        self,
        current_reading: Decimal,
        previous_reading: Decimal,
        unit_rate: Decimal,
        tenant_names: list[str],
        round_off: bool = False,
    ) -> GeneratedWaterBill:
        """Splits the shared water meter between tenants and renders the text."""
        split = calculations.split_water_charge(
            current_reading=current_reading,
            previous_reading=previous_reading,
            unit_rate=unit_rate,
            tenant_count=len(tenant_names),
            round_off=round_off,
        )
        env = get_environment()
        context = {
            "current_reading": current_reading,
            "previous_reading": previous_reading,
            "unit_rate": unit_rate,
            "split": split,
        }
        texts = BillTexts(
            english=env.get_template("water_bill_en.txt.j2").render(context),
            hindi=env.get_template("water_bill_hi.txt.j2").render(context),
        )
        return GeneratedWaterBill(
            split=split, tenant_names=tuple(tenant_names), texts=texts
        )

    @staticmethod
    def reading_note(
        bill_date: date, main_reading: Decimal, water_reading: Decimal
    ) -> str:
        """Short note of today's main and water meter readings."""
        return (
            get_environment()
            .get_template("reading_note.txt.j2")
            .render(
                date=format_bill_date(bill_date),
                main_reading=main_reading,
                water_reading=water_reading,
            )
        )
