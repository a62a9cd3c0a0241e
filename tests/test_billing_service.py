"""Tests for the billing service."""

from datetime import date
from decimal import Decimal

import pytest

from tenantbill.core.exceptions import BillTextError, ValidationError
from tenantbill.core.models import COMMON_WATER_METER, ReadingType
from tenantbill.services.bill_text import BillSummary, BillTexts, TemplateBillTextGenerator
from tenantbill.services.billing import BillingService, BillRequest


class RecordingGenerator:
    def __init__(self):
        self.summaries: list[BillSummary] = []

    async def generate(self, summary: BillSummary) -> BillTexts:
        self.summaries.append(summary)
        return BillTexts(english="EN", hindi="HI")


class BrokenGenerator:
    async def generate(self, summary: BillSummary) -> BillTexts:
        raise RuntimeError("model unavailable")


def make_request(**overrides) -> BillRequest:
    params = dict(
        tenant_name="Dada",
        month=6,
        year=2025,
        bill_date=date(2025, 6, 30),
        due_date=date(2025, 7, 10),
        current_reading=Decimal("120"),
        previous_reading=Decimal("100"),
        previous_due=Decimal("50"),
        unit_rate=Decimal("8"),
        water_charges=Decimal("0"),
        apply_water_charges=False,
        penalty=Decimal("20"),
    )
    params.update(overrides)
    return BillRequest(**params)


@pytest.mark.asyncio
async def test_generate_bill_saves_reading_and_builds_summary(store):
    generator = RecordingGenerator()
    service = BillingService(store=store, text_generator=generator)

    bill = await service.generate_bill(make_request())

    assert bill.charges.total_amount == Decimal("230")
    assert bill.texts == BillTexts(english="EN", hindi="HI")
    saved = await store.get_reading("Dada", 6, 2025)
    assert saved.reading == Decimal("120")

    summary = generator.summaries[0]
    assert summary.bill_date == "30/06/2025"
    assert summary.due_date == "10/07/2025"
    assert summary.electricity_charges == Decimal("210")


@pytest.mark.asyncio
async def test_generate_bill_keeps_reading_when_text_fails(store):
    service = BillingService(store=store, text_generator=BrokenGenerator())

    with pytest.raises(BillTextError):
        await service.generate_bill(make_request())

    assert await store.get_reading("Dada", 6, 2025) is not None


@pytest.mark.asyncio
async def test_generate_bill_rejects_inverted_readings_without_saving(store):
    service = BillingService(store=store, text_generator=RecordingGenerator())

    with pytest.raises(ValidationError):
        await service.generate_bill(
            make_request(current_reading=Decimal("90"), previous_reading=Decimal("100"))
        )

    assert await store.get_reading("Dada", 6, 2025) is None


@pytest.mark.asyncio
async def test_generate_bill_requires_tenant(store):
    service = BillingService(store=store, text_generator=RecordingGenerator())

    with pytest.raises(ValidationError):
        await service.generate_bill(make_request(tenant_name=""))


@pytest.mark.asyncio
async def test_generate_bill_with_template_text(store):
    service = BillingService(
        store=store, text_generator=TemplateBillTextGenerator(contact_phone="12345")
    )

    bill = await service.generate_bill(
        make_request(water_charges=Decimal("52.5"), apply_water_charges=True)
    )

    assert "Due Date: 10/07/2025" in bill.texts.english
    assert "WATER CHARGES💧 = ₹52.5" in bill.texts.english
    assert "*₹282.5*" in bill.texts.english
    assert "12345" in bill.texts.english
    assert "₹282.5" in bill.texts.hindi


@pytest.mark.asyncio
async def test_prefill(store):
    service = BillingService(store=store, text_generator=RecordingGenerator())
    await store.save_reading("Dada", 12, 2024, Decimal("400"))

    previous, current = await service.prefill("Dada", 1, 2025)
    assert previous == Decimal("400")
    assert current is None

    await store.save_reading("Dada", 1, 2025, Decimal("450"))
    _, current = await service.prefill("Dada", 1, 2025)
    assert current.reading == Decimal("450")


@pytest.mark.asyncio
async def test_water_readings(store):
    service = BillingService(store=store, text_generator=RecordingGenerator())

    await service.save_water_reading(5, 2025, Decimal("100"))

    saved = await store.get_reading(COMMON_WATER_METER, 5, 2025, ReadingType.WATER)
    assert saved.reading == Decimal("100")
    assert await service.get_previous_water_reading(6, 2025) == Decimal("100")

    with pytest.raises(ValidationError):
        await service.save_water_reading(6, 2025, Decimal("0"))


def test_generate_water_bill_text():
    service = BillingService(store=None, text_generator=RecordingGenerator())

    water_bill = service.generate_water_bill(
        current_reading=Decimal("130"),
        previous_reading=Decimal("100"),
        unit_rate=Decimal("7"),
        tenant_names=["Dada", "Room 22", "Radhe room", "shop 195"],
    )

    assert water_bill.split.charge_per_tenant == Decimal("52.50")
    assert water_bill.tenant_names == ("Dada", "Room 22", "Radhe room", "shop 195")
    assert "= 30.00 units" in water_bill.texts.english
    assert "[30.00 units / 4 Tenants ] = 7.50 units" in water_bill.texts.english
    assert "7.50 × ₹7 = ₹52.50/Tenant" in water_bill.texts.english
    assert "₹52.50/किरायेदार" in water_bill.texts.hindi


def test_reading_note():
    note = BillingService.reading_note(
        date(2025, 3, 7), Decimal("1234.5"), Decimal("88")
    )

    assert "📅Date : 07/03/2025📅" in note
    assert "1.Main Meter : 1234.50" in note
    assert "2.Water meter : 88.00" in note


@pytest.mark.asyncio
async def test_rejected_bill_keeps_earlier_reading(store):
    service = BillingService(store=store, text_generator=RecordingGenerator())
    await store.save_reading("Dada", 6, 2025, Decimal("130"))

    with pytest.raises(ValidationError):
        await service.generate_bill(make_request(unit_rate=Decimal("0")))

    assert (await store.get_reading("Dada", 6, 2025)).reading == Decimal("130")
