"""Handlers for the reading entry process (FSM)."""

from __future__ import annotations

from html import escape

from aiogram import F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from tenantbill.bots.tg.handlers.utils import (
    get_period_keyboard,
    get_tenant_keyboard,
    parse_decimal,
    parse_period,
)
from tenantbill.bots.tg.keyboards.inline import SelectPeriodCallback, SelectTenantCallback
from tenantbill.bots.tg.keyboards.reply import BTN_READING
from tenantbill.bots.tg.states import ReadingEntry
from tenantbill.core.calculations import format_amount
from tenantbill.core.exceptions import BillingError
from tenantbill.core.periods import format_period_for_display, previous_period
from tenantbill.services.store import ReadingStore

router = Router(name=__name__)


@router.message(F.text == BTN_READING)
async def handle_readings_command(
    message: Message, state: FSMContext, store: ReadingStore
) -> None:
    """Starts the reading entry process by showing a list of tenants."""
    await state.clear()
    tenants = await store.list_tenants()
    if not tenants:
        await message.answer("No tenants found. Add them first.")
        return

    builder = get_tenant_keyboard(tenants, "reading")
    await message.answer(
        "Select the tenant to enter a reading for:",
        reply_markup=builder.as_markup(),
    )


@router.callback_query(SelectTenantCallback.filter(F.action == "reading"))
async def handle_tenant_selection(
    query: CallbackQuery,
    callback_data: SelectTenantCallback,
    state: FSMContext,
    store: ReadingStore,
) -> None:
    """Handles tenant selection and asks for the month."""
    if not isinstance(query.message, Message):
        return
    await query.answer()

    tenant = await store.get_tenant(callback_data.tenant_id)
    if tenant is None:
        await query.message.edit_text("Tenant not found.")
        return

    await state.update_data(tenant_name=tenant.name)
    await query.message.edit_text(
        f"<b>{escape(tenant.name)}</b>: select the month of the reading:",
        reply_markup=get_period_keyboard("reading").as_markup(),
    )


@router.callback_query(SelectPeriodCallback.filter(F.action == "reading"))
async def handle_period_selection(
    query: CallbackQuery,
    callback_data: SelectPeriodCallback,
    state: FSMContext,
    store: ReadingStore,
) -> None:
    """Shows the previous month's reading and asks for the current one."""
    if not isinstance(query.message, Message):
        return
    await query.answer()

    data = await state.get_data()
    tenant_name = data.get("tenant_name")
    if not tenant_name:
        await query.message.edit_text("Session expired. Start again from the menu.")
        return

    month, year = parse_period(callback_data.period)
    previous = await store.get_previous_reading(tenant_name, month, year)
    current = await store.get_reading(tenant_name, month, year)
    prev_month, prev_year = previous_period(month, year)

    await state.update_data(month=month, year=year)
    await state.set_state(ReadingEntry.enter_value)

    lines = [
        f"<b>{escape(tenant_name)}</b>, {format_period_for_display(month, year)}",
        f"Reading for {format_period_for_display(prev_month, prev_year)}: "
        f"<b>{format_amount(previous)}</b>",
    ]
    if current:
        lines.append(f"Already saved for this month: <b>{format_amount(current.reading)}</b>")
    lines.append("\nEnter the current reading:")
    await query.message.edit_text("\n".join(lines))


@router.message(ReadingEntry.enter_value)
async def handle_reading_value(
    message: Message, state: FSMContext, store: ReadingStore
) -> None:
    """Saves the entered reading."""
    value = parse_decimal(message.text)
    if value is None or value <= 0:
        await message.answer("Current reading must be a positive number.")
        return

    data = await state.get_data()
    try:
        await store.save_reading(data["tenant_name"], data["month"], data["year"], value)
    except BillingError as e:
        await message.answer(f"⚠️ {escape(str(e))}")
        return

    await message.answer(
        f"✅ Reading {format_amount(value)} saved for "
        f"<b>{escape(data['tenant_name'])}</b>, "
        f"{format_period_for_display(data['month'], data['year'])}."
    )
    await state.clear()
