"""Handlers for bill generation."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from html import escape

from aiogram import F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, InlineKeyboardButton, Message
from aiogram.utils.keyboard import InlineKeyboardBuilder

from tenantbill.bots.tg.handlers.utils import (
    get_period_keyboard,
    get_tenant_keyboard,
    get_yes_no_keyboard,
    parse_decimal,
    parse_period,
    send_preformatted,
)
from tenantbill.bots.tg.keyboards.inline import (
    ChoiceCallback,
    SelectPeriodCallback,
    SelectTenantCallback,
)
from tenantbill.bots.tg.keyboards.reply import BTN_BILL
from tenantbill.bots.tg.states import BillEntry
from tenantbill.config import settings
from tenantbill.core.calculations import format_amount
from tenantbill.core.exceptions import BillingError, BillTextError
from tenantbill.core.periods import format_period_for_display
from tenantbill.services.billing import BillingService, BillRequest
from tenantbill.services.store import ReadingStore

router = Router(name=__name__)


def _use_value_keyboard(field: str, value: Decimal, label: str) -> InlineKeyboardBuilder:
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(
            text=label,
            callback_data=ChoiceCallback(field=field, value=str(value)).pack(),
        )
    )
    return builder


@router.message(F.text == BTN_BILL)
async def handle_bill_command(
    message: Message, state: FSMContext, store: ReadingStore
) -> None:
    """Starts the bill form by showing the tenants."""
    # Keep the last water split so it can be offered as this bill's water charge.
    await state.set_state(None)
    tenants = await store.list_tenants()
    if not tenants:
        await message.answer("No tenants found. Add them first.")
        return
    await message.answer(
        "Select the tenant to bill:",
        reply_markup=get_tenant_keyboard(tenants, "bill").as_markup(),
    )


@router.callback_query(SelectTenantCallback.filter(F.action == "bill"))
async def handle_bill_tenant(
    query: CallbackQuery,
    callback_data: SelectTenantCallback,
    state: FSMContext,
    store: ReadingStore,
) -> None:
    if not isinstance(query.message, Message):
        return
    await query.answer()
    tenant = await store.get_tenant(callback_data.tenant_id)
    if tenant is None:
        await query.message.edit_text("Tenant not found.")
        return

    await state.update_data(tenant_name=tenant.name)
    await query.message.edit_text(
        f"<b>{escape(tenant.name)}</b>: select the billing month:",
        reply_markup=get_period_keyboard("bill").as_markup(),
    )


@router.callback_query(SelectPeriodCallback.filter(F.action == "bill"))
async def handle_bill_period(
    query: CallbackQuery,
    callback_data: SelectPeriodCallback,
    state: FSMContext,
    billing_service: BillingService,
) -> None:
    """Looks up the previous reading and asks for the current one."""
    if not isinstance(query.message, Message):
        return
    await query.answer()

    data = await state.get_data()
    tenant_name = data.get("tenant_name")
    if not tenant_name:
        await query.message.edit_text("Session expired. Start again from the menu.")
        return

    month, year = parse_period(callback_data.period)
    previous, current = await billing_service.prefill(tenant_name, month, year)
    await state.update_data(month=month, year=year, previous_reading=str(previous))
    await state.set_state(BillEntry.enter_current)

    text = (
        f"<b>{escape(tenant_name)}</b>, {format_period_for_display(month, year)}\n"
        f"Previous reading: <b>{format_amount(previous)}</b>\n\n"
        "Enter the current meter reading:"
    )
    markup = None
    if current:
        markup = _use_value_keyboard(
            "current", current.reading, f"Use saved {format_amount(current.reading)}"
        ).as_markup()
    await query.message.edit_text(text, reply_markup=markup)


async def _ask_previous_due(message: Message, state: FSMContext, value: Decimal):
    await state.update_data(current_reading=str(value))
    await state.set_state(BillEntry.enter_previous_due)
    await message.answer("Previous due (enter 0 if none):")


@router.callback_query(BillEntry.enter_current, ChoiceCallback.filter(F.field == "current"))
async def handle_saved_current(
    query: CallbackQuery, callback_data: ChoiceCallback, state: FSMContext
) -> None:
    if not isinstance(query.message, Message):
        return
    await query.answer()
    await query.message.edit_reply_markup(reply_markup=None)
    await _ask_previous_due(query.message, state, Decimal(callback_data.value))


@router.message(BillEntry.enter_current)
async def handle_current_reading(message: Message, state: FSMContext) -> None:
    value = parse_decimal(message.text)
    if value is None or value < 0:
        await message.answer("Please enter a non-negative number.")
        return
    await _ask_previous_due(message, state, value)


@router.message(BillEntry.enter_previous_due)
async def handle_previous_due(message: Message, state: FSMContext) -> None:
    value = parse_decimal(message.text)
    if value is None or value < 0:
        await message.answer("Please enter a non-negative amount.")
        return
    await state.update_data(previous_due=str(value))
    await state.set_state(BillEntry.enter_rate)
    await message.answer("Rate per unit (₹):")


@router.message(BillEntry.enter_rate)
async def handle_rate(message: Message, state: FSMContext) -> None:
    value = parse_decimal(message.text)
    if value is None or value <= 0:
        await message.answer("Unit rate must be positive.")
        return
    await state.update_data(unit_rate=str(value))
    await state.set_state(BillEntry.enter_water)

    data = await state.get_data()
    markup = None
    last_water = data.get("last_water_charge")
    if last_water:
        markup = _use_value_keyboard(
            "water", Decimal(last_water), f"Use water split ₹{last_water}"
        ).as_markup()
    await message.answer(
        "Water charges for this tenant (0 to leave water out):", reply_markup=markup
    )


async def _ask_penalty(message: Message, state: FSMContext, value: Decimal):
    await state.update_data(water_charges=str(value))
    await state.set_state(BillEntry.enter_penalty)
    await message.answer("Penalty (enter 0 if none):")


@router.callback_query(BillEntry.enter_water, ChoiceCallback.filter(F.field == "water"))
async def handle_water_split(
    query: CallbackQuery, callback_data: ChoiceCallback, state: FSMContext
) -> None:
    if not isinstance(query.message, Message):
        return
    await query.answer()
    await query.message.edit_reply_markup(reply_markup=None)
    await _ask_penalty(query.message, state, Decimal(callback_data.value))


@router.message(BillEntry.enter_water)
async def handle_water_charges(message: Message, state: FSMContext) -> None:
    value = parse_decimal(message.text)
    if value is None or value < 0:
        await message.answer("Please enter a non-negative amount.")
        return
    await _ask_penalty(message, state, value)


@router.message(BillEntry.enter_penalty)
async def handle_penalty(message: Message, state: FSMContext) -> None:
    value = parse_decimal(message.text)
    if value is None or value < 0:
        await message.answer("Please enter a non-negative amount.")
        return
    await state.update_data(penalty=str(value))
    await state.set_state(BillEntry.choose_round_off)
    await message.answer(
        "Round off the electricity charges and total?",
        reply_markup=get_yes_no_keyboard("round").as_markup(),
    )


@router.callback_query(
    BillEntry.choose_round_off, ChoiceCallback.filter(F.field == "round")
)
async def handle_round_off(
    query: CallbackQuery,
    callback_data: ChoiceCallback,
    state: FSMContext,
    billing_service: BillingService,
) -> None:
    """Computes the bill and sends it in English and Hindi."""
    if not isinstance(query.message, Message):
        return
    await query.answer()

    data = await state.get_data()
    water_charges = Decimal(data["water_charges"])
    bill_date = date.today()
    request = BillRequest(
        tenant_name=data["tenant_name"],
        month=data["month"],
        year=data["year"],
        bill_date=bill_date,
        due_date=bill_date + timedelta(days=settings.DUE_DAYS),
        current_reading=Decimal(data["current_reading"]),
        previous_reading=Decimal(data["previous_reading"]),
        previous_due=Decimal(data["previous_due"]),
        unit_rate=Decimal(data["unit_rate"]),
        water_charges=water_charges,
        apply_water_charges=water_charges > 0,
        penalty=Decimal(data["penalty"]),
        round_off=callback_data.value == "yes",
    )

    await query.message.edit_text("Preparing the bill...")
    try:
        bill = await billing_service.generate_bill(request)
    except BillTextError as e:
        await query.message.edit_text(
            f"⚠️ The reading was saved but the bill text failed: {escape(str(e))}"
        )
        await state.set_state(None)
        return
    except BillingError as e:
        await query.message.edit_text(f"⚠️ {escape(str(e))}")
        await state.set_state(None)
        return

    await query.message.edit_text(
        f"✅ Bill for <b>{escape(request.tenant_name)}</b>: "
        f"total ₹{format_amount(bill.charges.total_amount)}"
    )
    await send_preformatted(query.message, "English bill", bill.texts.english)
    await send_preformatted(query.message, "Hindi bill", bill.texts.hindi)
    await state.set_state(None)
