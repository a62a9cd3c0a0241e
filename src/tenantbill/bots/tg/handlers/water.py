"""Handlers for the shared water meter calculator."""

from __future__ import annotations

from decimal import Decimal
from html import escape

from aiogram import F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, InlineKeyboardButton, Message
from aiogram.utils.keyboard import InlineKeyboardBuilder

from tenantbill.bots.tg.handlers.utils import (
    get_period_keyboard,
    get_yes_no_keyboard,
    parse_decimal,
    parse_period,
    send_preformatted,
)
from tenantbill.bots.tg.keyboards.inline import (
    ChoiceCallback,
    SelectPeriodCallback,
    ToggleTenantCallback,
)
from tenantbill.bots.tg.keyboards.reply import BTN_WATER
from tenantbill.bots.tg.states import WaterBillEntry
from tenantbill.core.calculations import format_amount
from tenantbill.core.exceptions import BillingError
from tenantbill.core.models import Tenant
from tenantbill.core.periods import format_period_for_display
from tenantbill.services.billing import BillingService
from tenantbill.services.store import ReadingStore

router = Router(name=__name__)


def _tenant_toggle_keyboard(
    tenants: list[Tenant], selected: set[int]
) -> InlineKeyboardBuilder:
    builder = InlineKeyboardBuilder()
    for tenant in tenants:
        mark = "✅" if tenant.id in selected else "▫️"
        builder.row(
            InlineKeyboardButton(
                text=f"{mark} {tenant.name}",
                callback_data=ToggleTenantCallback(tenant_id=tenant.id).pack(),
            )
        )
    builder.row(
        InlineKeyboardButton(
            text="Done",
            callback_data=ChoiceCallback(field="tenants", value="done").pack(),
        )
    )
    return builder


@router.message(F.text == BTN_WATER)
async def handle_water_command(message: Message, state: FSMContext) -> None:
    """Starts the water calculator by asking for the billing month."""
    await state.set_state(None)
    await message.answer(
        "<b>Shared water meter</b>: select the billing month:",
        reply_markup=get_period_keyboard("water").as_markup(),
    )


@router.callback_query(SelectPeriodCallback.filter(F.action == "water"))
async def handle_water_period(
    query: CallbackQuery,
    callback_data: SelectPeriodCallback,
    state: FSMContext,
    billing_service: BillingService,
) -> None:
    """Shows the previous water reading for the month and asks for the current one."""
    if not isinstance(query.message, Message):
        return
    await query.answer()

    month, year = parse_period(callback_data.period)
    previous = await billing_service.get_previous_water_reading(month, year)
    await state.update_data(
        water_month=month,
        water_year=year,
        water_previous=str(previous),
        water_selected=[],
    )
    await state.set_state(WaterBillEntry.enter_current)
    await query.message.edit_text(
        f"<b>Shared water meter</b>, {format_period_for_display(month, year)}\n"
        f"Previous reading: <b>{format_amount(previous)}</b>\n\n"
        "Enter the current water meter reading:"
    )


@router.message(WaterBillEntry.enter_current)
async def handle_water_current(message: Message, state: FSMContext) -> None:
    value = parse_decimal(message.text)
    if value is None or value <= 0:
        await message.answer("Please enter a valid current reading for water.")
        return
    await state.update_data(water_current=str(value))
    await state.set_state(WaterBillEntry.enter_rate)
    await message.answer("Water rate per unit (₹):")


@router.message(WaterBillEntry.enter_rate)
async def handle_water_rate(
    message: Message, state: FSMContext, store: ReadingStore
) -> None:
    value = parse_decimal(message.text)
    if value is None or value <= 0:
        await message.answer("Unit rate must be positive.")
        return
    tenants = await store.list_tenants()
    if not tenants:
        await message.answer("No tenants found. Add them first.")
        await state.set_state(None)
        return

    await state.update_data(water_rate=str(value))
    await state.set_state(WaterBillEntry.select_tenants)
    await message.answer(
        "Select the tenants sharing the water meter:",
        reply_markup=_tenant_toggle_keyboard(tenants, set()).as_markup(),
    )


@router.callback_query(WaterBillEntry.select_tenants, ToggleTenantCallback.filter())
async def handle_toggle_tenant(
    query: CallbackQuery,
    callback_data: ToggleTenantCallback,
    state: FSMContext,
    store: ReadingStore,
) -> None:
    if not isinstance(query.message, Message):
        return
    await query.answer()
    data = await state.get_data()
    selected = set(data.get("water_selected", []))
    selected ^= {callback_data.tenant_id}
    await state.update_data(water_selected=sorted(selected))

    tenants = await store.list_tenants()
    await query.message.edit_reply_markup(
        reply_markup=_tenant_toggle_keyboard(tenants, selected).as_markup()
    )


@router.callback_query(
    WaterBillEntry.select_tenants, ChoiceCallback.filter(F.field == "tenants")
)
async def handle_tenants_done(query: CallbackQuery, state: FSMContext) -> None:
    if not isinstance(query.message, Message):
        return
    data = await state.get_data()
    if not data.get("water_selected"):
        await query.answer("Select at least one tenant.", show_alert=True)
        return
    await query.answer()
    await state.set_state(WaterBillEntry.choose_round_off)
    await query.message.edit_text(
        "Round off the water charge?",
        reply_markup=get_yes_no_keyboard("water_round").as_markup(),
    )


@router.callback_query(
    WaterBillEntry.choose_round_off, ChoiceCallback.filter(F.field == "water_round")
)
async def handle_water_round_off(
    query: CallbackQuery,
    callback_data: ChoiceCallback,
    state: FSMContext,
    store: ReadingStore,
    billing_service: BillingService,
) -> None:
    """Splits the water bill and sends it in English and Hindi."""
    if not isinstance(query.message, Message):
        return
    await query.answer()
    data = await state.get_data()
    selected = set(data["water_selected"])
    names = [t.name for t in await store.list_tenants() if t.id in selected]

    try:
        water_bill = billing_service.generate_water_bill(
            current_reading=Decimal(data["water_current"]),
            previous_reading=Decimal(data["water_previous"]),
            unit_rate=Decimal(data["water_rate"]),
            tenant_names=names,
            round_off=callback_data.value == "yes",
        )
    except BillingError as e:
        await query.message.edit_text(f"⚠️ {escape(str(e))}")
        await state.set_state(None)
        return

    charge = water_bill.split.charge_per_tenant
    await state.update_data(last_water_charge=format_amount(charge))
    await state.set_state(None)

    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(
            text="💾 Save water reading",
            callback_data=ChoiceCallback(field="save_water", value="yes").pack(),
        )
    )
    await query.message.edit_text(
        f"💧 ₹{format_amount(charge)} per tenant for "
        f"{escape(', '.join(names))}.\n"
        "It will be offered as the water charge in the next bill."
    )
    await send_preformatted(query.message, "English water bill", water_bill.texts.english)
    await send_preformatted(query.message, "Hindi water bill", water_bill.texts.hindi)
    await query.message.answer(
        "Save the current water reading?", reply_markup=builder.as_markup()
    )


@router.callback_query(ChoiceCallback.filter(F.field == "save_water"))
async def handle_save_water_reading(
    query: CallbackQuery, state: FSMContext, billing_service: BillingService
) -> None:
    """Saves the shared meter reading entered in the calculator."""
    if not isinstance(query.message, Message):
        return
    await query.answer()
    data = await state.get_data()
    if "water_current" not in data:
        await query.message.edit_text("Session expired. Start again from the menu.")
        return
    try:
        await billing_service.save_water_reading(
            data["water_month"], data["water_year"], Decimal(data["water_current"])
        )
    except BillingError as e:
        await query.message.edit_text(f"⚠️ {escape(str(e))}")
        return
    await query.message.edit_text("✅ Common water reading saved.")
