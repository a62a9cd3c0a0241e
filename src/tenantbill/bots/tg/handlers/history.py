"""Handlers for the yearly readings overview and the reading note."""

from __future__ import annotations

import logging
import tempfile
from datetime import date
from decimal import Decimal

from aiogram import F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, FSInputFile, InlineKeyboardButton, Message
from aiogram.utils.keyboard import InlineKeyboardBuilder

from tenantbill.bots.tg.handlers.utils import parse_decimal, send_preformatted
from tenantbill.bots.tg.keyboards.inline import ChoiceCallback
from tenantbill.bots.tg.keyboards.reply import BTN_HISTORY, BTN_NOTE
from tenantbill.bots.tg.states import NoteEntry
from tenantbill.core.calculations import format_amount
from tenantbill.core.models import COMMON_WATER_METER, ReadingType
from tenantbill.services.billing import BillingService
from tenantbill.services.export import (
    ExportService,
    build_yearly_grid,
    render_yearly_text,
)
from tenantbill.services.store import ReadingStore

router = Router(name=__name__)
logger = logging.getLogger(__name__)


@router.message(F.text == BTN_HISTORY)
async def handle_history_command(message: Message, state: FSMContext) -> None:
    """Asks which year to show."""
    await state.set_state(None)
    current_year = date.today().year
    builder = InlineKeyboardBuilder()
    builder.row(
        *[
            InlineKeyboardButton(
                text=str(year),
                callback_data=ChoiceCallback(field="year", value=str(year)).pack(),
            )
            for year in range(current_year - 2, current_year + 1)
        ]
    )
    await message.answer("Select the year:", reply_markup=builder.as_markup())


@router.callback_query(ChoiceCallback.filter(F.field == "year"))
async def handle_history_year(
    query: CallbackQuery,
    callback_data: ChoiceCallback,
    store: ReadingStore,
    export_service: ExportService,
) -> None:
    """Sends the readings grid for the year as text and as a PDF."""
    if not isinstance(query.message, Message):
        return
    await query.answer()

    year = int(callback_data.value)
    readings = await store.list_readings_for_year(year)
    tenants = await store.list_tenants()
    grid = build_yearly_grid(readings, tenants, year)

    await query.message.edit_text(f"📊 Readings for {year}:")
    await send_preformatted(query.message, f"Readings {year}", render_yearly_text(grid))

    try:
        with tempfile.NamedTemporaryFile(suffix=".pdf", delete=False) as temp_file:
            output_path = export_service.generate_pdf_yearly(grid, temp_file.name)
            await query.message.answer_document(
                FSInputFile(output_path, filename=f"readings_{year}.pdf"),
                caption=f"<b>Readings {year}</b>",
            )
    except Exception as e:
        logger.error(f"Failed to generate yearly PDF for {year}: {e}", exc_info=True)
        await query.message.answer("❌ Could not create the PDF, the table above is complete.")


# --- Reading note ---
@router.message(F.text == BTN_NOTE)
async def handle_note_command(message: Message, state: FSMContext) -> None:
    """Starts the reading note for today."""
    await state.set_state(NoteEntry.enter_main)
    await message.answer("Main meter reading:")


@router.message(NoteEntry.enter_main)
async def handle_note_main(
    message: Message, state: FSMContext, store: ReadingStore
) -> None:
    value = parse_decimal(message.text)
    if value is None or value < 0:
        await message.answer("Please enter a non-negative number.")
        return
    await state.update_data(note_main=str(value))
    await state.set_state(NoteEntry.enter_water)

    today = date.today()
    saved = await store.get_reading(
        COMMON_WATER_METER, today.month, today.year, ReadingType.WATER
    )
    markup = None
    if saved:
        builder = InlineKeyboardBuilder()
        builder.row(
            InlineKeyboardButton(
                text=f"Use saved {format_amount(saved.reading)}",
                callback_data=ChoiceCallback(
                    field="note_water", value=str(saved.reading)
                ).pack(),
            )
        )
        markup = builder.as_markup()
    await message.answer("Water meter reading:", reply_markup=markup)


async def _send_note(message: Message, state: FSMContext, water: Decimal) -> None:
    data = await state.get_data()
    note = BillingService.reading_note(date.today(), Decimal(data["note_main"]), water)
    await state.set_state(None)
    await send_preformatted(message, "Reading note", note)


@router.callback_query(NoteEntry.enter_water, ChoiceCallback.filter(F.field == "note_water"))
async def handle_note_saved_water(
    query: CallbackQuery, callback_data: ChoiceCallback, state: FSMContext
) -> None:
    if not isinstance(query.message, Message):
        return
    await query.answer()
    await query.message.edit_reply_markup(reply_markup=None)
    await _send_note(query.message, state, Decimal(callback_data.value))


@router.message(NoteEntry.enter_water)
async def handle_note_water(message: Message, state: FSMContext) -> None:
    value = parse_decimal(message.text)
    if value is None or value < 0:
        await message.answer("Please enter a non-negative number.")
        return
    await _send_note(message, state, value)
