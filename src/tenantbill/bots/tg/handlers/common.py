"""Common command handlers."""

from aiogram import F, Router
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from tenantbill.bots.tg.keyboards.reply import (
    BTN_BACK,
    BTN_TENANTS,
    get_main_menu,
    get_tenant_panel,
)

router = Router(name=__name__)


@router.message(CommandStart())
async def handle_start(message: Message, state: FSMContext) -> None:
    """Greets the user and shows the main menu."""
    await state.clear()
    await message.answer(
        "Electricity and water billing for your tenants.\n\n"
        "Use the keyboard below to enter readings or generate bills.",
        reply_markup=get_main_menu(),
    )


@router.message(Command("help"))
async def handle_help(message: Message) -> None:
    """Handler for the /help command."""
    await message.answer(
        "This bot keeps monthly meter readings and prepares bills "
        "in English and Hindi.\n\n"
        "Use the keyboard below to navigate, /cancel to abort a form."
    )


@router.message(Command("cancel"))
async def handle_cancel(message: Message, state: FSMContext) -> None:
    """Aborts whatever form is in progress."""
    await state.clear()
    await message.answer("Cancelled.", reply_markup=get_main_menu())


@router.message(F.text == BTN_TENANTS)
async def handle_tenant_panel(message: Message) -> None:
    """Shows the tenant management panel."""
    await message.answer("Tenant management:", reply_markup=get_tenant_panel())


@router.message(F.text == BTN_BACK)
async def handle_back_to_main_menu(message: Message, state: FSMContext) -> None:
    """Returns the user to the main menu."""
    await state.clear()
    await message.answer("Main menu:", reply_markup=get_main_menu())
