"""Handlers for tenant management."""

from __future__ import annotations

from html import escape

from aiogram import F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, InlineKeyboardButton, Message
from aiogram.utils.keyboard import InlineKeyboardBuilder

from tenantbill.bots.tg.handlers.utils import get_yes_no_keyboard
from tenantbill.bots.tg.keyboards.inline import ChoiceCallback, TenantActionCallback
from tenantbill.bots.tg.keyboards.reply import (
    BTN_ADD_TENANT,
    BTN_DELETE_TENANT,
    BTN_RENAME_TENANT,
)
from tenantbill.bots.tg.states import TenantManagement
from tenantbill.core.exceptions import BillingError
from tenantbill.services.directory import TenantDirectory

router = Router(name=__name__)


async def _send_tenant_choice(
    message: Message, directory: TenantDirectory, action: str, prompt: str
) -> None:
    tenants = await directory.list_tenants()
    if not tenants:
        await message.answer("No tenants yet. Add one first.")
        return

    builder = InlineKeyboardBuilder()
    for tenant in tenants:
        builder.row(
            InlineKeyboardButton(
                text=tenant.name,
                callback_data=TenantActionCallback(
                    action=action, tenant_id=tenant.id
                ).pack(),
            )
        )
    await message.answer(prompt, reply_markup=builder.as_markup())


# --- Add ---
@router.message(F.text == BTN_ADD_TENANT)
async def handle_new_tenant(message: Message, state: FSMContext):
    """Starts the process of adding a tenant."""
    await state.set_state(TenantManagement.enter_name)
    await message.answer("Enter the new tenant's name:")


@router.message(TenantManagement.enter_name)
async def handle_tenant_name(
    message: Message, state: FSMContext, directory: TenantDirectory
):
    """Handles the new tenant's name and saves it."""
    try:
        tenant = await directory.add_tenant(message.text)
    except BillingError as e:
        await message.answer(f"⚠️ {escape(str(e))} Try again or /cancel.")
        return

    await message.answer(f"✅ Tenant <b>{escape(tenant.name)}</b> added.")
    await state.clear()


# --- Rename ---
@router.message(F.text == BTN_RENAME_TENANT)
async def handle_rename_tenant(message: Message, directory: TenantDirectory):
    """Shows the tenants that can be renamed."""
    await _send_tenant_choice(message, directory, "ren", "Which tenant to rename?")


@router.callback_query(TenantActionCallback.filter(F.action == "ren"))
async def handle_rename_selected(
    query: CallbackQuery, callback_data: TenantActionCallback, state: FSMContext
):
    """Remembers the tenant and asks for the new name."""
    if not isinstance(query.message, Message):
        return
    await query.answer()
    await state.update_data(tenant_id=callback_data.tenant_id)
    await state.set_state(TenantManagement.enter_new_name)
    await query.message.edit_text(
        "Enter the new name. Past readings will move to it as well:"
    )


@router.message(TenantManagement.enter_new_name)
async def handle_new_name(
    message: Message, state: FSMContext, directory: TenantDirectory
):
    """Renames the tenant and its readings."""
    data = await state.get_data()
    try:
        tenant = await directory.edit_tenant(data.get("tenant_id"), message.text)
    except BillingError as e:
        await message.answer(f"⚠️ {escape(str(e))} Try again or /cancel.")
        return

    await message.answer(f"✅ Tenant renamed to <b>{escape(tenant.name)}</b>.")
    await state.clear()


# --- Delete ---
@router.message(F.text == BTN_DELETE_TENANT)
async def handle_delete_tenant(message: Message, directory: TenantDirectory):
    """Shows the tenants that can be deleted."""
    await _send_tenant_choice(message, directory, "del", "Which tenant to delete?")


@router.callback_query(TenantActionCallback.filter(F.action == "del"))
async def handle_delete_selected(
    query: CallbackQuery,
    callback_data: TenantActionCallback,
    state: FSMContext,
    directory: TenantDirectory,
):
    """Asks for confirmation before deleting."""
    if not isinstance(query.message, Message):
        return
    await query.answer()
    tenants = await directory.list_tenants()
    tenant = next((t for t in tenants if t.id == callback_data.tenant_id), None)
    if tenant is None:
        await query.message.edit_text("Tenant not found.")
        return

    await state.update_data(tenant_id=tenant.id, tenant_name=tenant.name)
    await state.set_state(TenantManagement.confirm_delete)
    await query.message.edit_text(
        f"Delete <b>{escape(tenant.name)}</b> and all of its readings? "
        "This cannot be undone.",
        reply_markup=get_yes_no_keyboard("delete").as_markup(),
    )


@router.callback_query(
    TenantManagement.confirm_delete, ChoiceCallback.filter(F.field == "delete")
)
async def handle_delete_confirmation(
    query: CallbackQuery,
    callback_data: ChoiceCallback,
    state: FSMContext,
    directory: TenantDirectory,
):
    """Deletes the tenant if confirmed."""
    if not isinstance(query.message, Message):
        return
    await query.answer()
    data = await state.get_data()
    await state.clear()

    if callback_data.value != "yes":
        await query.message.edit_text("Deletion cancelled.")
        return

    try:
        await directory.delete_tenant(data.get("tenant_id"))
    except BillingError as e:
        await query.message.edit_text(f"⚠️ {escape(str(e))}")
        return
    name = escape(data.get("tenant_name", ""))
    await query.message.edit_text(f"✅ Tenant <b>{name}</b> deleted.")
