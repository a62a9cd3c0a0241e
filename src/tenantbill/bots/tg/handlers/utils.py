from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from html import escape

from aiogram.types import InlineKeyboardButton, Message
from aiogram.utils.keyboard import InlineKeyboardBuilder
from dateutil.relativedelta import relativedelta

from tenantbill.bots.tg.keyboards.inline import (
    ChoiceCallback,
    SelectPeriodCallback,
    SelectTenantCallback,
)
from tenantbill.core.models import Tenant
from tenantbill.core.periods import format_period_for_display


def get_period_keyboard(action: str, months: int = 6) -> InlineKeyboardBuilder:
    """
    Builds an inline keyboard with buttons for the last few months.

    Args:
        action: The action to be encoded in the callback data (e.g., 'bill').
        months: How many months to offer, the current one included.

    Returns:
        An InlineKeyboardBuilder with the period buttons.
    """
    builder = InlineKeyboardBuilder()
    today = date.today()

    for i in range(months):
        period_date = today - relativedelta(months=i)
        callback_data = SelectPeriodCallback(
            action=action, period=period_date.strftime("%Y-%m")
        ).pack()
        builder.row(
            InlineKeyboardButton(
                text=format_period_for_display(period_date.month, period_date.year),
                callback_data=callback_data,
            )
        )

    return builder


def get_tenant_keyboard(tenants: list[Tenant], action: str) -> InlineKeyboardBuilder:
    """Builds an inline keyboard with one button per tenant."""
    builder = InlineKeyboardBuilder()
    for tenant in tenants:
        builder.row(
            InlineKeyboardButton(
                text=tenant.name,
                callback_data=SelectTenantCallback(
                    action=action, tenant_id=tenant.id
                ).pack(),
            )
        )
    return builder


def get_yes_no_keyboard(field: str) -> InlineKeyboardBuilder:
    """Builds a Yes/No keyboard for a boolean form field."""
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(
            text="Yes", callback_data=ChoiceCallback(field=field, value="yes").pack()
        ),
        InlineKeyboardButton(
            text="No", callback_data=ChoiceCallback(field=field, value="no").pack()
        ),
    )
    return builder


def parse_period(period: str) -> tuple[int, int]:
    """Parses a 'YYYY-MM' callback period into (month, year)."""
    parsed = datetime.strptime(period, "%Y-%m")
    return parsed.month, parsed.year


def parse_decimal(text: str | None) -> Decimal | None:
    """Parses a user-typed number, accepting a comma as decimal separator."""
    if not text:
        return None
    try:
        value = Decimal(text.strip().replace(",", "."))
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


async def send_preformatted(message: Message, title: str, text: str) -> None:
    """Sends ``text`` in a monospace block so it can be copied as is."""
    await message.answer(f"<b>{escape(title)}</b>\n<pre>{escape(text)}</pre>")
