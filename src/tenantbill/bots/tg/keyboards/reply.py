"""Reply keyboard builders."""

from aiogram.types import KeyboardButton, ReplyKeyboardMarkup
from aiogram.utils.keyboard import ReplyKeyboardBuilder

BTN_READING = "✍️ Enter reading"
BTN_BILL = "🧾 Generate bill"
BTN_WATER = "💧 Water bill"
BTN_HISTORY = "📊 Yearly readings"
BTN_NOTE = "📝 Reading note"
BTN_TENANTS = "⚙️ Manage tenants"

BTN_ADD_TENANT = "👤 Add tenant"
BTN_RENAME_TENANT = "✏️ Rename tenant"
BTN_DELETE_TENANT = "🗑 Delete tenant"
BTN_BACK = "⬅️ Back to main menu"


def get_main_menu() -> ReplyKeyboardMarkup:
    """Builds the main menu reply keyboard."""
    builder = ReplyKeyboardBuilder()
    builder.row(
        KeyboardButton(text=BTN_READING),
        KeyboardButton(text=BTN_BILL),
    )
    builder.row(
        KeyboardButton(text=BTN_WATER),
        KeyboardButton(text=BTN_HISTORY),
    )
    builder.row(
        KeyboardButton(text=BTN_NOTE),
        KeyboardButton(text=BTN_TENANTS),
    )
    return builder.as_markup(resize_keyboard=True)


def get_tenant_panel() -> ReplyKeyboardMarkup:
    """Builds the tenant management reply keyboard."""
    builder = ReplyKeyboardBuilder()
    builder.row(KeyboardButton(text=BTN_ADD_TENANT))
    builder.row(
        KeyboardButton(text=BTN_RENAME_TENANT),
        KeyboardButton(text=BTN_DELETE_TENANT),
    )
    builder.row(KeyboardButton(text=BTN_BACK))
    return builder.as_markup(resize_keyboard=True)
