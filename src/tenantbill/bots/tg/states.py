"""FSM states for the bot."""

from aiogram.fsm.state import State, StatesGroup


class TenantManagement(StatesGroup):
    """States for adding, renaming and deleting tenants."""

    enter_name = State()
    enter_new_name = State()
    confirm_delete = State()


class ReadingEntry(StatesGroup):
    """States for the meter reading entry process."""

    enter_value = State()


class BillEntry(StatesGroup):
    """States for the bill generation form."""

    enter_current = State()
    enter_previous_due = State()
    enter_rate = State()
    enter_water = State()
    enter_penalty = State()
    choose_round_off = State()


class WaterBillEntry(StatesGroup):
    """States for the shared water meter calculator."""

    enter_current = State()
    enter_rate = State()
    select_tenants = State()
    choose_round_off = State()


class NoteEntry(StatesGroup):
    """States for the reading note."""

    enter_main = State()
    enter_water = State()
