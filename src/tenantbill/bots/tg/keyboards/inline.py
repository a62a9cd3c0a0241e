"""Inline keyboard callback data."""

from aiogram.filters.callback_data import CallbackData


class TenantActionCallback(CallbackData, prefix="tnt"):
    """
    Callback data for tenant management.
    - ren: rename
    - del: delete
    """

    action: str
    tenant_id: int


class SelectTenantCallback(CallbackData, prefix="usr_tenant"):
    """Callback data for selecting a tenant for a reading or a bill."""

    action: str  # 'reading' or 'bill'
    tenant_id: int


class SelectPeriodCallback(CallbackData, prefix="period"):
    """Callback data for selecting a billing month."""

    action: str  # 'reading', 'bill', 'history'
    period: str  # YYYY-MM


class ToggleTenantCallback(CallbackData, prefix="wtr"):
    """Callback data for picking tenants sharing the water bill."""

    tenant_id: int


class ChoiceCallback(CallbackData, prefix="ch"):
    """Yes/no style answers inside a form."""

    field: str
    value: str
