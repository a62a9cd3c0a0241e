"""Billing period helpers."""

from __future__ import annotations

from datetime import date

from dateutil.relativedelta import relativedelta

MONTHS_ENGLISH = {
    1: "January",
    2: "February",
    3: "March",
    4: "April",
    5: "May",
    6: "June",
    7: "July",
    8: "August",
    9: "September",
    10: "October",
    11: "November",
    12: "December",
}

MONTH_ABBREVIATIONS = [MONTHS_ENGLISH[m][:3] for m in range(1, 13)]


def previous_period(month: int, year: int) -> tuple[int, int]:
    """Returns the (month, year) immediately before the given one.

    January rolls back to December of the previous year.
    """
    prev = date(year, month, 1) - relativedelta(months=1)
    return prev.month, prev.year


def format_period_for_display(month: int, year: int) -> str:
    """Formats a period as 'Month YYYY' in English."""
    return f"{MONTHS_ENGLISH[month]} {year}"


def format_bill_date(value: date) -> str:
    """Formats a date the way bills print it (dd/mm/yyyy)."""
    return value.strftime("%d/%m/%Y")
