from datetime import date

import pytest

from tenantbill.core.periods import (
    MONTH_ABBREVIATIONS,
    format_bill_date,
    format_period_for_display,
    previous_period,
)


@pytest.mark.parametrize(
    "month, year, expected",
    [
        (1, 2024, (12, 2023)),
        (3, 2024, (2, 2024)),
        (12, 2024, (11, 2024)),
    ],
)
def test_previous_period(month, year, expected):
    assert previous_period(month, year) == expected


def test_format_period_for_display():
    assert format_period_for_display(2, 2025) == "February 2025"


def test_format_bill_date_is_day_first():
    assert format_bill_date(date(2025, 3, 7)) == "07/03/2025"


def test_month_abbreviations():
    assert MONTH_ABBREVIATIONS[0] == "Jan"
    assert MONTH_ABBREVIATIONS[-1] == "Dec"
    assert len(MONTH_ABBREVIATIONS) == 12
