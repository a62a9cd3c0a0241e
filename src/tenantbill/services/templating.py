"""Jinja2 environment shared by the text and PDF renderers."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from tenantbill.core.calculations import CENT, format_amount

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"


def format_fixed(value: Decimal | int | float) -> str:
    """Formats a value with exactly two decimal places."""
    return f"{Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP):f}"


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    """Returns the template environment with the billing filters registered."""
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        undefined=StrictUndefined,
        autoescape=select_autoescape(["html"]),
    )
    env.filters["amount"] = format_amount
    env.filters["fixed2"] = format_fixed
    return env
