"""Core business logic for calculations."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from tenantbill.core.exceptions import ValidationError

ZERO = Decimal("0")
CENT = Decimal("0.01")


@dataclass(frozen=True)
class ChargeBreakdown:
    """Result of a tenant's monthly charge calculation."""

    units_consumed: Decimal
    electricity_charges: Decimal
    water_charges: Decimal  # Zero unless water charges were applied
    penalty: Decimal
    total_amount: Decimal


@dataclass(frozen=True)
class WaterSplit:
    """Shared water meter consumption divided between tenants."""

    total_units: Decimal
    units_per_tenant: Decimal
    charge_per_tenant: Decimal
    tenant_count: int


def round_whole(value: Decimal) -> Decimal:
    """Rounds a value to the nearest whole unit, halves going up."""
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def format_amount(value: Decimal) -> str:
    """
    Formats a value for bill text: at most two decimal places,
    without trailing zeros ("210", "12.5", "0.75").
    """
    text = f"{value.quantize(CENT, rounding=ROUND_HALF_UP):f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def calculate_consumption(
    current_reading: Decimal, previous_reading: Decimal
) -> Decimal:
    """
    Calculates the units consumed between two meter readings.

    Raises:
        ValidationError: if the current reading is below the previous one.
    """
    consumption = current_reading - previous_reading
    if consumption < ZERO:
        raise ValidationError("Current reading cannot be less than previous reading.")
    return consumption


def calculate_cost(consumption: Decimal, rate: Decimal) -> Decimal:
    """Calculates the monetary cost of a consumption at a per-unit rate."""
    return consumption * rate


def compute_charges(
    current_reading: Decimal,
    previous_reading: Decimal,
    previous_due: Decimal,
    unit_rate: Decimal,
    water_charges: Decimal = ZERO,
    apply_water_charges: bool = False,
    penalty: Decimal | None = None,
    round_off: bool = False,
) -> ChargeBreakdown:
    """
    Computes a tenant's electricity charge, optional water charge and total.

    Args:
        current_reading: Meter value for the billed month.
        previous_reading: Meter value for the month before.
        previous_due: Outstanding amount carried over from earlier bills.
        unit_rate: Price of one unit of electricity.
        water_charges: Water share for this tenant.
        apply_water_charges: Whether the water share is added to the total.
        penalty: Optional late-payment penalty.
        round_off: Round electricity charges and total to whole units.

    Returns:
        The charge breakdown. When rounding, only the electricity charges and
        the total are rounded, each on its own, so the total may differ from
        the sum of the displayed parts.
    """
    units_consumed = calculate_consumption(current_reading, previous_reading)

    if unit_rate <= ZERO:
        raise ValidationError("Unit rate must be positive.")
    if previous_due < ZERO:
        raise ValidationError("Previous due cannot be negative.")
    if water_charges < ZERO:
        raise ValidationError("Water charges cannot be negative.")

    electricity_charges = calculate_cost(units_consumed, unit_rate) + previous_due
    effective_water = water_charges if apply_water_charges else ZERO
    penalty = penalty or ZERO

    total_amount = electricity_charges + effective_water + penalty

    if round_off:
        electricity_charges = round_whole(electricity_charges)
        total_amount = round_whole(total_amount)

    return ChargeBreakdown(
        units_consumed=units_consumed,
        electricity_charges=electricity_charges,
        water_charges=effective_water,
        penalty=penalty,
        total_amount=total_amount,
    )


def split_water_charge(
    current_reading: Decimal,
    previous_reading: Decimal,
    unit_rate: Decimal,
    tenant_count: int,
    round_off: bool = False,
) -> WaterSplit:
    """Divides the shared water meter's consumption evenly between tenants."""
    if (
        current_reading <= ZERO
        or previous_reading < ZERO
        or unit_rate <= ZERO
        or tenant_count <= 0
    ):
        raise ValidationError(
            "Please provide valid water readings, a positive rate "
            "and select at least one tenant."
        )
    if current_reading < previous_reading:
        raise ValidationError(
            "Current water reading cannot be less than previous reading."
        )

    total_units = current_reading - previous_reading
    units_per_tenant = total_units / tenant_count
    charge = calculate_cost(units_per_tenant, unit_rate)
    if round_off:
        charge = round_whole(charge)

    return WaterSplit(
        total_units=total_units,
        units_per_tenant=units_per_tenant,
        charge_per_tenant=charge.quantize(CENT, rounding=ROUND_HALF_UP),
        tenant_count=tenant_count,
    )
