"""Per-transaction tax reconciliation arithmetic.

Pure functions, no I/O. Money stays in integer minor units; only the two
percentage columns are decimals.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from typing import Optional

from taxrecon.utils.jurisdictions import normalize_indian_state

from .ledger import TransactionRecord
from .rates import JurisdictionRate

# Decimal places kept for the rate implied by the tax actually collected
IMPLIED_RATE_PRECISION = 4

_ZERO = Decimal("0")
_ONE = Decimal("1")
_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class ReportRow:
    transaction_id: str
    date: date
    place_of_supply: str
    applied_rate_percent: Decimal
    taxable_value_cents: int
    collected_tax_cents: int
    implied_rate_percent: Decimal
    expected_tax_rounded_cents: int
    expected_tax_floored_cents: int
    difference_rounded: int
    difference_floored: int

    def as_csv_row(self) -> list[str]:
        return [
            self.transaction_id,
            self.date.strftime("%Y-%m-%d"),
            self.place_of_supply,
            format_decimal(self.applied_rate_percent),
            str(self.taxable_value_cents),
            str(self.collected_tax_cents),
            format_decimal(self.implied_rate_percent),
            str(self.expected_tax_rounded_cents),
            str(self.expected_tax_floored_cents),
            str(self.difference_rounded),
            str(self.difference_floored),
        ]


def format_decimal(value: Decimal) -> str:
    """Plain decimal string without exponent or trailing zeros: 18.000 -> "18", 7.50 -> "7.5"."""
    if value == 0:
        return "0"
    return format(value.normalize(), "f")


def implied_rate_percent(collected_tax_cents: int, taxable_value_cents: int) -> Decimal:
    if taxable_value_cents == 0:
        return _ZERO
    quantum = Decimal(1).scaleb(-IMPLIED_RATE_PRECISION)
    ratio = Decimal(collected_tax_cents) / Decimal(taxable_value_cents) * _HUNDRED
    return ratio.quantize(quantum, rounding=ROUND_HALF_UP)


def expected_tax_cents(taxable_value_cents: int, combined_rate: Decimal) -> tuple[int, int]:
    """Return (rounded half-up, floored) tax for the given value and rate."""
    exact = Decimal(taxable_value_cents) * combined_rate
    rounded = exact.quantize(_ONE, rounding=ROUND_HALF_UP)
    floored = exact.quantize(_ONE, rounding=ROUND_FLOOR)
    return int(rounded), int(floored)


def compute_row(transaction: TransactionRecord, rate: Optional[JurisdictionRate]) -> ReportRow:
    """Build the report row for one included transaction.

    Never raises for data problems: an unrecognised region yields an empty place
    of supply and a missing rate yields zero applied rate and zero expected tax.
    """
    place_of_supply = normalize_indian_state(transaction.ip_state) or ""
    # Per-unit price; quantity is deliberately not multiplied in
    taxable_value_cents = transaction.price_cents
    collected_tax_cents = transaction.tax_cents

    if rate is not None:
        applied_rate_percent = rate.percent
        expected_rounded, expected_floored = expected_tax_cents(taxable_value_cents, rate.combined_rate)
    else:
        applied_rate_percent = _ZERO
        expected_rounded = expected_floored = 0

    return ReportRow(
        transaction_id=transaction.external_id,
        date=transaction.created_at.date(),
        place_of_supply=place_of_supply,
        applied_rate_percent=applied_rate_percent,
        taxable_value_cents=taxable_value_cents,
        collected_tax_cents=collected_tax_cents,
        implied_rate_percent=implied_rate_percent(collected_tax_cents, taxable_value_cents),
        expected_tax_rounded_cents=expected_rounded,
        expected_tax_floored_cents=expected_floored,
        difference_rounded=expected_rounded - collected_tax_cents,
        difference_floored=expected_floored - collected_tax_cents,
    )
