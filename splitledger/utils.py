"""
Utilities Module

This module provides the helpers shared by the ledger modules.

Features:
    - The settlement tolerance (EPSILON) used everywhere amounts are compared
    - Cent rounding for display and reports
    - Input validation helpers for the write path
    - Identifier and timestamp generation

Functions:
    is_settled: Check whether an amount is within EPSILON of zero.
    amounts_match: Compare two amounts within EPSILON.
    round_money: Round half-up to 2 decimal places.
    format_currency: Format amount with currency symbol.
    validate_amount: Validate if input is a valid monetary amount.
    validate_date: Validate a YYYY-MM-DD date string.
    validate_non_empty_string: Validate a non-empty string.
    generate_id: Generate a unique identifier for records.
    get_timestamp: Current UTC timestamp in ISO format.
"""

import math
import uuid
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP


# One cent. Balances and totals closer than this are treated as equal.
EPSILON = 0.01


def is_settled(amount: float) -> bool:
    return abs(amount) <= EPSILON


def amounts_match(left: float, right: float) -> bool:
    """Return True when two amounts differ by no more than EPSILON."""
    return abs(left - right) <= EPSILON


def round_money(value) -> float:
    """
    Round a value to 2 decimal places and convert to float.

    Uses ROUND_HALF_UP on a Decimal built from the string form so that
    2.675 becomes 2.68 rather than 2.67.

    Args:
        value: Decimal, float or int to round.

    Returns:
        float: Rounded value as float.
    """
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def format_currency(amount: float, symbol: str = "$") -> str:
    """
    Format a monetary amount with the appropriate currency symbol.

    Args:
        amount: The amount to format.
        symbol: Currency symbol (default: $).

    Returns:
        str: Formatted string like "$1,234.56" or "-$5.00".
    """
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def validate_amount(value) -> bool:
    """
    Validate if the input is a valid monetary amount.

    Args:
        value: Value to validate.

    Returns:
        bool: True if valid, finite, positive number.
    """
    if isinstance(value, bool):
        return False
    try:
        amount = float(value)
        return math.isfinite(amount) and amount > 0
    except (TypeError, ValueError):
        return False


def validate_date(date_str: str, field_name: str) -> bool:
    """
    Validate date string format (YYYY-MM-DD).

    Args:
        date_str: Date string to validate.
        field_name: Name of the field for error messages.

    Returns:
        bool: True if valid.

    Raises:
        ValueError: If date format is invalid.
    """
    try:
        datetime.strptime(date_str, "%Y-%m-%d")
        return True
    except (TypeError, ValueError):
        raise ValueError(f"{field_name} must be in YYYY-MM-DD format, got: {date_str}")


def validate_non_empty_string(value: str, field_name: str) -> bool:
    """
    Validate that a string is non-empty.

    Raises:
        ValueError: If string is empty or not a string.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string")
    return True


def generate_id() -> str:
    """Generate an opaque unique identifier (UUID4 hex string)."""
    return str(uuid.uuid4())


def get_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()
