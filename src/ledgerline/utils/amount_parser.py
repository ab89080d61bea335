"""Amount parsing utilities."""

import logging
from decimal import Decimal, InvalidOperation
import re

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is not finite
    """
    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")

    amount_str = str(amount_str).strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols
    amount_str = re.sub(r"[$€£¥]", "", amount_str)

    # Remove commas
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e!r}")

    # Decimal accepts "NaN" and "Infinity"
    if not amount.is_finite():
        raise ValueError(f"Amount '{amount_str}' is not a finite number")

    return -amount if is_negative else amount


def amount_or_zero(amount_str: str) -> Decimal:
    """Parse a stored amount, treating anything unparseable as zero."""
    try:
        return parse_amount(amount_str)
    except ValueError:
        logger.debug("Treating malformed amount %r as zero", amount_str)
        return ZERO


def normalize_amount(amount_str: str) -> str:
    """Validate user input and return it as a plain two-place decimal string.

    Raises:
        ValueError: If the amount cannot be parsed
    """
    return f"{parse_amount(amount_str):.2f}"
