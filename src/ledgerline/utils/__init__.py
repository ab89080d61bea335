"""Utility functions for ledgerline."""

from ledgerline.utils.date_parser import parse_date
from ledgerline.utils.amount_parser import parse_amount, amount_or_zero

__all__ = ["parse_date", "parse_amount", "amount_or_zero"]
