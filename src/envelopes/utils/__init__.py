"""Utility functions for envelopes."""

from envelopes.utils.date_parser import parse_date, parse_month
from envelopes.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_month", "parse_amount"]
