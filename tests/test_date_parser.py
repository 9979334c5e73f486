"""Tests for date and month parsing."""

from datetime import date, timedelta

import pytest
from dateutil.relativedelta import relativedelta

from envelopes.domain.month import MonthKey
from envelopes.utils.date_parser import parse_date, parse_month


def test_parse_absolute_date():
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_natural_date():
    assert parse_date("January 15, 2024") == date(2024, 1, 15)


def test_parse_relative_days():
    today = date.today()
    assert parse_date("today") == today
    assert parse_date(" Yesterday ") == today - timedelta(days=1)
    assert parse_date("tomorrow") == today + timedelta(days=1)


def test_parse_invalid_date():
    with pytest.raises(ValueError):
        parse_date("not a date")


def test_parse_month_key():
    assert parse_month("2024-03") == MonthKey(2024, 3)


def test_parse_relative_months():
    today = date.today()
    assert parse_month("this month") == MonthKey.from_date(today)
    assert parse_month("Last Month") == MonthKey.from_date(today - relativedelta(months=1))
    assert parse_month("next month") == MonthKey.from_date(today + relativedelta(months=1))


def test_parse_month_from_date():
    assert parse_month("2024-02-29") == MonthKey(2024, 2)


def test_parse_invalid_month():
    with pytest.raises(ValueError):
        parse_month("2024-13")
    with pytest.raises(ValueError):
        parse_month("whenever")
