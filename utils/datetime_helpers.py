"""Timezone-aware date/time helpers for the hotel application."""

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from flask import current_app


def get_timezone() -> ZoneInfo:
    """Get the configured timezone."""
    tz_name = current_app.config.get('TIMEZONE', 'America/Sao_Paulo')
    return ZoneInfo(tz_name)


def get_today() -> date:
    """Get today's date in the configured timezone."""
    return datetime.now(get_timezone()).date()


def parse_date(value) -> date:
    """
    Coerce a date, datetime or 'YYYY-MM-DD' string into a date.

    Args:
        value: Value to parse

    Returns:
        date object

    Raises:
        ValueError: If value is empty or not a valid calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise ValueError('A data é obrigatória')
    try:
        return datetime.strptime(str(value)[:10], '%Y-%m-%d').date()
    except ValueError:
        raise ValueError(f'Data inválida: {value}')


def to_iso_date(value) -> str:
    """Normalize a date-like value to a 'YYYY-MM-DD' string."""
    return parse_date(value).isoformat()


def iter_nights(check_in: date, check_out: date):
    """Yield each night of a stay, check-in inclusive, check-out exclusive."""
    current = check_in
    while current < check_out:
        yield current
        current += timedelta(days=1)


def iter_days(start: date, end: date):
    """Yield each day from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
