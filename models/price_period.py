"""
Price period model.
Named date ranges (regular or holiday) that price entries hang off.
"""

import logging
from typing import Optional

from database import get_db
from utils.datetime_helpers import parse_date, to_iso_date

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ['name', 'start_date', 'end_date', 'is_holiday', 'minimum_stay']


def _row_to_dict(row) -> dict:
    data = dict(row)
    data['is_holiday'] = bool(data.get('is_holiday'))
    return data


def _validate_period(name, start_date, end_date, minimum_stay) -> tuple:
    """Validate period fields and return normalized (start, end, minimum_stay)."""
    if not name or not str(name).strip():
        raise ValueError('O nome do período é obrigatório')

    start = parse_date(start_date)
    end = parse_date(end_date)
    if start > end:
        raise ValueError('A data inicial não pode ser posterior à data final')

    try:
        minimum_stay = int(minimum_stay)
    except (TypeError, ValueError):
        raise ValueError('A estadia mínima deve ser um número inteiro')
    if minimum_stay < 1:
        raise ValueError('A estadia mínima deve ser de pelo menos 1 noite')

    return start.isoformat(), end.isoformat(), minimum_stay


# =============================================================================
# QUERIES
# =============================================================================

def get_all_periods() -> list:
    """Get all periods ordered by start date."""
    db = get_db()
    rows = db.execute('''
        SELECT p.*, (SELECT COUNT(*) FROM price_entries e WHERE e.period_id = p.id) as entry_count
        FROM price_periods p
        ORDER BY p.start_date, p.id
    ''').fetchall()
    return [_row_to_dict(row) for row in rows]


def get_period_by_id(period_id: int) -> Optional[dict]:
    """
    Get period by ID.

    Args:
        period_id: Period ID

    Returns:
        Period dict or None if not found
    """
    db = get_db()
    row = db.execute('SELECT * FROM price_periods WHERE id = ?', (period_id,)).fetchone()
    return _row_to_dict(row) if row else None


def find_period_for_date(target_date) -> Optional[dict]:
    """
    Find the period that governs pricing for a date.

    A holiday period covering the date takes precedence over a regular one.
    Among periods with the same holiday flag, the most recently created wins.

    Args:
        target_date: date or 'YYYY-MM-DD'

    Returns:
        Period dict or None if no period covers the date
    """
    day = to_iso_date(target_date)
    db = get_db()
    row = db.execute('''
        SELECT * FROM price_periods
        WHERE start_date <= ? AND end_date >= ?
        ORDER BY is_holiday DESC, created_at DESC, id DESC
        LIMIT 1
    ''', (day, day)).fetchone()
    return _row_to_dict(row) if row else None


# =============================================================================
# CRUD OPERATIONS
# =============================================================================

def create_period(
    name: str,
    start_date,
    end_date,
    is_holiday: bool = False,
    minimum_stay: int = 1
) -> int:
    """
    Create a new price period.

    Args:
        name: Display name (e.g. 'Alta Temporada Julho')
        start_date: First day (inclusive)
        end_date: Last day (inclusive)
        is_holiday: Holiday periods override regular ones
        minimum_stay: Minimum nights required

    Returns:
        New period ID

    Raises:
        ValueError: If validation fails
    """
    start, end, minimum_stay = _validate_period(name, start_date, end_date, minimum_stay)

    db = get_db()
    cursor = db.execute('''
        INSERT INTO price_periods (name, start_date, end_date, is_holiday, minimum_stay)
        VALUES (?, ?, ?, ?, ?)
    ''', (name.strip(), start, end, 1 if is_holiday else 0, minimum_stay))
    db.commit()
    return cursor.lastrowid


def update_period(period_id: int, **kwargs) -> bool:
    """
    Update a period. Unspecified fields keep their current value.

    Raises:
        ValueError: If the period does not exist or validation fails
    """
    current = get_period_by_id(period_id)
    if not current:
        raise ValueError('Período não encontrado')

    name = kwargs.get('name', current['name'])
    start, end, minimum_stay = _validate_period(
        name,
        kwargs.get('start_date', current['start_date']),
        kwargs.get('end_date', current['end_date']),
        kwargs.get('minimum_stay', current['minimum_stay'])
    )
    is_holiday = kwargs.get('is_holiday', current['is_holiday'])

    db = get_db()
    cursor = db.execute('''
        UPDATE price_periods
        SET name = ?, start_date = ?, end_date = ?, is_holiday = ?,
            minimum_stay = ?, updated_at = CURRENT_TIMESTAMP
        WHERE id = ?
    ''', (name.strip(), start, end, 1 if is_holiday else 0, minimum_stay, period_id))
    db.commit()
    return cursor.rowcount > 0


def delete_period(period_id: int) -> bool:
    """Hard delete a period; its price entries cascade."""
    db = get_db()
    cursor = db.execute('DELETE FROM price_periods WHERE id = ?', (period_id,))
    db.commit()
    return cursor.rowcount > 0


def duplicate_period(period_id: int, new_name: str, start_date=None, end_date=None) -> int:
    """
    Copy a period and all of its price entries.

    Args:
        period_id: Source period ID
        new_name: Name of the copy
        start_date: Optional new start (defaults to the source's)
        end_date: Optional new end (defaults to the source's)

    Returns:
        New period ID

    Raises:
        ValueError: If the source does not exist
    """
    source = get_period_by_id(period_id)
    if not source:
        raise ValueError('Período não encontrado')

    start, end, minimum_stay = _validate_period(
        new_name,
        start_date or source['start_date'],
        end_date or source['end_date'],
        source['minimum_stay']
    )

    db = get_db()
    try:
        cursor = db.execute('''
            INSERT INTO price_periods (name, start_date, end_date, is_holiday, minimum_stay)
            VALUES (?, ?, ?, ?, ?)
        ''', (new_name.strip(), start, end, 1 if source['is_holiday'] else 0, minimum_stay))
        new_id = cursor.lastrowid

        db.execute('''
            INSERT INTO price_entries
            (accommodation_id, category, period_id, people, price_per_night, includes_breakfast)
            SELECT accommodation_id, category, ?, people, price_per_night, includes_breakfast
            FROM price_entries WHERE period_id = ?
        ''', (new_id, period_id))

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info('Period %s duplicated as %s (%s)', period_id, new_id, new_name)
    return new_id

