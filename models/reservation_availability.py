"""
Accommodation availability checks.
Stays are half-open [check_in, check_out): a departure and an arrival may share a day.
"""

import logging
import sqlite3
from datetime import date, timedelta

from database import get_db
from utils.datetime_helpers import parse_date

logger = logging.getLogger(__name__)

# Statuses that do not hold the accommodation
RELEASING_STATUSES = ('cancelled',)


class ReservationConflictError(ValueError):
    """Raised when a stay overlaps an active reservation or a manual block."""

    def __init__(self, message: str = None, conflicts: list = None):
        self.conflicts = conflicts or []
        super().__init__(message or 'Acomodação indisponível para as datas selecionadas')


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """True if half-open ranges [a_start, a_end) and [b_start, b_end) share a night."""
    return a_start < b_end and b_start < a_end


def _blocked_for_range(accommodation: dict, check_in: date, check_out: date) -> bool:
    """
    Check the manual block of an accommodation row.

    A block without dates covers every range. A dated block covers both of
    its end days, so a stay conflicts when any night falls inside it.
    """
    if not accommodation['is_blocked']:
        return False

    block_start = accommodation['block_start']
    block_end = accommodation['block_end']
    if not block_start or not block_end:
        return True

    return ranges_overlap(
        check_in, check_out,
        parse_date(block_start), parse_date(block_end) + timedelta(days=1)
    )


def get_conflicting_reservations(
    accommodation_id: int,
    check_in,
    check_out,
    exclude_reservation_id: int = None
) -> list:
    """
    List the reservations occupying an accommodation during a stay.

    Args:
        accommodation_id: Accommodation ID
        check_in: Arrival date
        check_out: Departure date
        exclude_reservation_id: Reservation to ignore (editing in place)

    Returns:
        list of dicts: id, reservation_code, guest_name, check_in_date,
        check_out_date, status
    """
    start = parse_date(check_in)
    end = parse_date(check_out)

    db = get_db()
    placeholders = ','.join('?' * len(RELEASING_STATUSES))
    query = f'''
        SELECT r.id, r.reservation_code, r.check_in_date, r.check_out_date, r.status,
               COALESCE(g.first_name || ' ' || g.last_name, r.guest_name) as guest_name
        FROM reservations r
        LEFT JOIN guests g ON r.guest_id = g.id
        WHERE r.accommodation_id = ?
          AND r.status NOT IN ({placeholders})
          AND r.check_in_date < ?
          AND r.check_out_date > ?
    '''
    params = [accommodation_id, *RELEASING_STATUSES, end.isoformat(), start.isoformat()]

    if exclude_reservation_id:
        query += ' AND r.id != ?'
        params.append(exclude_reservation_id)

    query += ' ORDER BY r.check_in_date'

    rows = db.execute(query, params).fetchall()
    return [dict(row) for row in rows]


def is_accommodation_available(
    accommodation_id: int,
    check_in,
    check_out,
    exclude_reservation_id: int = None
) -> bool:
    """
    Decide whether an accommodation can be booked for a stay.

    Pure read. Any data-access failure is logged and reported as
    unavailable so callers never book on an unknown state.

    Args:
        accommodation_id: Accommodation ID
        check_in: Arrival date (date or 'YYYY-MM-DD')
        check_out: Departure date, must be after check_in
        exclude_reservation_id: Reservation to ignore (editing in place)

    Returns:
        True if no active reservation overlaps and no manual block applies
    """
    try:
        start = parse_date(check_in)
        end = parse_date(check_out)
    except ValueError:
        return False
    if start >= end:
        return False

    try:
        db = get_db()
        accommodation = db.execute(
            'SELECT is_blocked, block_start, block_end FROM accommodations WHERE id = ?',
            (accommodation_id,)
        ).fetchone()
        if not accommodation:
            return False

        if _blocked_for_range(accommodation, start, end):
            return False

        conflicts = get_conflicting_reservations(
            accommodation_id, start, end, exclude_reservation_id
        )
        return len(conflicts) == 0
    except sqlite3.Error as e:
        logger.error(f'Availability check failed for accommodation {accommodation_id}: {e}',
                     exc_info=True)
        return False


def get_available_accommodation_ids(check_in, check_out, min_capacity: int = 1) -> list:
    """
    IDs of accommodations bookable for a stay with enough capacity.

    Args:
        check_in: Arrival date
        check_out: Departure date
        min_capacity: Minimum capacity required

    Returns:
        list of accommodation IDs, ordered by room number
    """
    start = parse_date(check_in)
    end = parse_date(check_out)

    db = get_db()
    rows = db.execute('''
        SELECT id, is_blocked, block_start, block_end FROM accommodations
        WHERE capacity >= ?
        ORDER BY room_number
    ''', (min_capacity,)).fetchall()

    placeholders = ','.join('?' * len(RELEASING_STATUSES))
    busy = {
        row['accommodation_id'] for row in db.execute(f'''
            SELECT DISTINCT accommodation_id FROM reservations
            WHERE status NOT IN ({placeholders})
              AND check_in_date < ?
              AND check_out_date > ?
        ''', [*RELEASING_STATUSES, end.isoformat(), start.isoformat()]).fetchall()
    }

    return [
        row['id'] for row in rows
        if row['id'] not in busy and not _blocked_for_range(row, start, end)
    ]
