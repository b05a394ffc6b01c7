"""
Reservation status management.
Handles status transitions, lifecycle timestamps and history.
"""

import logging
import sqlite3

from database import get_db
from .reservation_availability import ReservationConflictError

logger = logging.getLogger(__name__)


# =============================================================================
# STATUS CONSTANTS
# =============================================================================

STATUSES = ['pending', 'confirmed', 'checked_in', 'checked_out', 'cancelled']

STATUS_DISPLAY = {
    'pending': 'Pendente',
    'confirmed': 'Confirmada',
    'checked_in': 'Check-in realizado',
    'checked_out': 'Check-out realizado',
    'cancelled': 'Cancelada',
}

ALLOWED_TRANSITIONS = {
    'pending': ('confirmed', 'cancelled'),
    'confirmed': ('checked_in', 'cancelled'),
    'checked_in': ('checked_out',),
    'checked_out': (),
    'cancelled': (),
}


class InvalidStatusTransition(ValueError):
    """Raised when a status change is not allowed from the current status."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(
            f'Não é possível alterar o status de '
            f'{STATUS_DISPLAY.get(current, current)} para {STATUS_DISPLAY.get(requested, requested)}'
        )


def can_transition(current: str, requested: str) -> bool:
    """True if `requested` is reachable from `current` in one step."""
    return requested in ALLOWED_TRANSITIONS.get(current, ())


# =============================================================================
# TRANSITIONS
# =============================================================================

def change_reservation_status(
    reservation_id: int,
    new_status: str,
    changed_by: str = None,
    notes: str = ''
) -> bool:
    """
    Move a reservation to a new status.

    Check-in stamps started_at, check-out stamps completed_at. Every change
    is written to reservation_status_history.

    Args:
        reservation_id: Reservation ID
        new_status: Target status
        changed_by: Username
        notes: Optional note

    Returns:
        False if the reservation does not exist, True on success

    Raises:
        ValueError: If new_status is unknown
        InvalidStatusTransition: If the transition is not allowed
        ReservationConflictError: If the overlap guard rejects the update
    """
    if new_status not in STATUSES:
        raise ValueError(f'Status inválido: {new_status}')

    db = get_db()
    cursor = db.cursor()

    cursor.execute('SELECT status FROM reservations WHERE id = ?', (reservation_id,))
    row = cursor.fetchone()
    if not row:
        return False

    old_status = row['status']
    if not can_transition(old_status, new_status):
        raise InvalidStatusTransition(old_status, new_status)

    stamp = ''
    if new_status == 'checked_in':
        stamp = ', started_at = CURRENT_TIMESTAMP'
    elif new_status == 'checked_out':
        stamp = ', completed_at = CURRENT_TIMESTAMP'

    try:
        cursor.execute(f'''
            UPDATE reservations
            SET status = ?, updated_at = CURRENT_TIMESTAMP{stamp}
            WHERE id = ?
        ''', (new_status, reservation_id))

        cursor.execute('''
            INSERT INTO reservation_status_history
            (reservation_id, old_status, new_status, changed_by, notes)
            VALUES (?, ?, ?, ?, ?)
        ''', (reservation_id, old_status, new_status, changed_by, notes))

        db.commit()
    except sqlite3.IntegrityError as e:
        db.rollback()
        if 'reservation_overlap' in str(e):
            raise ReservationConflictError()
        raise
    except Exception:
        db.rollback()
        raise

    logger.info('Reservation %s: %s -> %s by %s', reservation_id, old_status, new_status, changed_by)
    return True


def cancel_reservation(reservation_id: int, cancelled_by: str = None, notes: str = '') -> bool:
    """Shortcut to move a reservation to 'cancelled'."""
    return change_reservation_status(reservation_id, 'cancelled', cancelled_by, notes)


# =============================================================================
# HISTORY
# =============================================================================

def get_status_history(reservation_id: int) -> list:
    """
    Get status change history for a reservation, oldest first.

    Args:
        reservation_id: Reservation ID

    Returns:
        list: History entries
    """
    db = get_db()
    rows = db.execute('''
        SELECT * FROM reservation_status_history
        WHERE reservation_id = ?
        ORDER BY created_at, id
    ''', (reservation_id,)).fetchall()
    return [dict(row) for row in rows]
