"""
Reservation CRUD operations.
Handles create, read, update, delete for reservations.
"""

import logging
import sqlite3
from datetime import datetime

from database import get_db
from models.accommodation import get_accommodation_by_id
from models.guest import get_guest_by_id
from models.price_period import find_period_for_date
from models.pricing import quote_stay, check_minimum_stay, MinimumStayError
from utils.datetime_helpers import parse_date
from .reservation_availability import (
    ReservationConflictError,
    get_conflicting_reservations,
    is_accommodation_available,
)

logger = logging.getLogger(__name__)


# =============================================================================
# RESERVATION CODE GENERATION
# =============================================================================

def generate_reservation_code(cursor=None, max_retries: int = 5) -> str:
    """
    Generate a unique reservation code.

    Format: RES-YYMMDD-NNN where NNN is the daily sequence of creation.
    Example: RES-250716-001 = first reservation created on Jul 16, 2025

    Args:
        cursor: Active transaction cursor
        max_retries: Max attempts on collision

    Returns:
        str: Unique reservation code

    Raises:
        ValueError: If unable to generate unique code
    """
    prefix = f"RES-{datetime.now().strftime('%y%m%d')}-"

    db = get_db()
    cur = cursor or db.cursor()

    for attempt in range(max_retries):
        cur.execute('''
            SELECT MAX(CAST(SUBSTR(reservation_code, 12) AS INTEGER)) as max_seq
            FROM reservations
            WHERE reservation_code LIKE ?
        ''', (f'{prefix}%',))

        result = cur.fetchone()
        next_seq = (result['max_seq'] or 0) + 1 + attempt

        if next_seq > 999:
            raise ValueError('Limite diário de reservas (999) atingido')

        code = f'{prefix}{next_seq:03d}'

        cur.execute('SELECT id FROM reservations WHERE reservation_code = ?', (code,))
        if not cur.fetchone():
            return code

    raise ValueError('Não foi possível gerar um código de reserva único')


# =============================================================================
# VALIDATION
# =============================================================================

def _raise_unavailable(accommodation_id: int, check_in, check_out, exclude_reservation_id=None):
    """Raise a conflict error naming the blocking reservations, if any."""
    conflicts = get_conflicting_reservations(
        accommodation_id, check_in, check_out, exclude_reservation_id
    )
    if conflicts:
        codes = ', '.join(c['reservation_code'] for c in conflicts)
        raise ReservationConflictError(
            f'Acomodação já reservada nessas datas: {codes}', conflicts=conflicts
        )
    raise ReservationConflictError('Acomodação bloqueada ou indisponível para as datas selecionadas')


def _validate_occupancy(accommodation: dict, guests) -> int:
    try:
        guests = int(guests)
    except (TypeError, ValueError):
        raise ValueError('O número de hóspedes deve ser um inteiro')
    if guests < 1:
        raise ValueError('O número de hóspedes deve ser pelo menos 1')
    if guests > accommodation['capacity']:
        raise ValueError(
            f'Capacidade insuficiente: {accommodation["name"]} acomoda até {accommodation["capacity"]} pessoas'
        )
    return guests


def _validate_stay(check_in, check_out) -> tuple:
    start = parse_date(check_in)
    end = parse_date(check_out)
    if start >= end:
        raise ValueError('A data de check-out deve ser posterior à de check-in')
    return start, end


# =============================================================================
# CREATE
# =============================================================================

def create_reservation(
    accommodation_id: int,
    check_in,
    check_out,
    guests: int = 1,
    guest_id: int = None,
    guest_name: str = None,
    includes_breakfast: bool = False,
    total_price: float = None,
    notes: str = '',
    created_by: str = None,
    external_event_id: str = None,
    override_minimum_stay: bool = False
) -> tuple:
    """
    Create a reservation with all validations.

    The availability check gives a friendly error up front; the insert then
    runs under BEGIN IMMEDIATE and the overlap trigger rejects any stay that
    slipped in between check and write.

    Args:
        accommodation_id: Accommodation ID
        check_in: Arrival date
        check_out: Departure date (exclusive)
        guests: Number of guests
        guest_id: Registered guest ID
        guest_name: Inline guest name when no guest record exists
        includes_breakfast: Breakfast flag
        total_price: Manual total (defaults to the quoted total)
        notes: Free text notes
        created_by: Username creating the reservation
        external_event_id: Calendar event ID from the sync collaborator
        override_minimum_stay: Caller confirmed a stay shorter than the minimum

    Returns:
        tuple: (reservation_id, reservation_code)

    Raises:
        ReservationConflictError: If the stay overlaps or the room is blocked
        MinimumStayError: If the stay is too short and not overridden
        ValueError: If validations fail
    """
    start, end = _validate_stay(check_in, check_out)

    accommodation = get_accommodation_by_id(accommodation_id)
    if not accommodation:
        raise ValueError('Acomodação não encontrada')

    guests = _validate_occupancy(accommodation, guests)

    if guest_id:
        guest = get_guest_by_id(guest_id)
        if not guest:
            raise ValueError('Hóspede não encontrado')
    elif not guest_name or not str(guest_name).strip():
        raise ValueError('Informe o hóspede ou o nome do hóspede')

    if not is_accommodation_available(accommodation_id, start, end):
        _raise_unavailable(accommodation_id, start, end)

    nights = (end - start).days
    quote = quote_stay(accommodation_id, start, end, guests, includes_breakfast)
    min_stay = quote['min_stay'] if quote else check_minimum_stay(nights, find_period_for_date(start))

    if min_stay['violation'] and not override_minimum_stay:
        raise MinimumStayError(min_stay['required'], min_stay['requested'])

    if total_price is None:
        if not quote:
            raise ValueError('Não há preço cadastrado para esta estadia; informe o valor total')
        total_price = quote['total_price']

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        reservation_code = generate_reservation_code(cursor)

        cursor.execute('''
            INSERT INTO reservations (
                reservation_code, accommodation_id, guest_id, guest_name,
                check_in_date, check_out_date, guests, includes_breakfast,
                status, total_price, notes, external_event_id, created_by
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, 'pending', ?, ?, ?, ?)
        ''', (
            reservation_code, accommodation_id, guest_id,
            guest_name.strip() if guest_name else None,
            start.isoformat(), end.isoformat(), guests, 1 if includes_breakfast else 0,
            float(total_price), notes or '', external_event_id, created_by
        ))

        reservation_id = cursor.lastrowid

        cursor.execute('''
            INSERT INTO reservation_status_history
            (reservation_id, old_status, new_status, changed_by, notes)
            VALUES (?, NULL, 'pending', ?, 'Criação da reserva')
        ''', (reservation_id, created_by))

        db.commit()

    except sqlite3.IntegrityError as e:
        db.rollback()
        if 'reservation_overlap' in str(e):
            logger.warning('Overlap rejected at write time for accommodation %s (%s to %s)',
                           accommodation_id, start, end)
            raise ReservationConflictError()
        raise
    except Exception:
        db.rollback()
        raise

    logger.info('Reservation %s created for accommodation %s (%s to %s)',
                reservation_code, accommodation_id, start, end)
    return reservation_id, reservation_code


# =============================================================================
# READ
# =============================================================================

_DETAIL_QUERY = '''
    SELECT r.*,
           a.name as accommodation_name, a.room_number, a.category, a.capacity,
           g.first_name as guest_first_name, g.last_name as guest_last_name,
           g.email as guest_email, g.phone as guest_phone,
           COALESCE(g.first_name || ' ' || g.last_name, r.guest_name) as display_name
    FROM reservations r
    JOIN accommodations a ON r.accommodation_id = a.id
    LEFT JOIN guests g ON r.guest_id = g.id
'''


def _row_to_dict(row) -> dict:
    data = dict(row)
    data['includes_breakfast'] = bool(data.get('includes_breakfast'))
    data['nights'] = (parse_date(data['check_out_date']) - parse_date(data['check_in_date'])).days
    return data


def get_reservation_by_id(reservation_id: int) -> dict:
    """
    Get reservation with accommodation and guest details.

    Args:
        reservation_id: Reservation ID

    Returns:
        dict or None
    """
    db = get_db()
    row = db.execute(_DETAIL_QUERY + ' WHERE r.id = ?', (reservation_id,)).fetchone()
    return _row_to_dict(row) if row else None


def get_reservation_by_code(reservation_code: str) -> dict:
    """Get reservation by its code."""
    db = get_db()
    row = db.execute(_DETAIL_QUERY + ' WHERE r.reservation_code = ?', (reservation_code,)).fetchone()
    return _row_to_dict(row) if row else None


def get_all_reservations(
    status: str = None,
    accommodation_id: int = None,
    guest_id: int = None
) -> list:
    """
    List reservations, most recent check-in first.

    Args:
        status: Optional status filter
        accommodation_id: Optional accommodation filter
        guest_id: Optional guest filter

    Returns:
        list of reservation dicts
    """
    db = get_db()
    query = _DETAIL_QUERY + ' WHERE 1=1'
    params = []

    if status:
        query += ' AND r.status = ?'
        params.append(status)

    if accommodation_id:
        query += ' AND r.accommodation_id = ?'
        params.append(accommodation_id)

    if guest_id:
        query += ' AND r.guest_id = ?'
        params.append(guest_id)

    query += ' ORDER BY r.check_in_date DESC, r.id DESC'

    rows = db.execute(query, params).fetchall()
    return [_row_to_dict(row) for row in rows]


def get_reservations_by_date(start_date, end_date, include_cancelled: bool = False) -> list:
    """
    Reservations touching any day in [start_date, end_date].

    A reservation whose check-out equals start_date is included so that
    departures on the first day are visible.

    Args:
        start_date: First day
        end_date: Last day (inclusive)
        include_cancelled: Include cancelled reservations

    Returns:
        list of reservation dicts ordered by check-in
    """
    start = parse_date(start_date)
    end = parse_date(end_date)

    db = get_db()
    query = _DETAIL_QUERY + ' WHERE r.check_in_date <= ? AND r.check_out_date >= ?'
    params = [end.isoformat(), start.isoformat()]

    if not include_cancelled:
        query += " AND r.status != 'cancelled'"

    query += ' ORDER BY r.check_in_date, a.room_number'

    rows = db.execute(query, params).fetchall()
    return [_row_to_dict(row) for row in rows]


# =============================================================================
# UPDATE
# =============================================================================

UPDATABLE_FIELDS = [
    'accommodation_id', 'check_in_date', 'check_out_date', 'guests', 'guest_id',
    'guest_name', 'includes_breakfast', 'total_price', 'notes', 'external_event_id'
]

_REPRICE_FIELDS = {'accommodation_id', 'check_in_date', 'check_out_date', 'guests', 'includes_breakfast'}


def update_reservation(reservation_id: int, **kwargs) -> bool:
    """
    Update reservation fields.

    Moving the stay (accommodation or dates) re-checks availability
    excluding the reservation itself. When the stay, occupancy or breakfast
    change and no total is given, the total is re-quoted if a price exists.

    Args:
        reservation_id: Reservation ID
        **kwargs: Fields to update (see UPDATABLE_FIELDS)

    Returns:
        True if updated, False if nothing to update

    Raises:
        ReservationConflictError: If the new stay is unavailable
        ValueError: If validations fail
    """
    current = get_reservation_by_id(reservation_id)
    if not current:
        raise ValueError('Reserva não encontrada')

    changes = {k: v for k, v in kwargs.items() if k in UPDATABLE_FIELDS}
    if not changes:
        return False

    moving = any(k in changes for k in ('accommodation_id', 'check_in_date', 'check_out_date'))
    if moving and current['status'] in ('checked_out', 'cancelled'):
        raise ValueError('Não é possível alterar datas de uma reserva encerrada')

    accommodation_id = changes.get('accommodation_id', current['accommodation_id'])
    start, end = _validate_stay(
        changes.get('check_in_date', current['check_in_date']),
        changes.get('check_out_date', current['check_out_date'])
    )

    accommodation = get_accommodation_by_id(accommodation_id)
    if not accommodation:
        raise ValueError('Acomodação não encontrada')

    guests = _validate_occupancy(accommodation, changes.get('guests', current['guests']))

    if changes.get('guest_id'):
        if not get_guest_by_id(changes['guest_id']):
            raise ValueError('Hóspede não encontrado')

    if moving and not is_accommodation_available(accommodation_id, start, end,
                                                 exclude_reservation_id=reservation_id):
        _raise_unavailable(accommodation_id, start, end, exclude_reservation_id=reservation_id)

    if 'check_in_date' in changes:
        changes['check_in_date'] = start.isoformat()
    if 'check_out_date' in changes:
        changes['check_out_date'] = end.isoformat()
    if 'guests' in changes:
        changes['guests'] = guests
    if 'includes_breakfast' in changes:
        changes['includes_breakfast'] = 1 if changes['includes_breakfast'] else 0

    if 'total_price' not in changes and _REPRICE_FIELDS & changes.keys():
        breakfast = changes.get('includes_breakfast', current['includes_breakfast'])
        quote = quote_stay(accommodation_id, start, end, guests, bool(breakfast))
        if quote:
            changes['total_price'] = quote['total_price']

    updates = [f'{field} = ?' for field in changes]
    values = list(changes.values())
    updates.append('updated_at = CURRENT_TIMESTAMP')
    values.append(reservation_id)

    db = get_db()
    try:
        cursor = db.execute(f'UPDATE reservations SET {", ".join(updates)} WHERE id = ?', values)
        db.commit()
    except sqlite3.IntegrityError as e:
        db.rollback()
        if 'reservation_overlap' in str(e):
            raise ReservationConflictError()
        raise

    return cursor.rowcount > 0


# =============================================================================
# DELETE
# =============================================================================

def delete_reservation(reservation_id: int) -> bool:
    """
    Hard delete a reservation and its status history.

    Args:
        reservation_id: Reservation ID

    Returns:
        True if deleted
    """
    db = get_db()
    cursor = db.execute('DELETE FROM reservations WHERE id = ?', (reservation_id,))
    db.commit()

    if cursor.rowcount:
        logger.info('Reservation %s deleted', reservation_id)
    return cursor.rowcount > 0
