"""
Accommodation model.
Inventory CRUD and manual blocking of rooms.
"""

import json
import logging
from typing import Optional

from database import get_db
from utils.datetime_helpers import to_iso_date
from utils.validators import validate_room_number

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

CATEGORIES = ['Standard', 'Luxo', 'Super Luxo', 'Master']

BLOCK_REASONS = {
    'maintenance': 'Manutenção',
    'reserved': 'Reservado',
    'unavailable': 'Indisponível',
    'other': 'Outro',
    'Reforma': 'Reforma',
    'Manutenção': 'Manutenção',
    'Locação Mensal': 'Locação Mensal',
    'Locação Anual': 'Locação Anual',
    'Outro': 'Outro',
}

UPDATABLE_FIELDS = [
    'name', 'room_number', 'category', 'capacity', 'description',
    'image_url', 'images', 'album_url'
]


def _row_to_dict(row) -> dict:
    """Map a database row to an accommodation dict."""
    data = dict(row)
    try:
        data['images'] = json.loads(data.get('images') or '[]')
    except (TypeError, json.JSONDecodeError):
        data['images'] = []
    data['is_blocked'] = bool(data.get('is_blocked'))
    return data


def _validate_fields(category: str = None, capacity=None, room_number: str = None) -> None:
    if category is not None and category not in CATEGORIES:
        raise ValueError(f'Categoria inválida: {category}')
    if capacity is not None:
        try:
            if int(capacity) < 1:
                raise ValueError
        except (TypeError, ValueError):
            raise ValueError('A capacidade deve ser um número inteiro maior que zero')
    if room_number is not None and not validate_room_number(room_number):
        raise ValueError(f'Número de quarto inválido: {room_number}')


# =============================================================================
# QUERIES
# =============================================================================

def get_all_accommodations(category: str = None, include_blocked: bool = True) -> list:
    """
    Get all accommodations ordered by room number.

    Args:
        category: Optional category filter
        include_blocked: If False, blocked accommodations are skipped

    Returns:
        List of accommodation dicts
    """
    db = get_db()
    query = 'SELECT * FROM accommodations WHERE 1=1'
    params = []

    if category:
        query += ' AND category = ?'
        params.append(category)

    if not include_blocked:
        query += ' AND is_blocked = 0'

    query += ' ORDER BY room_number'

    rows = db.execute(query, params).fetchall()
    return [_row_to_dict(row) for row in rows]


def get_accommodations_by_category(category: str) -> list:
    """Get all accommodations of one category."""
    return get_all_accommodations(category=category)


def get_accommodation_by_id(accommodation_id: int) -> Optional[dict]:
    """
    Get accommodation by ID.

    Args:
        accommodation_id: Accommodation ID

    Returns:
        Accommodation dict or None if not found
    """
    db = get_db()
    row = db.execute('SELECT * FROM accommodations WHERE id = ?', (accommodation_id,)).fetchone()
    return _row_to_dict(row) if row else None


# =============================================================================
# CRUD OPERATIONS
# =============================================================================

def create_accommodation(
    name: str,
    room_number: str,
    category: str,
    capacity: int,
    description: str = '',
    image_url: str = None,
    images: list = None,
    album_url: str = None
) -> int:
    """
    Create a new accommodation.

    Args:
        name: Display name
        room_number: Unique room number
        category: One of CATEGORIES
        capacity: Maximum number of guests
        description: Free text description
        image_url: Cover image URL
        images: List of image URLs
        album_url: External photo album link

    Returns:
        New accommodation ID

    Raises:
        ValueError: If validation fails or room number is taken
    """
    if not name or not str(name).strip():
        raise ValueError('O nome é obrigatório')
    _validate_fields(category=category, capacity=capacity, room_number=room_number)

    db = get_db()
    existing = db.execute(
        'SELECT id FROM accommodations WHERE room_number = ?', (room_number,)
    ).fetchone()
    if existing:
        raise ValueError(f'Já existe uma acomodação com o número {room_number}')

    cursor = db.execute('''
        INSERT INTO accommodations
        (name, room_number, category, capacity, description, image_url, images, album_url)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
    ''', (name.strip(), room_number, category, int(capacity), description or '',
          image_url, json.dumps(images or []), album_url))

    db.commit()
    return cursor.lastrowid


def update_accommodation(accommodation_id: int, **kwargs) -> bool:
    """
    Update accommodation fields.

    Args:
        accommodation_id: Accommodation ID
        **kwargs: Fields to update (see UPDATABLE_FIELDS)

    Returns:
        True if updated successfully

    Raises:
        ValueError: If validation fails
    """
    _validate_fields(
        category=kwargs.get('category'),
        capacity=kwargs.get('capacity'),
        room_number=kwargs.get('room_number')
    )

    db = get_db()

    if 'room_number' in kwargs:
        clash = db.execute(
            'SELECT id FROM accommodations WHERE room_number = ? AND id != ?',
            (kwargs['room_number'], accommodation_id)
        ).fetchone()
        if clash:
            raise ValueError(f'Já existe uma acomodação com o número {kwargs["room_number"]}')

    updates = []
    values = []

    for field in UPDATABLE_FIELDS:
        if field in kwargs:
            value = kwargs[field]
            if field == 'images':
                value = json.dumps(value or [])
            elif field == 'capacity':
                value = int(value)
            updates.append(f'{field} = ?')
            values.append(value)

    if not updates:
        return False

    updates.append('updated_at = CURRENT_TIMESTAMP')
    values.append(accommodation_id)

    cursor = db.execute(
        f'UPDATE accommodations SET {", ".join(updates)} WHERE id = ?', values
    )
    db.commit()
    return cursor.rowcount > 0


def delete_accommodation(accommodation_id: int) -> bool:
    """
    Hard delete an accommodation and its price entries.

    Args:
        accommodation_id: Accommodation ID

    Returns:
        True if deleted

    Raises:
        ValueError: If the accommodation still has reservations
    """
    db = get_db()
    has_reservations = db.execute(
        'SELECT 1 FROM reservations WHERE accommodation_id = ? LIMIT 1', (accommodation_id,)
    ).fetchone()
    if has_reservations:
        raise ValueError('Não é possível excluir acomodação com reservas')

    cursor = db.execute('DELETE FROM accommodations WHERE id = ?', (accommodation_id,))
    db.commit()
    return cursor.rowcount > 0


# =============================================================================
# BLOCKING
# =============================================================================

def block_accommodation(
    accommodation_id: int,
    reason: str,
    note: str = None,
    start_date=None,
    end_date=None
) -> bool:
    """
    Block an accommodation manually.

    Without a date range the block covers every date. With a range both
    start and end days are blocked.

    Args:
        accommodation_id: Accommodation ID
        reason: One of BLOCK_REASONS
        note: Free text note
        start_date: Optional first blocked day
        end_date: Optional last blocked day

    Returns:
        True if blocked

    Raises:
        ValueError: If reason or range is invalid
    """
    if reason not in BLOCK_REASONS:
        raise ValueError(f'Motivo de bloqueio inválido: {reason}')

    if (start_date is None) != (end_date is None):
        raise ValueError('Informe início e fim do bloqueio, ou nenhum dos dois')

    block_start = to_iso_date(start_date) if start_date else None
    block_end = to_iso_date(end_date) if end_date else None
    if block_start and block_start > block_end:
        raise ValueError('O início do bloqueio não pode ser posterior ao fim')

    db = get_db()
    cursor = db.execute('''
        UPDATE accommodations
        SET is_blocked = 1, block_reason = ?, block_note = ?,
            block_start = ?, block_end = ?, updated_at = CURRENT_TIMESTAMP
        WHERE id = ?
    ''', (reason, note, block_start, block_end, accommodation_id))
    db.commit()

    if cursor.rowcount:
        logger.info('Accommodation %s blocked (%s)', accommodation_id, reason)
    return cursor.rowcount > 0


def unblock_accommodation(accommodation_id: int) -> bool:
    """Clear the manual block of an accommodation."""
    db = get_db()
    cursor = db.execute('''
        UPDATE accommodations
        SET is_blocked = 0, block_reason = NULL, block_note = NULL,
            block_start = NULL, block_end = NULL, updated_at = CURRENT_TIMESTAMP
        WHERE id = ?
    ''', (accommodation_id,))
    db.commit()
    return cursor.rowcount > 0
