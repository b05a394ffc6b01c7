"""
Guest data access functions.
Guest records, accent-insensitive search and soft delete.
"""

import json
import unicodedata
from typing import Optional

from database import get_db
from utils.validators import validate_email, validate_phone


_FIELDS = [
    'first_name', 'last_name', 'email', 'phone', 'document_number', 'document_type',
    'date_of_birth', 'nationality', 'address_street', 'address_city', 'address_state',
    'address_zip_code', 'address_country', 'emergency_contact_name',
    'emergency_contact_phone', 'preferences', 'notes'
]

_SEARCH_FIELDS = ['first_name', 'last_name', 'email', 'phone', 'document_number']


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def normalize_text(text: str) -> str:
    """
    Normalize text for accent-insensitive search.

    Examples:
        'João' -> 'joao'
        'Conceição Araújo' -> 'conceicao araujo'
    """
    if not text:
        return ''
    normalized = unicodedata.normalize('NFD', text)
    without_accents = ''.join(c for c in normalized if unicodedata.category(c) != 'Mn')
    return without_accents.lower()


def _row_to_dict(row) -> dict:
    data = dict(row)
    try:
        data['preferences'] = json.loads(data.get('preferences') or '{}')
    except (TypeError, json.JSONDecodeError):
        data['preferences'] = {}
    data['is_active'] = bool(data.get('is_active'))
    data['full_name'] = f"{data['first_name']} {data['last_name']}".strip()
    return data


def _validate_guest(data: dict, partial: bool = False) -> None:
    if not partial or 'first_name' in data:
        if not data.get('first_name') or not str(data['first_name']).strip():
            raise ValueError('O nome é obrigatório')
    if not partial or 'last_name' in data:
        if not data.get('last_name') or not str(data['last_name']).strip():
            raise ValueError('O sobrenome é obrigatório')
    if not partial or 'email' in data:
        if not validate_email(data.get('email')):
            raise ValueError('Formato de e-mail inválido')
    if data.get('phone') and not validate_phone(data['phone']):
        raise ValueError('Formato de telefone inválido')


# =============================================================================
# QUERIES
# =============================================================================

def get_all_guests(active_only: bool = True) -> list:
    """
    Get guests ordered by name.

    Args:
        active_only: Skip soft-deleted guests

    Returns:
        List of guest dicts
    """
    db = get_db()
    query = 'SELECT * FROM guests'
    if active_only:
        query += ' WHERE is_active = 1'
    query += ' ORDER BY first_name, last_name'

    rows = db.execute(query).fetchall()
    return [_row_to_dict(row) for row in rows]


def get_guest_by_id(guest_id: int) -> Optional[dict]:
    """
    Get guest by ID, including soft-deleted ones.

    Reservations keep pointing at removed guests, so lookups by ID must
    still resolve them.
    """
    db = get_db()
    row = db.execute('SELECT * FROM guests WHERE id = ?', (guest_id,)).fetchone()
    return _row_to_dict(row) if row else None


def get_guest_by_email(email: str) -> Optional[dict]:
    """Get the active guest with this email (case-insensitive)."""
    if not email:
        return None
    db = get_db()
    row = db.execute(
        'SELECT * FROM guests WHERE LOWER(email) = LOWER(?) AND is_active = 1',
        (email.strip(),)
    ).fetchone()
    return _row_to_dict(row) if row else None


def search_guests(query: str, limit: int = 20) -> list:
    """
    Search active guests by name, email, phone or document.
    Accent-insensitive; every word of the query must match.

    Args:
        query: Search text
        limit: Maximum results

    Returns:
        List of guest dicts
    """
    search_words = normalize_text(query).split()
    if not search_words:
        return []

    results = []
    for guest in get_all_guests(active_only=True):
        searchable = ' '.join(
            normalize_text(str(guest[field])) for field in _SEARCH_FIELDS if guest.get(field)
        )
        if all(word in searchable for word in search_words):
            results.append(guest)
            if len(results) >= limit:
                break
    return results


def get_guest_reservations(guest_id: int) -> list:
    """
    Reservations of a guest, most recent first.

    Args:
        guest_id: Guest ID

    Returns:
        List of reservation dicts with accommodation name and room
    """
    db = get_db()
    rows = db.execute('''
        SELECT r.*, a.name as accommodation_name, a.room_number
        FROM reservations r
        JOIN accommodations a ON r.accommodation_id = a.id
        WHERE r.guest_id = ?
        ORDER BY r.check_in_date DESC
    ''', (guest_id,)).fetchall()
    return [dict(row) for row in rows]


# =============================================================================
# CRUD OPERATIONS
# =============================================================================

def create_guest(data: dict, created_by: str = None) -> int:
    """
    Create a guest.

    Args:
        data: Guest fields (first_name, last_name and email required)
        created_by: Username

    Returns:
        New guest ID

    Raises:
        ValueError: If validation fails or the email is already registered
    """
    _validate_guest(data)

    if get_guest_by_email(data['email']):
        raise ValueError(f'Já existe um hóspede com o e-mail {data["email"]}')

    values = {field: data.get(field) for field in _FIELDS}
    values['first_name'] = values['first_name'].strip()
    values['last_name'] = values['last_name'].strip()
    values['email'] = values['email'].strip().lower()
    values['preferences'] = json.dumps(data.get('preferences') or {})

    columns = ', '.join(values.keys())
    placeholders = ', '.join('?' * len(values))

    db = get_db()
    cursor = db.execute(
        f'INSERT INTO guests ({columns}, created_by) VALUES ({placeholders}, ?)',
        [*values.values(), created_by]
    )
    db.commit()
    return cursor.lastrowid


def update_guest(guest_id: int, data: dict) -> bool:
    """
    Update guest fields.

    Raises:
        ValueError: If the guest does not exist or validation fails
    """
    current = get_guest_by_id(guest_id)
    if not current:
        raise ValueError('Hóspede não encontrado')

    changes = {field: data[field] for field in _FIELDS if field in data}
    if not changes:
        return False

    _validate_guest(changes, partial=True)

    if 'email' in changes:
        changes['email'] = changes['email'].strip().lower()
        other = get_guest_by_email(changes['email'])
        if other and other['id'] != guest_id:
            raise ValueError(f'Já existe um hóspede com o e-mail {changes["email"]}')
    if 'preferences' in changes:
        changes['preferences'] = json.dumps(changes['preferences'] or {})

    updates = [f'{field} = ?' for field in changes]
    values = list(changes.values())
    updates.append('updated_at = CURRENT_TIMESTAMP')
    values.append(guest_id)

    db = get_db()
    cursor = db.execute(f'UPDATE guests SET {", ".join(updates)} WHERE id = ?', values)
    db.commit()
    return cursor.rowcount > 0


def delete_guest(guest_id: int) -> bool:
    """
    Soft delete a guest (is_active = 0).

    Args:
        guest_id: Guest ID

    Returns:
        True if the guest was active and is now removed
    """
    db = get_db()
    cursor = db.execute('''
        UPDATE guests SET is_active = 0, updated_at = CURRENT_TIMESTAMP
        WHERE id = ? AND is_active = 1
    ''', (guest_id,))
    db.commit()
    return cursor.rowcount > 0
