"""
Price entry model.
Nightly prices keyed by (accommodation or category, period, people, breakfast).
"""

import sqlite3
from typing import Optional

from database import get_db
from models.accommodation import CATEGORIES, get_accommodation_by_id
from models.price_period import get_period_by_id

UPDATABLE_FIELDS = ['people', 'price_per_night', 'includes_breakfast']


def _row_to_dict(row) -> dict:
    data = dict(row)
    data['includes_breakfast'] = bool(data.get('includes_breakfast'))
    return data


def _validate_entry(people, price_per_night) -> tuple:
    try:
        people = int(people)
    except (TypeError, ValueError):
        raise ValueError('O número de pessoas deve ser um inteiro')
    if people < 1:
        raise ValueError('O número de pessoas deve ser pelo menos 1')

    try:
        price_per_night = float(price_per_night)
    except (TypeError, ValueError):
        raise ValueError('O preço por noite deve ser numérico')
    if price_per_night < 0:
        raise ValueError('O preço por noite não pode ser negativo')

    return people, price_per_night


def _validate_target(period_id, accommodation_id, category) -> None:
    if not get_period_by_id(period_id):
        raise ValueError('Período não encontrado')
    if accommodation_id is not None:
        if not get_accommodation_by_id(accommodation_id):
            raise ValueError('Acomodação não encontrada')
        return
    if not category:
        raise ValueError('Informe a acomodação ou a categoria do preço')
    if category not in CATEGORIES:
        raise ValueError(f'Categoria inválida: {category}')


# =============================================================================
# QUERIES
# =============================================================================

def get_price_entry_by_id(entry_id: int) -> Optional[dict]:
    """Get a price entry by ID."""
    db = get_db()
    row = db.execute('SELECT * FROM price_entries WHERE id = ?', (entry_id,)).fetchone()
    return _row_to_dict(row) if row else None


def get_prices_for_accommodation(accommodation_id: int, period_id: int = None) -> list:
    """
    Get the prices that apply to an accommodation.

    Includes its own entries and the category-wide entries of its category;
    category-wide rows carry is_category_wide = True.

    Args:
        accommodation_id: Accommodation ID
        period_id: Optional period filter

    Returns:
        List of price entry dicts with period name and dates
    """
    db = get_db()
    query = '''
        SELECT e.*, p.name as period_name, p.start_date, p.end_date,
               p.is_holiday, p.minimum_stay,
               (e.accommodation_id IS NULL) as is_category_wide
        FROM price_entries e
        JOIN price_periods p ON e.period_id = p.id
        JOIN accommodations a ON a.id = ?
        WHERE (e.accommodation_id = a.id
               OR (e.accommodation_id IS NULL AND e.category = a.category))
    '''
    params = [accommodation_id]

    if period_id:
        query += ' AND e.period_id = ?'
        params.append(period_id)

    query += ' ORDER BY p.start_date, e.people, e.includes_breakfast, is_category_wide'

    rows = db.execute(query, params).fetchall()
    result = []
    for row in rows:
        entry = _row_to_dict(row)
        entry['is_holiday'] = bool(entry['is_holiday'])
        entry['is_category_wide'] = bool(entry['is_category_wide'])
        result.append(entry)
    return result


def get_prices_for_period(period_id: int) -> list:
    """Get every entry of a period, accommodation entries first."""
    db = get_db()
    rows = db.execute('''
        SELECT e.*, a.name as accommodation_name, a.room_number
        FROM price_entries e
        LEFT JOIN accommodations a ON e.accommodation_id = a.id
        WHERE e.period_id = ?
        ORDER BY e.accommodation_id IS NULL, a.room_number, e.category, e.people, e.includes_breakfast
    ''', (period_id,)).fetchall()
    return [_row_to_dict(row) for row in rows]


# =============================================================================
# CRUD OPERATIONS
# =============================================================================

def create_price_entry(
    period_id: int,
    people: int,
    price_per_night: float,
    includes_breakfast: bool = False,
    accommodation_id: int = None,
    category: str = None
) -> int:
    """
    Create a price entry.

    Args:
        period_id: Period ID
        people: Exact occupancy the price applies to
        price_per_night: Nightly price
        includes_breakfast: Breakfast flag
        accommodation_id: Accommodation the price belongs to
        category: Category for a category-wide price (accommodation_id None)

    Returns:
        New entry ID

    Raises:
        ValueError: If validation fails or the natural key already exists
    """
    _validate_target(period_id, accommodation_id, category)
    people, price_per_night = _validate_entry(people, price_per_night)

    db = get_db()
    try:
        cursor = db.execute('''
            INSERT INTO price_entries
            (accommodation_id, category, period_id, people, price_per_night, includes_breakfast)
            VALUES (?, ?, ?, ?, ?, ?)
        ''', (accommodation_id, None if accommodation_id else category, period_id,
              people, price_per_night, 1 if includes_breakfast else 0))
        db.commit()
    except sqlite3.IntegrityError:
        db.rollback()
        raise ValueError('Já existe um preço para esta combinação de período, pessoas e café da manhã')

    return cursor.lastrowid


def update_price_entry(entry_id: int, **kwargs) -> bool:
    """
    Update price, people or breakfast flag of an entry.

    Raises:
        ValueError: If the entry does not exist, validation fails or the
            change collides with another entry
    """
    current = get_price_entry_by_id(entry_id)
    if not current:
        raise ValueError('Preço não encontrado')

    people, price_per_night = _validate_entry(
        kwargs.get('people', current['people']),
        kwargs.get('price_per_night', current['price_per_night'])
    )
    includes_breakfast = kwargs.get('includes_breakfast', current['includes_breakfast'])

    db = get_db()
    try:
        cursor = db.execute('''
            UPDATE price_entries
            SET people = ?, price_per_night = ?, includes_breakfast = ?,
                updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
        ''', (people, price_per_night, 1 if includes_breakfast else 0, entry_id))
        db.commit()
    except sqlite3.IntegrityError:
        db.rollback()
        raise ValueError('Já existe um preço para esta combinação de período, pessoas e café da manhã')

    return cursor.rowcount > 0


def delete_price_entry(entry_id: int) -> bool:
    """Delete a single price entry."""
    db = get_db()
    cursor = db.execute('DELETE FROM price_entries WHERE id = ?', (entry_id,))
    db.commit()
    return cursor.rowcount > 0


def upsert_price_entry(
    period_id: int,
    people: int,
    price_per_night: float,
    includes_breakfast: bool = False,
    accommodation_id: int = None,
    category: str = None,
    commit: bool = True
) -> int:
    """
    Insert a price entry or overwrite the price of the existing one.

    A single statement keyed by the natural key, so concurrent writers can
    never produce two entries for the same key.

    Args:
        period_id: Period ID
        people: Exact occupancy
        price_per_night: Nightly price
        includes_breakfast: Breakfast flag
        accommodation_id: Accommodation ID (None for category-wide)
        category: Category for category-wide entries
        commit: Commit immediately (False when the caller batches)

    Returns:
        ID of the inserted or updated entry
    """
    _validate_target(period_id, accommodation_id, category)
    people, price_per_night = _validate_entry(people, price_per_night)
    breakfast = 1 if includes_breakfast else 0

    db = get_db()
    if accommodation_id is not None:
        row = db.execute('''
            INSERT INTO price_entries
            (accommodation_id, period_id, people, price_per_night, includes_breakfast)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(accommodation_id, period_id, people, includes_breakfast)
            DO UPDATE SET price_per_night = excluded.price_per_night,
                          updated_at = CURRENT_TIMESTAMP
            RETURNING id
        ''', (accommodation_id, period_id, people, price_per_night, breakfast)).fetchall()[0]
    else:
        row = db.execute('''
            INSERT INTO price_entries
            (category, period_id, people, price_per_night, includes_breakfast)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(category, period_id, people, includes_breakfast)
            WHERE accommodation_id IS NULL
            DO UPDATE SET price_per_night = excluded.price_per_night,
                          updated_at = CURRENT_TIMESTAMP
            RETURNING id
        ''', (category, period_id, people, price_per_night, breakfast)).fetchall()[0]

    if commit:
        db.commit()
    return row['id']


def delete_all_prices(accommodation_id: int = None, period_id: int = None) -> int:
    """
    Bulk delete price entries.

    With no filters every entry is removed (database cleanup).

    Args:
        accommodation_id: Only this accommodation's entries
        period_id: Only this period's entries

    Returns:
        Number of deleted entries
    """
    db = get_db()
    query = 'DELETE FROM price_entries WHERE 1=1'
    params = []

    if accommodation_id:
        query += ' AND accommodation_id = ?'
        params.append(accommodation_id)

    if period_id:
        query += ' AND period_id = ?'
        params.append(period_id)

    cursor = db.execute(query, params)
    db.commit()
    return cursor.rowcount
