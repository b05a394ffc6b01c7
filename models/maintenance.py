"""
Maintenance ticketing.
Areas, work orders with status history, and the accommodation integration.
"""

import logging
from datetime import datetime
from typing import Optional

from database import get_db
from models.accommodation import get_all_accommodations

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

AREA_TYPES = {
    'accommodation': 'Acomodação',
    'common': 'Área comum',
    'maintenance': 'Manutenção',
    'restaurant': 'Restaurante',
    'recreation': 'Lazer',
}

ORDER_STATUSES = {
    'pending': 'Pendente',
    'in_progress': 'Em andamento',
    'completed': 'Concluída',
    'cancelled': 'Cancelada',
}

PRIORITIES = {
    'low': 'Baixa',
    'medium': 'Média',
    'high': 'Alta',
    'urgent': 'Urgente',
}

ACTIVE_ORDER_STATUSES = ('pending', 'in_progress')

AREA_FIELDS = ['name', 'code', 'area_type', 'description', 'location', 'is_active', 'accommodation_id']

ORDER_FIELDS = [
    'area_id', 'title', 'description', 'priority', 'status', 'assigned_to',
    'scheduled_date', 'estimated_hours', 'actual_hours', 'cost', 'notes'
]


# =============================================================================
# AREAS
# =============================================================================

def get_all_areas(active_only: bool = False) -> list:
    """Get all areas ordered by type and name."""
    db = get_db()
    query = 'SELECT * FROM maintenance_areas'
    if active_only:
        query += ' WHERE is_active = 1'
    query += ' ORDER BY area_type, name'
    return [dict(row) for row in db.execute(query).fetchall()]


def get_areas_by_type(area_type: str) -> list:
    """Get active areas of one type."""
    db = get_db()
    rows = db.execute('''
        SELECT * FROM maintenance_areas
        WHERE area_type = ? AND is_active = 1
        ORDER BY name
    ''', (area_type,)).fetchall()
    return [dict(row) for row in rows]


def get_area_by_id(area_id: int) -> Optional[dict]:
    db = get_db()
    row = db.execute('SELECT * FROM maintenance_areas WHERE id = ?', (area_id,)).fetchone()
    return dict(row) if row else None


def create_area(
    name: str,
    code: str,
    area_type: str,
    description: str = None,
    location: str = None,
    accommodation_id: int = None
) -> int:
    """
    Create a maintenance area.

    Args:
        name: Display name
        code: Unique short code
        area_type: One of AREA_TYPES
        description: Free text
        location: Where the area is
        accommodation_id: Linked accommodation, for accommodation areas

    Returns:
        New area ID

    Raises:
        ValueError: If validation fails or code is taken
    """
    if not name or not code:
        raise ValueError('Nome e código da área são obrigatórios')
    if area_type not in AREA_TYPES:
        raise ValueError(f'Tipo de área inválido: {area_type}')

    db = get_db()
    if db.execute('SELECT 1 FROM maintenance_areas WHERE code = ?', (code,)).fetchone():
        raise ValueError(f'Já existe uma área com o código "{code}"')

    cursor = db.execute('''
        INSERT INTO maintenance_areas (name, code, area_type, description, location, accommodation_id)
        VALUES (?, ?, ?, ?, ?, ?)
    ''', (name, code, area_type, description, location, accommodation_id))
    db.commit()
    return cursor.lastrowid


def update_area(area_id: int, **kwargs) -> bool:
    """
    Update area fields.

    Raises:
        ValueError: If validation fails or the new code is taken
    """
    if 'area_type' in kwargs and kwargs['area_type'] not in AREA_TYPES:
        raise ValueError(f'Tipo de área inválido: {kwargs["area_type"]}')

    db = get_db()
    if 'code' in kwargs:
        clash = db.execute(
            'SELECT 1 FROM maintenance_areas WHERE code = ? AND id != ?', (kwargs['code'], area_id)
        ).fetchone()
        if clash:
            raise ValueError(f'Já existe uma área com o código "{kwargs["code"]}"')

    updates = []
    values = []
    for field in AREA_FIELDS:
        if field in kwargs:
            updates.append(f'{field} = ?')
            values.append(kwargs[field])

    if not updates:
        return False

    updates.append('updated_at = CURRENT_TIMESTAMP')
    values.append(area_id)

    cursor = db.execute(f'UPDATE maintenance_areas SET {", ".join(updates)} WHERE id = ?', values)
    db.commit()
    return cursor.rowcount > 0


def delete_area(area_id: int) -> bool:
    """
    Delete an area.

    Raises:
        ValueError: If the area still has work orders
    """
    db = get_db()
    if db.execute('SELECT 1 FROM maintenance_orders WHERE area_id = ? LIMIT 1', (area_id,)).fetchone():
        raise ValueError('Não é possível excluir área com ordens de serviço')

    cursor = db.execute('DELETE FROM maintenance_areas WHERE id = ?', (area_id,))
    db.commit()
    return cursor.rowcount > 0


def ensure_accommodation_area(accommodation_id: int) -> Optional[int]:
    """
    Return the accommodation-type area of an accommodation, creating it if needed.

    Returns:
        Area ID, or None if the accommodation does not exist
    """
    db = get_db()
    row = db.execute('''
        SELECT id FROM maintenance_areas
        WHERE accommodation_id = ? AND area_type = 'accommodation'
    ''', (accommodation_id,)).fetchone()
    if row:
        return row['id']

    accommodation = db.execute(
        'SELECT name, room_number FROM accommodations WHERE id = ?', (accommodation_id,)
    ).fetchone()
    if not accommodation:
        return None

    return create_area(
        name=accommodation['name'],
        code=f"ACC-{accommodation['room_number']}",
        area_type='accommodation',
        description=f'Área da acomodação {accommodation["name"]}',
        accommodation_id=accommodation_id
    )


# =============================================================================
# ORDER NUMBER GENERATION
# =============================================================================

def generate_order_number(cursor=None) -> str:
    """
    Generate a work order number.

    Format: OS-YYMMDD-NN where NN is the daily sequence.
    Example: OS-250716-03 = third order opened on Jul 16, 2025

    Raises:
        ValueError: If the daily limit is reached
    """
    prefix = f"OS-{datetime.now().strftime('%y%m%d')}-"

    db = get_db()
    cur = cursor or db.cursor()
    cur.execute('''
        SELECT MAX(CAST(SUBSTR(order_number, 11) AS INTEGER)) as max_seq
        FROM maintenance_orders
        WHERE order_number LIKE ?
    ''', (f'{prefix}%',))

    next_seq = (cur.fetchone()['max_seq'] or 0) + 1
    if next_seq > 99:
        raise ValueError('Limite diário de ordens de serviço (99) atingido')

    return f'{prefix}{next_seq:02d}'


# =============================================================================
# ORDERS
# =============================================================================

_ORDER_QUERY = '''
    SELECT o.*, a.name as area_name, a.code as area_code, a.area_type, a.accommodation_id
    FROM maintenance_orders o
    JOIN maintenance_areas a ON o.area_id = a.id
'''


def get_all_maintenance_orders(status: str = None, area_id: int = None) -> list:
    """
    List work orders, newest first.

    Args:
        status: Optional status filter
        area_id: Optional area filter

    Returns:
        list of order dicts with area name, code and type
    """
    db = get_db()
    query = _ORDER_QUERY + ' WHERE 1=1'
    params = []

    if status:
        query += ' AND o.status = ?'
        params.append(status)

    if area_id:
        query += ' AND o.area_id = ?'
        params.append(area_id)

    query += ' ORDER BY o.created_at DESC, o.id DESC'

    return [dict(row) for row in db.execute(query, params).fetchall()]


def get_maintenance_order_by_id(order_id: int) -> Optional[dict]:
    """Get a work order with its area."""
    db = get_db()
    row = db.execute(_ORDER_QUERY + ' WHERE o.id = ?', (order_id,)).fetchone()
    return dict(row) if row else None


def get_maintenance_orders_for_accommodation(accommodation_id: int) -> list:
    """Work orders of every area linked to an accommodation."""
    db = get_db()
    rows = db.execute(
        _ORDER_QUERY + ' WHERE a.accommodation_id = ? ORDER BY o.created_at DESC, o.id DESC',
        (accommodation_id,)
    ).fetchall()
    return [dict(row) for row in rows]


def _add_history(cursor, order_id: int, status: str, changed_by: str, notes: str = None) -> None:
    cursor.execute('''
        INSERT INTO maintenance_history (maintenance_order_id, status, notes, changed_by)
        VALUES (?, ?, ?, ?)
    ''', (order_id, status, notes, changed_by))


def create_maintenance_order(
    area_id: int,
    title: str,
    description: str = '',
    priority: str = 'medium',
    requested_by: str = None,
    assigned_to: str = None,
    scheduled_date: str = None,
    estimated_hours: float = None,
    notes: str = None
) -> tuple:
    """
    Open a work order.

    Args:
        area_id: Area ID
        title: Short title
        description: Details
        priority: One of PRIORITIES
        requested_by: Username
        assigned_to: Assignee
        scheduled_date: Planned date (YYYY-MM-DD)
        estimated_hours: Estimate
        notes: Free text

    Returns:
        tuple: (order_id, order_number)

    Raises:
        ValueError: If validation fails
    """
    if not title or not str(title).strip():
        raise ValueError('O título é obrigatório')
    if priority not in PRIORITIES:
        raise ValueError(f'Prioridade inválida: {priority}')
    if not get_area_by_id(area_id):
        raise ValueError('Área não encontrada')

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')
        order_number = generate_order_number(cursor)

        cursor.execute('''
            INSERT INTO maintenance_orders (
                order_number, area_id, title, description, priority, status,
                requested_by, assigned_to, scheduled_date, estimated_hours, notes
            ) VALUES (?, ?, ?, ?, ?, 'pending', ?, ?, ?, ?, ?)
        ''', (order_number, area_id, title.strip(), description or '', priority,
              requested_by, assigned_to, scheduled_date, estimated_hours, notes))

        order_id = cursor.lastrowid
        _add_history(cursor, order_id, 'pending', requested_by, 'Ordem aberta')
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info('Maintenance order %s opened for area %s', order_number, area_id)
    return order_id, order_number


def update_maintenance_order(order_id: int, changed_by: str = None, **kwargs) -> bool:
    """
    Update a work order.

    A status change is written to maintenance_history; moving to
    in_progress stamps started_at and moving to completed stamps
    completed_at.

    Raises:
        ValueError: If the order does not exist or validation fails
    """
    current = get_maintenance_order_by_id(order_id)
    if not current:
        raise ValueError('Ordem de serviço não encontrada')

    if 'status' in kwargs and kwargs['status'] not in ORDER_STATUSES:
        raise ValueError(f'Status inválido: {kwargs["status"]}')
    if 'priority' in kwargs and kwargs['priority'] not in PRIORITIES:
        raise ValueError(f'Prioridade inválida: {kwargs["priority"]}')

    updates = []
    values = []
    for field in ORDER_FIELDS:
        if field in kwargs:
            updates.append(f'{field} = ?')
            values.append(kwargs[field])

    if not updates:
        return False

    status_changed = 'status' in kwargs and kwargs['status'] != current['status']
    if status_changed and kwargs['status'] == 'in_progress' and not current['started_at']:
        updates.append('started_at = CURRENT_TIMESTAMP')
    if status_changed and kwargs['status'] == 'completed':
        updates.append('completed_at = CURRENT_TIMESTAMP')

    updates.append('updated_at = CURRENT_TIMESTAMP')
    values.append(order_id)

    db = get_db()
    cursor = db.cursor()
    try:
        cursor.execute(f'UPDATE maintenance_orders SET {", ".join(updates)} WHERE id = ?', values)
        if status_changed:
            _add_history(cursor, order_id, kwargs['status'], changed_by, kwargs.get('history_notes'))
        db.commit()
    except Exception:
        db.rollback()
        raise

    return True


def delete_maintenance_order(order_id: int) -> bool:
    """Delete a work order and its history."""
    db = get_db()
    cursor = db.execute('DELETE FROM maintenance_orders WHERE id = ?', (order_id,))
    db.commit()
    return cursor.rowcount > 0


def get_maintenance_history(order_id: int) -> list:
    """Status history of a work order, newest first."""
    db = get_db()
    rows = db.execute('''
        SELECT * FROM maintenance_history
        WHERE maintenance_order_id = ?
        ORDER BY created_at DESC, id DESC
    ''', (order_id,)).fetchall()
    return [dict(row) for row in rows]


# =============================================================================
# ACCOMMODATION INTEGRATION
# =============================================================================

def has_active_maintenance_orders(accommodation_id: int) -> bool:
    """True if an area linked to the accommodation has a pending or in-progress order."""
    db = get_db()
    placeholders = ','.join('?' * len(ACTIVE_ORDER_STATUSES))
    row = db.execute(f'''
        SELECT 1 FROM maintenance_orders o
        JOIN maintenance_areas a ON o.area_id = a.id
        WHERE a.accommodation_id = ?
          AND o.status IN ({placeholders})
        LIMIT 1
    ''', [accommodation_id, *ACTIVE_ORDER_STATUSES]).fetchone()
    return row is not None


def get_available_accommodations() -> list:
    """
    Accommodations that are neither blocked nor under active maintenance.

    Returns:
        list of accommodation dicts ordered by room number
    """
    return [
        accommodation for accommodation in get_all_accommodations(include_blocked=False)
        if not has_active_maintenance_orders(accommodation['id'])
    ]


def create_maintenance_order_for_blocking(
    accommodation_id: int,
    title: str,
    description: str = '',
    priority: str = 'medium',
    requested_by: str = None
) -> Optional[tuple]:
    """
    Open a work order on an accommodation's own area, creating the area if needed.

    Returns:
        tuple (order_id, order_number), or None if the accommodation does not exist
    """
    area_id = ensure_accommodation_area(accommodation_id)
    if area_id is None:
        return None

    return create_maintenance_order(
        area_id=area_id,
        title=title,
        description=description,
        priority=priority,
        requested_by=requested_by,
        notes='Ordem criada automaticamente pelo bloqueio da acomodação'
    )
