"""
Occupancy calendar data.
Builds per-(accommodation, day) records and classifies each grid cell.
"""

import logging
from collections import defaultdict

from database import get_db
from utils.datetime_helpers import parse_date, iter_days

logger = logging.getLogger(__name__)


CELL_KINDS = ('empty', 'blocked', 'checkout', 'checkin', 'occupied', 'turnover')

# Kinds in which the accommodation is slept in on that night
_OCCUPIED_KINDS = ('occupied', 'checkin', 'turnover')


# =============================================================================
# CELL CLASSIFICATION
# =============================================================================

def classify_cell(records: list, day) -> dict:
    """
    Classify one calendar cell.

    A blocked marker wins over everything. Otherwise reservations are split
    into departures (check-out on the day), arrivals (check-in on the day)
    and mid-stay occupants. A departure and an arrival on the same day is a
    turnover; a departure alone leaves the night free.

    Args:
        records: Records of this accommodation for this day
        day: Cell date

    Returns:
        dict: {'kind': str, 'checkout': [...], 'checkin': [...], 'occupied': [...]}
    """
    day_str = parse_date(day).isoformat()
    reservations = [r for r in records if r.get('reservation_id')]
    blocked = any(r.get('is_blocked') and not r.get('reservation_id') for r in records)

    checkout = [r for r in reservations if r['check_out_date'] == day_str]
    checkin = [r for r in reservations if r['check_in_date'] == day_str]
    occupied = [
        r for r in reservations
        if r['check_in_date'] != day_str and r['check_out_date'] != day_str
    ]

    if blocked:
        kind = 'blocked'
    elif checkout and checkin:
        kind = 'turnover'
    elif occupied:
        kind = 'occupied'
    elif checkin:
        kind = 'checkin'
    elif checkout:
        kind = 'checkout'
    else:
        kind = 'empty'

    return {
        'kind': kind,
        'checkout': checkout,
        'checkin': checkin,
        'occupied': occupied
    }


# =============================================================================
# DATA LOADING
# =============================================================================

def _block_covers(accommodation, day_str: str) -> bool:
    if not accommodation['is_blocked']:
        return False
    if not accommodation['block_start'] or not accommodation['block_end']:
        return True
    return accommodation['block_start'] <= day_str <= accommodation['block_end']


def get_occupancy_data(start_date, end_date) -> list:
    """
    Build occupancy records for every accommodation and day in a range.

    Each reservation produces a record for every day from check-in through
    check-out (inclusive, so departures render). Days with no reservation
    get a single placeholder record, flagged is_blocked when a manual block
    covers the day.

    Args:
        start_date: First day
        end_date: Last day (inclusive)

    Returns:
        list of dicts: accommodation_id, accommodation_name, room_number,
        category, date, is_blocked, block_reason, reservation_id,
        reservation_code, reservation_status, check_in_date, check_out_date,
        guest_first_name, guest_last_name, guest_name, number_of_guests
    """
    start = parse_date(start_date)
    end = parse_date(end_date)
    if start > end:
        raise ValueError('A data final deve ser igual ou posterior à inicial')

    db = get_db()
    accommodations = db.execute('''
        SELECT id, name, room_number, category, is_blocked, block_reason, block_start, block_end
        FROM accommodations
        ORDER BY room_number
    ''').fetchall()

    reservations = db.execute('''
        SELECT r.id, r.reservation_code, r.accommodation_id, r.status,
               r.check_in_date, r.check_out_date, r.guests, r.guest_name,
               g.first_name as guest_first_name, g.last_name as guest_last_name
        FROM reservations r
        LEFT JOIN guests g ON r.guest_id = g.id
        WHERE r.status != 'cancelled'
          AND r.check_in_date <= ?
          AND r.check_out_date >= ?
        ORDER BY r.check_in_date
    ''', (end.isoformat(), start.isoformat())).fetchall()

    by_accommodation = defaultdict(list)
    for reservation in reservations:
        by_accommodation[reservation['accommodation_id']].append(reservation)

    records = []
    for accommodation in accommodations:
        base = {
            'accommodation_id': accommodation['id'],
            'accommodation_name': accommodation['name'],
            'room_number': accommodation['room_number'],
            'category': accommodation['category'],
        }
        for day in iter_days(start, end):
            day_str = day.isoformat()
            day_reservations = [
                r for r in by_accommodation[accommodation['id']]
                if r['check_in_date'] <= day_str <= r['check_out_date']
            ]

            if _block_covers(accommodation, day_str):
                records.append({
                    **base, 'date': day_str, 'is_blocked': True,
                    'block_reason': accommodation['block_reason'], 'reservation_id': None
                })

            for r in day_reservations:
                records.append({
                    **base,
                    'date': day_str,
                    'is_blocked': False,
                    'block_reason': None,
                    'reservation_id': r['id'],
                    'reservation_code': r['reservation_code'],
                    'reservation_status': r['status'],
                    'check_in_date': r['check_in_date'],
                    'check_out_date': r['check_out_date'],
                    'guest_first_name': r['guest_first_name'],
                    'guest_last_name': r['guest_last_name'],
                    'guest_name': r['guest_name'],
                    'number_of_guests': r['guests'],
                })

            if not day_reservations and not _block_covers(accommodation, day_str):
                records.append({
                    **base, 'date': day_str, 'is_blocked': False,
                    'block_reason': None, 'reservation_id': None
                })

    return records


# =============================================================================
# GRID AND STATISTICS
# =============================================================================

def build_occupancy_grid(start_date, end_date) -> dict:
    """
    Classify every (accommodation, day) cell of a range.

    Returns:
        dict: {
            'dates': ['YYYY-MM-DD', ...],
            'accommodations': [
                {'id', 'name', 'room_number', 'category',
                 'cells': [{'date', 'kind', 'checkout', 'checkin', 'occupied'}]}
            ]
        }
    """
    start = parse_date(start_date)
    end = parse_date(end_date)
    records = get_occupancy_data(start, end)

    cells = defaultdict(list)
    rows = {}
    for record in records:
        cells[(record['accommodation_id'], record['date'])].append(record)
        rows.setdefault(record['accommodation_id'], {
            'id': record['accommodation_id'],
            'name': record['accommodation_name'],
            'room_number': record['room_number'],
            'category': record['category'],
            'cells': []
        })

    dates = [day.isoformat() for day in iter_days(start, end)]
    for accommodation_id, row in rows.items():
        for day_str in dates:
            cell = classify_cell(cells[(accommodation_id, day_str)], day_str)
            cell['date'] = day_str
            row['cells'].append(cell)

    return {'dates': dates, 'accommodations': list(rows.values())}


def get_occupancy_stats(start_date, end_date) -> dict:
    """
    Summarize occupancy over a range.

    A departure-only cell is not an occupied night.

    Returns:
        dict: total_cells, occupied_nights, blocked_cells, available_cells,
        checkins, checkouts, occupancy_rate (percent, one decimal)
    """
    grid = build_occupancy_grid(start_date, end_date)

    total = occupied = blocked = checkins = checkouts = 0
    for row in grid['accommodations']:
        for cell in row['cells']:
            total += 1
            if cell['kind'] == 'blocked':
                blocked += 1
            elif cell['kind'] in _OCCUPIED_KINDS:
                occupied += 1
            checkins += len(cell['checkin'])
            checkouts += len(cell['checkout'])

    rate = round(occupied / total * 100, 1) if total else 0.0

    return {
        'total_cells': total,
        'occupied_nights': occupied,
        'blocked_cells': blocked,
        'available_cells': total - occupied - blocked,
        'checkins': checkins,
        'checkouts': checkouts,
        'occupancy_rate': rate
    }
