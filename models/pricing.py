"""
Pricing data access and resolution.
Rate lookup per night, minimum-stay checks, stay quotes and category bulk pricing.
"""

import logging
from typing import Optional

from database import get_db
from models.accommodation import get_accommodation_by_id, CATEGORIES
from models.price_entry import upsert_price_entry
from models.price_period import find_period_for_date, get_period_by_id
from utils.datetime_helpers import parse_date, iter_nights

logger = logging.getLogger(__name__)


class MinimumStayError(ValueError):
    """Raised when a booking is shorter than the minimum stay and was not confirmed."""

    def __init__(self, required: int, requested: int):
        self.required = required
        self.requested = requested
        super().__init__(
            f'Estadia mínima de {required} noites para este período (solicitado: {requested})'
        )


# =============================================================================
# RATE RESOLUTION
# =============================================================================

def _find_entry(period_id: int, people: int, includes_breakfast: bool,
                accommodation: dict = None, category: str = None) -> Optional[dict]:
    """
    Find the exact-match entry of a period.

    An accommodation's own entry outranks a category-wide entry for its
    category. No fallback to other occupancies or breakfast options.
    """
    db = get_db()
    breakfast = 1 if includes_breakfast else 0

    if accommodation is not None:
        row = db.execute('''
            SELECT e.*,
                   CASE WHEN e.accommodation_id IS NOT NULL THEN 1 ELSE 0 END as match_score
            FROM price_entries e
            WHERE e.period_id = ?
              AND e.people = ?
              AND e.includes_breakfast = ?
              AND (e.accommodation_id = ?
                   OR (e.accommodation_id IS NULL AND e.category = ?))
            ORDER BY match_score DESC
            LIMIT 1
        ''', (period_id, people, breakfast, accommodation['id'], accommodation['category'])).fetchone()
    else:
        row = db.execute('''
            SELECT e.*, 0 as match_score
            FROM price_entries e
            WHERE e.period_id = ?
              AND e.people = ?
              AND e.includes_breakfast = ?
              AND e.accommodation_id IS NULL
              AND e.category = ?
        ''', (period_id, people, breakfast, category)).fetchone()

    if not row:
        return None

    entry = dict(row)
    entry.pop('match_score', None)
    entry['includes_breakfast'] = bool(entry['includes_breakfast'])
    return entry


def resolve_rate(
    accommodation_id: Optional[int],
    target_date,
    people: int,
    includes_breakfast: bool = False,
    category: str = None
) -> Optional[dict]:
    """
    Resolve the nightly price entry for a date.

    Step 1 picks the governing period (holiday over regular, newest first).
    Step 2 picks the entry with exactly `people` occupancy and the same
    breakfast flag within that period.

    Args:
        accommodation_id: Accommodation to price (None to price a category)
        target_date: Night being priced
        people: Exact occupancy
        includes_breakfast: Breakfast flag
        category: Category, used when accommodation_id is None

    Returns:
        Entry dict plus period_name, is_holiday and minimum_stay, or None
        when no period covers the date or no exact entry exists
    """
    accommodation = None
    if accommodation_id is not None:
        accommodation = get_accommodation_by_id(accommodation_id)
        if not accommodation:
            return None
    elif category not in CATEGORIES:
        return None

    period = find_period_for_date(target_date)
    if not period:
        return None

    entry = _find_entry(period['id'], int(people), includes_breakfast,
                        accommodation=accommodation, category=category)
    if not entry:
        return None

    entry['period_name'] = period['name']
    entry['is_holiday'] = period['is_holiday']
    entry['minimum_stay'] = period['minimum_stay']
    return entry


def check_minimum_stay(nights: int, period: Optional[dict]) -> dict:
    """
    Compare requested nights against a period's minimum stay.

    Reports only; the caller decides whether to proceed.

    Args:
        nights: Requested number of nights
        period: Period dict (or any dict with minimum_stay), may be None

    Returns:
        {'violation': bool, 'required': int, 'requested': int}
    """
    required = int(period.get('minimum_stay') or 1) if period else 1
    return {
        'violation': nights < required,
        'required': required,
        'requested': nights
    }


def quote_stay(
    accommodation_id: int,
    check_in,
    check_out,
    guests: int,
    includes_breakfast: bool = False
) -> Optional[dict]:
    """
    Price a whole stay night by night.

    Each night is priced by the period that governs it, so a stay crossing
    a period boundary is prorated.

    Args:
        accommodation_id: Accommodation ID
        check_in: First night
        check_out: Departure day (not charged)
        guests: Exact occupancy
        includes_breakfast: Breakfast flag

    Returns:
        dict: {
            'nights': int,
            'total_price': float,
            'nightly_rate': float,       # total / nights
            'has_multiple_periods': bool,
            'breakdown': [{'period_id', 'period_name', 'is_holiday',
                           'minimum_stay', 'nights', 'price_per_night',
                           'subtotal'}],
            'minimum_stay': int,         # largest among spanned periods
            'min_stay': {'violation', 'required', 'requested'}
        }
        or None if any night has no period or no exact price.
    """
    start = parse_date(check_in)
    end = parse_date(check_out)
    if start >= end:
        raise ValueError('A data de check-out deve ser posterior à de check-in')

    accommodation = get_accommodation_by_id(accommodation_id)
    if not accommodation:
        return None

    breakdown = {}
    entry_cache = {}
    total = 0.0
    nights = 0

    for night in iter_nights(start, end):
        period = find_period_for_date(night)
        if not period:
            return None

        if period['id'] not in entry_cache:
            entry_cache[period['id']] = _find_entry(
                period['id'], int(guests), includes_breakfast, accommodation=accommodation
            )
        entry = entry_cache[period['id']]
        if not entry:
            return None

        price = float(entry['price_per_night'])
        line = breakdown.setdefault(period['id'], {
            'period_id': period['id'],
            'period_name': period['name'],
            'is_holiday': period['is_holiday'],
            'minimum_stay': period['minimum_stay'],
            'nights': 0,
            'price_per_night': price,
            'subtotal': 0.0
        })
        line['nights'] += 1
        line['subtotal'] += price
        total += price
        nights += 1

    lines = list(breakdown.values())
    required = max(line['minimum_stay'] for line in lines)

    return {
        'accommodation_id': accommodation_id,
        'nights': nights,
        'total_price': round(total, 2),
        'nightly_rate': round(total / nights, 2),
        'has_multiple_periods': len(lines) > 1,
        'breakdown': lines,
        'minimum_stay': required,
        'min_stay': check_minimum_stay(nights, {'minimum_stay': required})
    }


# =============================================================================
# CATEGORY BULK PRICING
# =============================================================================

def apply_category_pricing(
    category: str,
    period_id: int,
    price_options: list,
    excluded_accommodation_ids: list = None
) -> bool:
    """
    Write the same price table to every accommodation of a category.

    For each non-excluded accommodation and each option whose people fits
    its capacity, upserts one entry with breakfast and one without. Each
    accommodation is committed on its own; a failing accommodation is
    logged and skipped, earlier ones stay applied.

    Args:
        category: Category name
        period_id: Target period
        price_options: [{'people': int, 'with_breakfast': float,
                         'without_breakfast': float}, ...]
        excluded_accommodation_ids: Accommodations to leave untouched

    Returns:
        False if the accommodation lookup failed or any accommodation
        failed, else True
    """
    excluded = {int(acc_id) for acc_id in (excluded_accommodation_ids or [])}
    db = get_db()

    try:
        if not get_period_by_id(period_id):
            logger.error('Category pricing: period %s not found', period_id)
            return False
        accommodations = db.execute(
            'SELECT id, name, capacity FROM accommodations WHERE category = ? ORDER BY room_number',
            (category,)
        ).fetchall()
    except Exception as e:
        logger.error(f'Category pricing lookup failed for {category}: {e}', exc_info=True)
        return False

    all_ok = True
    for accommodation in accommodations:
        if accommodation['id'] in excluded:
            continue

        options = [opt for opt in price_options if int(opt['people']) <= accommodation['capacity']]
        if not options:
            continue

        try:
            for option in options:
                upsert_price_entry(
                    period_id, option['people'], option['with_breakfast'],
                    includes_breakfast=True, accommodation_id=accommodation['id'], commit=False
                )
                upsert_price_entry(
                    period_id, option['people'], option['without_breakfast'],
                    includes_breakfast=False, accommodation_id=accommodation['id'], commit=False
                )
            db.commit()
        except Exception as e:
            db.rollback()
            all_ok = False
            logger.error(
                f'Category pricing failed for accommodation {accommodation["id"]}: {e}',
                exc_info=True
            )

    logger.info('Category pricing applied: category=%s period=%s ok=%s', category, period_id, all_ok)
    return all_ok
