"""
Search Service - Availability search with pricing.

Handles:
- Search parameter validation
- Capacity, block and overlap filtering
- Per-stay quoting and minimum stay reporting
"""

import logging
from datetime import timedelta
from typing import Optional, Dict, List, Any

from models.accommodation import get_all_accommodations
from models.pricing import quote_stay
from models.reservation_availability import is_accommodation_available
from utils.datetime_helpers import parse_date

logger = logging.getLogger(__name__)


def validate_search_params(check_in, check_out, guests) -> Optional[str]:
    """
    Validate search input.

    Returns:
        Error message (Portuguese), or None when the input is usable
    """
    if not check_in:
        return 'Selecione pelo menos uma data de check-in'

    try:
        start = parse_date(check_in)
        end = parse_date(check_out) if check_out else None
    except ValueError:
        return 'Formato de data inválido (use AAAA-MM-DD)'

    if end is not None and end <= start:
        return 'A data de check-out deve ser posterior à de check-in'

    try:
        if int(guests) < 1:
            return 'Informe ao menos um hóspede'
    except (TypeError, ValueError):
        return 'Número de hóspedes inválido'

    return None


def _build_result(accommodation: Dict[str, Any], quote: Dict[str, Any],
                  nights: Optional[int], includes_breakfast: bool) -> Dict[str, Any]:
    required = quote['minimum_stay']
    return {
        'accommodation': accommodation,
        'price_per_night': quote['nightly_rate'],
        'total_price': quote['total_price'] if nights else None,
        'nights': nights,
        'includes_breakfast': includes_breakfast,
        'has_multiple_periods': quote['has_multiple_periods'],
        'periods_count': len(quote['breakdown']),
        'breakdown': quote['breakdown'],
        'minimum_stay': required,
        'is_min_stay_violation': nights is not None and nights < required,
    }


def search_accommodations(
    check_in,
    check_out,
    guests: int,
    includes_breakfast: bool = False,
    force: bool = False
) -> Dict[str, Any]:
    """
    Find bookable, priced accommodations for a stay.

    Only accommodations whose capacity fits the party, that are free of
    reservations and manual blocks for the range and that have a price for
    every night are returned.
    Without a check-out date the first night alone is priced and no total
    is given.

    Args:
        check_in: Arrival date
        check_out: Departure date, or None
        guests: Party size (exact price tier)
        includes_breakfast: Breakfast flag
        force: When True, minimum stay violations are not flagged at the
            top level (the operator already confirmed the shorter stay)

    Returns:
        dict: {
            'results': [...],            # sorted by price_per_night
            'has_min_stay_violations': bool,
            'max_min_stay': int
        }

    Raises:
        ValueError: If the parameters are invalid
    """
    error = validate_search_params(check_in, check_out, guests)
    if error:
        raise ValueError(error)

    start = parse_date(check_in)
    end = parse_date(check_out) if check_out else None
    nights = (end - start).days if end else None
    quote_end = end or start + timedelta(days=1)
    guests = int(guests)

    results: List[Dict[str, Any]] = []
    for accommodation in get_all_accommodations():
        if accommodation['capacity'] < guests:
            continue

        if not is_accommodation_available(accommodation['id'], start, quote_end):
            continue

        quote = quote_stay(accommodation['id'], start, quote_end, guests, includes_breakfast)
        if not quote:
            logger.debug(f"No price for accommodation {accommodation['room_number']} "
                         f"({start} to {quote_end}, {guests} guests)")
            continue

        results.append(_build_result(accommodation, quote, nights, includes_breakfast))

    results.sort(key=lambda r: r['price_per_night'])

    violations = [r for r in results if r['is_min_stay_violation']]
    has_violations = bool(violations) and not force
    max_min_stay = max((r['minimum_stay'] for r in violations), default=1)

    logger.info(f'Search {start} to {end}: {len(results)} accommodations found')

    return {
        'results': results,
        'has_min_stay_violations': has_violations,
        'max_min_stay': max_min_stay if has_violations else 1,
    }
