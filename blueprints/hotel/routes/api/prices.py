"""
Price entry, rate and quote API routes.
Includes the category bulk-pricing endpoint.
"""

from flask import current_app, request
from flask_login import login_required

from utils.api_response import api_success, api_error
from utils.messages import MESSAGES
from models.accommodation import CATEGORIES, get_accommodation_by_id
from models.price_period import get_period_by_id
from models.price_entry import (
    UPDATABLE_FIELDS, get_price_entry_by_id,
    get_prices_for_accommodation, get_prices_for_period,
    create_price_entry, update_price_entry, delete_price_entry, delete_all_prices
)
from models.pricing import resolve_rate, quote_stay, apply_category_pricing


def _parse_price_options(raw) -> list:
    """Validate the price_options payload of the category endpoint."""
    if not isinstance(raw, list) or not raw:
        raise ValueError('Informe ao menos uma opção de preço')

    options = []
    for item in raw:
        try:
            option = {
                'people': int(item['people']),
                'with_breakfast': float(item['with_breakfast']),
                'without_breakfast': float(item['without_breakfast'])
            }
        except (KeyError, TypeError, ValueError):
            raise ValueError('Opção de preço inválida: informe people, with_breakfast e without_breakfast')
        if option['people'] < 1 or option['with_breakfast'] < 0 or option['without_breakfast'] < 0:
            raise ValueError('Opção de preço inválida: valores devem ser positivos')
        options.append(option)
    return options


def _parse_excluded_ids(raw) -> list:
    """Validate excluded_accommodation_ids of the category endpoint."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError('excluded_accommodation_ids deve ser uma lista')
    try:
        return [int(acc_id) for acc_id in raw]
    except (TypeError, ValueError):
        raise ValueError('excluded_accommodation_ids deve conter apenas IDs numéricos')


def register_routes(bp):
    """Register pricing API routes on the blueprint."""

    # ============================================================================
    # PRICE ENTRIES
    # ============================================================================

    @bp.route('/accommodations/<int:accommodation_id>/prices')
    @login_required
    def prices_for_accommodation(accommodation_id):
        """
        Prices that apply to an accommodation (own and category-wide).

        Query params:
            period_id: Restrict to one period (optional)
        """
        if not get_accommodation_by_id(accommodation_id):
            return api_error(MESSAGES['accommodation_not_found'], 404)

        period_id = request.args.get('period_id', type=int)
        return api_success(prices=get_prices_for_accommodation(accommodation_id, period_id))

    @bp.route('/periods/<int:period_id>/prices')
    @login_required
    def prices_for_period(period_id):
        """All price entries of a period."""
        if not get_period_by_id(period_id):
            return api_error(MESSAGES['period_not_found'], 404)
        return api_success(prices=get_prices_for_period(period_id))

    @bp.route('/prices', methods=['POST'])
    @login_required
    def prices_create():
        """
        Create a price entry.

        Request body:
            period_id, people, price_per_night (required)
            accommodation_id or category (one required)
            includes_breakfast (optional)
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(MESSAGES['data_required'], 400)

        if not get_period_by_id(data.get('period_id')):
            return api_error(MESSAGES['period_not_found'], 404)

        try:
            entry_id = create_price_entry(
                period_id=data['period_id'],
                people=data.get('people'),
                price_per_night=data.get('price_per_night'),
                includes_breakfast=bool(data.get('includes_breakfast', False)),
                accommodation_id=data.get('accommodation_id'),
                category=data.get('category')
            )
        except ValueError as e:
            return api_error(str(e), 400)

        return api_success(
            price=get_price_entry_by_id(entry_id),
            message=MESSAGES['price_created'],
            status=201
        )

    @bp.route('/prices/<int:entry_id>', methods=['PUT'])
    @login_required
    def prices_update(entry_id):
        """Update people, price or breakfast flag of an entry."""
        if not get_price_entry_by_id(entry_id):
            return api_error(MESSAGES['price_not_found'], 404)

        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not data:
            return api_error(MESSAGES['data_required'], 400)

        updates = {k: v for k, v in data.items() if k in UPDATABLE_FIELDS}
        try:
            update_price_entry(entry_id, **updates)
        except ValueError as e:
            return api_error(str(e), 400)

        return api_success(price=get_price_entry_by_id(entry_id), message=MESSAGES['price_updated'])

    @bp.route('/prices/<int:entry_id>', methods=['DELETE'])
    @login_required
    def prices_delete(entry_id):
        """Delete one price entry."""
        if not delete_price_entry(entry_id):
            return api_error(MESSAGES['price_not_found'], 404)
        return api_success(message=MESSAGES['price_deleted'])

    @bp.route('/prices', methods=['DELETE'])
    @login_required
    def prices_delete_bulk():
        """
        Bulk delete price entries.

        Query params:
            accommodation_id: Only this accommodation (optional)
            period_id: Only this period (optional)
            all: '1' is required when no filter is given
        """
        accommodation_id = request.args.get('accommodation_id', type=int)
        period_id = request.args.get('period_id', type=int)
        if not accommodation_id and not period_id and request.args.get('all') != '1':
            return api_error('Informe um filtro ou confirme a exclusão de todos os preços', 400)

        count = delete_all_prices(accommodation_id=accommodation_id, period_id=period_id)
        current_app.logger.info(f'Deleted {count} price entries '
                                f'(accommodation={accommodation_id}, period={period_id})')
        return api_success(deleted=count, message=MESSAGES['prices_deleted'].format(count=count))

    # ============================================================================
    # CATEGORY BULK PRICING
    # ============================================================================

    @bp.route('/prices/category', methods=['POST'])
    @login_required
    def prices_apply_category():
        """
        Apply one price table to every accommodation of a category.

        Request body:
            category: Category name (required)
            period_id: Target period (required)
            price_options: [{people, with_breakfast, without_breakfast}] (required)
            excluded_accommodation_ids: Accommodations to skip (optional)

        Returns:
            200 when every accommodation was written, 207 when some failed
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(MESSAGES['data_required'], 400)

        category = data.get('category')
        if category not in CATEGORIES:
            return api_error(f'Categoria inválida: {category}', 400, categories=CATEGORIES)

        period_id = data.get('period_id')
        if not get_period_by_id(period_id):
            return api_error(MESSAGES['period_not_found'], 404)

        try:
            options = _parse_price_options(data.get('price_options'))
            excluded = _parse_excluded_ids(data.get('excluded_accommodation_ids'))
        except ValueError as e:
            return api_error(str(e), 400)

        ok = apply_category_pricing(category, period_id, options,
                                    excluded_accommodation_ids=excluded)
        if not ok:
            return api_success(warning=MESSAGES['category_pricing_partial'], applied=False, status=207)

        return api_success(
            applied=True,
            message=MESSAGES['category_pricing_applied'].format(category=category)
        )

    # ============================================================================
    # RATES AND QUOTES
    # ============================================================================

    @bp.route('/rates/resolve')
    @login_required
    def rates_resolve():
        """
        Resolve the nightly rate for one date.

        Query params:
            date: YYYY-MM-DD (required)
            people: Exact occupancy (required)
            accommodation_id or category (one required)
            breakfast: '1' for breakfast prices (optional)
        """
        date_str = request.args.get('date')
        people = request.args.get('people', type=int)
        if not date_str or not people:
            return api_error('Informe data e número de pessoas', 400)

        try:
            rate = resolve_rate(
                request.args.get('accommodation_id', type=int),
                date_str,
                people,
                includes_breakfast=request.args.get('breakfast') == '1',
                category=request.args.get('category')
            )
        except ValueError:
            return api_error(MESSAGES['invalid_date'], 400)

        if not rate:
            return api_error(MESSAGES['no_price_available'], 404)
        return api_success(rate=rate)

    @bp.route('/quote', methods=['POST'])
    @login_required
    def quote():
        """
        Price a stay night by night.

        Request body:
            accommodation_id, check_in, check_out, guests (required)
            includes_breakfast (optional)
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(MESSAGES['data_required'], 400)

        if not get_accommodation_by_id(data.get('accommodation_id')):
            return api_error(MESSAGES['accommodation_not_found'], 404)

        try:
            result = quote_stay(
                data['accommodation_id'],
                data.get('check_in'),
                data.get('check_out'),
                int(data.get('guests') or 1),
                includes_breakfast=bool(data.get('includes_breakfast', False))
            )
        except (TypeError, ValueError) as e:
            return api_error(str(e), 400)

        if not result:
            return api_error(MESSAGES['no_price_available'], 404)
        return api_success(quote=result)
