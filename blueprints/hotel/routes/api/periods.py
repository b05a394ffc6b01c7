"""
Price period API routes.
"""

from flask import current_app, request
from flask_login import login_required

from utils.api_response import api_success, api_error
from utils.messages import MESSAGES
from models.price_period import (
    UPDATABLE_FIELDS, get_all_periods, get_period_by_id, find_period_for_date,
    create_period, update_period, delete_period, duplicate_period
)


def register_routes(bp):
    """Register price period API routes on the blueprint."""

    @bp.route('/periods')
    @login_required
    def periods_list():
        """List all price periods with their entry counts."""
        return api_success(periods=get_all_periods())

    @bp.route('/periods/for-date')
    @login_required
    def periods_for_date():
        """
        Get the period governing a date (holidays first).

        Query params:
            date: YYYY-MM-DD (required)
        """
        date_str = request.args.get('date')
        if not date_str:
            return api_error(MESSAGES['date_required'], 400)

        try:
            period = find_period_for_date(date_str)
        except ValueError:
            return api_error(MESSAGES['invalid_date'], 400)

        return api_success(period=period)

    @bp.route('/periods/<int:period_id>')
    @login_required
    def periods_detail(period_id):
        """Get one period."""
        period = get_period_by_id(period_id)
        if not period:
            return api_error(MESSAGES['period_not_found'], 404)
        return api_success(period=period)

    @bp.route('/periods', methods=['POST'])
    @login_required
    def periods_create():
        """
        Create a price period.

        Request body:
            name, start_date, end_date (required)
            is_holiday, minimum_stay (optional)
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(MESSAGES['data_required'], 400)

        try:
            period_id = create_period(
                name=data.get('name'),
                start_date=data.get('start_date'),
                end_date=data.get('end_date'),
                is_holiday=bool(data.get('is_holiday', False)),
                minimum_stay=data.get('minimum_stay', 1)
            )
        except ValueError as e:
            return api_error(str(e), 400)
        except Exception as e:
            current_app.logger.error(f'Error creating period: {e}', exc_info=True)
            return api_error(MESSAGES['internal_error'], 500)

        return api_success(
            period=get_period_by_id(period_id),
            message=MESSAGES['period_created'],
            status=201
        )

    @bp.route('/periods/<int:period_id>', methods=['PUT'])
    @login_required
    def periods_update(period_id):
        """Update a price period."""
        if not get_period_by_id(period_id):
            return api_error(MESSAGES['period_not_found'], 404)

        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not data:
            return api_error(MESSAGES['data_required'], 400)

        updates = {k: v for k, v in data.items() if k in UPDATABLE_FIELDS}
        try:
            update_period(period_id, **updates)
        except ValueError as e:
            return api_error(str(e), 400)

        return api_success(period=get_period_by_id(period_id), message=MESSAGES['period_updated'])

    @bp.route('/periods/<int:period_id>', methods=['DELETE'])
    @login_required
    def periods_delete(period_id):
        """Delete a price period and its entries."""
        if not delete_period(period_id):
            return api_error(MESSAGES['period_not_found'], 404)
        return api_success(message=MESSAGES['period_deleted'])

    @bp.route('/periods/<int:period_id>/duplicate', methods=['POST'])
    @login_required
    def periods_duplicate(period_id):
        """
        Copy a period with all of its prices.

        Request body:
            name: Name of the copy (required)
            start_date, end_date: New range (optional)
        """
        if not get_period_by_id(period_id):
            return api_error(MESSAGES['period_not_found'], 404)

        data = request.get_json(silent=True) or {}
        try:
            new_id = duplicate_period(
                period_id,
                new_name=data.get('name'),
                start_date=data.get('start_date'),
                end_date=data.get('end_date')
            )
        except ValueError as e:
            return api_error(str(e), 400)

        return api_success(
            period=get_period_by_id(new_id),
            message=MESSAGES['period_duplicated'],
            status=201
        )
