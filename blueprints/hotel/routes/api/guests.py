"""
Guest API routes.
"""

from flask import current_app, request
from flask_login import login_required, current_user

from utils.api_response import api_success, api_error
from utils.messages import MESSAGES
from models.guest import (
    get_all_guests, get_guest_by_id, search_guests, get_guest_reservations,
    create_guest, update_guest, delete_guest
)


def register_routes(bp):
    """Register guest API routes on the blueprint."""

    @bp.route('/guests')
    @login_required
    def guests_list():
        """
        List guests.

        Query params:
            include_inactive: '1' to include soft-deleted guests
        """
        active_only = request.args.get('include_inactive') != '1'
        return api_success(guests=get_all_guests(active_only=active_only))

    @bp.route('/guests/search')
    @login_required
    def guests_search():
        """Search guests by name, email, phone or document (accent-insensitive)."""
        query = request.args.get('q', '').strip()
        if len(query) < current_app.config['GUEST_SEARCH_MIN_CHARS']:
            return api_success(guests=[])

        limit = max(1, min(request.args.get('limit', 20, type=int), 100))
        return api_success(guests=search_guests(query, limit=limit))

    @bp.route('/guests/<int:guest_id>')
    @login_required
    def guests_detail(guest_id):
        """Get one guest."""
        guest = get_guest_by_id(guest_id)
        if not guest:
            return api_error(MESSAGES['guest_not_found'], 404)
        return api_success(guest=guest)

    @bp.route('/guests/<int:guest_id>/reservations')
    @login_required
    def guests_reservations(guest_id):
        """Reservation history of a guest."""
        if not get_guest_by_id(guest_id):
            return api_error(MESSAGES['guest_not_found'], 404)
        return api_success(reservations=get_guest_reservations(guest_id))

    @bp.route('/guests', methods=['POST'])
    @login_required
    def guests_create():
        """
        Register a guest.

        Request body:
            first_name, last_name, email (required)
            phone, document fields, address fields, preferences, notes (optional)
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(MESSAGES['data_required'], 400)

        try:
            guest_id = create_guest(data, created_by=current_user.username)
        except ValueError as e:
            return api_error(str(e), 400)
        except Exception as e:
            current_app.logger.error(f'Error creating guest: {e}', exc_info=True)
            return api_error(MESSAGES['internal_error'], 500)

        return api_success(
            guest=get_guest_by_id(guest_id),
            message=MESSAGES['guest_created'],
            status=201
        )

    @bp.route('/guests/<int:guest_id>', methods=['PUT'])
    @login_required
    def guests_update(guest_id):
        """Update guest fields."""
        if not get_guest_by_id(guest_id):
            return api_error(MESSAGES['guest_not_found'], 404)

        data = request.get_json(silent=True)
        if not data:
            return api_error(MESSAGES['data_required'], 400)

        try:
            update_guest(guest_id, data)
        except ValueError as e:
            return api_error(str(e), 400)

        return api_success(guest=get_guest_by_id(guest_id), message=MESSAGES['guest_updated'])

    @bp.route('/guests/<int:guest_id>', methods=['DELETE'])
    @login_required
    def guests_delete(guest_id):
        """Soft delete a guest; past reservations keep resolving it."""
        if not delete_guest(guest_id):
            return api_error(MESSAGES['guest_not_found'], 404)
        return api_success(message=MESSAGES['guest_deleted'])
