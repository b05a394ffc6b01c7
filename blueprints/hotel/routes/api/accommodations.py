"""
Accommodation API routes.
Inventory CRUD, manual blocks and maintenance-aware availability.
"""

from flask import current_app, request
from flask_login import login_required, current_user

from utils.api_response import api_success, api_error
from utils.messages import MESSAGES
from models.accommodation import (
    CATEGORIES, BLOCK_REASONS, UPDATABLE_FIELDS,
    get_all_accommodations, get_accommodation_by_id,
    create_accommodation, update_accommodation, delete_accommodation,
    block_accommodation, unblock_accommodation
)
from models.maintenance import (
    get_available_accommodations, has_active_maintenance_orders,
    get_maintenance_orders_for_accommodation, create_maintenance_order_for_blocking
)


def register_routes(bp):
    """Register accommodation API routes on the blueprint."""

    # ============================================================================
    # QUERIES
    # ============================================================================

    @bp.route('/accommodations')
    @login_required
    def accommodations_list():
        """
        List accommodations.

        Query params:
            category: Filter by category (optional)
            include_blocked: '0' to hide blocked accommodations (default: '1')
        """
        category = request.args.get('category') or None
        include_blocked = request.args.get('include_blocked', '1') != '0'

        accommodations = get_all_accommodations(category=category, include_blocked=include_blocked)
        return api_success(accommodations=accommodations, categories=CATEGORIES)

    @bp.route('/accommodations/available')
    @login_required
    def accommodations_available():
        """List accommodations that are not blocked nor under active maintenance."""
        return api_success(accommodations=get_available_accommodations())

    @bp.route('/accommodations/<int:accommodation_id>')
    @login_required
    def accommodations_detail(accommodation_id):
        """Get one accommodation with its work orders."""
        accommodation = get_accommodation_by_id(accommodation_id)
        if not accommodation:
            return api_error(MESSAGES['accommodation_not_found'], 404)

        accommodation['has_active_maintenance'] = has_active_maintenance_orders(accommodation_id)
        accommodation['maintenance_orders'] = get_maintenance_orders_for_accommodation(accommodation_id)
        return api_success(accommodation=accommodation)

    # ============================================================================
    # CRUD
    # ============================================================================

    @bp.route('/accommodations', methods=['POST'])
    @login_required
    def accommodations_create():
        """
        Create an accommodation.

        Request body:
            name, room_number, category, capacity (required)
            description, image_url, images, album_url (optional)
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(MESSAGES['data_required'], 400)

        try:
            accommodation_id = create_accommodation(
                name=data.get('name'),
                room_number=data.get('room_number'),
                category=data.get('category'),
                capacity=data.get('capacity'),
                description=data.get('description', ''),
                image_url=data.get('image_url'),
                images=data.get('images'),
                album_url=data.get('album_url')
            )
        except ValueError as e:
            return api_error(str(e), 400)
        except Exception as e:
            current_app.logger.error(f'Error creating accommodation: {e}', exc_info=True)
            return api_error(MESSAGES['internal_error'], 500)

        return api_success(
            accommodation=get_accommodation_by_id(accommodation_id),
            message=MESSAGES['accommodation_created'],
            status=201
        )

    @bp.route('/accommodations/<int:accommodation_id>', methods=['PUT'])
    @login_required
    def accommodations_update(accommodation_id):
        """Update accommodation fields."""
        if not get_accommodation_by_id(accommodation_id):
            return api_error(MESSAGES['accommodation_not_found'], 404)

        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not data:
            return api_error(MESSAGES['data_required'], 400)

        updates = {k: v for k, v in data.items() if k in UPDATABLE_FIELDS}
        try:
            update_accommodation(accommodation_id, **updates)
        except ValueError as e:
            return api_error(str(e), 400)

        return api_success(
            accommodation=get_accommodation_by_id(accommodation_id),
            message=MESSAGES['accommodation_updated']
        )

    @bp.route('/accommodations/<int:accommodation_id>', methods=['DELETE'])
    @login_required
    def accommodations_delete(accommodation_id):
        """Delete an accommodation without reservations."""
        try:
            deleted = delete_accommodation(accommodation_id)
        except ValueError as e:
            return api_error(str(e), 400)

        if not deleted:
            return api_error(MESSAGES['accommodation_not_found'], 404)
        return api_success(message=MESSAGES['accommodation_deleted'])

    # ============================================================================
    # BLOCKS
    # ============================================================================

    @bp.route('/accommodations/<int:accommodation_id>/block', methods=['POST'])
    @login_required
    def accommodations_block(accommodation_id):
        """
        Block an accommodation.

        Request body:
            reason: Block reason (required)
            note: Free text (optional)
            start_date, end_date: Inclusive block range (optional, both or none)
            create_maintenance_order: Open a work order for the block (optional)
        """
        if not get_accommodation_by_id(accommodation_id):
            return api_error(MESSAGES['accommodation_not_found'], 404)

        data = request.get_json(silent=True) or {}
        reason = data.get('reason')
        if not reason:
            return api_error('O motivo do bloqueio é obrigatório', 400, reasons=list(BLOCK_REASONS))

        try:
            block_accommodation(
                accommodation_id,
                reason=reason,
                note=data.get('note'),
                start_date=data.get('start_date'),
                end_date=data.get('end_date')
            )
        except ValueError as e:
            return api_error(str(e), 400)

        order = None
        if data.get('create_maintenance_order'):
            try:
                order_id, order_number = create_maintenance_order_for_blocking(
                    accommodation_id,
                    title=data.get('note') or BLOCK_REASONS.get(reason, reason),
                    description=data.get('note') or '',
                    requested_by=current_user.username
                )
                order = {'id': order_id, 'order_number': order_number}
            except ValueError as e:
                current_app.logger.warning(f'Block saved but work order failed: {e}')

        return api_success(
            accommodation=get_accommodation_by_id(accommodation_id),
            maintenance_order=order,
            message=MESSAGES['accommodation_blocked']
        )

    @bp.route('/accommodations/<int:accommodation_id>/unblock', methods=['POST'])
    @login_required
    def accommodations_unblock(accommodation_id):
        """Remove the manual block of an accommodation."""
        if not unblock_accommodation(accommodation_id):
            return api_error(MESSAGES['accommodation_not_found'], 404)

        return api_success(
            accommodation=get_accommodation_by_id(accommodation_id),
            message=MESSAGES['accommodation_unblocked']
        )
