"""
Maintenance API routes.
Areas, work orders and their status history.
"""

from flask import current_app, request
from flask_login import login_required, current_user

from utils.api_response import api_success, api_error
from utils.messages import MESSAGES
from models.maintenance import (
    AREA_TYPES, ORDER_STATUSES, PRIORITIES, AREA_FIELDS, ORDER_FIELDS,
    get_all_areas, get_areas_by_type, get_area_by_id, create_area, update_area, delete_area,
    get_all_maintenance_orders, get_maintenance_order_by_id, create_maintenance_order,
    update_maintenance_order, delete_maintenance_order, get_maintenance_history
)


def register_routes(bp):
    """Register maintenance API routes on the blueprint."""

    # ============================================================================
    # AREAS
    # ============================================================================

    @bp.route('/maintenance/areas')
    @login_required
    def maintenance_areas_list():
        """
        List maintenance areas.

        Query params:
            type: Filter by area type (optional)
            active: '1' for active areas only (optional)
        """
        area_type = request.args.get('type')
        if area_type:
            areas = get_areas_by_type(area_type)
        else:
            areas = get_all_areas(active_only=request.args.get('active') == '1')
        return api_success(areas=areas, area_types=AREA_TYPES)

    @bp.route('/maintenance/areas', methods=['POST'])
    @login_required
    def maintenance_areas_create():
        """
        Create a maintenance area.

        Request body:
            name, code, area_type (required)
            description, location, accommodation_id (optional)
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(MESSAGES['data_required'], 400)

        try:
            area_id = create_area(
                name=data.get('name'),
                code=data.get('code'),
                area_type=data.get('area_type'),
                description=data.get('description'),
                location=data.get('location'),
                accommodation_id=data.get('accommodation_id')
            )
        except ValueError as e:
            return api_error(str(e), 400)

        return api_success(area=get_area_by_id(area_id), message=MESSAGES['area_created'], status=201)

    @bp.route('/maintenance/areas/<int:area_id>', methods=['PUT'])
    @login_required
    def maintenance_areas_update(area_id):
        """Update a maintenance area."""
        if not get_area_by_id(area_id):
            return api_error(MESSAGES['area_not_found'], 404)

        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not data:
            return api_error(MESSAGES['data_required'], 400)

        updates = {k: v for k, v in data.items() if k in AREA_FIELDS}
        try:
            update_area(area_id, **updates)
        except ValueError as e:
            return api_error(str(e), 400)

        return api_success(area=get_area_by_id(area_id), message=MESSAGES['area_updated'])

    @bp.route('/maintenance/areas/<int:area_id>', methods=['DELETE'])
    @login_required
    def maintenance_areas_delete(area_id):
        """Delete an area without work orders."""
        try:
            deleted = delete_area(area_id)
        except ValueError as e:
            return api_error(str(e), 400)

        if not deleted:
            return api_error(MESSAGES['area_not_found'], 404)
        return api_success(message=MESSAGES['area_deleted'])

    # ============================================================================
    # WORK ORDERS
    # ============================================================================

    @bp.route('/maintenance/orders')
    @login_required
    def maintenance_orders_list():
        """
        List work orders.

        Query params:
            status: Filter by status (optional)
            area_id: Filter by area (optional)
        """
        orders = get_all_maintenance_orders(
            status=request.args.get('status') or None,
            area_id=request.args.get('area_id', type=int)
        )
        return api_success(orders=orders, statuses=ORDER_STATUSES, priorities=PRIORITIES)

    @bp.route('/maintenance/orders/<int:order_id>')
    @login_required
    def maintenance_orders_detail(order_id):
        """Get a work order with its history."""
        order = get_maintenance_order_by_id(order_id)
        if not order:
            return api_error(MESSAGES['order_not_found'], 404)
        return api_success(order=order, history=get_maintenance_history(order_id))

    @bp.route('/maintenance/orders', methods=['POST'])
    @login_required
    def maintenance_orders_create():
        """
        Open a work order.

        Request body:
            area_id, title (required)
            description, priority, assigned_to, scheduled_date,
            estimated_hours, notes (optional)
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(MESSAGES['data_required'], 400)

        try:
            order_id, order_number = create_maintenance_order(
                area_id=data.get('area_id'),
                title=data.get('title'),
                description=data.get('description', ''),
                priority=data.get('priority', 'medium'),
                requested_by=current_user.username,
                assigned_to=data.get('assigned_to'),
                scheduled_date=data.get('scheduled_date'),
                estimated_hours=data.get('estimated_hours'),
                notes=data.get('notes')
            )
        except ValueError as e:
            return api_error(str(e), 400)
        except Exception as e:
            current_app.logger.error(f'Error creating work order: {e}', exc_info=True)
            return api_error(MESSAGES['internal_error'], 500)

        return api_success(
            order=get_maintenance_order_by_id(order_id),
            message=MESSAGES['order_created'].format(number=order_number),
            status=201
        )

    @bp.route('/maintenance/orders/<int:order_id>', methods=['PUT'])
    @login_required
    def maintenance_orders_update(order_id):
        """Update a work order; status changes are recorded in its history."""
        if not get_maintenance_order_by_id(order_id):
            return api_error(MESSAGES['order_not_found'], 404)

        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not data:
            return api_error(MESSAGES['data_required'], 400)

        updates = {k: v for k, v in data.items() if k in ORDER_FIELDS}
        try:
            update_maintenance_order(order_id, changed_by=current_user.username, **updates)
        except ValueError as e:
            return api_error(str(e), 400)

        return api_success(order=get_maintenance_order_by_id(order_id), message=MESSAGES['order_updated'])

    @bp.route('/maintenance/orders/<int:order_id>', methods=['DELETE'])
    @login_required
    def maintenance_orders_delete(order_id):
        """Delete a work order."""
        if not delete_maintenance_order(order_id):
            return api_error(MESSAGES['order_not_found'], 404)
        return api_success(message=MESSAGES['order_deleted'])

    @bp.route('/maintenance/orders/<int:order_id>/history')
    @login_required
    def maintenance_orders_history(order_id):
        """Status history of a work order, newest first."""
        if not get_maintenance_order_by_id(order_id):
            return api_error(MESSAGES['order_not_found'], 404)
        return api_success(history=get_maintenance_history(order_id))
