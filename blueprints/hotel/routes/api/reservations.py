"""
Reservation API routes.
Creation, edits, status lifecycle and history.
"""

from flask import current_app, request
from flask_login import login_required, current_user

from utils.api_response import api_success, api_error
from utils.messages import MESSAGES
from models.reservation import (
    STATUSES, STATUS_DISPLAY, InvalidStatusTransition, ReservationConflictError,
    MinimumStayError, create_reservation, get_reservation_by_id,
    get_reservation_by_code, get_all_reservations, get_reservations_by_date,
    UPDATABLE_FIELDS, update_reservation, delete_reservation,
    change_reservation_status, get_status_history, is_accommodation_available,
    get_conflicting_reservations
)


def _conflict_response(error: ReservationConflictError):
    return api_error(str(error), 409, conflicts=error.conflicts)


def _minimum_stay_response(error: MinimumStayError):
    return api_error(
        MESSAGES['minimum_stay_violation'].format(required=error.required, requested=error.requested),
        409,
        minimum_stay={'required': error.required, 'requested': error.requested}
    )


def register_routes(bp):
    """Register reservation API routes on the blueprint."""

    # ============================================================================
    # QUERIES
    # ============================================================================

    @bp.route('/reservations')
    @login_required
    def reservations_list():
        """
        List reservations.

        Query params:
            status: Filter by status (optional)
            accommodation_id: Filter by accommodation (optional)
            guest_id: Filter by guest (optional)
            start_date, end_date: Only stays touching this range (optional, both)
        """
        start_date = request.args.get('start_date')
        end_date = request.args.get('end_date')

        if start_date and end_date:
            try:
                reservations = get_reservations_by_date(
                    start_date, end_date,
                    include_cancelled=request.args.get('include_cancelled') == '1'
                )
            except ValueError as e:
                return api_error(str(e), 400)
        else:
            reservations = get_all_reservations(
                status=request.args.get('status') or None,
                accommodation_id=request.args.get('accommodation_id', type=int),
                guest_id=request.args.get('guest_id', type=int)
            )

        return api_success(reservations=reservations, statuses=STATUS_DISPLAY)

    @bp.route('/reservations/<int:reservation_id>')
    @login_required
    def reservations_detail(reservation_id):
        """Get one reservation with its status history."""
        reservation = get_reservation_by_id(reservation_id)
        if not reservation:
            return api_error(MESSAGES['reservation_not_found'], 404)

        return api_success(reservation=reservation, history=get_status_history(reservation_id))

    @bp.route('/reservations/code/<code>')
    @login_required
    def reservations_by_code(code):
        """Get a reservation by its RES-YYMMDD-NNN code."""
        reservation = get_reservation_by_code(code)
        if not reservation:
            return api_error(MESSAGES['reservation_not_found'], 404)
        return api_success(reservation=reservation)

    @bp.route('/reservations/availability')
    @login_required
    def reservations_availability():
        """
        Check whether an accommodation is free for a stay.

        Query params:
            accommodation_id, check_in, check_out (required)
            exclude_reservation_id: Ignore this reservation (optional)
        """
        accommodation_id = request.args.get('accommodation_id', type=int)
        check_in = request.args.get('check_in')
        check_out = request.args.get('check_out')
        if not accommodation_id or not check_in or not check_out:
            return api_error('Informe acomodação, check-in e check-out', 400)

        exclude_id = request.args.get('exclude_reservation_id', type=int)
        available = is_accommodation_available(accommodation_id, check_in, check_out, exclude_id)

        conflicts = []
        if not available:
            try:
                conflicts = get_conflicting_reservations(accommodation_id, check_in, check_out, exclude_id)
            except ValueError as e:
                return api_error(str(e), 400)

        return api_success(available=available, conflicts=conflicts)

    # ============================================================================
    # CREATE / UPDATE / DELETE
    # ============================================================================

    @bp.route('/reservations', methods=['POST'])
    @login_required
    def reservations_create():
        """
        Create a reservation.

        Request body:
            accommodation_id, check_in, check_out (required)
            guest_id or guest_name (one required)
            guests, includes_breakfast, total_price, notes (optional)
            override_minimum_stay: Confirm a stay shorter than the minimum (optional)

        Returns:
            201 with reservation_id and reservation_code;
            409 on conflict or minimum stay violation
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(MESSAGES['data_required'], 400)

        try:
            reservation_id, reservation_code = create_reservation(
                accommodation_id=data.get('accommodation_id'),
                check_in=data.get('check_in'),
                check_out=data.get('check_out'),
                guests=data.get('guests', 1),
                guest_id=data.get('guest_id'),
                guest_name=data.get('guest_name'),
                includes_breakfast=bool(data.get('includes_breakfast', False)),
                total_price=data.get('total_price'),
                notes=data.get('notes', ''),
                created_by=current_user.username,
                external_event_id=data.get('external_event_id'),
                override_minimum_stay=bool(data.get('override_minimum_stay', False))
            )
        except ReservationConflictError as e:
            return _conflict_response(e)
        except MinimumStayError as e:
            return _minimum_stay_response(e)
        except ValueError as e:
            return api_error(str(e), 400)
        except Exception as e:
            current_app.logger.error(f'Error creating reservation: {e}', exc_info=True)
            return api_error(MESSAGES['internal_error'], 500)

        return api_success(
            reservation=get_reservation_by_id(reservation_id),
            message=MESSAGES['reservation_created'],
            status=201,
            reservation_id=reservation_id,
            reservation_code=reservation_code
        )

    @bp.route('/reservations/<int:reservation_id>', methods=['PUT'])
    @login_required
    def reservations_update(reservation_id):
        """Update reservation fields; moving the stay re-checks availability."""
        if not get_reservation_by_id(reservation_id):
            return api_error(MESSAGES['reservation_not_found'], 404)

        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not data:
            return api_error(MESSAGES['data_required'], 400)

        updates = {k: v for k, v in data.items() if k in UPDATABLE_FIELDS}
        try:
            update_reservation(reservation_id, **updates)
        except ReservationConflictError as e:
            return _conflict_response(e)
        except ValueError as e:
            return api_error(str(e), 400)
        except Exception as e:
            current_app.logger.error(f'Error updating reservation {reservation_id}: {e}', exc_info=True)
            return api_error(MESSAGES['internal_error'], 500)

        return api_success(
            reservation=get_reservation_by_id(reservation_id),
            message=MESSAGES['reservation_updated']
        )

    @bp.route('/reservations/<int:reservation_id>', methods=['DELETE'])
    @login_required
    def reservations_delete(reservation_id):
        """Hard delete a reservation."""
        if not delete_reservation(reservation_id):
            return api_error(MESSAGES['reservation_not_found'], 404)
        return api_success(message=MESSAGES['reservation_deleted'])

    # ============================================================================
    # STATUS
    # ============================================================================

    @bp.route('/reservations/<int:reservation_id>/status', methods=['POST'])
    @login_required
    def reservations_change_status(reservation_id):
        """
        Move a reservation to a new status.

        Request body:
            status: Target status (required)
            notes: Optional note for the history
        """
        data = request.get_json(silent=True) or {}
        new_status = data.get('status')
        if new_status not in STATUSES:
            return api_error(f'Status inválido: {new_status}', 400, statuses=STATUSES)

        try:
            changed = change_reservation_status(
                reservation_id, new_status,
                changed_by=current_user.username,
                notes=data.get('notes', '')
            )
        except InvalidStatusTransition as e:
            return api_error(str(e), 409)
        except ReservationConflictError as e:
            return _conflict_response(e)
        except ValueError as e:
            return api_error(str(e), 400)

        if not changed:
            return api_error(MESSAGES['reservation_not_found'], 404)

        return api_success(
            reservation=get_reservation_by_id(reservation_id),
            message=MESSAGES['status_changed'].format(status=STATUS_DISPLAY[new_status])
        )

    @bp.route('/reservations/<int:reservation_id>/cancel', methods=['POST'])
    @login_required
    def reservations_cancel(reservation_id):
        """Cancel a reservation, releasing its accommodation."""
        data = request.get_json(silent=True) or {}
        try:
            cancelled = change_reservation_status(
                reservation_id, 'cancelled',
                changed_by=current_user.username,
                notes=data.get('notes', '')
            )
        except InvalidStatusTransition as e:
            return api_error(str(e), 409)

        if not cancelled:
            return api_error(MESSAGES['reservation_not_found'], 404)

        return api_success(
            reservation=get_reservation_by_id(reservation_id),
            message=MESSAGES['status_changed'].format(status=STATUS_DISPLAY['cancelled'])
        )

    @bp.route('/reservations/<int:reservation_id>/history')
    @login_required
    def reservations_history(reservation_id):
        """Status change history, oldest first."""
        if not get_reservation_by_id(reservation_id):
            return api_error(MESSAGES['reservation_not_found'], 404)
        return api_success(history=get_status_history(reservation_id))
