"""
Reservation data access functions.
Handles reservation CRUD, status lifecycle and availability checking.

This module re-exports the functions of the split modules:
- reservation_state.py: Status transitions and history
- reservation_crud.py: Create, read, update, delete operations
- reservation_availability.py: Overlap and block checks
"""

# =============================================================================
# RE-EXPORTS
# =============================================================================

# Status management
from .reservation_state import (
    STATUSES,
    STATUS_DISPLAY,
    ALLOWED_TRANSITIONS,
    InvalidStatusTransition,
    can_transition,
    change_reservation_status,
    cancel_reservation,
    get_status_history,
)

# CRUD operations
from .reservation_crud import (
    generate_reservation_code,
    create_reservation,
    get_reservation_by_id,
    get_reservation_by_code,
    get_all_reservations,
    get_reservations_by_date,
    UPDATABLE_FIELDS,
    update_reservation,
    delete_reservation,
)

# Availability
from .reservation_availability import (
    RELEASING_STATUSES,
    ReservationConflictError,
    ranges_overlap,
    get_conflicting_reservations,
    is_accommodation_available,
    get_available_accommodation_ids,
)

# Minimum stay
from .pricing import MinimumStayError

__all__ = [
    'STATUSES', 'STATUS_DISPLAY', 'ALLOWED_TRANSITIONS', 'InvalidStatusTransition',
    'can_transition', 'change_reservation_status', 'cancel_reservation', 'get_status_history',
    'generate_reservation_code', 'create_reservation', 'get_reservation_by_id',
    'get_reservation_by_code', 'get_all_reservations', 'get_reservations_by_date',
    'UPDATABLE_FIELDS', 'update_reservation', 'delete_reservation',
    'RELEASING_STATUSES', 'ReservationConflictError', 'ranges_overlap',
    'get_conflicting_reservations', 'is_accommodation_available',
    'get_available_accommodation_ids', 'MinimumStayError',
]
