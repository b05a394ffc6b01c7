"""
Tests for the reservation lifecycle.
"""

import re
import sqlite3

import pytest

from database import get_db
from models.guest import create_guest, delete_guest
from models.reservation import (
    create_reservation, get_reservation_by_id, get_reservation_by_code,
    get_all_reservations, get_reservations_by_date, update_reservation,
    delete_reservation, change_reservation_status, cancel_reservation,
    get_status_history, can_transition, InvalidStatusTransition,
    ReservationConflictError, MinimumStayError
)


class TestCreateReservation:
    """Tests for reservation creation."""

    def test_quoted_total_and_pending_status(self, app, hotel_data):
        with app.app_context():
            reservation_id, code = create_reservation(
                hotel_data['room_101'], '2025-07-10', '2025-07-13',
                guests=2, guest_name='Ana Lima', created_by='admin'
            )

            reservation = get_reservation_by_id(reservation_id)
            assert reservation['status'] == 'pending'
            assert reservation['total_price'] == 540
            assert reservation['nights'] == 3
            assert reservation['display_name'] == 'Ana Lima'
            assert re.match(r'^RES-\d{6}-001$', code)

    def test_codes_are_sequential(self, app, hotel_data):
        with app.app_context():
            _, first = create_reservation(hotel_data['room_101'], '2025-07-01', '2025-07-03',
                                          guests=2, guest_name='A')
            _, second = create_reservation(hotel_data['room_101'], '2025-07-03', '2025-07-05',
                                           guests=2, guest_name='B')

            assert first[:11] == second[:11]
            assert int(second[11:]) == int(first[11:]) + 1

    def test_minimum_stay_violation_raises(self, app, hotel_data):
        with app.app_context():
            with pytest.raises(MinimumStayError) as exc_info:
                create_reservation(hotel_data['room_101'], '2025-07-10', '2025-07-11',
                                   guests=2, guest_name='Ana Lima')

            assert exc_info.value.required == 2
            assert exc_info.value.requested == 1

    def test_minimum_stay_override(self, app, hotel_data):
        with app.app_context():
            reservation_id, _ = create_reservation(
                hotel_data['room_101'], '2025-07-10', '2025-07-11',
                guests=2, guest_name='Ana Lima', override_minimum_stay=True
            )
            assert get_reservation_by_id(reservation_id)['total_price'] == 180

    def test_without_price_requires_total(self, app, hotel_data):
        with app.app_context():
            with pytest.raises(ValueError):
                create_reservation(hotel_data['room_102'], '2025-07-10', '2025-07-13',
                                   guests=2, guest_name='Ana Lima')

            reservation_id, _ = create_reservation(
                hotel_data['room_102'], '2025-07-10', '2025-07-13',
                guests=2, guest_name='Ana Lima', total_price=450
            )
            assert get_reservation_by_id(reservation_id)['total_price'] == 450

    def test_capacity_enforced(self, app, hotel_data):
        with app.app_context():
            with pytest.raises(ValueError, match='Capacidade'):
                create_reservation(hotel_data['room_102'], '2025-07-10', '2025-07-13',
                                   guests=3, guest_name='Ana Lima', total_price=450)

    def test_guest_or_name_required(self, app, hotel_data):
        with app.app_context():
            with pytest.raises(ValueError):
                create_reservation(hotel_data['room_101'], '2025-07-10', '2025-07-13', guests=2)

    def test_checkout_must_follow_checkin(self, app, hotel_data):
        with app.app_context():
            with pytest.raises(ValueError):
                create_reservation(hotel_data['room_101'], '2025-07-13', '2025-07-10',
                                   guests=2, guest_name='Ana Lima')

    def test_registered_guest_survives_soft_delete(self, app, hotel_data):
        with app.app_context():
            guest_id = create_guest({'first_name': 'João', 'last_name': 'Pereira',
                                     'email': 'joao@example.com'})
            reservation_id, _ = create_reservation(hotel_data['room_101'], '2025-07-10', '2025-07-13',
                                                   guests=2, guest_id=guest_id)
            delete_guest(guest_id)

            reservation = get_reservation_by_id(reservation_id)
            assert reservation['guest_id'] == guest_id
            assert reservation['display_name'] == 'João Pereira'


class TestOverlapGuard:
    """Tests for the database-level overlap triggers."""

    def _insert(self, accommodation_id, check_in, check_out, code, status='pending'):
        db = get_db()
        db.execute('''
            INSERT INTO reservations
            (reservation_code, accommodation_id, guest_name, check_in_date, check_out_date,
             guests, status, total_price)
            VALUES (?, ?, 'Teste', ?, ?, 1, ?, 0)
        ''', (code, accommodation_id, check_in, check_out, status))
        db.commit()

    def test_overlapping_insert_is_aborted(self, app, hotel_data):
        with app.app_context():
            self._insert(hotel_data['room_101'], '2025-07-10', '2025-07-15', 'T-1')

            with pytest.raises(sqlite3.IntegrityError, match='reservation_overlap'):
                self._insert(hotel_data['room_101'], '2025-07-12', '2025-07-18', 'T-2')
            get_db().rollback()

    def test_turnover_insert_is_accepted(self, app, hotel_data):
        with app.app_context():
            self._insert(hotel_data['room_101'], '2025-07-10', '2025-07-15', 'T-1')
            self._insert(hotel_data['room_101'], '2025-07-15', '2025-07-18', 'T-2')

            assert len(get_all_reservations(accommodation_id=hotel_data['room_101'])) == 2

    def test_cancelled_rows_do_not_count(self, app, hotel_data):
        with app.app_context():
            self._insert(hotel_data['room_101'], '2025-07-10', '2025-07-15', 'T-1', status='cancelled')
            self._insert(hotel_data['room_101'], '2025-07-10', '2025-07-15', 'T-2')

    def test_moving_onto_another_stay_raises_conflict(self, app, hotel_data):
        with app.app_context():
            create_reservation(hotel_data['room_101'], '2025-07-10', '2025-07-13',
                               guests=2, guest_name='A')
            other_id, _ = create_reservation(hotel_data['room_101'], '2025-07-20', '2025-07-23',
                                             guests=2, guest_name='B')

            with pytest.raises(ReservationConflictError):
                update_reservation(other_id, check_in_date='2025-07-12')


class TestStatusLifecycle:
    """Tests for status transitions."""

    def test_allowed_transitions(self):
        assert can_transition('pending', 'confirmed')
        assert can_transition('confirmed', 'checked_in')
        assert can_transition('checked_in', 'checked_out')
        assert not can_transition('pending', 'checked_out')
        assert not can_transition('cancelled', 'confirmed')

    def test_full_lifecycle_stamps_and_history(self, app, hotel_data):
        with app.app_context():
            reservation_id, _ = create_reservation(hotel_data['room_101'], '2025-07-10', '2025-07-13',
                                                   guests=2, guest_name='Ana Lima', created_by='admin')

            for status in ('confirmed', 'checked_in', 'checked_out'):
                assert change_reservation_status(reservation_id, status, 'admin')

            reservation = get_reservation_by_id(reservation_id)
            assert reservation['status'] == 'checked_out'
            assert reservation['started_at'] is not None
            assert reservation['completed_at'] is not None

            history = get_status_history(reservation_id)
            assert [h['new_status'] for h in history] == ['pending', 'confirmed', 'checked_in', 'checked_out']
            assert history[0]['old_status'] is None

    def test_invalid_transition_raises(self, app, hotel_data):
        with app.app_context():
            reservation_id, _ = create_reservation(hotel_data['room_101'], '2025-07-10', '2025-07-13',
                                                   guests=2, guest_name='Ana Lima')

            with pytest.raises(InvalidStatusTransition):
                change_reservation_status(reservation_id, 'checked_out')

    def test_unknown_reservation_returns_false(self, app, hotel_data):
        with app.app_context():
            assert change_reservation_status(9999, 'confirmed') is False

    def test_reactivating_cancelled_is_not_allowed(self, app, hotel_data):
        with app.app_context():
            reservation_id, _ = create_reservation(hotel_data['room_101'], '2025-07-10', '2025-07-13',
                                                   guests=2, guest_name='Ana Lima')
            cancel_reservation(reservation_id, 'admin')

            with pytest.raises(InvalidStatusTransition):
                change_reservation_status(reservation_id, 'pending')


class TestQueriesAndEdits:
    """Tests for reservation reads, updates and deletes."""

    def test_lookup_by_code(self, app, hotel_data):
        with app.app_context():
            reservation_id, code = create_reservation(hotel_data['room_101'], '2025-07-10', '2025-07-13',
                                                      guests=2, guest_name='Ana Lima')
            assert get_reservation_by_code(code)['id'] == reservation_id

    def test_by_date_includes_departures(self, app, hotel_data):
        with app.app_context():
            create_reservation(hotel_data['room_101'], '2025-07-10', '2025-07-13',
                               guests=2, guest_name='Ana Lima')

            assert len(get_reservations_by_date('2025-07-13', '2025-07-20')) == 1
            assert get_reservations_by_date('2025-07-14', '2025-07-20') == []

    def test_update_reprices_stay(self, app, hotel_data):
        with app.app_context():
            reservation_id, _ = create_reservation(hotel_data['room_101'], '2025-07-10', '2025-07-13',
                                                   guests=2, guest_name='Ana Lima')

            update_reservation(reservation_id, check_out_date='2025-07-14', includes_breakfast=True)

            reservation = get_reservation_by_id(reservation_id)
            assert reservation['check_out_date'] == '2025-07-14'
            assert reservation['total_price'] == 800

    def test_update_can_extend_into_own_dates(self, app, hotel_data):
        with app.app_context():
            reservation_id, _ = create_reservation(hotel_data['room_101'], '2025-07-10', '2025-07-13',
                                                   guests=2, guest_name='Ana Lima')

            assert update_reservation(reservation_id, check_in_date='2025-07-11', check_out_date='2025-07-14')

    def test_delete_removes_history(self, app, hotel_data):
        with app.app_context():
            reservation_id, _ = create_reservation(hotel_data['room_101'], '2025-07-10', '2025-07-13',
                                                   guests=2, guest_name='Ana Lima')

            assert delete_reservation(reservation_id)
            assert get_reservation_by_id(reservation_id) is None
            assert get_status_history(reservation_id) == []
