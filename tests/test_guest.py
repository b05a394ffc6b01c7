"""
Tests for the guest registry.
"""

import pytest

from models.guest import (
    normalize_text, create_guest, get_guest_by_id, get_guest_by_email, get_all_guests,
    search_guests, update_guest, delete_guest, get_guest_reservations
)
from models.reservation import create_reservation


GUEST = {
    'first_name': 'José',
    'last_name': 'Conceição',
    'email': 'Jose@Example.com',
    'phone': '(11) 98765-4321',
    'document_number': '123.456.789-00',
}


class TestNormalizeText:
    """Tests for accent-insensitive normalization."""

    def test_strips_accents_and_case(self):
        assert normalize_text('José CONCEIÇÃO') == 'jose conceicao'

    def test_empty(self):
        assert normalize_text('') == ''


class TestGuestCrud:
    """Tests for guest create, update and soft delete."""

    def test_create_normalizes_email(self, app):
        with app.app_context():
            guest_id = create_guest(GUEST, created_by='admin')

            guest = get_guest_by_id(guest_id)
            assert guest['email'] == 'jose@example.com'
            assert guest['created_by'] == 'admin'
            assert get_guest_by_email('JOSE@example.com')['id'] == guest_id

    @pytest.mark.parametrize('field', ['first_name', 'last_name', 'email'])
    def test_required_fields(self, app, field):
        with app.app_context():
            data = dict(GUEST)
            data[field] = ''
            with pytest.raises(ValueError):
                create_guest(data)

    def test_duplicate_email_rejected(self, app):
        with app.app_context():
            create_guest(GUEST)
            with pytest.raises(ValueError):
                create_guest(dict(GUEST, first_name='Outro'))

    def test_update(self, app):
        with app.app_context():
            guest_id = create_guest(GUEST)

            assert update_guest(guest_id, {'notes': 'Prefere andar alto'})
            assert get_guest_by_id(guest_id)['notes'] == 'Prefere andar alto'

    def test_update_invalid_email(self, app):
        with app.app_context():
            guest_id = create_guest(GUEST)
            with pytest.raises(ValueError):
                update_guest(guest_id, {'email': 'not-an-email'})

    def test_soft_delete(self, app):
        with app.app_context():
            guest_id = create_guest(GUEST)

            assert delete_guest(guest_id)
            assert get_all_guests() == []
            assert len(get_all_guests(active_only=False)) == 1
            # Still resolvable by ID
            assert get_guest_by_id(guest_id)['is_active'] is False
            # Deleting twice does nothing
            assert delete_guest(guest_id) is False

    def test_email_reusable_after_soft_delete(self, app):
        with app.app_context():
            guest_id = create_guest(GUEST)
            delete_guest(guest_id)

            assert create_guest(GUEST) != guest_id


class TestGuestSearch:
    """Tests for guest search."""

    def test_accent_insensitive(self, app):
        with app.app_context():
            create_guest(GUEST)
            assert len(search_guests('conceicao')) == 1
            assert len(search_guests('JOSE conc')) == 1

    def test_by_document(self, app):
        with app.app_context():
            create_guest(GUEST)
            assert len(search_guests('123.456')) == 1

    def test_no_match(self, app):
        with app.app_context():
            create_guest(GUEST)
            assert search_guests('maria') == []

    def test_inactive_excluded(self, app):
        with app.app_context():
            delete_guest(create_guest(GUEST))
            assert search_guests('jose') == []


class TestGuestReservations:
    """Tests for a guest's reservation history."""

    def test_lists_reservations(self, app, hotel_data):
        with app.app_context():
            guest_id = create_guest(GUEST)
            create_reservation(hotel_data['room_101'], '2025-07-10', '2025-07-13',
                               guests=2, guest_id=guest_id)

            reservations = get_guest_reservations(guest_id)
            assert len(reservations) == 1
            assert reservations[0]['room_number'] == '101'
