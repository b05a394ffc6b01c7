"""
Tests for the availability search.
"""

import pytest

from blueprints.hotel.services.search_service import validate_search_params, search_accommodations
from models.accommodation import block_accommodation
from models.price_entry import create_price_entry
from models.reservation import create_reservation


@pytest.fixture
def luxo_prices(app, hotel_data):
    """Category-wide Luxo price for 2 people, cheaper than room 101."""
    with app.app_context():
        create_price_entry(hotel_data['july'], 2, 150, includes_breakfast=False, category='Luxo')
    return hotel_data


def _rooms(outcome):
    return [r['accommodation']['room_number'] for r in outcome['results']]


class TestValidateSearchParams:
    """Tests for search input validation."""

    def test_valid(self):
        assert validate_search_params('2025-07-10', '2025-07-13', 2) is None
        assert validate_search_params('2025-07-10', None, '2') is None

    @pytest.mark.parametrize('check_in,check_out,guests', [
        (None, '2025-07-13', 2),
        ('10/07/2025', '2025-07-13', 2),
        ('2025-07-13', '2025-07-13', 2),
        ('2025-07-10', '2025-07-13', 0),
        ('2025-07-10', '2025-07-13', 'dois'),
    ])
    def test_invalid(self, check_in, check_out, guests):
        assert validate_search_params(check_in, check_out, guests) is not None

    def test_search_raises_on_invalid(self, app):
        with app.app_context():
            with pytest.raises(ValueError):
                search_accommodations('2025-07-13', '2025-07-10', 2)


class TestSearchAccommodations:
    """Tests for filtering, pricing and ordering."""

    def test_sorted_by_price(self, app, luxo_prices):
        with app.app_context():
            outcome = search_accommodations('2025-07-10', '2025-07-13', 2)

            assert _rooms(outcome) == ['201', '101']
            assert outcome['results'][0]['total_price'] == 450
            assert outcome['results'][1]['total_price'] == 540
            assert outcome['has_min_stay_violations'] is False
            assert outcome['max_min_stay'] == 1

    def test_unpriced_and_small_rooms_skipped(self, app, hotel_data):
        with app.app_context():
            outcome = search_accommodations('2025-07-10', '2025-07-13', 4)
            assert _rooms(outcome) == ['101']
            assert outcome['results'][0]['price_per_night'] == 270

    def test_booked_room_excluded(self, app, luxo_prices):
        with app.app_context():
            create_reservation(luxo_prices['room_101'], '2025-07-12', '2025-07-14',
                               guests=2, guest_name='Ana Lima')

            assert _rooms(search_accommodations('2025-07-10', '2025-07-13', 2)) == ['201']
            # Turnover day is free
            assert _rooms(search_accommodations('2025-07-14', '2025-07-16', 2)) == ['201', '101']

    def test_dated_block_excludes_only_its_days(self, app, luxo_prices):
        with app.app_context():
            block_accommodation(luxo_prices['room_201'], 'Reforma',
                                start_date='2025-07-20', end_date='2025-07-22')

            assert _rooms(search_accommodations('2025-07-10', '2025-07-13', 2)) == ['201', '101']
            assert _rooms(search_accommodations('2025-07-21', '2025-07-23', 2)) == ['101']

    def test_breakfast_prices(self, app, hotel_data):
        with app.app_context():
            outcome = search_accommodations('2025-07-10', '2025-07-13', 2, includes_breakfast=True)

            result = outcome['results'][0]
            assert result['price_per_night'] == 200
            assert result['total_price'] == 600
            assert result['includes_breakfast'] is True

    def test_without_checkout_quotes_one_night(self, app, hotel_data):
        with app.app_context():
            outcome = search_accommodations('2025-07-10', None, 2)

            result = outcome['results'][0]
            assert result['price_per_night'] == 180
            assert result['nights'] is None
            assert result['total_price'] is None
            assert result['is_min_stay_violation'] is False
            assert outcome['has_min_stay_violations'] is False


class TestMinimumStayReporting:
    """Tests for minimum stay flags."""

    def test_short_stay_flagged(self, app, hotel_data):
        with app.app_context():
            outcome = search_accommodations('2025-07-10', '2025-07-11', 2)

            assert outcome['results'][0]['is_min_stay_violation'] is True
            assert outcome['has_min_stay_violations'] is True
            assert outcome['max_min_stay'] == 2

    def test_force_suppresses_top_level_flag(self, app, hotel_data):
        with app.app_context():
            outcome = search_accommodations('2025-07-10', '2025-07-11', 2, force=True)

            assert outcome['results'][0]['is_min_stay_violation'] is True
            assert outcome['has_min_stay_violations'] is False
            assert outcome['max_min_stay'] == 1
