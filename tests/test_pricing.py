"""
Tests for rate resolution, minimum stay, stay quotes and category bulk pricing.
"""

import pytest

from database import get_db
from models.pricing import (
    resolve_rate, check_minimum_stay, quote_stay, apply_category_pricing
)
from models.price_period import create_period, find_period_for_date
from models.price_entry import (
    create_price_entry, upsert_price_entry, get_prices_for_accommodation, delete_all_prices
)


class TestResolveRate:
    """Tests for exact-match rate lookup."""

    def test_july_two_guests_without_breakfast(self, app, hotel_data):
        with app.app_context():
            rate = resolve_rate(hotel_data['room_101'], '2025-07-10', 2, includes_breakfast=False)

            assert rate['price_per_night'] == 180
            assert rate['period_name'] == 'Julho'
            assert rate['minimum_stay'] == 2

    def test_breakfast_flag_selects_entry(self, app, hotel_data):
        with app.app_context():
            assert resolve_rate(hotel_data['room_101'], '2025-07-10', 2, True)['price_per_night'] == 200
            assert resolve_rate(hotel_data['room_101'], '2025-07-10', 4, True)['price_per_night'] == 300
            assert resolve_rate(hotel_data['room_101'], '2025-07-10', 4, False)['price_per_night'] == 270

    def test_no_fallback_to_other_occupancy(self, app, hotel_data):
        with app.app_context():
            assert resolve_rate(hotel_data['room_101'], '2025-07-10', 3) is None

    def test_no_period_means_no_rate(self, app, hotel_data):
        with app.app_context():
            assert resolve_rate(hotel_data['room_101'], '2025-08-10', 2) is None

    def test_deterministic(self, app, hotel_data):
        with app.app_context():
            first = resolve_rate(hotel_data['room_101'], '2025-07-10', 2)
            second = resolve_rate(hotel_data['room_101'], '2025-07-10', 2)
            assert first == second

    def test_holiday_period_takes_precedence(self, app, hotel_data):
        with app.app_context():
            holiday = create_period('Férias de Julho', '2025-07-09', '2025-07-11',
                                    is_holiday=True, minimum_stay=3)
            create_price_entry(holiday, 2, 400, includes_breakfast=False,
                               accommodation_id=hotel_data['room_101'])

            rate = resolve_rate(hotel_data['room_101'], '2025-07-10', 2)
            assert rate['price_per_night'] == 400
            assert rate['is_holiday'] is True
            assert rate['minimum_stay'] == 3

            # Outside the holiday the regular period still applies
            assert resolve_rate(hotel_data['room_101'], '2025-07-20', 2)['price_per_night'] == 180

    def test_most_recent_period_wins_among_equals(self, app, hotel_data):
        with app.app_context():
            newer = create_period('Julho revisado', '2025-07-01', '2025-07-31')
            assert find_period_for_date('2025-07-10')['id'] == newer

    def test_category_wide_entry_applies(self, app, hotel_data):
        with app.app_context():
            create_price_entry(hotel_data['july'], 2, 350, category='Luxo')

            rate = resolve_rate(hotel_data['room_201'], '2025-07-10', 2)
            assert rate['price_per_night'] == 350
            assert resolve_rate(None, '2025-07-10', 2, category='Luxo')['price_per_night'] == 350

    def test_own_entry_beats_category_wide(self, app, hotel_data):
        with app.app_context():
            create_price_entry(hotel_data['july'], 2, 999, category='Standard')

            assert resolve_rate(hotel_data['room_101'], '2025-07-10', 2)['price_per_night'] == 180
            assert resolve_rate(hotel_data['room_102'], '2025-07-10', 2)['price_per_night'] == 999


class TestMinimumStay:
    """Tests for minimum stay reporting."""

    def test_three_nights_in_july_is_fine(self):
        result = check_minimum_stay(3, {'minimum_stay': 2})
        assert result == {'violation': False, 'required': 2, 'requested': 3}

    def test_one_night_in_july_violates(self):
        result = check_minimum_stay(1, {'minimum_stay': 2})
        assert result == {'violation': True, 'required': 2, 'requested': 1}

    def test_no_period_requires_one_night(self):
        assert check_minimum_stay(1, None)['violation'] is False


class TestQuoteStay:
    """Tests for whole-stay quotes."""

    def test_july_scenario_three_nights(self, app, hotel_data):
        with app.app_context():
            quote = quote_stay(hotel_data['room_101'], '2025-07-10', '2025-07-13', 2)

            assert quote['nightly_rate'] == 180
            assert quote['total_price'] == 540
            assert quote['nights'] == 3
            assert quote['min_stay']['violation'] is False

    def test_july_scenario_one_night(self, app, hotel_data):
        with app.app_context():
            quote = quote_stay(hotel_data['room_101'], '2025-07-10', '2025-07-11', 2)

            assert quote['min_stay'] == {'violation': True, 'required': 2, 'requested': 1}

    def test_stay_across_periods_is_prorated(self, app, hotel_data):
        with app.app_context():
            august = create_period('Agosto', '2025-08-01', '2025-08-31', minimum_stay=1)
            create_price_entry(august, 2, 120, accommodation_id=hotel_data['room_101'])

            quote = quote_stay(hotel_data['room_101'], '2025-07-30', '2025-08-03', 2)

            # 2 nights at 180 + 2 nights at 120
            assert quote['total_price'] == 600
            assert quote['nightly_rate'] == 150
            assert quote['has_multiple_periods'] is True
            assert [line['nights'] for line in quote['breakdown']] == [2, 2]
            assert quote['minimum_stay'] == 2

    def test_missing_night_price_returns_none(self, app, hotel_data):
        with app.app_context():
            # August has no period at all
            assert quote_stay(hotel_data['room_101'], '2025-07-30', '2025-08-02', 2) is None

    def test_invalid_range_raises(self, app, hotel_data):
        with app.app_context():
            with pytest.raises(ValueError):
                quote_stay(hotel_data['room_101'], '2025-07-10', '2025-07-10', 2)


class TestPriceEntries:
    """Tests for price entry storage."""

    def test_duplicate_natural_key_rejected(self, app, hotel_data):
        with app.app_context():
            with pytest.raises(ValueError):
                create_price_entry(hotel_data['july'], 2, 150, includes_breakfast=False,
                                   accommodation_id=hotel_data['room_101'])

    def test_upsert_overwrites_existing(self, app, hotel_data):
        with app.app_context():
            entry_id = upsert_price_entry(hotel_data['july'], 2, 190, includes_breakfast=False,
                                          accommodation_id=hotel_data['room_101'])
            again = upsert_price_entry(hotel_data['july'], 2, 195, includes_breakfast=False,
                                       accommodation_id=hotel_data['room_101'])

            assert entry_id == again
            assert resolve_rate(hotel_data['room_101'], '2025-07-10', 2)['price_per_night'] == 195

    def test_category_upsert_is_unique(self, app, hotel_data):
        with app.app_context():
            upsert_price_entry(hotel_data['july'], 2, 300, category='Luxo')
            upsert_price_entry(hotel_data['july'], 2, 320, category='Luxo')

            count = get_db().execute(
                'SELECT COUNT(*) FROM price_entries WHERE category = ? AND accommodation_id IS NULL',
                ('Luxo',)
            ).fetchone()[0]
            assert count == 1

    def test_negative_price_rejected(self, app, hotel_data):
        with app.app_context():
            with pytest.raises(ValueError):
                create_price_entry(hotel_data['july'], 3, -10, accommodation_id=hotel_data['room_101'])

    def test_entry_needs_target(self, app, hotel_data):
        with app.app_context():
            with pytest.raises(ValueError):
                create_price_entry(hotel_data['july'], 2, 100)

    def test_unknown_accommodation_is_reported(self, app, hotel_data):
        with app.app_context():
            with pytest.raises(ValueError, match='Acomodação não encontrada'):
                create_price_entry(hotel_data['july'], 2, 100, accommodation_id=9999)

    def test_unknown_category_rejected(self, app, hotel_data):
        with app.app_context():
            with pytest.raises(ValueError, match='Categoria inválida'):
                create_price_entry(hotel_data['july'], 2, 100, category='Chalé')
            with pytest.raises(ValueError, match='Categoria inválida'):
                upsert_price_entry(hotel_data['july'], 2, 100, category='Chalé')

    def test_unknown_period_rejected(self, app, hotel_data):
        with app.app_context():
            with pytest.raises(ValueError, match='Período não encontrado'):
                create_price_entry(9999, 2, 100, accommodation_id=hotel_data['room_101'])

    def test_delete_all_prices_by_accommodation(self, app, hotel_data):
        with app.app_context():
            assert delete_all_prices(accommodation_id=hotel_data['room_101']) == 4
            assert get_prices_for_accommodation(hotel_data['room_101']) == []


class TestCategoryPricing:
    """Tests for bulk pricing of a category."""

    OPTIONS = [
        {'people': 2, 'with_breakfast': 220, 'without_breakfast': 200},
        {'people': 4, 'with_breakfast': 320, 'without_breakfast': 290},
    ]

    def test_applies_to_every_accommodation(self, app, hotel_data):
        with app.app_context():
            assert apply_category_pricing('Standard', hotel_data['july'], self.OPTIONS) is True

            assert resolve_rate(hotel_data['room_101'], '2025-07-10', 2)['price_per_night'] == 200
            assert resolve_rate(hotel_data['room_101'], '2025-07-10', 4, True)['price_per_night'] == 320
            assert resolve_rate(hotel_data['room_102'], '2025-07-10', 2, True)['price_per_night'] == 220

    def test_options_above_capacity_are_skipped(self, app, hotel_data):
        with app.app_context():
            apply_category_pricing('Standard', hotel_data['july'], self.OPTIONS)

            # Room 102 holds 2 people
            assert resolve_rate(hotel_data['room_102'], '2025-07-10', 4) is None

    def test_exclusions_are_untouched(self, app, hotel_data):
        with app.app_context():
            apply_category_pricing('Standard', hotel_data['july'], self.OPTIONS,
                                   excluded_accommodation_ids=[hotel_data['room_101']])

            assert resolve_rate(hotel_data['room_101'], '2025-07-10', 2)['price_per_night'] == 180
            assert resolve_rate(hotel_data['room_102'], '2025-07-10', 2)['price_per_night'] == 200

    def test_reapplying_keeps_one_entry_per_key(self, app, hotel_data):
        with app.app_context():
            apply_category_pricing('Standard', hotel_data['july'], self.OPTIONS)
            apply_category_pricing('Standard', hotel_data['july'], self.OPTIONS)

            rows = get_db().execute('''
                SELECT accommodation_id, period_id, people, includes_breakfast, COUNT(*) as n
                FROM price_entries
                GROUP BY accommodation_id, period_id, people, includes_breakfast
                HAVING n > 1
            ''').fetchall()
            assert rows == []

    def test_unknown_period_fails(self, app, hotel_data):
        with app.app_context():
            assert apply_category_pricing('Standard', 9999, self.OPTIONS) is False

    def test_partial_failure_keeps_earlier_commits(self, app, hotel_data):
        with app.app_context():
            options = [{'people': 2, 'with_breakfast': 220, 'without_breakfast': 200},
                       {'people': 4, 'with_breakfast': 'x', 'without_breakfast': 290}]

            # Room 101 fails on the 4-person option; room 102 only takes the 2-person one
            assert apply_category_pricing('Standard', hotel_data['july'], options) is False
            assert resolve_rate(hotel_data['room_101'], '2025-07-10', 2)['price_per_night'] == 180
            assert resolve_rate(hotel_data['room_102'], '2025-07-10', 2)['price_per_night'] == 200
