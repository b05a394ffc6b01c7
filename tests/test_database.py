"""
Database tests.
Tests schema creation, seed data and integrity rules.
"""

import sqlite3

import pytest

from database import get_db


def _names(db, kind):
    rows = db.execute('SELECT name FROM sqlite_master WHERE type = ?', (kind,)).fetchall()
    return {row['name'] for row in rows}


class TestSchema:
    """Tests for tables, indexes and triggers."""

    def test_tables(self, app):
        with app.app_context():
            tables = _names(get_db(), 'table')

            for table in ('users', 'accommodations', 'price_periods', 'price_entries', 'guests',
                          'reservations', 'reservation_status_history', 'maintenance_areas',
                          'maintenance_orders', 'maintenance_history', 'app_settings'):
                assert table in tables

    def test_price_key_indexes(self, app):
        with app.app_context():
            indexes = _names(get_db(), 'index')

            assert 'idx_price_entries_accommodation_key' in indexes
            assert 'idx_price_entries_category_key' in indexes

    def test_overlap_triggers(self, app):
        with app.app_context():
            triggers = _names(get_db(), 'trigger')

            assert 'trg_reservations_no_overlap_insert' in triggers
            assert 'trg_reservations_no_overlap_update' in triggers

    def test_foreign_keys_enabled(self, app):
        with app.app_context():
            assert get_db().execute('PRAGMA foreign_keys').fetchone()[0] == 1


class TestSeed:
    """Tests for seed data."""

    def test_admin_user(self, app):
        with app.app_context():
            row = get_db().execute("SELECT * FROM users WHERE username = 'admin'").fetchone()
            assert row is not None
            assert row['active'] == 1

    def test_default_settings(self, app):
        with app.app_context():
            rows = get_db().execute('SELECT key, value FROM app_settings').fetchall()
            settings = {row['key']: row['value'] for row in rows}

            assert settings['occupancy_default_days'] == '14'
            assert settings['search_allow_force'] == 'true'
            assert 'copy_config' in settings

    def test_seeded_settings_are_the_ones_read(self, app):
        with app.app_context():
            keys = {row['key'] for row in get_db().execute('SELECT key FROM app_settings')}

            assert keys == {'copy_config', 'occupancy_default_days', 'search_allow_force'}

    def test_no_inventory(self, app):
        with app.app_context():
            assert get_db().execute('SELECT COUNT(*) FROM accommodations').fetchone()[0] == 0


class TestIntegrity:
    """Tests for constraints enforced by the database."""

    def test_category_price_unique(self, app, hotel_data):
        with app.app_context():
            db = get_db()
            insert = '''
                INSERT INTO price_entries (category, period_id, people, price_per_night, includes_breakfast)
                VALUES ('Luxo', ?, 2, 100, 0)
            '''
            db.execute(insert, (hotel_data['july'],))
            db.commit()

            with pytest.raises(sqlite3.IntegrityError):
                db.execute(insert, (hotel_data['july'],))
            db.rollback()

    def test_update_overlap_aborted(self, app, hotel_data):
        with app.app_context():
            db = get_db()
            db.execute('''
                INSERT INTO reservations
                (reservation_code, accommodation_id, guest_name, check_in_date, check_out_date,
                 guests, status, total_price)
                VALUES ('T-1', ?, 'A', '2025-07-10', '2025-07-13', 1, 'pending', 0),
                       ('T-2', ?, 'B', '2025-07-13', '2025-07-15', 1, 'pending', 0)
            ''', (hotel_data['room_101'], hotel_data['room_101']))
            db.commit()

            with pytest.raises(sqlite3.IntegrityError, match='reservation_overlap'):
                db.execute("UPDATE reservations SET check_out_date = '2025-07-14' "
                           "WHERE reservation_code = 'T-1'")
            db.rollback()

    def test_reactivating_overlapping_cancelled_row_aborted(self, app, hotel_data):
        with app.app_context():
            db = get_db()
            db.execute('''
                INSERT INTO reservations
                (reservation_code, accommodation_id, guest_name, check_in_date, check_out_date,
                 guests, status, total_price)
                VALUES ('T-1', ?, 'A', '2025-07-10', '2025-07-13', 1, 'cancelled', 0),
                       ('T-2', ?, 'B', '2025-07-11', '2025-07-15', 1, 'pending', 0)
            ''', (hotel_data['room_101'], hotel_data['room_101']))
            db.commit()

            with pytest.raises(sqlite3.IntegrityError):
                db.execute("UPDATE reservations SET status = 'confirmed' WHERE reservation_code = 'T-1'")
            db.rollback()
