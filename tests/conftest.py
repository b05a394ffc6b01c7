"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, not the production database.
"""

import os
import pytest
import tempfile

# Set test database path BEFORE importing app
# This ensures all tests use an isolated database
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), 'pousada_test.db')
os.environ['DATABASE_PATH'] = TEST_DB_PATH


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    os.environ['DATABASE_PATH'] = TEST_DB_PATH
    os.environ['FLASK_ENV'] = 'test'

    yield

    # Cleanup: remove test database after all tests
    for path in (TEST_DB_PATH, TEST_DB_PATH + '-wal', TEST_DB_PATH + '-shm'):
        if os.path.exists(path):
            try:
                os.remove(path)
            except PermissionError:
                pass  # Windows may have file locked


@pytest.fixture
def app():
    """Create test application with isolated database."""
    from app import create_app
    from database import init_db

    os.environ['DATABASE_PATH'] = TEST_DB_PATH

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['WTF_CSRF_ENABLED'] = False
    app.config['DATABASE_PATH'] = TEST_DB_PATH

    with app.app_context():
        init_db()
        yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def authenticated_client(app, client):
    """Create authenticated test client."""
    with app.app_context():
        # Login as admin
        client.post('/login', data={
            'username': 'admin',
            'password': 'admin123'
        })
    return client


@pytest.fixture
def hotel_data(app):
    """
    Small priced inventory.

    Two Standard rooms (capacity 4 and 2), one Luxo room (capacity 4), a
    'Julho' period (2025-07-01 to 2025-07-31, minimum stay 2) and exact
    prices for room 101: 2 people 200/180, 4 people 300/270
    (with/without breakfast).
    """
    from models.accommodation import create_accommodation
    from models.price_period import create_period
    from models.price_entry import create_price_entry

    with app.app_context():
        room_101 = create_accommodation('Apartamento Standard', '101', 'Standard', 4)
        room_102 = create_accommodation('Apartamento Standard Duplo', '102', 'Standard', 2)
        room_201 = create_accommodation('Suíte Luxo', '201', 'Luxo', 4)

        july = create_period('Julho', '2025-07-01', '2025-07-31', minimum_stay=2)

        for people, with_breakfast, without_breakfast in ((2, 200, 180), (4, 300, 270)):
            create_price_entry(july, people, with_breakfast, includes_breakfast=True,
                               accommodation_id=room_101)
            create_price_entry(july, people, without_breakfast, includes_breakfast=False,
                               accommodation_id=room_101)

        yield {
            'room_101': room_101,
            'room_102': room_102,
            'room_201': room_201,
            'july': july,
        }
