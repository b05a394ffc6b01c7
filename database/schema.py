"""
Database schema definitions.
Table creation, indexes, integrity triggers and structure management.
"""


def drop_tables(db):
    """Drop all existing tables."""
    # Disable foreign key constraints before dropping
    db.execute('PRAGMA foreign_keys = OFF')

    tables = [
        'maintenance_history',
        'maintenance_orders',
        'maintenance_areas',
        'reservation_status_history',
        'reservations',
        'guests',
        'price_entries',
        'price_periods',
        'accommodations',
        'app_settings',
        'users'
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')

    # Re-enable foreign key constraints
    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    # 1. Users
    db.execute('''
        CREATE TABLE users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT UNIQUE NOT NULL,
            email TEXT UNIQUE NOT NULL,
            password_hash TEXT NOT NULL,
            full_name TEXT,
            active INTEGER DEFAULT 1,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            last_login TIMESTAMP
        )
    ''')

    # 2. Inventory
    db.execute('''
        CREATE TABLE accommodations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            room_number TEXT UNIQUE NOT NULL,
            category TEXT NOT NULL
                CHECK(category IN ('Standard', 'Luxo', 'Super Luxo', 'Master')),
            capacity INTEGER NOT NULL CHECK(capacity > 0),
            description TEXT DEFAULT '',
            image_url TEXT,
            images TEXT DEFAULT '[]',
            album_url TEXT,
            is_blocked INTEGER DEFAULT 0,
            block_reason TEXT,
            block_note TEXT,
            block_start DATE,
            block_end DATE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CHECK(block_start IS NULL OR block_end IS NULL OR block_start <= block_end)
        )
    ''')

    # 3. Pricing
    db.execute('''
        CREATE TABLE price_periods (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            start_date DATE NOT NULL,
            end_date DATE NOT NULL,
            is_holiday INTEGER DEFAULT 0,
            minimum_stay INTEGER DEFAULT 1 CHECK(minimum_stay >= 1),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CHECK(start_date <= end_date)
        )
    ''')

    db.execute('''
        CREATE TABLE price_entries (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            accommodation_id INTEGER REFERENCES accommodations(id) ON DELETE CASCADE,
            category TEXT,
            period_id INTEGER NOT NULL REFERENCES price_periods(id) ON DELETE CASCADE,
            people INTEGER NOT NULL CHECK(people >= 1),
            price_per_night REAL NOT NULL CHECK(price_per_night >= 0),
            includes_breakfast INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CHECK(accommodation_id IS NOT NULL OR category IS NOT NULL)
        )
    ''')

    # 4. Guests and reservations
    db.execute('''
        CREATE TABLE guests (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            first_name TEXT NOT NULL,
            last_name TEXT NOT NULL,
            email TEXT NOT NULL,
            phone TEXT,
            document_number TEXT,
            document_type TEXT,
            date_of_birth DATE,
            nationality TEXT,
            address_street TEXT,
            address_city TEXT,
            address_state TEXT,
            address_zip_code TEXT,
            address_country TEXT,
            emergency_contact_name TEXT,
            emergency_contact_phone TEXT,
            preferences TEXT DEFAULT '{}',
            notes TEXT,
            is_active INTEGER DEFAULT 1,
            created_by TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    db.execute('''
        CREATE TABLE reservations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            reservation_code TEXT UNIQUE NOT NULL,
            accommodation_id INTEGER NOT NULL REFERENCES accommodations(id),
            guest_id INTEGER REFERENCES guests(id) ON DELETE SET NULL,
            guest_name TEXT,
            check_in_date DATE NOT NULL,
            check_out_date DATE NOT NULL,
            guests INTEGER NOT NULL DEFAULT 1 CHECK(guests >= 1),
            includes_breakfast INTEGER DEFAULT 0,
            status TEXT NOT NULL DEFAULT 'pending'
                CHECK(status IN ('pending', 'confirmed', 'checked_in', 'checked_out', 'cancelled')),
            total_price REAL DEFAULT 0,
            notes TEXT,
            external_event_id TEXT,
            started_at TIMESTAMP,
            completed_at TIMESTAMP,
            created_by TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CHECK(check_in_date < check_out_date)
        )
    ''')

    db.execute('''
        CREATE TABLE reservation_status_history (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            reservation_id INTEGER NOT NULL REFERENCES reservations(id) ON DELETE CASCADE,
            old_status TEXT,
            new_status TEXT NOT NULL,
            changed_by TEXT,
            notes TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 5. Maintenance
    db.execute('''
        CREATE TABLE maintenance_areas (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            code TEXT UNIQUE NOT NULL,
            area_type TEXT NOT NULL
                CHECK(area_type IN ('accommodation', 'common', 'maintenance', 'restaurant', 'recreation')),
            description TEXT,
            location TEXT,
            is_active INTEGER DEFAULT 1,
            accommodation_id INTEGER REFERENCES accommodations(id) ON DELETE SET NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    db.execute('''
        CREATE TABLE maintenance_orders (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            order_number TEXT UNIQUE NOT NULL,
            area_id INTEGER NOT NULL REFERENCES maintenance_areas(id),
            title TEXT NOT NULL,
            description TEXT DEFAULT '',
            priority TEXT NOT NULL DEFAULT 'medium'
                CHECK(priority IN ('low', 'medium', 'high', 'urgent')),
            status TEXT NOT NULL DEFAULT 'pending'
                CHECK(status IN ('pending', 'in_progress', 'completed', 'cancelled')),
            requested_by TEXT,
            assigned_to TEXT,
            scheduled_date DATE,
            started_at TIMESTAMP,
            completed_at TIMESTAMP,
            estimated_hours REAL,
            actual_hours REAL,
            cost REAL,
            notes TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    db.execute('''
        CREATE TABLE maintenance_history (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            maintenance_order_id INTEGER NOT NULL REFERENCES maintenance_orders(id) ON DELETE CASCADE,
            status TEXT NOT NULL,
            notes TEXT,
            changed_by TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 6. Runtime settings
    db.execute('''
        CREATE TABLE app_settings (
            key TEXT PRIMARY KEY,
            value TEXT,
            description TEXT,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')


def create_indexes(db):
    """Create lookup and uniqueness indexes."""

    # Accommodation indexes
    db.execute('CREATE INDEX idx_accommodations_category ON accommodations(category)')
    db.execute('CREATE INDEX idx_accommodations_blocked ON accommodations(is_blocked)')

    # Period indexes
    db.execute('CREATE INDEX idx_periods_dates ON price_periods(start_date, end_date, is_holiday)')

    # Price entry natural keys (one entry per accommodation/period/people/breakfast)
    db.execute('''
        CREATE UNIQUE INDEX idx_price_entries_accommodation_key
        ON price_entries(accommodation_id, period_id, people, includes_breakfast)
    ''')
    db.execute('''
        CREATE UNIQUE INDEX idx_price_entries_category_key
        ON price_entries(category, period_id, people, includes_breakfast)
        WHERE accommodation_id IS NULL
    ''')
    db.execute('CREATE INDEX idx_price_entries_period ON price_entries(period_id)')

    # Reservation indexes
    db.execute('CREATE INDEX idx_reservations_stay ON reservations(accommodation_id, check_in_date, check_out_date)')
    db.execute('CREATE INDEX idx_reservations_guest ON reservations(guest_id)')
    db.execute('CREATE INDEX idx_reservations_status ON reservations(status)')

    # Guest indexes
    db.execute('CREATE INDEX idx_guests_email ON guests(email)')
    db.execute('CREATE INDEX idx_guests_active ON guests(is_active, last_name)')

    # Maintenance indexes
    db.execute('CREATE INDEX idx_maintenance_orders_area ON maintenance_orders(area_id, status)')
    db.execute('CREATE INDEX idx_maintenance_history_order ON maintenance_history(maintenance_order_id)')


def create_triggers(db):
    """
    Create integrity triggers.

    The reservation overlap triggers are the write-time guard for bookings:
    two non-cancelled reservations of the same accommodation may not share a
    night under the half-open [check_in, check_out) model.
    """
    db.execute('''
        CREATE TRIGGER trg_reservations_no_overlap_insert
        BEFORE INSERT ON reservations
        WHEN NEW.status != 'cancelled'
        BEGIN
            SELECT RAISE(ABORT, 'reservation_overlap')
            WHERE EXISTS (
                SELECT 1 FROM reservations r
                WHERE r.accommodation_id = NEW.accommodation_id
                  AND r.status != 'cancelled'
                  AND r.check_in_date < NEW.check_out_date
                  AND NEW.check_in_date < r.check_out_date
            );
        END
    ''')

    db.execute('''
        CREATE TRIGGER trg_reservations_no_overlap_update
        BEFORE UPDATE OF accommodation_id, check_in_date, check_out_date, status ON reservations
        WHEN NEW.status != 'cancelled'
        BEGIN
            SELECT RAISE(ABORT, 'reservation_overlap')
            WHERE EXISTS (
                SELECT 1 FROM reservations r
                WHERE r.accommodation_id = NEW.accommodation_id
                  AND r.id != NEW.id
                  AND r.status != 'cancelled'
                  AND r.check_in_date < NEW.check_out_date
                  AND NEW.check_in_date < r.check_out_date
            );
        END
    ''')
