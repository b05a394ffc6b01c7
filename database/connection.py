"""
SQLite connection handling.
One connection per application context, closed on teardown.
"""

import logging
import sqlite3
from flask import g, current_app

logger = logging.getLogger(__name__)


def get_db():
    """
    Return the connection bound to the current app context.

    Rows come back as sqlite3.Row. Dates stay ISO text, so no
    detect_types. Foreign keys are enforced and the journal runs in WAL
    so readers do not wait on the reservation writer.
    """
    if 'db' not in g:
        conn = sqlite3.connect(current_app.config['DATABASE_PATH'])
        conn.row_factory = sqlite3.Row
        conn.execute('PRAGMA foreign_keys = ON')
        conn.execute('PRAGMA journal_mode = WAL')
        g.db = conn
    return g.db


def close_db(e=None):
    conn = g.pop('db', None)
    if conn is not None:
        conn.close()


def init_db():
    """
    Rebuild the schema from scratch and seed the admin account and settings.
    Existing data is dropped.
    """
    from database.schema import drop_tables, create_tables, create_indexes, create_triggers
    from database.seed import seed_database

    db = get_db()
    drop_tables(db)
    create_tables(db)
    create_indexes(db)
    create_triggers(db)
    seed_database(db)
    db.commit()

    logger.info('Database initialized at %s', current_app.config['DATABASE_PATH'])
