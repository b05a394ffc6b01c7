"""
Application settings data access functions.
Handles reading and writing app_settings key-value pairs.
"""

from typing import Optional, Dict
from database import get_db


def get_setting(key: str, default: str = None) -> Optional[str]:
    """
    Get a single setting value by key.

    Args:
        key: Setting key name
        default: Default value if key not found

    Returns:
        Setting value string or default
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT value FROM app_settings WHERE key = ?', (key,))
    row = cursor.fetchone()
    return row['value'] if row else default


def get_setting_int(key: str, default: int = 0) -> int:
    """
    Get a setting value as integer.

    Args:
        key: Setting key name
        default: Default value if key not found or invalid

    Returns:
        Setting value as integer
    """
    value = get_setting(key)
    if value is None:
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


def get_setting_bool(key: str, default: bool = False) -> bool:
    """
    Get a setting value as boolean.

    Args:
        key: Setting key name
        default: Default value if key not found

    Returns:
        Setting value as boolean
    """
    value = get_setting(key)
    if value is None:
        return default
    return value.lower() in ('true', '1', 'yes', 'on', 'sim')


def get_all_settings() -> Dict[str, str]:
    """Get all setting key-value pairs."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT key, value FROM app_settings ORDER BY key')
    return {row['key']: row['value'] for row in cursor.fetchall()}


def set_setting(key: str, value: str, description: str = None) -> bool:
    """
    Set a setting value (insert or update).

    Args:
        key: Setting key name
        value: Setting value
        description: Optional description (only used on insert)

    Returns:
        True if successful
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO app_settings (key, value, description)
        VALUES (?, ?, ?)
        ON CONFLICT(key) DO UPDATE SET
            value = excluded.value,
            updated_at = CURRENT_TIMESTAMP
    ''', (key, value, description))

    db.commit()
    return cursor.rowcount > 0


def delete_setting(key: str) -> bool:
    """
    Delete a setting key.

    Args:
        key: Setting key name

    Returns:
        True if deleted
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('DELETE FROM app_settings WHERE key = ?', (key,))
    db.commit()
    return cursor.rowcount > 0


class SettingsStore:
    """
    Key-value store adapter over app_settings.

    Collaborators that persist small blobs (the share-text config) take a
    store instance instead of touching the table directly, so tests can pass
    any object exposing get/set/delete.
    """

    def get(self, key: str, default: str = None) -> Optional[str]:
        return get_setting(key, default)

    def set(self, key: str, value: str) -> None:
        set_setting(key, value)

    def delete(self, key: str) -> None:
        delete_setting(key)
