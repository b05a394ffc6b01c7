"""
Login accounts.
The API has a single role: every active account administers the hotel.
"""

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from database import get_db

MIN_PASSWORD_LENGTH = 6


class User(UserMixin):
    """Session user built from a users row."""

    def __init__(self, row: dict):
        self.id = row['id']
        self.username = row['username']
        self.email = row['email']
        self.full_name = row.get('full_name')
        self.active = row['active']
        self.last_login = row.get('last_login')

    @property
    def is_active(self):
        return self.active == 1

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'full_name': self.full_name,
            'last_login': self.last_login,
        }


def _fetch_user(column: str, value) -> dict | None:
    row = get_db().execute(f'SELECT * FROM users WHERE {column} = ?', (value,)).fetchone()
    return dict(row) if row else None


def get_user_by_id(user_id: int) -> dict | None:
    return _fetch_user('id', user_id)


def get_user_by_username(username: str) -> dict | None:
    return _fetch_user('username', username)


def _check_length(password: str) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f'A senha deve ter pelo menos {MIN_PASSWORD_LENGTH} caracteres')


def create_user(username: str, email: str, password: str, full_name: str = None) -> int:
    """
    Create an account; the password is stored as a werkzeug hash.

    Raises:
        ValueError: Short password, or username/e-mail already taken
    """
    _check_length(password)

    db = get_db()
    taken = db.execute(
        'SELECT 1 FROM users WHERE username = ? OR email = ?', (username, email)
    ).fetchone()
    if taken:
        raise ValueError('Usuário ou e-mail já cadastrado')

    cursor = db.execute('''
        INSERT INTO users (username, email, password_hash, full_name)
        VALUES (?, ?, ?, ?)
    ''', (username, email, generate_password_hash(password), full_name))
    db.commit()
    return cursor.lastrowid


def check_password(user_row: dict, password: str) -> bool:
    if not user_row or not password:
        return False
    return check_password_hash(user_row['password_hash'], password)


def update_last_login(user_id: int) -> None:
    db = get_db()
    db.execute('UPDATE users SET last_login = CURRENT_TIMESTAMP WHERE id = ?', (user_id,))
    db.commit()


def update_password(user_id: int, new_password: str) -> bool:
    """
    Replace the stored hash.

    Raises:
        ValueError: If the new password is too short
    """
    _check_length(new_password)

    db = get_db()
    cursor = db.execute('''
        UPDATE users SET password_hash = ?, updated_at = CURRENT_TIMESTAMP
        WHERE id = ?
    ''', (generate_password_hash(new_password), user_id))
    db.commit()
    return cursor.rowcount > 0
