"""
Database seed data.
Initial data population for fresh database installations.
"""

import json
from werkzeug.security import generate_password_hash


def seed_database(db):
    """Insert initial seed data."""

    # 1. Admin user (change the password after first login)
    db.execute('''
        INSERT INTO users (username, email, password_hash, full_name, active)
        VALUES (?, ?, ?, ?, ?)
    ''', ('admin', 'admin@pousada.local', generate_password_hash('admin123'),
          'Administrador', 1))

    # 2. Default runtime settings
    default_copy_config = {
        'include_name': True,
        'include_category': True,
        'include_capacity': True,
        'include_description': True,
        'include_nights': True,
        'include_album_url': True,
        'include_price': True,
        'include_total': True,
    }

    settings_data = [
        ('copy_config', json.dumps(default_copy_config), 'Campos do texto de compartilhamento'),
        ('occupancy_default_days', '14', 'Dias exibidos no mapa de ocupação'),
        ('search_allow_force', 'true', 'Permitir busca ignorando estadia mínima'),
    ]

    for key, value, description in settings_data:
        db.execute('''
            INSERT INTO app_settings (key, value, description)
            VALUES (?, ?, ?)
        ''', (key, value, description))
