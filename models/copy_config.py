"""
Share-text configuration.
Which fields the WhatsApp text includes, persisted through a key-value store.
"""

import json
import logging

logger = logging.getLogger(__name__)

COPY_CONFIG_KEY = 'copy_config'

DEFAULT_COPY_CONFIG = {
    'include_name': True,
    'include_category': True,
    'include_capacity': True,
    'include_description': True,
    'include_nights': True,
    'include_album_url': True,
    'include_price': True,
    'include_total': True,
}

COPY_CONFIG_TEMPLATES = {
    'Completo': dict(DEFAULT_COPY_CONFIG),
    'Básico': {
        'include_name': True,
        'include_category': True,
        'include_capacity': True,
        'include_description': False,
        'include_nights': False,
        'include_album_url': False,
        'include_price': True,
        'include_total': False,
    },
    'Apenas Preços': {
        'include_name': True,
        'include_category': False,
        'include_capacity': False,
        'include_description': False,
        'include_nights': True,
        'include_album_url': False,
        'include_price': True,
        'include_total': True,
    },
}


def normalize_copy_config(config: dict) -> dict:
    """Merge a partial config over the defaults, dropping unknown keys."""
    merged = dict(DEFAULT_COPY_CONFIG)
    for key, value in (config or {}).items():
        if key in DEFAULT_COPY_CONFIG:
            merged[key] = bool(value)
    return merged


def load_copy_config(store) -> dict:
    """
    Load the share-text config.

    Args:
        store: Key-value store exposing get(key)

    Returns:
        Full config dict; defaults when nothing is stored or the blob is unreadable
    """
    raw = store.get(COPY_CONFIG_KEY)
    if not raw:
        return dict(DEFAULT_COPY_CONFIG)
    try:
        return normalize_copy_config(json.loads(raw))
    except (TypeError, ValueError) as e:
        logger.warning('Stored copy config is unreadable, using defaults: %s', e)
        return dict(DEFAULT_COPY_CONFIG)


def save_copy_config(config: dict, store) -> dict:
    """
    Persist a (possibly partial) share-text config.

    Returns:
        The normalized config that was stored
    """
    normalized = normalize_copy_config(config)
    store.set(COPY_CONFIG_KEY, json.dumps(normalized))
    return normalized


def reset_copy_config(store) -> dict:
    """Remove the stored config and return the defaults."""
    store.delete(COPY_CONFIG_KEY)
    return dict(DEFAULT_COPY_CONFIG)


def get_template(name: str) -> dict:
    """
    Get a named template.

    Raises:
        ValueError: If no template has that name
    """
    if name not in COPY_CONFIG_TEMPLATES:
        raise ValueError(f'Modelo desconhecido: {name}')
    return dict(COPY_CONFIG_TEMPLATES[name])
