"""
Tests for the share-text config and formatter.
"""

import pytest

from models.config import SettingsStore, get_setting
from models.copy_config import (
    COPY_CONFIG_KEY, DEFAULT_COPY_CONFIG, normalize_copy_config, load_copy_config,
    save_copy_config, reset_copy_config, get_template
)
from utils.copy_formatter import format_accommodation_text, generate_preview_text


class MemoryStore:
    """Dict-backed key-value store."""

    def __init__(self, data=None):
        self.data = dict(data or {})

    def get(self, key, default=None):
        return self.data.get(key, default)

    def set(self, key, value):
        self.data[key] = value

    def delete(self, key):
        self.data.pop(key, None)


def _result(**overrides):
    result = {
        'accommodation': {
            'name': 'Apartamento Standard',
            'category': 'Standard',
            'capacity': 4,
            'description': 'Vista para o mar',
            'album_url': 'https://photos.example.com/101',
        },
        'price_per_night': 180.0,
        'total_price': 540.0,
        'nights': 3,
        'has_multiple_periods': False,
        'periods_count': 1,
    }
    result.update(overrides)
    return result


class TestConfigPersistence:
    """Tests for load, save and reset."""

    def test_defaults_when_missing(self):
        assert load_copy_config(MemoryStore()) == DEFAULT_COPY_CONFIG

    def test_defaults_when_unreadable(self):
        store = MemoryStore({COPY_CONFIG_KEY: '{not json'})
        assert load_copy_config(store) == DEFAULT_COPY_CONFIG

    def test_partial_save_is_merged(self):
        store = MemoryStore()
        saved = save_copy_config({'include_total': False, 'bogus': True}, store)

        assert saved['include_total'] is False
        assert saved['include_name'] is True
        assert 'bogus' not in saved
        assert load_copy_config(store) == saved

    def test_reset(self):
        store = MemoryStore()
        save_copy_config({'include_price': False}, store)

        assert reset_copy_config(store) == DEFAULT_COPY_CONFIG
        assert COPY_CONFIG_KEY not in store.data

    def test_normalize_casts_to_bool(self):
        assert normalize_copy_config({'include_name': 0})['include_name'] is False

    def test_settings_store_round_trip(self, app):
        with app.app_context():
            store = SettingsStore()
            save_copy_config({'include_album_url': False}, store)

            assert get_setting(COPY_CONFIG_KEY) is not None
            assert load_copy_config(store)['include_album_url'] is False

            reset_copy_config(store)
            assert get_setting(COPY_CONFIG_KEY) is None


class TestTemplates:
    """Tests for named templates."""

    def test_known_template(self):
        template = get_template('Básico')
        assert template['include_description'] is False
        assert set(template) == set(DEFAULT_COPY_CONFIG)

    def test_template_is_a_copy(self):
        get_template('Completo')['include_name'] = False
        assert get_template('Completo')['include_name'] is True

    def test_unknown_template(self):
        with pytest.raises(ValueError):
            get_template('Inexistente')


class TestFormatAccommodationText:
    """Tests for the rendered text."""

    def test_full_config(self):
        text = format_accommodation_text(_result(), DEFAULT_COPY_CONFIG)

        assert text.startswith('*Apartamento Standard*')
        assert '*Categoria:* Standard' in text
        assert '*Capacidade:* 4 pessoas' in text
        assert 'Vista para o mar' in text
        assert '*Álbum de fotos:* https://photos.example.com/101' in text
        assert '*Valor da diária:* R$ 180.00' in text
        assert '*Número de diárias:* 3' in text
        assert text.endswith('*Valor total:* R$ 540.00')

    def test_prices_only_template(self):
        text = format_accommodation_text(_result(), get_template('Apenas Preços'))

        assert 'Categoria' not in text
        assert 'Vista para o mar' not in text
        assert '*Valor total:* R$ 540.00' in text

    def test_multiple_periods_note(self):
        text = format_accommodation_text(
            _result(has_multiple_periods=True, periods_count=3), DEFAULT_COPY_CONFIG
        )
        assert '3 períodos tarifários diferentes' in text

    def test_no_price_hides_price_lines(self):
        text = format_accommodation_text(_result(price_per_night=0), DEFAULT_COPY_CONFIG)

        assert 'Valor' not in text
        assert 'diárias' not in text

    def test_single_night_quote_has_no_total(self):
        text = format_accommodation_text(
            _result(nights=None, total_price=None), DEFAULT_COPY_CONFIG
        )

        assert '*Valor da diária:* R$ 180.00' in text
        assert 'Valor total' not in text

    def test_missing_accommodation(self):
        assert format_accommodation_text({}, DEFAULT_COPY_CONFIG) == ''

    def test_preview(self):
        text = generate_preview_text(DEFAULT_COPY_CONFIG)

        assert '*Valor da diária:* R$ 295.00' in text
        assert '*Valor total:* R$ 885.00' in text
