"""
Settings API routes.
Runtime key-value settings and the share-text copy config.
"""

from flask import request
from flask_login import login_required

from utils.api_response import api_success, api_error
from utils.messages import MESSAGES
from utils.copy_formatter import generate_preview_text
from models.config import SettingsStore, get_all_settings, set_setting
from models.copy_config import (
    COPY_CONFIG_KEY, COPY_CONFIG_TEMPLATES, load_copy_config, save_copy_config,
    reset_copy_config, normalize_copy_config, get_template
)


def register_routes(bp):
    """Register settings API routes on the blueprint."""

    # ============================================================================
    # GENERAL SETTINGS
    # ============================================================================

    @bp.route('/settings')
    @login_required
    def settings_list():
        """All runtime settings as key-value pairs."""
        return api_success(settings=get_all_settings())

    @bp.route('/settings', methods=['PUT'])
    @login_required
    def settings_update():
        """
        Update runtime settings.

        Request body:
            {key: value, ...} (the copy config has its own endpoint)
        """
        data = request.get_json(silent=True)
        if not data or not isinstance(data, dict):
            return api_error(MESSAGES['data_required'], 400)

        if COPY_CONFIG_KEY in data:
            return api_error('Use /settings/copy-config para o texto de compartilhamento', 400)

        for key, value in data.items():
            if isinstance(value, bool):
                value = 'true' if value else 'false'
            set_setting(key, str(value))

        return api_success(settings=get_all_settings(), message=MESSAGES['settings_saved'])

    # ============================================================================
    # COPY CONFIG
    # ============================================================================

    @bp.route('/settings/copy-config')
    @login_required
    def copy_config_get():
        """Stored copy config with a preview of the resulting text."""
        config = load_copy_config(SettingsStore())
        return api_success(config=config, preview=generate_preview_text(config))

    @bp.route('/settings/copy-config', methods=['PUT'])
    @login_required
    def copy_config_save():
        """
        Save the copy config.

        Request body:
            include_* flags; missing flags take their default value
        """
        data = request.get_json(silent=True)
        if not data or not isinstance(data, dict):
            return api_error(MESSAGES['data_required'], 400)

        config = save_copy_config(data, SettingsStore())
        return api_success(config=config, preview=generate_preview_text(config),
                           message=MESSAGES['settings_saved'])

    @bp.route('/settings/copy-config', methods=['DELETE'])
    @login_required
    def copy_config_reset():
        """Restore the default copy config."""
        config = reset_copy_config(SettingsStore())
        return api_success(config=config, message=MESSAGES['settings_reset'])

    @bp.route('/settings/copy-config/templates')
    @login_required
    def copy_config_templates():
        """Named copy config templates."""
        return api_success(templates=COPY_CONFIG_TEMPLATES)

    @bp.route('/settings/copy-config/templates/<name>', methods=['POST'])
    @login_required
    def copy_config_apply_template(name):
        """Save a named template as the copy config."""
        try:
            template = get_template(name)
        except ValueError as e:
            return api_error(str(e), 404)

        config = save_copy_config(template, SettingsStore())
        return api_success(config=config, message=MESSAGES['settings_saved'])

    @bp.route('/settings/copy-config/preview', methods=['POST'])
    @login_required
    def copy_config_preview():
        """Render the sample text for an unsaved config."""
        data = request.get_json(silent=True) or {}
        return api_success(preview=generate_preview_text(normalize_copy_config(data)))
