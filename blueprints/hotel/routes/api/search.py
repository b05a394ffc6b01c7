"""
Availability search API routes.
Search results carry the WhatsApp share text rendered with the stored copy config.
"""

from flask import current_app, request
from flask_login import login_required

from utils.api_response import api_success, api_error
from utils.copy_formatter import format_accommodation_text
from models.config import SettingsStore, get_setting_bool
from models.copy_config import load_copy_config
from blueprints.hotel.services.search_service import search_accommodations


def register_routes(bp):
    """Register search API routes on the blueprint."""

    @bp.route('/search', methods=['POST'])
    @login_required
    def search():
        """
        Search bookable accommodations.

        Request body:
            check_in: YYYY-MM-DD (required)
            check_out: YYYY-MM-DD (optional)
            guests: Party size (default: 1)
            includes_breakfast: Breakfast prices (optional)
            force: Skip the minimum stay prompt (optional)

        Returns:
            JSON with results (each with share text), has_min_stay_violations
            and max_min_stay
        """
        data = request.get_json(silent=True) or {}

        force = bool(data.get('force', False))
        if force and not get_setting_bool('search_allow_force', True):
            force = False

        try:
            outcome = search_accommodations(
                data.get('check_in'),
                data.get('check_out'),
                data.get('guests', 1),
                includes_breakfast=bool(data.get('includes_breakfast', False)),
                force=force
            )
        except ValueError as e:
            return api_error(str(e), 400)
        except Exception as e:
            current_app.logger.error(f'Search failed: {e}', exc_info=True)
            return api_error('Erro ao buscar acomodações', 500)

        config = load_copy_config(SettingsStore())
        for result in outcome['results']:
            result['share_text'] = format_accommodation_text(result, config)

        return api_success(
            results=outcome['results'],
            count=len(outcome['results']),
            has_min_stay_violations=outcome['has_min_stay_violations'],
            max_min_stay=outcome['max_min_stay']
        )
