"""
Occupancy calendar API routes.
"""

from datetime import timedelta

from flask import current_app, request
from flask_login import login_required

from utils.api_response import api_success, api_error
from utils.datetime_helpers import get_today, parse_date
from models.config import get_setting_int
from models.occupancy import build_occupancy_grid, get_occupancy_stats


def _requested_range():
    """
    Read start/end query params.

    Defaults to today plus the configured number of days.

    Raises:
        ValueError: On invalid dates or an inverted range
    """
    start_str = request.args.get('start')
    end_str = request.args.get('end')

    start = parse_date(start_str) if start_str else get_today()
    if end_str:
        end = parse_date(end_str)
    else:
        days = get_setting_int('occupancy_default_days', 14)
        end = start + timedelta(days=max(days, 1) - 1)

    if end < start:
        raise ValueError('A data final deve ser igual ou posterior à inicial')
    if (end - start).days > current_app.config['OCCUPANCY_MAX_DAYS']:
        raise ValueError('O intervalo máximo é de um ano')
    return start, end


def register_routes(bp):
    """Register occupancy API routes on the blueprint."""

    @bp.route('/occupancy')
    @login_required
    def occupancy_grid():
        """
        Classified occupancy grid.

        Query params:
            start: First day YYYY-MM-DD (default: today)
            end: Last day, inclusive (default: start + occupancy_default_days - 1)

        Returns:
            JSON with dates and per-accommodation cells
            (empty, blocked, checkout, checkin, occupied, turnover)
        """
        try:
            start, end = _requested_range()
        except ValueError as e:
            return api_error(str(e), 400)

        grid = build_occupancy_grid(start, end)
        return api_success(
            start=start.isoformat(),
            end=end.isoformat(),
            dates=grid['dates'],
            accommodations=grid['accommodations']
        )

    @bp.route('/occupancy/stats')
    @login_required
    def occupancy_stats():
        """Occupancy summary for a range (same params as the grid)."""
        try:
            start, end = _requested_range()
        except ValueError as e:
            return api_error(str(e), 400)

        return api_success(start=start.isoformat(), end=end.isoformat(),
                           stats=get_occupancy_stats(start, end))
