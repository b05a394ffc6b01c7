"""
Public API routes.
Health check and application metadata.
"""

from flask import current_app, jsonify, Blueprint

from database import get_db

api_bp = Blueprint('api', __name__)


@api_bp.route('/health')
def health_check():
    """
    Health check endpoint (no authentication required).

    Returns:
        JSON with status, version and database reachability
    """
    try:
        get_db().execute('SELECT 1').fetchone()
        database = 'ok'
    except Exception as e:
        current_app.logger.error(f'Health check database error: {e}', exc_info=True)
        database = 'error'

    return jsonify({
        'status': 'ok' if database == 'ok' else 'degraded',
        'database': database,
        'version': current_app.config['APP_VERSION'],
        'app': current_app.config['APP_NAME']
    }), 200 if database == 'ok' else 503
