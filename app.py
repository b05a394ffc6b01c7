"""
Pousada Admin - Hotel Administration Backend
Flask application factory, JSON error handling and management commands.
"""

import os
import click
import logging
from flask import Flask, g
from flask_wtf.csrf import CSRFError
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from config import config
from extensions import login_manager, csrf
from database import close_db, init_db


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance

    Raises:
        ValueError: If the production environment is incomplete
    """
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    app = Flask(__name__)

    config_class = config[config_name]
    if config_name == 'production':
        config_class.validate()
    app.config.from_object(config_class)

    login_manager.init_app(app)
    csrf.init_app(app)

    register_blueprints(app)
    register_error_handlers(app)
    register_cli_commands(app)

    # One sqlite connection per app context
    app.teardown_appcontext(close_db)

    configure_logging(app)

    return app


def register_blueprints(app):
    """
    Register blueprints.

    /            login, logout, current user
    /hotel/api   hotel administration API (login required)
    /api         public health check
    """
    from blueprints.auth.routes import auth_bp
    from blueprints.hotel import hotel_bp
    from blueprints.api.routes import api_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(hotel_bp, url_prefix='/hotel')
    app.register_blueprint(api_bp, url_prefix='/api')


def register_error_handlers(app):
    """Every error leaves the API as the standard JSON error body."""
    from utils.api_response import api_error
    from utils.messages import MESSAGES

    @app.errorhandler(CSRFError)
    def csrf_error(error):
        return api_error(MESSAGES['csrf_invalid'], status=400)

    @app.errorhandler(400)
    def bad_request_error(error):
        return api_error(MESSAGES['bad_request'], status=400)

    @app.errorhandler(404)
    def not_found_error(error):
        return api_error(MESSAGES['not_found'], status=404)

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return api_error(MESSAGES['method_not_allowed'], status=405)

    @app.errorhandler(500)
    def internal_error(error):
        # Leave no half-written transaction on the shared connection
        db = g.get('db')
        if db:
            db.rollback()
        return api_error(MESSAGES['internal_error'], status=500)


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db_command():
        """Initialize database with schema and seed data."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db()
        click.echo('Database initialized successfully!')

    @app.cli.command('create-user')
    @click.argument('username')
    @click.argument('email')
    @click.option('--full-name', default=None, help='Name shown in the API')
    @click.password_option()
    def create_user_command(username, email, full_name, password):
        """Create a login account."""
        from models.user import create_user

        with app.app_context():
            try:
                user_id = create_user(username=username, email=email,
                                      password=password, full_name=full_name)
                click.echo(f'User created successfully! ID: {user_id}')
            except ValueError as e:
                click.echo(f'Error creating user: {str(e)}', err=True)

    @app.cli.command('set-setting')
    @click.argument('key')
    @click.argument('value')
    def set_setting_command(key, value):
        """Set a runtime setting (e.g. occupancy_default_days 30)."""
        from models.config import set_setting

        with app.app_context():
            set_setting(key, value)
        click.echo(f'{key} = {value}')

    @app.cli.command('occupancy')
    @click.option('--start', required=True, help='First day, YYYY-MM-DD')
    @click.option('--end', required=True, help='Last day, YYYY-MM-DD')
    def occupancy_command(start, end):
        """Print occupancy statistics for a date range."""
        from models.occupancy import get_occupancy_stats

        with app.app_context():
            try:
                stats = get_occupancy_stats(start, end)
            except ValueError as e:
                raise click.BadParameter(str(e))

        for key, value in stats.items():
            click.echo(f'{key}: {value}')


def configure_logging(app):
    """
    Configure application logging.

    Outside debug and testing, records go to LOG_DIR/pousada.log at INFO
    and module loggers (models.*) propagate to the same handler.
    """
    if app.debug or app.testing:
        app.logger.setLevel(logging.DEBUG)
        return

    log_dir = app.config['LOG_DIR']
    os.makedirs(log_dir, exist_ok=True)

    file_handler = logging.FileHandler(os.path.join(log_dir, 'pousada.log'))
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s %(name)s: %(message)s [in %(pathname)s:%(lineno)d]'
    ))
    file_handler.setLevel(logging.INFO)

    app.logger.addHandler(file_handler)
    app.logger.setLevel(logging.INFO)

    models_logger = logging.getLogger('models')
    models_logger.addHandler(file_handler)
    models_logger.setLevel(logging.INFO)

    app.logger.info('Pousada Admin startup')


# Development server
if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', debug=True)
