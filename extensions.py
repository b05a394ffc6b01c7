"""
Flask extension instances, bound to the app in create_app().
"""

from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect

login_manager = LoginManager()
csrf = CSRFProtect()


@login_manager.user_loader
def load_user(user_id):
    """Rebuild the session user from its id; None logs the session out."""
    from models.user import get_user_by_id, User

    row = get_user_by_id(int(user_id))
    return User(row) if row else None


@login_manager.unauthorized_handler
def unauthorized():
    """The API has no login page: answer 401 with the JSON error body."""
    from utils.api_response import api_error
    from utils.messages import MESSAGES

    return api_error(MESSAGES['login_required'], status=401)
