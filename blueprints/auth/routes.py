"""
Authentication routes: login, logout, current user.
Session-based authentication for the JSON API.
"""

from flask import current_app, Blueprint
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf

from blueprints.auth.forms import LoginForm, ChangePasswordForm, first_error
from models.user import (
    User, get_user_by_id, get_user_by_username, update_last_login,
    update_password, check_password
)
from utils.api_response import api_success, api_error
from utils.messages import MESSAGES

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/csrf-token')
def csrf_token():
    """CSRF token for clients posting JSON with X-CSRFToken."""
    return api_success(csrf_token=generate_csrf())


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Log in with username and password.

    Request body (form or JSON):
        username, password (required)
        remember_me (optional)
    """
    form = LoginForm()

    if not form.validate_on_submit():
        return api_error(first_error(form), 400)

    user_dict = get_user_by_username(form.username.data)

    if user_dict is None or not check_password(user_dict, form.password.data):
        current_app.logger.warning(f'Failed login for {form.username.data}')
        return api_error(MESSAGES['invalid_credentials'], 401)

    if not user_dict.get('active'):
        return api_error('Sua conta foi desativada. Contate o administrador.', 403)

    user = User(user_dict)
    login_user(user, remember=form.remember_me.data)
    update_last_login(user.id)

    return api_success(
        user=user.to_dict(),
        message=MESSAGES['login_success'].format(name=user.full_name or user.username)
    )


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """Log out the current user."""
    logout_user()
    return api_success(message=MESSAGES['logout_success'])


@auth_bp.route('/me')
@login_required
def me():
    """Current user profile."""
    return api_success(user=current_user.to_dict())


@auth_bp.route('/me/password', methods=['POST'])
@login_required
def change_password():
    """
    Change the current user's password.

    Request body:
        current_password, new_password, confirm_password
    """
    form = ChangePasswordForm()

    if not form.validate_on_submit():
        return api_error(first_error(form), 400)

    user_dict = get_user_by_id(current_user.id)
    if not check_password(user_dict, form.current_password.data):
        return api_error('A senha atual está incorreta', 400)

    update_password(current_user.id, form.new_password.data)
    return api_success(message='Senha alterada com sucesso')
