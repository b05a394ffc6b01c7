"""
Authentication forms using Flask-WTF.
Login and password change, accepted as form data or JSON bodies.
"""

from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField
from wtforms.validators import DataRequired, Length, EqualTo


class LoginForm(FlaskForm):
    """Login form with username and password."""

    username = StringField('Usuário', validators=[
        DataRequired(message='O usuário é obrigatório')
    ])

    password = PasswordField('Senha', validators=[
        DataRequired(message='A senha é obrigatória')
    ])

    remember_me = BooleanField('Lembrar de mim')


class ChangePasswordForm(FlaskForm):
    """Password change form."""

    current_password = PasswordField('Senha atual', validators=[
        DataRequired(message='A senha atual é obrigatória')
    ])

    new_password = PasswordField('Nova senha', validators=[
        DataRequired(message='A nova senha é obrigatória'),
        Length(min=6, message='A senha deve ter pelo menos 6 caracteres'),
    ])

    confirm_password = PasswordField('Confirmar senha', validators=[
        DataRequired(message='Confirme a nova senha'),
        EqualTo('new_password', message='As senhas não coincidem')
    ])


def first_error(form: FlaskForm) -> str:
    """First validation message of a form, for JSON error responses."""
    for errors in form.errors.values():
        if errors:
            return errors[0]
    return 'Dados inválidos'
