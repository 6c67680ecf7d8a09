from wtforms import BooleanField, PasswordField, StringField
from wtforms.validators import DataRequired, Length

from neonflow.utils.forms import ApiForm


class LoginForm(ApiForm):
    """Login (the super admin's identifier is not an email address)"""
    email = StringField('Email', validators=[DataRequired(), Length(max=128)])
    password = PasswordField('Password', validators=[DataRequired()])
    remember_me = BooleanField('Remember me')
