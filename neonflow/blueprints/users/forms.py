from wtforms import PasswordField, SelectField, StringField
from wtforms.validators import AnyOf, DataRequired, Length, Optional

from neonflow.models import User
from neonflow.utils.forms import ApiForm
from neonflow.utils.validators import validate_not_blank

ROLE_CHOICES = [(role, role) for role in User.ROLES]
STATUS_CHOICES = [(status, status) for status in User.STATUSES]


class UserForm(ApiForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=128), validate_not_blank])
    email = StringField('Email', validators=[DataRequired(), Length(max=128)])
    password = PasswordField('Password', validators=[DataRequired(), Length(min=2, max=128)])
    role = SelectField('Role', choices=ROLE_CHOICES, default=User.ROLE_STAFF)
    status = SelectField('Status', choices=STATUS_CHOICES, default=User.STATUS_ACTIVE)
    avatar = StringField('Avatar', validators=[Optional(), Length(max=256)])


class UserUpdateForm(ApiForm):
    """Every field optional; an empty password keeps the current one"""
    name = StringField('Name', validators=[Optional(), Length(max=128), validate_not_blank])
    email = StringField('Email', validators=[Optional(), Length(max=128)])
    password = PasswordField('Password', validators=[Optional(), Length(min=2, max=128)])
    role = StringField('Role', validators=[Optional(), AnyOf(User.ROLES)])
    status = StringField('Status', validators=[Optional(), AnyOf(User.STATUSES)])
    avatar = StringField('Avatar', validators=[Optional(), Length(max=256)])
