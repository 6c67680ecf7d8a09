from flask_wtf import FlaskForm
from neonflow.exceptions import ValidationError


class ApiForm(FlaskForm):
    """
    FlaskForm fed from a JSON body (Flask-WTF wraps request.get_json()).
    Session cookies are SameSite=Lax and the API only speaks JSON, so the
    per-form CSRF token is off.
    """
    class Meta:
        csrf = False

    def validate_or_raise(self):
        if not self.validate():
            problems = [f"{name}: {', '.join(errors)}" for name, errors in self.errors.items()]
            raise ValidationError('; '.join(problems), payload={'errors': self.errors})
        return self
