from functools import wraps
from flask_login import current_user
from neonflow.exceptions import PermissionDenied


def admin_required(f):
    """
    Only ADMIN users may call the view.
    Use below @login_required so anonymous users get a 401 first.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated or not current_user.is_admin:
            raise PermissionDenied("Administrator role required")
        return f(*args, **kwargs)
    return decorated_function
