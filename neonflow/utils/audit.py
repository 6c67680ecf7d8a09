"""
Audit trail helpers
Records important operations (who, module, action, details)
"""
from functools import wraps
import json

from flask import request
from flask_login import current_user

from neonflow.extensions import db
from neonflow.models.sys import AuditLog


def log_action(module, action, details=None, user=None):
    """
    Write an audit entry for the current user.
    :param module: module name ('inventory', 'transactions', 'users', ...)
    :param action: action name ('create', 'revise', 'delete', ...)
    :param details: extra information (dict)
    :param user: author of the entry when it is not the signed-in user
    """
    user = user or current_user
    if not user.is_authenticated:
        return
    log = AuditLog(
        user_id=user.id,
        module=module,
        action=action,
        ip_address=request.remote_addr,
        details=json.dumps(details, ensure_ascii=False, default=str) if details else None
    )
    db.session.add(log)
    db.session.commit()


def audit_log(module, action):
    """
    Decorator form, logs after the view returned successfully:

    @audit_log('transactions', 'delete')
    def delete_transaction(movement_id):
        ...
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            result = f(*args, **kwargs)
            log_action(module, action, kwargs or None)
            return result
        return decorated_function
    return decorator
