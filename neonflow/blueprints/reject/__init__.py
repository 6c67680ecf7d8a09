from flask import Blueprint

reject_bp = Blueprint('reject', __name__)

from . import routes  # noqa: E402,F401
