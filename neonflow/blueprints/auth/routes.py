from flask import jsonify
from flask_login import current_user, login_required, login_user, logout_user

from neonflow.blueprints.auth import auth_bp
from neonflow.blueprints.auth.forms import LoginForm
from neonflow.services.user_service import UserService
from neonflow.utils.audit import log_action


@auth_bp.route('/login', methods=['POST'])
def login():
    form = LoginForm().validate_or_raise()
    user = UserService.authenticate(form.email.data, form.password.data)
    if user is None:
        return jsonify({'success': False, 'code': 401, 'message': 'Invalid username or password'}), 401

    login_user(user, remember=form.remember_me.data)
    log_action('auth', 'login', {'email': user.email})
    return jsonify({'success': True, 'user': user.to_dict()})


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    log_action('auth', 'logout')
    logout_user()
    return jsonify({'success': True, 'message': 'Session terminated'})


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify({'success': True, 'user': current_user.to_dict()})
