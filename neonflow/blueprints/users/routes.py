from flask import jsonify
from flask_login import current_user, login_required

from neonflow.blueprints.users import users_bp
from neonflow.blueprints.users.forms import UserForm, UserUpdateForm
from neonflow.services.user_service import UserService
from neonflow.utils.audit import audit_log, log_action
from neonflow.utils.decorators import admin_required


@users_bp.route('', methods=['GET'])
@login_required
@admin_required
def list_users():
    return jsonify([user.to_dict() for user in UserService.list_users()])


@users_bp.route('', methods=['POST'])
@login_required
@admin_required
def create_user():
    form = UserForm().validate_or_raise()
    user = UserService.create_user(
        name=form.name.data.strip(),
        email=form.email.data.strip(),
        password=form.password.data,
        role=form.role.data,
        status=form.status.data,
        avatar=form.avatar.data or None,
    )
    log_action('users', 'create', {'id': user.id, 'email': user.email, 'role': user.role})
    return jsonify({'success': True, 'user': user.to_dict()}), 201


@users_bp.route('/<user_id>', methods=['GET'])
@login_required
@admin_required
def get_user(user_id):
    return jsonify(UserService.get_user(user_id).to_dict())


@users_bp.route('/<user_id>', methods=['PUT'])
@login_required
@admin_required
def update_user(user_id):
    form = UserUpdateForm().validate_or_raise()
    fields = {name: field.data or None for name, field in form._fields.items()}
    user = UserService.update_user(user_id, **fields)
    log_action('users', 'update', {'id': user.id})
    return jsonify({'success': True, 'user': user.to_dict()})


@users_bp.route('/<user_id>', methods=['DELETE'])
@login_required
@admin_required
@audit_log('users', 'delete')
def delete_user(user_id):
    UserService.delete_user(user_id, acting_user=current_user)
    return jsonify({'success': True})
