"""User administration and login checks"""
from flask import current_app

from neonflow.extensions import db
from neonflow.exceptions import PermissionDenied, RecordNotFound, ValidationError
from neonflow.models import User, generate_id


class UserService:

    @staticmethod
    def authenticate(email, password):
        """Active user matching the credentials, or None"""
        user = User.query.filter_by(email=email).first()
        if user is None or not user.is_active or not user.verify_password(password):
            return None
        user.touch()
        db.session.commit()
        return user

    @staticmethod
    def get_user(user_id):
        user = db.session.get(User, user_id)
        if user is None:
            raise RecordNotFound(f"User {user_id} not found")
        return user

    @staticmethod
    def list_users():
        return User.query.order_by(User.name.asc()).all()

    @staticmethod
    def create_user(name, email, password, role=User.ROLE_STAFF, status=User.STATUS_ACTIVE, avatar=None):
        if User.query.filter_by(email=email).first():
            raise ValidationError(f"Email {email} is already registered")
        user = User(
            id=generate_id('usr'),
            name=name,
            email=email,
            password=password,
            role=role,
            status=status,
            avatar=avatar,
        )
        db.session.add(user)
        db.session.commit()
        current_app.logger.info(f"User {user.email} created ({user.role})")
        return user

    @staticmethod
    def update_user(user_id, **fields):
        """Update profile fields; an empty password leaves it unchanged"""
        user = UserService.get_user(user_id)
        email = fields.get('email')
        if email and email != user.email and User.query.filter_by(email=email).first():
            raise ValidationError(f"Email {email} is already registered")
        if user.is_protected and (fields.get('role') not in (None, User.ROLE_ADMIN)
                                  or fields.get('status') not in (None, User.STATUS_ACTIVE)):
            raise PermissionDenied("The super admin cannot be demoted or deactivated")

        for key in ('name', 'email', 'role', 'status', 'avatar'):
            if fields.get(key) is not None:
                setattr(user, key, fields[key])
        if fields.get('password'):
            user.password = fields['password']
        db.session.commit()
        return user

    @staticmethod
    def delete_user(user_id, acting_user=None):
        user = UserService.get_user(user_id)
        if user.is_protected:
            raise PermissionDenied("Cannot delete the Super Admin account")
        if acting_user is not None and acting_user.id == user.id:
            raise PermissionDenied("You cannot delete your own account")
        db.session.delete(user)
        db.session.commit()
        current_app.logger.info(f"User {user.email} deleted")

    @staticmethod
    def ensure_admin():
        """Seed the protected super admin if it is missing"""
        email = current_app.config['ADMIN_EMAIL']
        admin = User.query.filter_by(email=email).first()
        if admin is None:
            admin = User(
                id='usr-admin-01',
                name='Super Admin',
                email=email,
                password=current_app.config['ADMIN_PASSWORD'],
                role=User.ROLE_ADMIN,
                status=User.STATUS_ACTIVE,
                is_protected=True,
            )
            db.session.add(admin)
            db.session.commit()
            current_app.logger.info(f"Super admin created: {email}")
        return admin
