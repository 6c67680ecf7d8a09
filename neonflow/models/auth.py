from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from neonflow.extensions import db
from .base import BaseModel


class User(UserMixin, BaseModel):
    """Application user (ADMIN or STAFF)"""
    __tablename__ = 'auth_users'

    ROLE_ADMIN = 'ADMIN'
    ROLE_STAFF = 'STAFF'
    ROLES = (ROLE_ADMIN, ROLE_STAFF)

    STATUS_ACTIVE = 'ACTIVE'
    STATUS_INACTIVE = 'INACTIVE'
    STATUSES = (STATUS_ACTIVE, STATUS_INACTIVE)

    name = db.Column(db.String(128), nullable=False)
    email = db.Column(db.String(128), unique=True, index=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    role = db.Column(db.String(10), nullable=False, default=ROLE_STAFF)
    status = db.Column(db.String(10), nullable=False, default=STATUS_ACTIVE)
    avatar = db.Column(db.String(256))
    last_active = db.Column(db.DateTime, nullable=True)

    # Seeded super admin, protected from deletion
    is_protected = db.Column(db.Boolean, default=False)

    @property
    def password(self):
        raise AttributeError('password is not readable')

    @password.setter
    def password(self, password):
        self.password_hash = generate_password_hash(password)

    def verify_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    # Flask-Login
    @property
    def is_active(self):
        return self.status == self.STATUS_ACTIVE

    def touch(self):
        self.last_active = datetime.utcnow()

    def to_dict(self):
        data = super().to_dict()
        data.pop('password_hash', None)
        return data

    def __repr__(self):
        return f'<User {self.email} {self.role}>'
