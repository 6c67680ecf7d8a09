from datetime import datetime
from neonflow.extensions import db
from .base import BaseModel


class AuditLog(BaseModel):
    """Who did what, and from where"""
    __tablename__ = 'sys_audit_logs'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(db.String(64), db.ForeignKey('auth_users.id', ondelete='SET NULL'), nullable=True)
    module = db.Column(db.String(32))   # e.g. 'inventory', 'transactions'
    action = db.Column(db.String(64))   # e.g. 'create', 'revise'
    ip_address = db.Column(db.String(64))
    details = db.Column(db.Text)        # JSON
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    user = db.relationship('User')


class PlaylistItem(BaseModel):
    """Dashboard media player entry"""
    __tablename__ = 'sys_playlist_items'

    title = db.Column(db.String(128), nullable=False)
    url = db.Column(db.String(512), nullable=False)
    video_id = db.Column(db.String(16), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
