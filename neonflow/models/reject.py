from datetime import datetime
from neonflow.extensions import db
from .base import BaseModel


class RejectMasterItem(BaseModel):
    """Reject/waste master data, independent from the stock catalog"""
    __tablename__ = 'rej_master_items'

    name = db.Column(db.String(128), nullable=False)
    sku = db.Column(db.String(64), nullable=False)
    default_unit = db.Column(db.String(32), nullable=False, default='Pcs')
    category = db.Column(db.String(64), nullable=False, default='General')


class RejectRecord(BaseModel):
    """One outlet's reject report for a day"""
    __tablename__ = 'rej_records'

    date = db.Column(db.Date, nullable=False, index=True)
    outlet_name = db.Column(db.String(128), nullable=False)
    total_items = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    lines = db.relationship(
        'RejectLine',
        backref='record',
        order_by='RejectLine.position',
        cascade='all, delete-orphan',
    )

    def to_dict(self):
        data = super().to_dict()
        data['lines'] = [line.to_dict() for line in self.lines]
        return data


class RejectLine(BaseModel):
    __tablename__ = 'rej_record_lines'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    record_id = db.Column(db.String(64), db.ForeignKey('rej_records.id'), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    master_id = db.Column(db.String(64), index=True)
    name = db.Column(db.String(128), nullable=False)
    sku = db.Column(db.String(64))
    unit_name = db.Column(db.String(32), nullable=False, default='Pcs')
    order_quantity = db.Column(db.Integer, nullable=False)

    def to_dict(self):
        return {
            'master_id': self.master_id,
            'name': self.name,
            'sku': self.sku,
            'selected_unit': self.unit_name,
            'order_quantity': self.order_quantity,
        }
