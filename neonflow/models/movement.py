from datetime import datetime
from neonflow.extensions import db
from .base import BaseModel


class Movement(BaseModel):
    """
    Stock movement (one IN or OUT event covering one or more lines).
    Changed only through MovementService.revise_movement, which reconciles
    the on-hand quantities of every item involved.
    """
    __tablename__ = 'inv_movements'

    DIRECTION_IN = 'IN'
    DIRECTION_OUT = 'OUT'

    date = db.Column(db.Date, nullable=False, index=True)
    direction = db.Column(db.String(3), nullable=False)
    total_base_units = db.Column(db.Integer, nullable=False, default=0)
    reference_number = db.Column(db.String(64), default='')
    notes = db.Column(db.Text, default='')
    attachments = db.Column(db.JSON, default=list)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    created_by_id = db.Column(db.String(64), db.ForeignKey('auth_users.id', ondelete='SET NULL'), nullable=True)

    lines = db.relationship(
        'MovementLine',
        backref='movement',
        order_by='MovementLine.position',
        cascade='all, delete-orphan',
    )
    created_by = db.relationship('User')

    def to_dict(self):
        data = super().to_dict()
        data['attachments'] = list(self.attachments or [])
        data['lines'] = [line.to_dict() for line in self.lines]
        return data

    def __repr__(self):
        return f'<Movement {self.id} {self.direction} {self.date}>'


class MovementLine(BaseModel):
    """
    Snapshot of one catalog item inside a movement.
    name/sku/category/price are copied at recording time so history stays
    accurate after the catalog entry changes.
    """
    __tablename__ = 'inv_movement_lines'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    movement_id = db.Column(db.String(64), db.ForeignKey('inv_movements.id'), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    item_id = db.Column(db.String(64), nullable=False, index=True)
    name = db.Column(db.String(128))
    sku = db.Column(db.String(64))
    category = db.Column(db.String(64))
    price = db.Column(db.Float, default=0.0)

    unit_name = db.Column(db.String(32), nullable=False, default='Pcs')
    unit_ratio = db.Column(db.Integer, nullable=False, default=1)
    order_quantity = db.Column(db.Integer, nullable=False)

    @property
    def base_units(self):
        return self.order_quantity * self.unit_ratio

    def to_dict(self):
        return {
            'item_id': self.item_id,
            'name': self.name,
            'sku': self.sku,
            'category': self.category,
            'price': self.price,
            'selected_unit': {'name': self.unit_name, 'ratio': self.unit_ratio},
            'order_quantity': self.order_quantity,
            'base_units': self.base_units,
        }
