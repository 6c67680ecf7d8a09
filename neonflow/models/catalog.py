from datetime import date
from neonflow.extensions import db
from neonflow.services.ledger_service import derive_status
from .base import BaseModel


class StockItem(BaseModel):
    """
    Catalog item (the live on-hand quantity).
    quantity is only changed through the movement service; status follows it.
    """
    __tablename__ = 'inv_items'

    STATUS_IN_STOCK = 'In Stock'
    STATUS_LOW_STOCK = 'Low Stock'
    STATUS_OUT_OF_STOCK = 'Out of Stock'
    STATUS_DISCONTINUED = 'Discontinued'
    STATUSES = (STATUS_IN_STOCK, STATUS_LOW_STOCK, STATUS_OUT_OF_STOCK, STATUS_DISCONTINUED)

    name = db.Column(db.String(128), nullable=False, index=True)
    sku = db.Column(db.String(64), nullable=False, index=True)
    category = db.Column(db.String(64), nullable=False, default='General')
    quantity = db.Column(db.Integer, nullable=False, default=0)
    price = db.Column(db.Float, default=0.0)
    status = db.Column(db.String(20), nullable=False, default=STATUS_IN_STOCK)
    last_updated = db.Column(db.Date, default=date.today)

    # Optimistic lock counter, bumped by SQLAlchemy on every UPDATE
    version_id = db.Column(db.Integer, nullable=False, default=1)
    __mapper_args__ = {'version_id_col': version_id}

    def set_quantity(self, quantity, threshold=20):
        """Write a new on-hand quantity and keep status/last_updated in step"""
        self.quantity = quantity
        self.status = derive_status(quantity, threshold)
        self.last_updated = date.today()

    @property
    def stock_value(self):
        return (self.quantity or 0) * (self.price or 0.0)

    def __repr__(self):
        return f'<StockItem {self.id} {self.sku} qty={self.quantity}>'
