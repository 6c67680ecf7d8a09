import uuid
from datetime import date, datetime
from neonflow.extensions import db


def generate_id(prefix):
    """Readable string primary key, e.g. TRX-1A2B3C4D"""
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


class BaseModel(db.Model):
    """
    Base model for NeonFlow entities.
    String primary keys (the API hands ids to the client), save/delete helpers
    and a generic serializer.
    """
    __abstract__ = True

    id = db.Column(db.String(64), primary_key=True)

    def save(self):
        """Persist and commit"""
        db.session.add(self)
        db.session.commit()

    def delete(self):
        db.session.delete(self)
        db.session.commit()

    def to_dict(self):
        """
        Generic serializer: column values keyed by column name.
        Columns starting with '_' are private and skipped.
        """
        data = {}
        for c in self.__table__.columns:
            if c.name.startswith('_'):
                continue
            val = getattr(self, c.name)
            if isinstance(val, (datetime, date)):
                data[c.name] = val.isoformat()
            else:
                data[c.name] = val
        return data
