"""Reject/waste tracking - independent of the stock catalog"""
from flask import current_app

from neonflow.extensions import db
from neonflow.exceptions import RecordNotFound, ValidationError
from neonflow.models import RejectLine, RejectMasterItem, RejectRecord, generate_id
from neonflow.schemas import RejectMasterIn, RejectRecordCreate, validate_payload


class RejectService:

    @staticmethod
    def list_master():
        return RejectMasterItem.query.order_by(RejectMasterItem.name.asc()).all()

    @staticmethod
    def upsert_master(rows):
        """Bulk upsert keyed by id; existing rows get name and sku updated"""
        if not isinstance(rows, list):
            raise ValidationError("Expected a list of master items")
        items = [validate_payload(RejectMasterIn, row) for row in rows]
        try:
            for data in items:
                existing = db.session.get(RejectMasterItem, data.id) if data.id else None
                if existing:
                    existing.name = data.name
                    existing.sku = data.sku
                else:
                    db.session.add(RejectMasterItem(
                        id=data.id or generate_id('REJ'),
                        name=data.name,
                        sku=data.sku or generate_id('RSKU'),
                        default_unit=data.default_unit,
                        category=data.category,
                    ))
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return RejectService.list_master()

    @staticmethod
    def record_reject(payload):
        data = validate_payload(RejectRecordCreate, payload)
        record_id = data.id or generate_id('REJ-REC')
        if db.session.get(RejectRecord, record_id) is not None:
            raise ValidationError(f"Reject record {record_id} already exists")

        record = RejectRecord(
            id=record_id,
            date=data.date,
            outlet_name=data.outlet_name,
            total_items=len(data.lines),
        )
        for position, line in enumerate(data.lines):
            record.lines.append(RejectLine(
                position=position,
                master_id=line.master_id,
                name=line.name,
                sku=line.sku,
                unit_name=line.unit_name,
                order_quantity=line.order_quantity,
            ))
        try:
            db.session.add(record)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        current_app.logger.info(f"Reject {record.id} saved for {record.outlet_name} ({record.total_items} items)")
        return record

    @staticmethod
    def list_history():
        return RejectRecord.query.order_by(RejectRecord.date.desc(), RejectRecord.created_at.desc()).all()

    @staticmethod
    def get_record(record_id):
        record = db.session.get(RejectRecord, record_id)
        if record is None:
            raise RecordNotFound(f"Reject record {record_id} not found")
        return record

    @staticmethod
    def format_report(record):
        """
        Shareable text report:

            Data Reject Outlet Surabaya 050124
            • Bread (3 Pcs)
        """
        header = f"Data Reject {record.outlet_name} {record.date.strftime('%d%m%y')}"
        body = [f"• {line.name} ({line.order_quantity} {line.unit_name})" for line in record.lines]
        return '\n'.join([header] + body)
