"""Catalog bulk import - CSV/Excel upload and upsert"""
import csv
import random
import uuid
from datetime import date
from io import BytesIO, StringIO

import openpyxl
from flask import current_app

from neonflow.extensions import db
from neonflow.exceptions import ValidationError
from neonflow.models import StockItem
from neonflow.schemas import StockItemIn, validate_payload
from neonflow.services.export_service import ExportService
from neonflow.services.ledger_service import STATUS_DISCONTINUED, derive_status


class ImportService:
    """Catalog import"""

    ALLOWED_EXTENSIONS = {'csv', 'xlsx'}

    # Spreadsheet template columns
    TEMPLATE_COLUMNS = ['Name', 'SKU', 'Category', 'Price', 'Quantity', 'Status']
    TEMPLATE_SAMPLE = [
        {'Name': 'Quantum Processor X1', 'SKU': 'QP-X1-001', 'Category': 'Electronics',
         'Price': 1200, 'Quantity': 45, 'Status': 'In Stock'},
    ]

    @staticmethod
    def allowed_file(filename):
        return '.' in filename and \
               filename.rsplit('.', 1)[1].lower() in ImportService.ALLOWED_EXTENSIONS

    @staticmethod
    def parse_csv(file_content, encoding='utf-8'):
        """CSV bytes -> list of row dicts"""
        try:
            content = file_content.decode(encoding)
        except UnicodeDecodeError:
            content = file_content.decode('latin-1')
        # Excel writes a BOM in front of UTF-8 CSVs
        reader = csv.DictReader(StringIO(content.lstrip('\ufeff')))
        rows = []
        for row in reader:
            # Cells past the header land under the None key; drop them
            row.pop(None, None)
            if any((v or '').strip() for v in row.values()):
                rows.append(row)
        return rows

    @staticmethod
    def parse_excel(file_content):
        """First worksheet of an xlsx -> list of row dicts"""
        wb = openpyxl.load_workbook(BytesIO(file_content), data_only=True, read_only=True)
        ws = wb.active
        rows = list(ws.iter_rows(values_only=True))
        if not rows:
            return []

        headers = [str(h).strip() if h is not None else '' for h in rows[0]]
        data = []
        for row in rows[1:]:
            row_dict = {}
            for i, value in enumerate(row):
                if i < len(headers) and headers[i]:
                    row_dict[headers[i]] = value
            # Skip blank rows
            if any(v not in (None, '') for v in row_dict.values()):
                data.append(row_dict)
        return data

    @staticmethod
    def parse_upload(filename, file_content):
        if not ImportService.allowed_file(filename or ''):
            raise ValidationError("Unsupported file type, upload .csv or .xlsx")
        if filename.lower().endswith('.csv'):
            return ImportService.parse_csv(file_content)
        return ImportService.parse_excel(file_content)

    @staticmethod
    def _number(value, cast):
        try:
            return cast(float(value))
        except (TypeError, ValueError):
            return cast(0)

    @staticmethod
    def normalize_rows(rows):
        """
        Map raw spreadsheet rows onto catalog items.
        Missing ids/SKUs are generated, rows without a name are dropped.
        Duplicate names are kept as separate items.
        """
        threshold = current_app.config.get('LOW_STOCK_THRESHOLD', 20)
        today = date.today()
        items = []
        for row in rows:
            name = str(row.get('Name') or '').strip()
            if not name:
                continue
            quantity = max(ImportService._number(row.get('Quantity'), int), 0)
            status = row.get('Status')
            items.append({
                'id': str(row.get('ID') or f"IMP-{uuid.uuid4().hex[:10].upper()}"),
                'name': name,
                'sku': str(row.get('SKU') or f"GEN-{random.randint(0, 9999):04d}"),
                'category': str(row.get('Category') or 'General'),
                'price': max(ImportService._number(row.get('Price'), float), 0.0),
                'quantity': quantity,
                'status': status if status == STATUS_DISCONTINUED else derive_status(quantity, threshold),
                'last_updated': today,
            })
        return items

    @staticmethod
    def upsert_items(rows):
        """
        Upsert catalog items keyed by id.
        Existing rows get name, quantity, price, status and last_updated
        overwritten; everything happens in one transaction.

        Returns:
            (created_count, updated_count)
        """
        items = [validate_payload(StockItemIn, row) for row in rows]
        threshold = current_app.config.get('LOW_STOCK_THRESHOLD', 20)
        created = updated = 0
        try:
            for data in items:
                status = data.status or derive_status(data.quantity, threshold)
                last_updated = data.last_updated or date.today()
                existing = db.session.get(StockItem, data.id)
                if existing:
                    existing.name = data.name
                    existing.quantity = data.quantity
                    existing.price = data.price
                    existing.status = status
                    existing.last_updated = last_updated
                    updated += 1
                else:
                    db.session.add(StockItem(
                        id=data.id,
                        name=data.name,
                        sku=data.sku,
                        category=data.category,
                        quantity=data.quantity,
                        price=data.price,
                        status=status,
                        last_updated=last_updated,
                    ))
                    created += 1
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        current_app.logger.info(f"Catalog upsert: {created} created, {updated} updated")
        return created, updated

    @staticmethod
    def template_workbook():
        """Downloadable xlsx with the import columns and one sample row"""
        return ExportService.import_template(ImportService.TEMPLATE_COLUMNS, ImportService.TEMPLATE_SAMPLE)
