from datetime import datetime
from flask import jsonify, request, send_file
from flask_login import login_required

from neonflow.blueprints.inventory import inventory_bp
from neonflow.extensions import db
from neonflow.exceptions import ItemNotFound, ValidationError
from neonflow.models import StockItem
from neonflow.services.export_service import ExportService
from neonflow.services.import_service import ImportService
from neonflow.services.movement_service import MovementService
from neonflow.utils.audit import log_action
from neonflow.utils.decorators import admin_required

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


@inventory_bp.route('', methods=['GET'])
@login_required
def list_items():
    """
    Catalog list
    ?q= matches name or SKU, ?status= filters by status
    """
    query = StockItem.query
    keyword = request.args.get('q', '').strip()
    if keyword:
        like = f"%{keyword}%"
        query = query.filter(StockItem.name.ilike(like) | StockItem.sku.ilike(like))
    status = request.args.get('status', '').strip()
    if status and status != 'All':
        query = query.filter(StockItem.status == status)

    items = query.order_by(StockItem.name.asc()).all()
    return jsonify([item.to_dict() for item in items])


@inventory_bp.route('', methods=['POST'])
@inventory_bp.route('/bulk', methods=['POST'])
@login_required
@admin_required
def bulk_upsert():
    rows = request.get_json(silent=True)
    if isinstance(rows, dict):
        rows = [rows]
    if not isinstance(rows, list):
        raise ValidationError("Expected a JSON list of items")
    created, updated = ImportService.upsert_items(rows)
    log_action('inventory', 'bulk_upsert', {'created': created, 'updated': updated})
    items = StockItem.query.order_by(StockItem.name.asc()).all()
    return jsonify([item.to_dict() for item in items])


@inventory_bp.route('/import', methods=['POST'])
@login_required
@admin_required
def import_file():
    """Spreadsheet upload (csv/xlsx with Name, SKU, Category, Price, Quantity, Status)"""
    upload = request.files.get('file')
    if upload is None or not upload.filename:
        raise ValidationError("No file uploaded")

    rows = ImportService.parse_upload(upload.filename, upload.read())
    items = ImportService.normalize_rows(rows)
    if not items:
        raise ValidationError("No valid rows found in the file")

    created, updated = ImportService.upsert_items(items)
    log_action('inventory', 'import', {'file': upload.filename, 'created': created, 'updated': updated})
    return jsonify({
        'success': True,
        'message': f"Imported {len(items)} items",
        'created': created,
        'updated': updated,
        'skipped': len(rows) - len(items),
    })


@inventory_bp.route('/template', methods=['GET'])
@login_required
def import_template():
    output = ImportService.template_workbook()
    return send_file(output, mimetype=XLSX_MIMETYPE, as_attachment=True,
                     download_name='inventory_import_template.xlsx')


@inventory_bp.route('/<item_id>', methods=['GET'])
@login_required
def get_item(item_id):
    item = db.session.get(StockItem, item_id)
    if item is None:
        raise ItemNotFound(item_id)
    return jsonify(item.to_dict())


@inventory_bp.route('/<item_id>/stock-card', methods=['GET'])
@login_required
def stock_card(item_id):
    """Stock card: ledger rows with running balances for ?start=&end= (YYYY-MM-DD)"""
    item, card = MovementService.stock_card(item_id, request.args.get('start'), request.args.get('end'))
    data = card.to_dict()
    data['item'] = item.to_dict()
    return jsonify(data)


@inventory_bp.route('/<item_id>/stock-card/export', methods=['GET'])
@login_required
def export_stock_card(item_id):
    start, end = request.args.get('start'), request.args.get('end')
    item, card = MovementService.stock_card(item_id, start, end)
    output = ExportService.stock_card_workbook(item, card, start or None, end or None)
    filename = f"stock_card_{item.sku}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
    return send_file(output, mimetype=XLSX_MIMETYPE, as_attachment=True, download_name=filename)
