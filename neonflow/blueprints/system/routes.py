from flask import current_app, jsonify
from flask_login import current_user, login_required, logout_user
from sqlalchemy import func

from neonflow.blueprints.system import system_bp
from neonflow.commands import reset_database
from neonflow.extensions import db
from neonflow.models import StockItem
from neonflow.schemas import STOCK_UNITS
from neonflow.utils.audit import log_action
from neonflow.utils.decorators import admin_required


@system_bp.route('/dashboard', methods=['GET'])
@login_required
def dashboard():
    """Headline totals: stock value, item count, low stock count, top category"""
    threshold = current_app.config.get('LOW_STOCK_THRESHOLD', 20)

    total_value = db.session.query(
        func.coalesce(func.sum(StockItem.quantity * StockItem.price), 0)
    ).scalar()
    total_items = StockItem.query.count()
    low_stock = StockItem.query.filter(
        StockItem.quantity < threshold,
        StockItem.status != StockItem.STATUS_DISCONTINUED,
    ).count()

    top = db.session.query(
        StockItem.category, func.count(StockItem.id).label('item_count')
    ).group_by(StockItem.category).order_by(func.count(StockItem.id).desc(), StockItem.category.asc()).first()

    return jsonify({
        'totalValue': round(float(total_value or 0), 2),
        'totalItems': total_items,
        'lowStockCount': low_stock,
        'topCategory': top.category if top else None,
    })


@system_bp.route('/units', methods=['GET'])
@login_required
def stock_units():
    return jsonify([unit.model_dump() for unit in STOCK_UNITS])


@system_bp.route('/system/reset', methods=['POST'])
@login_required
@admin_required
def reset_system():
    """Wipe every table and reseed the super admin; the caller is signed out"""
    requested_by = current_user.email
    current_app.logger.warning(f"System reset requested by {requested_by}")
    admin = reset_database()
    # The old audit table is gone; the entry goes to the fresh one
    log_action('system', 'reset', {'requested_by': requested_by}, user=admin)
    logout_user()
    return jsonify({'success': True, 'message': 'System reset complete', 'admin': admin.email})
