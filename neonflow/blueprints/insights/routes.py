from flask import jsonify
from flask_login import login_required

from neonflow.blueprints.insights import insights_bp
from neonflow.models import StockItem
from neonflow.services.insight_service import insight_service


@insights_bp.route('/health', methods=['GET'])
@login_required
def inventory_health():
    items = StockItem.query.all()
    return jsonify({
        'success': True,
        'analysis': insight_service.analyze_inventory_health(items),
        'ai': insight_service.is_configured(),
    })


@insights_bp.route('/restock', methods=['GET'])
@login_required
def restock_plan():
    items = StockItem.query.all()
    return jsonify({
        'success': True,
        'plan': insight_service.suggest_restock_plan(items),
        'critical': len(insight_service.critical_items(items)),
    })
