from datetime import datetime
from flask import jsonify, request, send_file
from flask_login import current_user, login_required

from neonflow.blueprints.transactions import transactions_bp
from neonflow.services.export_service import ExportService
from neonflow.services.movement_service import MovementService
from neonflow.utils.audit import audit_log, log_action


@transactions_bp.route('', methods=['GET'])
@login_required
def list_transactions():
    """History, newest first (?type=IN|OUT, ?q= id/reference/item name)"""
    movements = MovementService.list_movements(
        direction=request.args.get('type') or None,
        search=request.args.get('q', '').strip() or None,
    )
    return jsonify([m.to_dict() for m in movements])


@transactions_bp.route('', methods=['POST'])
@login_required
def create_transaction():
    movement = MovementService.record_movement(request.get_json(silent=True), user=current_user)
    log_action('transactions', 'create', {'id': movement.id, 'direction': movement.direction,
                                          'total_base_units': movement.total_base_units})
    return jsonify({'success': True, 'transaction': movement.to_dict()}), 201


@transactions_bp.route('/export', methods=['GET'])
@login_required
def export_transactions():
    movements = MovementService.list_movements(direction=request.args.get('type') or None)
    output = ExportService.movements_workbook(movements)
    filename = f"transactions_{datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
    return send_file(output, as_attachment=True, download_name=filename,
                     mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')


@transactions_bp.route('/<movement_id>', methods=['GET'])
@login_required
def get_transaction(movement_id):
    return jsonify(MovementService.get_movement(movement_id).to_dict())


@transactions_bp.route('/<movement_id>', methods=['PUT'])
@login_required
def update_transaction(movement_id):
    """Edit a recorded transaction; stock is reconciled for every item involved"""
    movement = MovementService.revise_movement(movement_id, request.get_json(silent=True), user=current_user)
    log_action('transactions', 'revise', {'id': movement.id})
    return jsonify({'success': True, 'transaction': movement.to_dict()})


@transactions_bp.route('/<movement_id>', methods=['DELETE'])
@login_required
@audit_log('transactions', 'delete')
def delete_transaction(movement_id):
    MovementService.delete_movement(movement_id, user=current_user)
    return jsonify({'success': True})
