from flask import jsonify, request
from flask_login import login_required

from neonflow.blueprints.reject import reject_bp
from neonflow.schemas import REJECT_UNITS
from neonflow.services.reject_service import RejectService
from neonflow.utils.audit import log_action


@reject_bp.route('/master', methods=['GET'])
@login_required
def list_master():
    return jsonify([item.to_dict() for item in RejectService.list_master()])


@reject_bp.route('/master', methods=['POST'])
@login_required
def upsert_master():
    master = RejectService.upsert_master(request.get_json(silent=True))
    log_action('reject', 'upsert_master', {'count': len(master)})
    return jsonify([item.to_dict() for item in master])


@reject_bp.route('/units', methods=['GET'])
@login_required
def list_units():
    return jsonify([unit.model_dump() for unit in REJECT_UNITS])


@reject_bp.route('/history', methods=['GET'])
@login_required
def history():
    return jsonify([record.to_dict() for record in RejectService.list_history()])


@reject_bp.route('/record', methods=['POST'])
@login_required
def record_reject():
    """Record one outlet's waste for a day; the shareable report comes back with it"""
    record = RejectService.record_reject(request.get_json(silent=True))
    log_action('reject', 'record', {'id': record.id, 'outlet': record.outlet_name})
    return jsonify({
        'success': True,
        'record': record.to_dict(),
        'report': RejectService.format_report(record),
    }), 201


@reject_bp.route('/record/<record_id>/report', methods=['GET'])
@login_required
def record_report(record_id):
    record = RejectService.get_record(record_id)
    return jsonify({'success': True, 'report': RejectService.format_report(record)})
