from flask import jsonify
from flask_login import login_required

from neonflow.blueprints.media import media_bp
from neonflow.blueprints.media.forms import PlaylistForm
from neonflow.services.playlist_service import PlaylistService


@media_bp.route('', methods=['GET'])
@login_required
def list_playlist():
    return jsonify([item.to_dict() for item in PlaylistService.list_items()])


@media_bp.route('', methods=['POST'])
@login_required
def add_video():
    form = PlaylistForm().validate_or_raise()
    item = PlaylistService.add_item(form.url.data.strip(), form.title.data or None)
    return jsonify({'success': True, 'item': item.to_dict()}), 201


@media_bp.route('/<item_id>', methods=['DELETE'])
@login_required
def remove_video(item_id):
    PlaylistService.remove_item(item_id)
    return jsonify({'success': True})
