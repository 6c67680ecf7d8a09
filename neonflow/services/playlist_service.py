"""Dashboard media player playlist"""
import re

from neonflow.extensions import db
from neonflow.exceptions import RecordNotFound, ValidationError
from neonflow.models import PlaylistItem, generate_id

YOUTUBE_ID = re.compile(r'^.*(youtu\.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*')


def extract_video_id(url):
    """11 character YouTube video id, or None"""
    match = YOUTUBE_ID.match(url or '')
    if match and len(match.group(2)) == 11:
        return match.group(2)
    return None


class PlaylistService:

    @staticmethod
    def list_items():
        return PlaylistItem.query.order_by(PlaylistItem.created_at.asc()).all()

    @staticmethod
    def add_item(url, title=None):
        video_id = extract_video_id(url)
        if video_id is None:
            raise ValidationError("Please enter a valid YouTube URL")
        item = PlaylistItem(
            id=generate_id('pl'),
            title=title or f"Video {video_id}",
            url=url,
            video_id=video_id,
        )
        item.save()
        return item

    @staticmethod
    def remove_item(item_id):
        item = db.session.get(PlaylistItem, item_id)
        if item is None:
            raise RecordNotFound(f"Playlist item {item_id} not found")
        item.delete()
