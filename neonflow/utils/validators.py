"""
WTForms validators
"""
from wtforms.validators import ValidationError

from neonflow.services.playlist_service import extract_video_id


def validate_youtube_url(form, field):
    """The URL must contain a YouTube video id"""
    if field.data and extract_video_id(field.data) is None:
        raise ValidationError('Please enter a valid YouTube URL')


def validate_not_blank(form, field):
    if field.data is not None and not str(field.data).strip():
        raise ValidationError('This field cannot be blank')
