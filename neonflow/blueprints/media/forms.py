from wtforms import StringField
from wtforms.validators import DataRequired, Length, Optional

from neonflow.utils.forms import ApiForm
from neonflow.utils.validators import validate_youtube_url


class PlaylistForm(ApiForm):
    url = StringField('URL', validators=[DataRequired(), Length(max=512), validate_youtube_url])
    title = StringField('Title', validators=[Optional(), Length(max=128)])
