from .health import health_bp
from .auth import auth_bp
from .movies import movies_bp
from .comments import comments_bp
from .ratings import ratings_bp
from .subtitles import subtitles_bp
