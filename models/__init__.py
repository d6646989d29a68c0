from .db import db
from .user import User
from .audit_log import AuditLog
from .pexels_video import PexelsVideo
from .favorite import Favorite
from .comment import Comment
from .rating import Rating
from .subtitle import Subtitle
