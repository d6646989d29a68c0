from .base import BaseDAO
from .user import UserDAO
from .video_pool import VideoPoolDAO
from .favorite import FavoriteDAO
from .comment import CommentDAO
from .rating import RatingDAO
from .subtitle import SubtitleDAO

user_dao = UserDAO()
video_pool_dao = VideoPoolDAO()
favorite_dao = FavoriteDAO()
comment_dao = CommentDAO()
rating_dao = RatingDAO()
subtitle_dao = SubtitleDAO()
