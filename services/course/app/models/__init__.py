# Import all models so Alembic can discover them via Base.metadata
from .chapter import Chapter
from .course import Course
from .enrollment import Enrollment
from .user import User
from .video import Video
from .video_progress import VideoProgress

__all__ = [
    "Chapter",
    "Course",
    "Enrollment",
    "User",
    "Video",
    "VideoProgress",
]
