"""Shared domain exception classes for the course service.

These are raised by service-layer code and caught by controllers
to map to appropriate HTTP responses.
"""


class NotFoundError(Exception):
    """Base for every "referenced entity does not exist" failure."""

    entity = "Resource"

    def __init__(self, identifier: str = ""):
        self.identifier = identifier
        super().__init__(f"{self.entity} not found: {identifier}")


class UserNotFoundError(NotFoundError):
    entity = "User"


class CourseNotFoundError(NotFoundError):
    entity = "Course"


class ChapterNotFoundError(NotFoundError):
    entity = "Chapter"


class VideoNotFoundError(NotFoundError):
    entity = "Video"


class EnrollmentNotFoundError(NotFoundError):
    entity = "Enrollment"


class AlreadyEnrolledError(Exception):
    """Raised when user tries to enroll in a course they are already enrolled in."""


class VideoNotInCourseError(Exception):
    """Raised when a video is requested under a course it does not belong to."""

    def __init__(self, video_id: str = "", course_id: str = ""):
        self.video_id = video_id
        self.course_id = course_id
        super().__init__(f"Video {video_id} does not belong to course {course_id}")


class InvalidCredentialsError(Exception):
    """Raised by identity providers when the credentials are rejected."""

    def __init__(self, reason: str = "Invalid email or password."):
        self.reason = reason
        super().__init__(reason)


class IdentityProviderError(Exception):
    """Raised when the external identity provider cannot be reached or misbehaves."""
