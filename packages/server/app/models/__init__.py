# SQLModel definitions; imported here so metadata is populated for Alembic.
from .base import UUIDMixin, TimestampMixin  # noqa: F401
from .user import User  # noqa: F401
from .soup import Soup  # noqa: F401
from .comment import Comment  # noqa: F401
from .stars import UserSoupStar, UserCommentStar  # noqa: F401
