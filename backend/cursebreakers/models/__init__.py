"""ORM models. Importing this package registers every table on Base.metadata."""

from cursebreakers.models.user import User
from cursebreakers.models.blog import Blog, Comment, Post

__all__ = ["User", "Blog", "Post", "Comment"]
