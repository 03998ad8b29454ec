"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.user import User, UserSession
from app.models.bien import Bien, PhotoBien
from app.models.conversation import Conversation

__all__ = [
    "Base", "User", "UserSession",
    "Bien", "PhotoBien", "Conversation",
]
