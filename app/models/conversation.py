from __future__ import annotations

from sqlalchemy import Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, IdMixin


class Conversation(Base, IdMixin):
    __tablename__ = "conversations"

    bien_id: Mapped[int] = mapped_column(Integer, ForeignKey("biens.id"), index=True)
    acheteur_id: Mapped[int] = mapped_column(Integer, ForeignKey("utilisateurs.id"))

    bien = relationship("Bien", back_populates="conversations")
