from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Text, Float, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, IdMixin, utcnow

STATUT_PUBLIE = "publie"


class Bien(Base, IdMixin):
    __tablename__ = "biens"

    proprietaire_id: Mapped[int] = mapped_column(Integer, ForeignKey("utilisateurs.id"), index=True)
    titre: Mapped[str] = mapped_column(String(150))
    description: Mapped[str] = mapped_column(Text)
    type_bien: Mapped[str] = mapped_column(String(20))  # maison | immeuble | villa | appartement | terrain
    statut: Mapped[str] = mapped_column(String(20))  # location | vente
    prix: Mapped[float] = mapped_column(Float)
    modalite_paiement: Mapped[str] = mapped_column(String(20))  # mensuel | trimestriel | annuel | unique
    surface: Mapped[float] = mapped_column(Float)
    nombre_pieces: Mapped[int] = mapped_column(Integer, default=0)
    adresse_complete: Mapped[str] = mapped_column(String(255))
    ville: Mapped[str] = mapped_column(String(100), index=True)
    code_postal: Mapped[str] = mapped_column(String(20))
    latitude: Mapped[float] = mapped_column(Float)
    longitude: Mapped[float] = mapped_column(Float)
    statut_publication: Mapped[str] = mapped_column(String(20), default=STATUT_PUBLIE)  # publie | brouillon | archive
    date_publication: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    date_modification: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    proprietaire = relationship("User", back_populates="biens")
    photos = relationship(
        "PhotoBien", back_populates="bien", cascade="all, delete-orphan",
        order_by="PhotoBien.id",
    )
    conversations = relationship("Conversation", back_populates="bien", cascade="all, delete-orphan")


class PhotoBien(Base, IdMixin):
    __tablename__ = "photos_biens"

    bien_id: Mapped[int] = mapped_column(Integer, ForeignKey("biens.id"), index=True)
    url_image: Mapped[str] = mapped_column(String(500))
    # Not unique per bien: readers pick the lowest id among primaries
    est_principale: Mapped[bool] = mapped_column(Boolean, default=False)

    bien = relationship("Bien", back_populates="photos")
