"""CRUD operations for users, biens, photos and conversations."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Row, select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.listing_query import ListingPage, ListingQuery, photo_principale_column
from app.models import Bien, Conversation, PhotoBien, User
from app.models.base import utcnow
from app.models.bien import STATUT_PUBLIE
from app.schemas.filters import BienFilters


# ── Users ────────────────────────────────────────────────

async def create_user(
    db: AsyncSession, email: str, password_hash: str, role: str = "acheteur",
    nom: str = "", prenom: str = "", telephone: str = "",
) -> User:
    user = User(
        email=email, password_hash=password_hash, role=role,
        nom=nom, prenom=prenom, telephone=telephone,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalars().first()


# ── Biens: public reads ──────────────────────────────────

async def search_published_biens(db: AsyncSession, filters: BienFilters) -> ListingPage:
    """Run the count and page statements for one listing request."""
    query = ListingQuery(filters)
    total = (await db.execute(query.count_statement())).scalar_one()
    result = await db.execute(query.page_statement())
    return ListingPage(
        rows=list(result.all()), total=total,
        page=filters.page, limit=filters.limit,
    )


async def get_published_bien(db: AsyncSession, bien_id: int) -> Row | None:
    """Published bien joined with its owner's contact details, or None."""
    result = await db.execute(
        select(
            Bien,
            User.nom.label("proprietaire_nom"),
            User.prenom.label("proprietaire_prenom"),
            User.telephone.label("proprietaire_telephone"),
            User.email.label("proprietaire_email"),
        )
        .join(User, Bien.proprietaire_id == User.id)
        .where(Bien.id == bien_id, Bien.statut_publication == STATUT_PUBLIE)
    )
    return result.first()


async def list_photos(db: AsyncSession, bien_id: int) -> list[PhotoBien]:
    result = await db.execute(
        select(PhotoBien)
        .where(PhotoBien.bien_id == bien_id)
        .order_by(PhotoBien.est_principale.desc(), PhotoBien.id)
    )
    return list(result.scalars().all())


# ── Biens: owner side ────────────────────────────────────

async def list_biens_for_owner(db: AsyncSession, owner_id: int) -> list[Row]:
    """All of an owner's biens, whatever their publication status."""
    nb_conversations = (
        select(func.count(Conversation.id))
        .where(Conversation.bien_id == Bien.id)
        .scalar_subquery()
        .label("nb_conversations")
    )
    result = await db.execute(
        select(Bien, nb_conversations, photo_principale_column())
        .where(Bien.proprietaire_id == owner_id)
        .order_by(Bien.date_publication.desc(), Bien.id.desc())
    )
    return list(result.all())


async def get_bien(db: AsyncSession, bien_id: int) -> Bien | None:
    return await db.get(Bien, bien_id)


async def create_bien(db: AsyncSession, proprietaire_id: int, **fields: Any) -> Bien:
    bien = Bien(proprietaire_id=proprietaire_id, **fields)
    db.add(bien)
    # Re-read inside the same transaction so defaults come back consistent
    await db.flush()
    await db.refresh(bien)
    await db.commit()
    return bien


async def update_bien(db: AsyncSession, bien: Bien, **fields: Any) -> Bien:
    """Replace every mutable field; ownership and publication status are untouched."""
    for k, v in fields.items():
        setattr(bien, k, v)
    bien.date_modification = utcnow()
    await db.flush()
    await db.refresh(bien)
    await db.commit()
    return bien


async def delete_bien(db: AsyncSession, bien: Bien) -> None:
    await db.delete(bien)
    await db.commit()


# ── Photos / conversations ───────────────────────────────

async def add_photo(
    db: AsyncSession, bien_id: int, url_image: str, est_principale: bool = False,
) -> PhotoBien:
    photo = PhotoBien(bien_id=bien_id, url_image=url_image, est_principale=est_principale)
    db.add(photo)
    await db.commit()
    await db.refresh(photo)
    return photo


async def create_conversation(db: AsyncSession, bien_id: int, acheteur_id: int) -> Conversation:
    conv = Conversation(bien_id=bien_id, acheteur_id=acheteur_id)
    db.add(conv)
    await db.commit()
    await db.refresh(conv)
    return conv
