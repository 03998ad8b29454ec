"""Biens API: public listing and detail, seller listing, create/update/delete."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import crud
from app.db.engine import get_db
from app.dependencies import bien_filters, get_owned_bien, require_vendeur, valid_bien_id
from app.errors import ApiError, server_error
from app.models import Bien
from app.schemas import (
    BienDetail, BienDetailResponse, BienFilters, BienListItem, BienListResponse,
    BienMutationResponse, BienPayload, BienRead, MesBienItem, MesBiensResponse,
    MessageResponse, Pagination, PhotoRead,
)
from app.services.auth import AuthContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/biens", tags=["biens"])


def _fields(bien: Bien) -> dict:
    return BienRead.model_validate(bien).model_dump()


@router.get("/mes-biens", response_model=MesBiensResponse)
async def list_my_biens(
    auth: AuthContext = Depends(require_vendeur),
    db: AsyncSession = Depends(get_db),
):
    try:
        rows = await crud.list_biens_for_owner(db, auth.user_id)
    except SQLAlchemyError:
        logger.exception("Failed to list biens for owner %s", auth.user_id)
        raise server_error("Erreur lors de la récupération de vos biens")

    return MesBiensResponse(biens=[
        MesBienItem(
            **_fields(row.Bien),
            nb_conversations=row.nb_conversations or 0,
            photo_principale=row.photo_principale,
        )
        for row in rows
    ])


@router.get("", response_model=BienListResponse)
@router.get("/", response_model=BienListResponse, include_in_schema=False)
async def list_biens(
    filters: BienFilters = Depends(bien_filters),
    db: AsyncSession = Depends(get_db),
):
    try:
        page = await crud.search_published_biens(db, filters)
    except SQLAlchemyError:
        logger.exception("Failed to list biens with filters %s", filters.applied())
        raise server_error("Erreur lors de la récupération des biens")

    return BienListResponse(
        biens=[
            BienListItem(
                **_fields(row.Bien),
                proprietaire_nom=row.proprietaire_nom,
                proprietaire_prenom=row.proprietaire_prenom,
                proprietaire_telephone=row.proprietaire_telephone,
                photo_principale=row.photo_principale,
            )
            for row in page.rows
        ],
        total=page.total,
        pagination=Pagination(page=page.page, limit=page.limit, total=page.total, pages=page.pages),
        filters=filters.applied(),
    )


@router.get("/{id}", response_model=BienDetailResponse)
async def get_bien(
    bien_id: int = Depends(valid_bien_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        row = await crud.get_published_bien(db, bien_id)
        photos = await crud.list_photos(db, bien_id) if row else []
    except SQLAlchemyError:
        logger.exception("Failed to fetch bien %s", bien_id)
        raise server_error("Erreur lors de la récupération du bien")

    if row is None:
        raise ApiError(404, "Bien non trouvé", "Le bien demandé n'existe pas ou n'est pas publié")

    return BienDetailResponse(
        bien=BienDetail(
            **_fields(row.Bien),
            proprietaire_nom=row.proprietaire_nom,
            proprietaire_prenom=row.proprietaire_prenom,
            proprietaire_telephone=row.proprietaire_telephone,
            proprietaire_email=row.proprietaire_email,
        ),
        photos=[PhotoRead.model_validate(p) for p in photos],
    )


@router.post("", response_model=BienMutationResponse, status_code=201)
@router.post("/", response_model=BienMutationResponse, status_code=201, include_in_schema=False)
async def create_bien(
    body: BienPayload,
    auth: AuthContext = Depends(require_vendeur),
    db: AsyncSession = Depends(get_db),
):
    try:
        bien = await crud.create_bien(db, auth.user_id, **body.model_dump())
    except SQLAlchemyError:
        logger.exception("Failed to create bien for user %s", auth.user_id)
        raise server_error("Erreur lors de la création du bien")

    logger.info("Bien %s created by user %s", bien.id, auth.user_id)
    return BienMutationResponse(message="Bien créé avec succès", bien=BienRead.model_validate(bien))


@router.put("/{id}", response_model=BienMutationResponse)
async def update_bien(
    body: BienPayload,
    bien: Bien = Depends(get_owned_bien),
    db: AsyncSession = Depends(get_db),
):
    bien_id = bien.id
    try:
        bien = await crud.update_bien(db, bien, **body.model_dump())
    except SQLAlchemyError:
        logger.exception("Failed to update bien %s", bien_id)
        raise server_error("Erreur lors de la modification du bien")

    logger.info("Bien %s updated", bien_id)
    return BienMutationResponse(message="Bien mis à jour avec succès", bien=BienRead.model_validate(bien))


@router.delete("/{id}", response_model=MessageResponse)
async def delete_bien(
    bien: Bien = Depends(get_owned_bien),
    db: AsyncSession = Depends(get_db),
):
    bien_id = bien.id
    try:
        await crud.delete_bien(db, bien)
    except SQLAlchemyError:
        logger.exception("Failed to delete bien %s", bien_id)
        raise server_error("Erreur lors de la suppression du bien")

    logger.info("Bien %s deleted", bien_id)
    return MessageResponse(message="Bien supprimé avec succès")
