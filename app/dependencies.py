"""FastAPI dependency providers for auth, role and ownership checks, and request parsing."""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.db import crud
from app.db.engine import get_db
from app.errors import ApiError, server_error
from app.models import Bien
from app.models.base import MAX_INTEGER
from app.schemas.filters import BienFilters
from app.services.auth import AuthContext, get_current_user

logger = logging.getLogger(__name__)


@lru_cache
def get_settings_dep() -> Settings:
    return get_settings()


async def require_auth(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> AuthContext:
    """Require a valid authenticated session. Returns AuthContext."""
    return await get_current_user(request, db)


def require_role(*allowed_roles: str):
    """Factory: returns a dependency that enforces role membership."""
    async def _check(auth: AuthContext = Depends(require_auth)) -> AuthContext:
        if auth.role not in allowed_roles:
            raise HTTPException(403, "Rôle insuffisant pour cette action")
        return auth
    return _check


require_vendeur = require_role("vendeur", "admin")


def valid_bien_id(id: str) -> int:
    """Parse the {id} path segment as a positive integer that fits an SQL INTEGER."""
    # Plain ASCII digits only: no sign, whitespace or underscores
    bien_id = int(id) if id.isascii() and id.isdigit() else 0
    if not 0 < bien_id <= MAX_INTEGER:
        raise ApiError(400, "ID invalide", "L'ID du bien doit être un nombre entier positif")
    return bien_id


async def get_owned_bien(
    auth: AuthContext = Depends(require_auth),
    bien_id: int = Depends(valid_bien_id),
    db: AsyncSession = Depends(get_db),
) -> Bien:
    """Resolve the bien and check the caller owns it (admins pass) before any mutation."""
    try:
        bien = await crud.get_bien(db, bien_id)
    except SQLAlchemyError:
        logger.exception("Ownership lookup failed for bien %s", bien_id)
        raise server_error("Erreur lors de la vérification des droits")
    if bien is None:
        raise ApiError(404, "Bien non trouvé", "Le bien demandé n'existe pas")
    if bien.proprietaire_id != auth.user_id and not auth.is_admin:
        logger.warning("User %s denied access to bien %s", auth.user_id, bien_id)
        raise ApiError(403, "Accès refusé", "Vous n'êtes pas le propriétaire de ce bien")
    return bien


def bien_filters(
    ville: str | None = None,
    type_bien: str | None = None,
    statut: str | None = None,
    prix_min: str | None = None,
    prix_max: str | None = None,
    surface_min: str | None = None,
    nombre_pieces_min: str | None = None,
    page: str | None = None,
    limit: str | None = None,
    settings: Settings = Depends(get_settings_dep),
) -> BienFilters:
    """Build the filter struct from raw query strings; blank values count as absent."""
    raw = {
        "ville": ville, "type_bien": type_bien, "statut": statut,
        "prix_min": prix_min, "prix_max": prix_max, "surface_min": surface_min,
        "nombre_pieces_min": nombre_pieces_min, "page": page, "limit": limit,
    }
    values = {k: v.strip() for k, v in raw.items() if v is not None and v.strip()}
    values.setdefault("limit", settings.listing.default_page_size)
    try:
        return BienFilters.model_validate(values)
    except ValidationError as exc:
        raise RequestValidationError(
            [{"loc": ("query", *err["loc"]), "msg": err["msg"], "type": err["type"]} for err in exc.errors()]
        )
