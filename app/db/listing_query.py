"""Filterable, paginated query over published biens.

The count statement and the page statement are built from the same FROM
clause and the same predicate list, so the reported total always matches
the rows that pagination walks through. Every caller-supplied value ends
up as a bound parameter.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Select, select, func
from sqlalchemy.sql.elements import ColumnElement

from app.models import Bien, PhotoBien, User
from app.models.bien import STATUT_PUBLIE
from app.schemas.filters import BienFilters


def photo_principale_column():
    """Correlated scalar subquery: URL of the bien's first primary photo."""
    return (
        select(PhotoBien.url_image)
        .where(PhotoBien.bien_id == Bien.id, PhotoBien.est_principale == True)
        .order_by(PhotoBien.id)
        .limit(1)
        .scalar_subquery()
        .label("photo_principale")
    )


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit)


@dataclass(frozen=True)
class ListingQuery:
    filters: BienFilters

    def conditions(self) -> list[ColumnElement[bool]]:
        f = self.filters
        # Published-only is always first and cannot be switched off by a filter
        conds: list[ColumnElement[bool]] = [Bien.statut_publication == STATUT_PUBLIE]
        if f.ville is not None:
            conds.append(Bien.ville.icontains(f.ville, autoescape=True))
        if f.type_bien is not None:
            conds.append(Bien.type_bien == f.type_bien)
        if f.statut is not None:
            conds.append(Bien.statut == f.statut)
        if f.prix_min is not None:
            conds.append(Bien.prix >= f.prix_min)
        if f.prix_max is not None:
            conds.append(Bien.prix <= f.prix_max)
        if f.surface_min is not None:
            conds.append(Bien.surface >= f.surface_min)
        if f.nombre_pieces_min is not None:
            conds.append(Bien.nombre_pieces >= f.nombre_pieces_min)
        return conds

    def _select(self, *columns: Any) -> Select:
        return (
            select(*columns)
            .select_from(Bien)
            .join(User, Bien.proprietaire_id == User.id)
            .where(*self.conditions())
        )

    def count_statement(self) -> Select:
        return self._select(func.count(Bien.id))

    def page_statement(self) -> Select:
        return (
            self._select(
                Bien,
                User.nom.label("proprietaire_nom"),
                User.prenom.label("proprietaire_prenom"),
                User.telephone.label("proprietaire_telephone"),
                photo_principale_column(),
            )
            .order_by(Bien.date_publication.desc(), Bien.id.desc())
            .limit(self.filters.limit)
            .offset(self.filters.offset)
        )


@dataclass
class ListingPage:
    """One page of published biens plus the numbers needed to paginate."""

    rows: list[Any] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20

    @property
    def pages(self) -> int:
        return page_count(self.total, self.limit)
