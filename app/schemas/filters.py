"""Validated filter struct for the public listing endpoint."""

from __future__ import annotations
from typing import Any
from pydantic import BaseModel, Field, ValidationInfo, field_validator

from app.models.base import MAX_INTEGER
from app.schemas.bien import TypeBien, StatutBien

FILTER_KEYS = (
    "ville", "type_bien", "statut",
    "prix_min", "prix_max", "surface_min", "nombre_pieces_min",
)


class BienFilters(BaseModel):
    """Listing filters plus pagination.

    Absent filters are None and contribute no predicate. page and limit
    are at least 1; limit has no upper bound beyond what an SQL INTEGER
    bind can hold, and neither may the resulting offset.
    """

    ville: str | None = Field(default=None, min_length=1)
    type_bien: TypeBien | None = None
    statut: StatutBien | None = None
    prix_min: float | None = Field(default=None, allow_inf_nan=False)
    prix_max: float | None = Field(default=None, allow_inf_nan=False)
    surface_min: float | None = Field(default=None, allow_inf_nan=False)
    nombre_pieces_min: int | None = Field(default=None, le=MAX_INTEGER)
    page: int = Field(default=1, ge=1, le=MAX_INTEGER)
    limit: int = Field(default=20, ge=1, le=MAX_INTEGER)

    model_config = {"str_strip_whitespace": True, "frozen": True, "extra": "ignore"}

    @field_validator("limit")
    @classmethod
    def _offset_fits(cls, limit: int, info: ValidationInfo) -> int:
        page = info.data.get("page")
        if page is not None and (page - 1) * limit > MAX_INTEGER:
            raise ValueError("page trop grande pour cette taille de page")
        return limit

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def applied(self) -> dict[str, Any]:
        """The filters actually in effect, keyed by their query-string names."""
        return {k: getattr(self, k) for k in FILTER_KEYS if getattr(self, k) is not None}
