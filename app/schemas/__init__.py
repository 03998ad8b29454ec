"""Pydantic request/response schemas."""

from app.schemas.bien import (
    BienPayload, BienRead, BienListItem, BienDetail, MesBienItem, PhotoRead,
    Pagination, BienListResponse, MesBiensResponse, BienDetailResponse,
    BienMutationResponse, MessageResponse,
)
from app.schemas.filters import BienFilters

__all__ = [
    "BienPayload", "BienRead", "BienListItem", "BienDetail", "MesBienItem", "PhotoRead",
    "Pagination", "BienListResponse", "MesBiensResponse", "BienDetailResponse",
    "BienMutationResponse", "MessageResponse",
    "BienFilters",
]
