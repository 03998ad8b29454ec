from __future__ import annotations
from datetime import datetime
from typing import Any, Literal
from pydantic import BaseModel, Field

from app.models.base import MAX_INTEGER

TypeBien = Literal["maison", "immeuble", "villa", "appartement", "terrain"]
StatutBien = Literal["location", "vente"]
ModalitePaiement = Literal["mensuel", "trimestriel", "annuel", "unique"]

# Per-field messages returned in validation error details
VALIDATION_MESSAGES = {
    "titre": "Le titre doit contenir entre 5 et 150 caractères",
    "description": "La description doit contenir entre 20 et 2000 caractères",
    "type_bien": "Type de bien invalide",
    "statut": "Statut invalide (location ou vente)",
    "prix": "Le prix doit être un nombre positif supérieur à 0",
    "modalite_paiement": "Modalité de paiement invalide",
    "surface": "La surface doit être un nombre positif supérieur à 0",
    "nombre_pieces": "Le nombre de pièces doit être un entier positif ou nul",
    "adresse_complete": "L'adresse doit contenir entre 10 et 255 caractères",
    "ville": "La ville doit contenir entre 2 et 100 caractères",
    "code_postal": "Le code postal doit contenir entre 4 et 20 caractères",
    "latitude": "Latitude invalide",
    "longitude": "Longitude invalide",
}


class BienPayload(BaseModel):
    """Body of POST and PUT: every mutable field, validated once here."""

    titre: str = Field(min_length=5, max_length=150)
    description: str = Field(min_length=20, max_length=2000)
    type_bien: TypeBien
    statut: StatutBien
    prix: float = Field(ge=0.01, allow_inf_nan=False)
    modalite_paiement: ModalitePaiement
    surface: float = Field(ge=0.01, allow_inf_nan=False)
    nombre_pieces: int = Field(ge=0, le=MAX_INTEGER)
    adresse_complete: str = Field(min_length=10, max_length=255)
    ville: str = Field(min_length=2, max_length=100)
    code_postal: str = Field(min_length=4, max_length=20)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    model_config = {"str_strip_whitespace": True}


class BienRead(BaseModel):
    id: int
    proprietaire_id: int
    titre: str
    description: str
    type_bien: str
    statut: str
    prix: float
    modalite_paiement: str
    surface: float
    nombre_pieces: int
    adresse_complete: str
    ville: str
    code_postal: str
    latitude: float
    longitude: float
    statut_publication: str
    date_publication: datetime
    date_modification: datetime | None = None

    model_config = {"from_attributes": True}


class BienListItem(BienRead):
    proprietaire_nom: str
    proprietaire_prenom: str
    proprietaire_telephone: str
    photo_principale: str | None = None


class BienDetail(BienRead):
    proprietaire_nom: str
    proprietaire_prenom: str
    proprietaire_telephone: str
    proprietaire_email: str


class MesBienItem(BienRead):
    nb_conversations: int = 0
    photo_principale: str | None = None


class PhotoRead(BaseModel):
    id: int
    url_image: str
    est_principale: bool

    model_config = {"from_attributes": True}


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class BienListResponse(BaseModel):
    biens: list[BienListItem]
    total: int
    pagination: Pagination
    filters: dict[str, Any]


class MesBiensResponse(BaseModel):
    biens: list[MesBienItem]


class BienDetailResponse(BaseModel):
    bien: BienDetail
    photos: list[PhotoRead]


class BienMutationResponse(BaseModel):
    message: str
    bien: BienRead


class MessageResponse(BaseModel):
    message: str
