from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.models import Base, PhotoBien
from app.db import crud
from app.db.listing_query import ListingQuery
from app.schemas.filters import BienFilters

_BASE_DATE = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def db():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


@pytest_asyncio.fixture
async def vendeur(db):
    return await crud.create_user(
        db, "vendeur@test.com", "not-a-real-hash", role="vendeur",
        nom="Durand", prenom="Paul", telephone="0600000000",
    )


def _fields(n: int = 0, **overrides):
    data = {
        "titre": f"Bien numéro {n}",
        "description": "Description suffisamment longue pour le test.",
        "type_bien": "appartement",
        "statut": "location",
        "prix": 1000.0 + n,
        "modalite_paiement": "mensuel",
        "surface": 50.0 + n,
        "nombre_pieces": 2,
        "adresse_complete": f"{n} rue du Test",
        "ville": "Paris",
        "code_postal": "75001",
        "latitude": 48.85,
        "longitude": 2.35,
        "date_publication": _BASE_DATE + timedelta(days=n),
    }
    data.update(overrides)
    return data


async def test_search_returns_only_published_newest_first(db, vendeur):
    for n in range(3):
        await crud.create_bien(db, vendeur.id, **_fields(n))
    await crud.create_bien(db, vendeur.id, **_fields(10, statut_publication="brouillon"))

    page = await crud.search_published_biens(db, BienFilters())
    assert page.total == 3
    titres = [row.Bien.titre for row in page.rows]
    assert titres == ["Bien numéro 2", "Bien numéro 1", "Bien numéro 0"]
    assert page.rows[0].proprietaire_nom == "Durand"


async def test_search_ville_is_case_insensitive_substring(db, vendeur):
    await crud.create_bien(db, vendeur.id, **_fields(0, ville="Paris"))
    await crud.create_bien(db, vendeur.id, **_fields(1, ville="Lyon"))

    page = await crud.search_published_biens(db, BienFilters(ville="par"))
    assert page.total == 1
    assert page.rows[0].Bien.ville == "Paris"


async def test_search_ville_wildcards_match_literally(db, vendeur):
    await crud.create_bien(db, vendeur.id, **_fields(0, ville="Paris"))

    page = await crud.search_published_biens(db, BienFilters(ville="%"))
    assert page.total == 0
    assert page.rows == []


async def test_search_numeric_and_enum_filters(db, vendeur):
    await crud.create_bien(db, vendeur.id, **_fields(0, prix=500, surface=30, nombre_pieces=1))
    await crud.create_bien(db, vendeur.id, **_fields(1, prix=1500, surface=80, nombre_pieces=4))
    await crud.create_bien(db, vendeur.id, **_fields(2, prix=2500, surface=120, nombre_pieces=6,
                                                     type_bien="maison", statut="vente",
                                                     modalite_paiement="unique"))

    page = await crud.search_published_biens(db, BienFilters(prix_min=1000, prix_max=2000))
    assert [r.Bien.prix for r in page.rows] == [1500]

    page = await crud.search_published_biens(db, BienFilters(surface_min=80, nombre_pieces_min=4))
    assert page.total == 2

    page = await crud.search_published_biens(db, BienFilters(type_bien="maison", statut="vente"))
    assert page.total == 1
    assert page.rows[0].Bien.type_bien == "maison"


async def test_search_pagination_second_page(db, vendeur):
    for n in range(25):
        await crud.create_bien(db, vendeur.id, **_fields(n))

    page = await crud.search_published_biens(db, BienFilters(page=2, limit=10))
    assert page.total == 25
    assert page.pages == 3
    # Newest first: rows 11-20 are biens 14 down to 5
    assert [row.Bien.prix for row in page.rows] == [1000.0 + n for n in range(14, 4, -1)]

    last = await crud.search_published_biens(db, BienFilters(page=3, limit=10))
    assert len(last.rows) == 5


@pytest.mark.parametrize("filters", [
    BienFilters(),
    BienFilters(ville="a"),
    BienFilters(prix_min=1003),
    BienFilters(type_bien="maison"),
    BienFilters(ville="PAR", surface_min=52, nombre_pieces_min=2),
])
async def test_count_agrees_with_rows(db, vendeur, filters):
    for n in range(6):
        await crud.create_bien(db, vendeur.id, **_fields(n, ville="Paris" if n % 2 else "Lyon"))
    await crud.create_bien(db, vendeur.id, **_fields(7, statut_publication="archive"))

    everything = filters.model_copy(update={"limit": 1000})
    page = await crud.search_published_biens(db, everything)
    assert page.total == len(page.rows)
    count = (await db.execute(ListingQuery(everything).count_statement())).scalar_one()
    assert count == page.total


async def test_photo_principale_is_first_primary(db, vendeur):
    bien = await crud.create_bien(db, vendeur.id, **_fields(0))
    await crud.add_photo(db, bien.id, "https://img/secondaire.jpg")
    await crud.add_photo(db, bien.id, "https://img/principale.jpg", est_principale=True)
    await crud.add_photo(db, bien.id, "https://img/autre-principale.jpg", est_principale=True)

    page = await crud.search_published_biens(db, BienFilters())
    assert page.rows[0].photo_principale == "https://img/principale.jpg"

    photos = await crud.list_photos(db, bien.id)
    assert [p.url_image for p in photos] == [
        "https://img/principale.jpg",
        "https://img/autre-principale.jpg",
        "https://img/secondaire.jpg",
    ]


async def test_get_published_bien_hides_unpublished(db, vendeur):
    published = await crud.create_bien(db, vendeur.id, **_fields(0))
    draft = await crud.create_bien(db, vendeur.id, **_fields(1, statut_publication="brouillon"))

    row = await crud.get_published_bien(db, published.id)
    assert row is not None
    assert row.proprietaire_email == "vendeur@test.com"
    assert await crud.get_published_bien(db, draft.id) is None
    assert await crud.get_published_bien(db, 9999) is None


async def test_list_biens_for_owner_includes_drafts_and_counts(db, vendeur):
    acheteur = await crud.create_user(db, "acheteur@test.com", "x", role="acheteur")
    bien = await crud.create_bien(db, vendeur.id, **_fields(0))
    await crud.create_bien(db, vendeur.id, **_fields(1, statut_publication="brouillon"))
    await crud.create_bien(db, acheteur.id, **_fields(2))
    await crud.create_conversation(db, bien.id, acheteur.id)
    await crud.create_conversation(db, bien.id, acheteur.id)

    rows = await crud.list_biens_for_owner(db, vendeur.id)
    assert len(rows) == 2
    assert rows[0].Bien.statut_publication == "brouillon"
    assert rows[1].nb_conversations == 2
    assert rows[0].nb_conversations == 0


async def test_create_bien_reads_back_defaults(db, vendeur):
    fields = _fields(0)
    del fields["date_publication"]
    bien = await crud.create_bien(db, vendeur.id, **fields)
    assert bien.id is not None and bien.id > 0
    assert bien.statut_publication == "publie"
    assert bien.date_publication is not None
    assert bien.date_modification is None


async def test_update_bien_replaces_fields(db, vendeur):
    bien = await crud.create_bien(db, vendeur.id, **_fields(0))
    updated = await crud.update_bien(db, bien, **{
        k: v for k, v in _fields(5, titre="Nouveau titre", ville="Lille").items()
        if k != "date_publication"
    })
    assert updated.titre == "Nouveau titre"
    assert updated.ville == "Lille"
    assert updated.proprietaire_id == vendeur.id
    assert updated.date_modification is not None

    fetched = await crud.get_bien(db, bien.id)
    assert fetched.ville == "Lille"


async def test_delete_bien_removes_photos(db, vendeur):
    bien = await crud.create_bien(db, vendeur.id, **_fields(0))
    await crud.add_photo(db, bien.id, "https://img/1.jpg", est_principale=True)
    bien_id = bien.id

    await crud.delete_bien(db, bien)
    assert await crud.get_bien(db, bien_id) is None
    remaining = await db.execute(
        select(func.count(PhotoBien.id)).where(PhotoBien.bien_id == bien_id)
    )
    assert remaining.scalar_one() == 0
