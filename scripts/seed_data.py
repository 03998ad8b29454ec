"""Seed the database with a demo seller, a buyer and a few biens."""

import asyncio

from app.db.engine import async_session_factory, init_db
from app.db import crud
from app.services.auth import hash_password

DEMO_EMAIL = "vendeur.demo@example.com"
DEMO_BUYER_EMAIL = "acheteur.demo@example.com"

DEMO_BIENS = [
    {
        "titre": "Appartement lumineux centre-ville",
        "description": "Bel appartement de trois pièces rénové, proche des commerces et transports.",
        "type_bien": "appartement",
        "statut": "location",
        "prix": 1250.0,
        "modalite_paiement": "mensuel",
        "surface": 68.5,
        "nombre_pieces": 3,
        "adresse_complete": "12 rue de la République",
        "ville": "Paris",
        "code_postal": "75011",
        "latitude": 48.8625,
        "longitude": 2.3708,
        "photos": ["https://images.example.com/paris-salon.jpg", "https://images.example.com/paris-cuisine.jpg"],
    },
    {
        "titre": "Villa avec piscine",
        "description": "Villa individuelle de cinq pièces avec jardin arboré et piscine chauffée.",
        "type_bien": "villa",
        "statut": "vente",
        "prix": 685000.0,
        "modalite_paiement": "unique",
        "surface": 180.0,
        "nombre_pieces": 5,
        "adresse_complete": "8 chemin des Oliviers",
        "ville": "Marseille",
        "code_postal": "13008",
        "latitude": 43.2420,
        "longitude": 5.3790,
        "photos": ["https://images.example.com/villa-facade.jpg"],
    },
    {
        "titre": "Terrain constructible",
        "description": "Terrain plat et viabilisé en bordure de lotissement, exposition sud.",
        "type_bien": "terrain",
        "statut": "vente",
        "prix": 95000.0,
        "modalite_paiement": "unique",
        "surface": 820.0,
        "nombre_pieces": 0,
        "adresse_complete": "Lieu-dit Les Grands Champs",
        "ville": "Lyon",
        "code_postal": "69009",
        "latitude": 45.7780,
        "longitude": 4.8050,
        "photos": [],
    },
]


async def seed():
    await init_db()

    async with async_session_factory() as db:
        if await crud.get_user_by_email(db, DEMO_EMAIL):
            print("Demo seller already exists, skipping seed.")
            return

        vendeur = await crud.create_user(
            db, DEMO_EMAIL, hash_password("demo-password"), role="vendeur",
            nom="Martin", prenom="Claire", telephone="+33601020304",
        )
        print(f"Created seller: {vendeur.email} (id: {vendeur.id})")

        acheteur = await crud.create_user(
            db, DEMO_BUYER_EMAIL, hash_password("demo-password"), role="acheteur",
            nom="Durand", prenom="Paul", telephone="+33605060708",
        )
        print(f"Created buyer: {acheteur.email} (id: {acheteur.id})")

        for data in DEMO_BIENS:
            fields = dict(data)
            photos = fields.pop("photos")
            bien = await crud.create_bien(db, vendeur.id, **fields)
            for i, url in enumerate(photos):
                await crud.add_photo(db, bien.id, url, est_principale=(i == 0))
            print(f"Created bien: {bien.titre} (id: {bien.id}, {len(photos)} photos)")
            if bien.statut == "location":
                await crud.create_conversation(db, bien.id, acheteur.id)

    print("\nSeed complete. Start the server with: uvicorn app.main:app --reload")
    print("Seller login: vendeur.demo@example.com / demo-password")
    print("Buyer login: acheteur.demo@example.com / demo-password")


if __name__ == "__main__":
    asyncio.run(seed())
