import pytest
from fastapi.exceptions import RequestValidationError

from app.config import Settings
from app.dependencies import bien_filters, valid_bien_id
from app.errors import ApiError, validation_details


def _filters(**query):
    return bien_filters(settings=Settings(), **query)


def test_bien_filters_blank_values_are_absent():
    filters = _filters(ville="  ", prix_min="", page="")
    assert filters.ville is None
    assert filters.prix_min is None
    assert filters.page == 1
    assert filters.applied() == {}


def test_bien_filters_uses_configured_page_size():
    settings = Settings()
    settings.listing.default_page_size = 5
    assert bien_filters(settings=settings).limit == 5
    assert bien_filters(limit="50", settings=settings).limit == 50


def test_bien_filters_trims_and_coerces():
    filters = _filters(ville=" Lyon ", type_bien="villa", nombre_pieces_min="3", page="4", limit="10")
    assert filters.ville == "Lyon"
    assert filters.type_bien == "villa"
    assert filters.nombre_pieces_min == 3
    assert filters.offset == 30


def test_bien_filters_invalid_raises_request_validation_error():
    with pytest.raises(RequestValidationError) as exc:
        _filters(prix_min="abc", type_bien="chateau")
    details = validation_details(exc.value.errors())
    fields = {d["field"] for d in details}
    assert fields == {"prix_min", "type_bien"}
    assert {"field": "type_bien", "message": "Type de bien invalide"} in details


@pytest.mark.parametrize("raw,expected", [("1", 1), ("42", 42), (str(2**63 - 1), 2**63 - 1)])
def test_valid_bien_id_accepts_positive_integers(raw, expected):
    assert valid_bien_id(raw) == expected


@pytest.mark.parametrize("raw", [
    "0", "-3", "abc", "1.5", "",
    "1_0", "+5", " 5", "5 ", "\u0665",
    "99999999999999999999", str(2**63),
])
def test_valid_bien_id_rejects_everything_else(raw):
    with pytest.raises(ApiError) as exc:
        valid_bien_id(raw)
    assert exc.value.status_code == 400
    assert exc.value.error == "ID invalide"


def test_validation_details_uses_field_messages():
    errors = [
        {"loc": ("body", "prix"), "msg": "Input should be greater than or equal to 0.01", "type": "greater_than_equal"},
        {"loc": ("body", "inconnu"), "msg": "Field required", "type": "missing"},
    ]
    assert validation_details(errors) == [
        {"field": "prix", "message": "Le prix doit être un nombre positif supérieur à 0"},
        {"field": "inconnu", "message": "Field required"},
    ]


@pytest.mark.parametrize("field", ["page", "limit", "nombre_pieces_min"])
def test_bien_filters_oversized_integer_reports_field(field):
    with pytest.raises(RequestValidationError) as exc:
        _filters(**{field: "99999999999999999999"})
    assert [d["field"] for d in validation_details(exc.value.errors())] == [field]
