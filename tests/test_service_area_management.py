import pytest

from src.location_engine.data.service_areas_repository import (
    InMemoryServiceAreaRepository,
    row_to_service_area,
    service_area_to_row,
)
from src.location_engine.models.domain import Coordinates, ServiceAreaBoundary
from src.location_engine.schemas.service_areas import (
    CreateServiceAreaRequest,
    ServiceAreaBoundaryModel,
    UpdateServiceAreaRequest,
)
from src.location_engine.services.service_areas import management

TENANT = "tenant-1"

SQUARE = [
    {"lat": -6.25, "lng": 106.77},
    {"lat": -6.25, "lng": 106.86},
    {"lat": -6.15, "lng": 106.86},
    {"lat": -6.15, "lng": 106.77},
]


def _polygon(points: list[dict]) -> ServiceAreaBoundary:
    return ServiceAreaBoundary(type="polygon", coordinates=[Coordinates(**point) for point in points])


def _create_request(**overrides) -> CreateServiceAreaRequest:
    payload = {
        "name": "  Jakarta Pusat ",
        "boundaries": {"type": "polygon", "coordinates": SQUARE},
        "base_travel_surcharge": 15000,
        "available_services": ["massage"],
    }
    payload.update(overrides)
    return CreateServiceAreaRequest(**payload)


def test_validate_boundaries_accepts_square_and_circle():
    management.validate_boundaries(_polygon(SQUARE))
    management.validate_boundaries(
        ServiceAreaBoundary(type="circle", center=Coordinates(lat=-6.2, lng=106.8), radius=5)
    )


@pytest.mark.parametrize(
    "boundary, message",
    [
        (_polygon(SQUARE[:2]), "at least 3"),
        (_polygon([{"lat": 0, "lng": 0}, {"lat": 1, "lng": 1}, {"lat": 2, "lng": 2}]), "enclose an area"),
        (
            _polygon([{"lat": 0, "lng": 0}, {"lat": 1, "lng": 1}, {"lat": 1, "lng": 0}, {"lat": 0, "lng": 1}]),
            "self-intersect",
        ),
        (_polygon([{"lat": 95, "lng": 0}, {"lat": 1, "lng": 1}, {"lat": 1, "lng": 0}]), "outside valid"),
        (ServiceAreaBoundary(type="circle", radius=5), "center"),
        (ServiceAreaBoundary(type="circle", center=Coordinates(lat=0, lng=0), radius=0), "positive radius"),
        (ServiceAreaBoundary(type="circle", center=Coordinates(lat=0, lng=200), radius=1), "outside valid"),
    ],
)
def test_validate_boundaries_rejects_invalid(boundary: ServiceAreaBoundary, message: str):
    with pytest.raises(ValueError, match=message):
        management.validate_boundaries(boundary)


def test_create_and_get_service_area():
    repository = InMemoryServiceAreaRepository()
    created = management.create_service_area(TENANT, _create_request(), repository)

    assert created.id
    assert created.name == "Jakarta Pusat"
    assert created.is_active
    assert created.created_at is not None
    assert len(created.boundaries.coordinates) == 4
    assert management.get_service_area(TENANT, created.id, repository) == created
    assert management.get_service_area("someone-else", created.id, repository) is None


def test_create_rejects_invalid_boundaries():
    repository = InMemoryServiceAreaRepository()
    with pytest.raises(ValueError):
        management.create_service_area(
            TENANT, _create_request(boundaries={"type": "polygon", "coordinates": SQUARE[:2]}), repository
        )
    assert repository.list_for_tenant(TENANT, include_inactive=True) == []


def test_update_applies_only_given_fields():
    repository = InMemoryServiceAreaRepository()
    created = management.create_service_area(TENANT, _create_request(), repository)

    updated = management.update_service_area(
        TENANT,
        created.id,
        UpdateServiceAreaRequest(base_travel_surcharge=20000, is_active=False),
        repository,
    )

    assert updated.base_travel_surcharge == 20000
    assert updated.is_active is False
    assert updated.name == created.name
    assert updated.available_services == ["massage"]


def test_update_clears_nullable_fields_sent_as_null():
    repository = InMemoryServiceAreaRepository()
    created = management.create_service_area(
        TENANT, _create_request(description="Central Jakarta", per_km_surcharge=2000), repository
    )

    updated = management.update_service_area(
        TENANT,
        created.id,
        UpdateServiceAreaRequest(description=None, per_km_surcharge=None, name=None),
        repository,
    )

    assert updated.description is None
    assert updated.per_km_surcharge is None
    assert updated.name == "Jakarta Pusat"
    assert updated.base_travel_surcharge == 15000


def test_update_revalidates_boundaries():
    repository = InMemoryServiceAreaRepository()
    created = management.create_service_area(TENANT, _create_request(), repository)
    bad = UpdateServiceAreaRequest(
        boundaries=ServiceAreaBoundaryModel(type="circle", center={"lat": -6.2, "lng": 106.8}, radius=0)
    )
    with pytest.raises(ValueError):
        management.update_service_area(TENANT, created.id, bad, repository)


def test_update_missing_area_returns_none():
    repository = InMemoryServiceAreaRepository()
    assert management.update_service_area(TENANT, "missing", UpdateServiceAreaRequest(name="x"), repository) is None


def test_list_filters_inactive_and_service():
    repository = InMemoryServiceAreaRepository()
    massage = management.create_service_area(TENANT, _create_request(name="Massage only"), repository)
    everything = management.create_service_area(TENANT, _create_request(name="All", available_services=[]), repository)
    hidden = management.create_service_area(TENANT, _create_request(name="Hidden"), repository)
    management.update_service_area(TENANT, hidden.id, UpdateServiceAreaRequest(is_active=False), repository)

    active = management.list_service_areas(TENANT, repository)
    assert [area.id for area in active] == [massage.id, everything.id]
    assert len(management.list_service_areas(TENANT, repository, include_inactive=True)) == 3
    assert [area.id for area in management.list_service_areas(TENANT, repository, service_id="nails")] == [
        everything.id
    ]


def test_delete_service_area():
    repository = InMemoryServiceAreaRepository()
    created = management.create_service_area(TENANT, _create_request(), repository)
    assert management.delete_service_area("someone-else", created.id, repository) is False
    assert management.delete_service_area(TENANT, created.id, repository) is True
    assert management.get_service_area(TENANT, created.id, repository) is None


def test_row_mapping_keeps_boundaries_and_omits_blank_id():
    row = {
        "id": "area-1",
        "tenant_id": TENANT,
        "name": "Jakarta",
        "is_active": True,
        "boundaries": {"type": "polygon", "coordinates": SQUARE},
        "base_travel_surcharge": "15000",
        "available_services": None,
        "created_at": "2026-01-05T10:00:00Z",
    }
    area = row_to_service_area(row)
    assert area.base_travel_surcharge == 15000.0
    assert area.available_services == []
    assert area.boundaries.coordinates[0] == Coordinates(lat=-6.25, lng=106.77)
    assert area.created_at.tzinfo is not None

    back = service_area_to_row(area)
    assert back["id"] == "area-1"
    assert back["boundaries"]["coordinates"] == SQUARE

    area.id = ""
    assert "id" not in service_area_to_row(area)
