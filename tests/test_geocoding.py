import httpx
import pytest

from src.location_engine.config import Settings
from src.location_engine.services.geocoding.base import (
    ADDRESS_NOT_FOUND,
    GEOCODING_UNAVAILABLE,
    OUTSIDE_COUNTRY,
    GoogleGeocodingProvider,
    MapboxGeocodingProvider,
)
from src.location_engine.services.geocoding.dispatcher import get_geocoding_provider
from src.location_engine.services.geocoding.nominatim_client import NominatimClient


def _candidate(lat: float, lon: float, name: str = "Jalan Merdeka, Bandung, Jawa Barat, Indonesia", importance=0.6):
    return {
        "lat": str(lat),
        "lon": str(lon),
        "display_name": name,
        "importance": importance,
        "address": {"city": "Bandung", "state": "Jawa Barat", "postcode": "40111", "country": "Indonesia"},
    }


def _client(handler) -> NominatimClient:
    return NominatimClient.from_settings(Settings(), transport=httpx.MockTransport(handler))


def test_geocode_returns_primary_and_suggestions():
    candidates = [
        _candidate(-6.917, 107.619),
        _candidate(-6.92, 107.62, name="Jalan Asia Afrika, Bandung"),
        _candidate(35.68, 139.69, name="Chiyoda, Tokyo"),
        _candidate(-6.9, 107.6, name="Jalan Braga, Bandung"),
        _candidate(-6.95, 107.65, name="Fifth result, Bandung"),
    ]
    client = _client(lambda request: httpx.Response(200, json=candidates))

    result = client.geocode("Jalan Merdeka Bandung")

    assert result.is_valid
    assert result.error is None
    assert result.address.street == "Jalan Merdeka"
    assert result.address.city == "Bandung"
    assert result.address.postal_code == "40111"
    assert result.address.coordinates.lat == pytest.approx(-6.917)
    assert result.address.coordinates.lng == pytest.approx(107.619)
    assert result.confidence == pytest.approx(0.6)
    # candidates 2..4 only, out-of-country ones dropped
    assert [s.street for s in result.suggestions] == ["Jalan Asia Afrika", "Jalan Braga"]


def test_geocode_sends_country_restricted_query():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[_candidate(-6.917, 107.619)])

    _client(handler).geocode("Bandung")

    request = seen[0]
    assert request.url.path == "/search"
    assert request.url.params["q"] == "Bandung"
    assert request.url.params["countrycodes"] == "id"
    assert request.url.params["format"] == "json"
    assert request.url.params["limit"] == "5"
    assert request.url.params["addressdetails"] == "1"
    assert request.headers["User-Agent"] == "Booqing-Platform/1.0"


def test_geocode_not_found():
    result = _client(lambda request: httpx.Response(200, json=[])).geocode("Nowhere at all")
    assert not result.is_valid
    assert result.error == ADDRESS_NOT_FOUND
    assert result.address is None


def test_geocode_primary_outside_country():
    result = _client(lambda request: httpx.Response(200, json=[_candidate(35.68, 139.69)])).geocode("Chiyoda Tokyo")
    assert not result.is_valid
    assert result.error == OUTSIDE_COUNTRY


@pytest.mark.parametrize("importance", [None, 0, "bogus"])
def test_geocode_confidence_defaults(importance):
    result = _client(
        lambda request: httpx.Response(200, json=[_candidate(-6.917, 107.619, importance=importance)])
    ).geocode("Bandung")
    assert result.is_valid
    assert result.confidence == 0.5


def test_geocode_confidence_is_capped():
    result = _client(
        lambda request: httpx.Response(200, json=[_candidate(-6.917, 107.619, importance=1.7)])
    ).geocode("Bandung")
    assert result.confidence == 1.0


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="upstream down"),
        httpx.Response(200, json={"error": "unexpected"}),
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json=[{"display_name": "missing coordinates"}]),
    ],
)
def test_geocode_provider_errors_are_soft(response: httpx.Response):
    result = _client(lambda request: response).geocode("Bandung")
    assert not result.is_valid
    assert result.error == GEOCODING_UNAVAILABLE


def test_geocode_network_error_is_soft():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = _client(handler).geocode("Bandung")
    assert result.error == GEOCODING_UNAVAILABLE


def test_dispatcher_selects_providers():
    assert isinstance(get_geocoding_provider(Settings(geocoding_provider="nominatim")), NominatimClient)

    google = get_geocoding_provider(Settings(geocoding_provider="google", api_keys={"google": "g-key"}))
    assert isinstance(google, GoogleGeocodingProvider)
    assert google.api_key == "g-key"
    assert isinstance(get_geocoding_provider(Settings(geocoding_provider="mapbox")), MapboxGeocodingProvider)


@pytest.mark.parametrize("provider", [GoogleGeocodingProvider(), MapboxGeocodingProvider()])
def test_placeholder_providers_raise(provider):
    with pytest.raises(NotImplementedError):
        provider.geocode("Bandung")


def test_settings_parse_api_keys_from_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("LOCATION_API_KEYS", '{"Google": "abc", "mapbox": ""}')
    assert Settings().api_keys == {"google": "abc"}
