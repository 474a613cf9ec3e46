import httpx
import pytest

from src.location_engine.config import Settings
from src.location_engine.models.domain import Coordinates
from src.location_engine.services.routing.base import GoogleRoutingProvider, MapboxRoutingProvider
from src.location_engine.services.routing.dispatcher import get_routing_provider
from src.location_engine.services.routing.osrm_client import OSRMClient, parse_route

JAKARTA = Coordinates(lat=-6.2, lng=106.816)
BANDUNG = Coordinates(lat=-6.917, lng=107.619)

OSRM_ROUTE = {
    "code": "Ok",
    "routes": [
        {
            "distance": 151234.0,
            "duration": 9001.0,
            "geometry": {
                "type": "LineString",
                "coordinates": [[106.816, -6.2], [107.0, -6.5], [107.619, -6.917]],
            },
        }
    ],
}


def _client(handler) -> OSRMClient:
    return OSRMClient(base_url="http://osrm.test/", profile="driving", transport=httpx.MockTransport(handler))


def test_route_converts_units_and_swaps_coordinates():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=OSRM_ROUTE)

    info = _client(handler).route(JAKARTA, BANDUNG)

    assert info is not None
    assert info.distance_km == pytest.approx(151.234)
    assert info.duration_min == 151  # ceil(9001 / 60)
    assert info.route[0] == Coordinates(lat=-6.2, lng=106.816)
    assert info.route[-1] == Coordinates(lat=-6.917, lng=107.619)

    request = seen[0]
    assert request.url.path == "/route/v1/driving/106.816,-6.2;107.619,-6.917"
    assert request.url.params["overview"] == "full"
    assert request.url.params["geometries"] == "geojson"


def test_parse_route_without_geometry():
    info = parse_route({"distance": 1000, "duration": 60})
    assert info.distance_km == 1.0
    assert info.duration_min == 1
    assert info.route == []


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(503, text="busy"),
        httpx.Response(200, json={"code": "NoRoute", "message": "Impossible route"}),
        httpx.Response(200, json={"code": "Ok", "routes": []}),
        httpx.Response(200, json=["not", "an", "object"]),
        httpx.Response(200, json={"code": "Ok", "routes": [{"duration": 10}]}),
        httpx.Response(200, json={"code": "Ok", "routes": ["garbage"]}),
        httpx.Response(200, json={"code": "Ok", "routes": [{"distance": 1, "duration": 1, "geometry": "abc"}]}),
        httpx.Response(
            200, json={"code": "Ok", "routes": [{"distance": 1000, "duration": 60, "geometry": {"coordinates": [[106.8]]}}]}
        ),
        httpx.Response(200, json={"code": "Ok", "routes": [{"distance": "far", "duration": 60}]}),
    ],
)
def test_route_failures_return_none(response: httpx.Response):
    assert _client(lambda request: response).route(JAKARTA, BANDUNG) is None


def test_route_timeout_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    assert _client(handler).route(JAKARTA, BANDUNG) is None


def test_dispatcher_selects_providers():
    osrm = get_routing_provider(Settings(routing_provider="osrm", osrm_base_url="http://osrm.local"))
    assert isinstance(osrm, OSRMClient)
    assert osrm.base_url == "http://osrm.local"
    assert isinstance(get_routing_provider(Settings(routing_provider="google")), GoogleRoutingProvider)
    assert isinstance(get_routing_provider(Settings(routing_provider="mapbox")), MapboxRoutingProvider)


@pytest.mark.parametrize("provider", [GoogleRoutingProvider(), MapboxRoutingProvider()])
def test_placeholder_providers_raise(provider):
    with pytest.raises(NotImplementedError):
        provider.route(JAKARTA, BANDUNG)
