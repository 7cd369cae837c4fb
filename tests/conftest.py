import json

import httpx
import pytest

from cafe_map.repos.local_repo import LocalRepository


SAMPLE_ELEMENTS = [
    {
        "type": "node",
        "id": 101,
        "lat": 50.45,
        "lon": 30.52,
        "tags": {
            "amenity": "cafe",
            "name": "Aroma Kava",
            "addr:street": "Хрещатик",
            "addr:housenumber": "15",
            "addr:city": "Київ",
            "phone": "+380 44 000 0000",
            "opening_hours": "Mo-Su 08:00-22:00",
            "wifi": "yes",
        },
    },
    {
        "type": "node",
        "id": 102,
        "lat": 50.46,
        "lon": 30.51,
        "tags": {"amenity": "cafe"},
    },
    {
        "type": "way",
        "id": 201,
        "center": {"lat": 50.44, "lon": 30.53},
        "tags": {"amenity": "cafe", "name": "Courtyard", "website": "https://courtyard.example"},
    },
    {
        # way without center: nothing to put on the map
        "type": "way",
        "id": 202,
        "tags": {"amenity": "cafe", "name": "Lost"},
    },
]


@pytest.fixture
def repo(tmp_path):
    return LocalRepository(tmp_path / "data", cache_ttl_seconds=0)


@pytest.fixture
def overpass_calls():
    return []


@pytest.fixture
def overpass_ok(overpass_calls):
    def handler(request: httpx.Request) -> httpx.Response:
        overpass_calls.append(request)
        return httpx.Response(200, content=json.dumps({"elements": SAMPLE_ELEMENTS}))

    return httpx.MockTransport(handler)


@pytest.fixture
def overpass_down():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(504, text="Gateway Timeout")

    return httpx.MockTransport(handler)
