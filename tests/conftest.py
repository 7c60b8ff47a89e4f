"""Shared test fixtures: stand-in registries served through httpx.MockTransport."""

import asyncio
from dataclasses import dataclass

import httpx
import mlflow
import pytest

from pdokapis.retrieval.bag import CANONICAL_BAG_URL, BagClientBuilder
from pdokapis.retrieval.brk import BrkClientBuilder
from pdokapis.retrieval.locatieserver import LookupClientBuilder

BAG_TEST_URL = "http://bag.test/v2"
BRK_TEST_URL = "http://brk.test/wfs"
LOCATIESERVER_TEST_URL = "http://locatieserver.test/v3_1"

# 20 x 10 m footprint with a 2 x 2 m courtyard: 196 m²
PAND_RING = [
    [190000.0, 430000.0], [190020.0, 430000.0], [190020.0, 430010.0],
    [190000.0, 430010.0], [190000.0, 430000.0],
]
PAND_HOLE = [
    [190004.0, 430004.0], [190004.0, 430006.0], [190006.0, 430006.0],
    [190006.0, 430004.0], [190004.0, 430004.0],
]


@pytest.fixture(autouse=True)
def _disable_mlflow_tracing():
    """Disable MLflow tracing during tests: no side effects, no mlruns/ writes."""
    mlflow.tracing.disable()
    yield
    mlflow.tracing.enable()


@dataclass
class _Route:
    payload: object = None
    status: int = 200
    exc: Exception | None = None
    delay: float = 0.0


class FakeRegistry:
    """Serves canned JSON per URL path and records every request it receives."""

    def __init__(self):
        self.routes: dict[str, _Route] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path, payload=None, status=200, exc=None, delay=0.0):
        self.routes[path] = _Route(payload=payload, status=status, exc=exc, delay=delay)
        return self

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"title": "Niet gevonden", "status": 404})
        if route.delay:
            await asyncio.sleep(route.delay)
        if route.exc is not None:
            raise route.exc
        return httpx.Response(route.status, json=route.payload)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


def make_pand_payload(pand_id, rings=None, year="2008", status="Pand in gebruik"):
    return {
        "pand": {
            "identificatie": pand_id,
            "domein": "NL.IMBAG.Pand",
            "geometrie": {
                "type": "Polygon",
                "coordinates": rings if rings is not None else [PAND_RING, PAND_HOLE],
            },
            "oorspronkelijkBouwjaar": year,
            "status": status,
        },
        "_links": {"self": {"href": f"{CANONICAL_BAG_URL}/panden/{pand_id}"}},
    }


def make_vbo_payload(
    pand_ids,
    status="Verblijfsobject in gebruik",
    oppervlakte=1234,
    gebruiksdoelen=("kantoorfunctie",),
):
    return {
        "verblijfsobject": {
            "identificatie": "0268010000084126",
            "status": status,
            "oppervlakte": oppervlakte,
            "gebruiksdoelen": list(gebruiksdoelen),
        },
        "_links": {
            "self": {"href": f"{CANONICAL_BAG_URL}/verblijfsobjecten/0268010000084126"},
            "maaktDeelUitVan": [
                {"href": f"{CANONICAL_BAG_URL}/panden/{pand_id}"} for pand_id in pand_ids
            ],
        },
    }


@pytest.fixture
def fake_bag():
    return FakeRegistry()


@pytest.fixture
def fake_brk():
    return FakeRegistry()


@pytest.fixture
def fake_locatieserver():
    return FakeRegistry()


@pytest.fixture
async def bag_client(fake_bag):
    client = (
        BagClientBuilder("pdok-apis tests")
        .base_url(BAG_TEST_URL)
        .api_key("TEST_BAG_API_KEY")
        .transport(fake_bag.transport())
        .build()
    )
    yield client
    await client.aclose()


@pytest.fixture
async def brk_client(fake_brk):
    client = (
        BrkClientBuilder("pdok-apis tests")
        .base_url(BRK_TEST_URL)
        .transport(fake_brk.transport())
        .build()
    )
    yield client
    await client.aclose()


@pytest.fixture
async def lookup_client(fake_locatieserver):
    client = (
        LookupClientBuilder("pdok-apis tests")
        .base_url(LOCATIESERVER_TEST_URL)
        .transport(fake_locatieserver.transport())
        .build()
    )
    yield client
    await client.aclose()


@pytest.fixture
def pand_payload():
    return make_pand_payload


@pytest.fixture
def vbo_payload():
    return make_vbo_payload
