"""Tests for the Locatieserver, BRK and BAG clients against stand-in registries."""

from xml.etree import ElementTree

import httpx
import pytest

from pdokapis.core.errors import DecodeFailure, EmptyResult, NetworkFailure
from pdokapis.geometry.projection import CoordinateSpace
from pdokapis.retrieval.bag import BagClientBuilder
from pdokapis.retrieval.brk import BrkClientBuilder, lot_filter
from pdokapis.retrieval.http import ClientBuilder
from pdokapis.retrieval.locatieserver import TG_OFFICE_ADDRESS_ID, LookupClientBuilder

SUGGEST_PAYLOAD = {"response": {"numFound": 2, "docs": [
    {
        "id": "adr-2fe93c94378bb179c424cf9918662375",
        "type": "adres",
        "weergavenaam": "Oude Nonnendaalseweg 222, 6542WZ Nijmegen",
        "score": 11.2,
    },
    {
        "id": "adr-0000",
        "type": "adres",
        "weergavenaam": "Oude Nonnendaalseweg 222A, 6542WZ Nijmegen",
        "score": 8.4,
    },
]}}

LOOKUP_PAYLOAD = {"response": {"docs": [{
    "id": "adr-2fe93c94378bb179c424cf9918662375",
    "gekoppeld_perceel": ["HTT02-M-5038"],
    "nummeraanduiding_id": "0268200000084127",
    "adresseerbaarobject_id": "0268010000084126",
    "postcode": "6542WZ",
    "huis_nlt": "222",
    "straatnaam": "Oude Nonnendaalseweg",
    "woonplaatsnaam": "Nijmegen",
}]}}

LOT_PAYLOAD = {"type": "FeatureCollection", "features": [{
    "type": "Feature",
    "geometry": {
        "type": "Polygon",
        "coordinates": [[[187000, 428000], [187030, 428000], [187030, 428040],
                         [187000, 428040], [187000, 428000]]],
    },
    "properties": {
        "identificatieLokaalID": "56380503870000",
        "kadastraleGemeenteWaarde": "Nijmegen",
        "AKRKadastraleGemeenteCodeWaarde": "HTT02",
        "kadastraleGrootteWaarde": 1200,
        "sectie": "M",
        "perceelnummer": 5038,
    },
}]}


class TestBuilders:
    def test_lookup_defaults(self):
        builder = LookupClientBuilder("ua")
        assert builder._connection_timeout_secs == 10
        assert builder._request_timeout_secs == 30
        assert builder._accept_crs is CoordinateSpace.GPS

    def test_brk_and_bag_defaults(self):
        for builder in (BrkClientBuilder("ua"), BagClientBuilder("ua")):
            assert builder._connection_timeout_secs == 5
            assert builder._request_timeout_secs == 20
            assert builder._accept_crs is CoordinateSpace.RIJKSDRIEHOEK

    def test_user_agent_required(self):
        with pytest.raises(ValueError):
            BrkClientBuilder("")

    def test_overrides(self):
        client = (
            BrkClientBuilder("ua")
            .accept_crs("epsg:4258")
            .request_timeout_secs(3)
            .base_url("http://brk.test/wfs/")
            .build()
        )
        assert client.accept_crs is CoordinateSpace.GPS
        assert client.request_timeout_secs == 3
        assert client.base_url == "http://brk.test/wfs"

    def test_bag_headers(self):
        headers = BagClientBuilder("my agent").api_key(" secret\n")._headers()
        assert headers["X-Api-Key"] == "secret"
        assert headers["Accept-Crs"] == "epsg:28992"
        assert headers["User-Agent"] == "my agent"

    def test_bag_max_concurrency_validated(self):
        with pytest.raises(ValueError):
            BagClientBuilder("ua").max_concurrency(0)

    def test_builder_must_implement_build(self):
        class WithoutBuild(ClientBuilder):
            def _default_base_url(self):
                return "http://registry.test"

        with pytest.raises(TypeError):
            WithoutBuild("ua")


class TestLookupClient:
    async def test_suggest_keeps_ranking(self, lookup_client, fake_locatieserver):
        fake_locatieserver.add("/v3_1/suggest", SUGGEST_PAYLOAD)
        docs = await lookup_client.suggest("6542WZ", "222")

        assert docs[0].id == "adr-2fe93c94378bb179c424cf9918662375"
        assert [d.score for d in docs] == [11.2, 8.4]
        request = fake_locatieserver.requests[0]
        assert request.url.params["q"] == "postcode:6542WZ 222"
        assert request.headers["user-agent"] == "pdok-apis tests"

    async def test_lookup(self, lookup_client, fake_locatieserver):
        fake_locatieserver.add("/v3_1/lookup", LOOKUP_PAYLOAD)
        [record] = await lookup_client.lookup("adr-2fe93c94378bb179c424cf9918662375")

        assert record.street_name == "Oude Nonnendaalseweg"
        assert fake_locatieserver.requests[0].url.params["id"] == "adr-2fe93c94378bb179c424cf9918662375"

    async def test_lookup_no_results(self, lookup_client, fake_locatieserver):
        fake_locatieserver.add("/v3_1/lookup", {"response": {"docs": []}})
        assert await lookup_client.lookup("adr-unknown") == []

    async def test_lookup_tg_office(self, lookup_client, fake_locatieserver):
        fake_locatieserver.add("/v3_1/lookup", LOOKUP_PAYLOAD)
        await lookup_client.lookup_tg_office()
        assert fake_locatieserver.requests[0].url.params["id"] == TG_OFFICE_ADDRESS_ID

    async def test_suggest_addresses_for_lot(self, lookup_client, fake_locatieserver):
        fake_locatieserver.add("/v3_1/free", SUGGEST_PAYLOAD)
        docs = await lookup_client.suggest_addresses_for_lot("HTT02", "M", 5038)

        assert len(docs) == 2
        params = fake_locatieserver.requests[0].url.params
        assert params["q"] == "gekoppeld_perceel:HTT02-M-5038"
        assert params["fq"] == "type:adres"

    async def test_network_failure(self, lookup_client, fake_locatieserver):
        fake_locatieserver.add("/v3_1/suggest", exc=httpx.ConnectError("connection refused"))
        with pytest.raises(NetworkFailure) as exc_info:
            await lookup_client.suggest("6542WZ", "222")
        assert exc_info.value.url.endswith("/suggest")

    async def test_invalid_json(self):
        async def handler(request):
            return httpx.Response(200, text="<html>maintenance</html>")

        client = (
            LookupClientBuilder("ua")
            .base_url("http://locatieserver.test/v3_1")
            .transport(httpx.MockTransport(handler))
            .build()
        )
        async with client:
            with pytest.raises(DecodeFailure):
                await client.suggest("6542WZ", "222")


class TestBrkClient:
    async def test_get_lot(self, brk_client, fake_brk):
        fake_brk.add("/wfs", LOT_PAYLOAD)
        lots = await brk_client.get_lot("HTT02", "M", "5038")

        assert lots[0].section == "M"
        assert lots[0].parcel_number == 5038
        params = fake_brk.requests[0].url.params
        assert params["request"] == "GetFeature"
        assert params["typenames"] == "kadastralekaartv5:perceel"
        assert params["outputFormat"] == "application/json"
        assert "<Literal>HTT02</Literal>" in params["filter"]
        assert fake_brk.requests[0].headers["accept-crs"] == "epsg:28992"

    async def test_empty_collection_is_empty_result(self, brk_client, fake_brk):
        fake_brk.add("/wfs", {"type": "FeatureCollection", "features": []})
        with pytest.raises(EmptyResult) as exc_info:
            await brk_client.get_lot("HTT02", "M", "9999")
        assert "HTT02-M-9999" in exc_info.value.query

    async def test_network_failure_is_not_empty_result(self, brk_client, fake_brk):
        fake_brk.add("/wfs", exc=httpx.ReadTimeout("timed out"))
        with pytest.raises(NetworkFailure):
            await brk_client.get_lot("HTT02", "M", "5038")

    async def test_server_error(self, brk_client, fake_brk):
        fake_brk.add("/wfs", {"error": "internal"}, status=500)
        with pytest.raises(DecodeFailure) as exc_info:
            await brk_client.get_lot("HTT02", "M", "5038")
        assert exc_info.value.status_code == 500

    async def test_get_lot_sends_escaped_filter(self, brk_client, fake_brk):
        fake_brk.add("/wfs", LOT_PAYLOAD)
        await brk_client.get_lot("HTT02", "M&N", "5038")
        assert "<Literal>M&amp;N</Literal>" in fake_brk.requests[0].url.params["filter"]

    def test_lot_filter_combines_all_keys(self):
        xml = lot_filter("HTT02", "M", 5038)
        assert xml.count("<PropertyIsEqualTo>") == 3
        assert xml.count("<And>") == 2
        assert "<PropertyName>perceelnummer</PropertyName>" in xml
        assert "<Literal>5038</Literal>" in xml

    @pytest.mark.parametrize("section", [
        "M&N",
        "M</Literal></PropertyIsEqualTo><PropertyIsEqualTo>"
        "<PropertyName>sectie</PropertyName><Literal>M",
    ])
    def test_lot_filter_keeps_each_value_one_literal(self, section):
        root = ElementTree.fromstring(lot_filter("HTT02", section, "5038").strip())
        literals = [el.text for el in root.iter("Literal")]
        assert literals == [section, "5038", "HTT02"]
        assert len(list(root.iter("PropertyIsEqualTo"))) == 3


class TestBagClient:
    def test_building_url_rewrites_canonical_host(self, bag_client):
        link = "https://api.bag.kadaster.nl/lvbag/individuelebevragingen/v2/panden/0268100000085678"
        assert bag_client.building_url(link) == "http://bag.test/v2/panden/0268100000085678"

    def test_building_url_for_bare_id(self, bag_client):
        assert bag_client.building_url("0268100000085678") == "http://bag.test/v2/panden/0268100000085678"

    def test_building_url_foreign_host_untouched(self, bag_client):
        assert bag_client.building_url("http://elsewhere.test/p/1") == "http://elsewhere.test/p/1"

    async def test_get_building_object(self, bag_client, fake_bag, vbo_payload):
        fake_bag.add("/v2/verblijfsobjecten/0268010000084126", vbo_payload(["0268100000085678"]))
        record = await bag_client.get_building_object("0268010000084126")

        assert record.floor_area == 1234
        assert len(record.building_links) == 1
        request = fake_bag.requests[0]
        assert request.headers["x-api-key"] == "TEST_BAG_API_KEY"
        assert request.headers["accept-crs"] == "epsg:28992"

    async def test_get_building(self, bag_client, fake_bag, pand_payload):
        fake_bag.add("/v2/panden/0268100000085678", pand_payload("0268100000085678"))
        building = await bag_client.get_building(
            "https://api.bag.kadaster.nl/lvbag/individuelebevragingen/v2/panden/0268100000085678"
        )
        assert building.id == "0268100000085678"
        assert fake_bag.paths() == ["/v2/panden/0268100000085678"]

    async def test_unknown_object_is_decode_failure(self, bag_client):
        with pytest.raises(DecodeFailure) as exc_info:
            await bag_client.get_building_object("0000000000000000")
        assert exc_info.value.status_code == 404

    async def test_body_not_matching_content_encoding(self):
        async def handler(request):
            return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip")

        client = (
            BagClientBuilder("ua")
            .base_url("http://bag.test/v2")
            .transport(httpx.MockTransport(handler))
            .build()
        )
        async with client:
            with pytest.raises(DecodeFailure) as exc_info:
                await client.get_building_object("0268010000084126")
        assert "undecodable body" in exc_info.value.detail
        assert exc_info.value.url == "http://bag.test/v2/verblijfsobjecten/0268010000084126"

    async def test_redirect_loop_is_network_failure(self):
        async def handler(request):
            return httpx.Response(302, headers={"Location": str(request.url)})

        client = (
            BagClientBuilder("ua")
            .base_url("http://bag.test/v2")
            .transport(httpx.MockTransport(handler))
            .build()
        )
        client._http.follow_redirects = True
        async with client:
            with pytest.raises(NetworkFailure):
                await client.get_building_object("0268010000084126")
