"""The PDOK Locatieserver: geocoding suggestions and address lookups.

Used to obtain the identifiers (lot codes, verblijfsobject ids) that the
BRK and BAG clients consume.

See https://api.pdok.nl/bzk/locatieserver/search/v3_1/ui/ for the service
documentation.
"""

import logging

from pdokapis.config import settings
from pdokapis.core.types import AddressRecord, SuggestDoc
from pdokapis.geometry.projection import CoordinateSpace
from pdokapis.observability.tracing import trace
from pdokapis.retrieval.decoders import decode_lookup_response, decode_suggest_response
from pdokapis.retrieval.http import ClientBuilder, RegistryClient

logger = logging.getLogger(__name__)

# Known address used to check that the service is up
TG_OFFICE_ADDRESS_ID = "adr-5826c02550308f6da19e4feb5eb97ec8"


class LookupClient(RegistryClient):
    """Client for the suggest, lookup and free-text endpoints."""

    registry = "locatieserver"

    @trace(name="locatieserver.suggest", span_type="RETRIEVER")
    async def suggest(self, postcode: str, house_number: str) -> list[SuggestDoc]:
        """Suggestions for a postal code and house number, best match first.

        The registry's ranking is kept as-is.
        """
        url = f"{self.base_url}/suggest"
        payload = await self.get_json(url, params={"q": f"postcode:{postcode} {house_number}"})
        docs = decode_suggest_response(payload, url)
        logger.info("Locatieserver suggest %s %s: %d docs", postcode, house_number, len(docs))
        return docs

    @trace(name="locatieserver.lookup", span_type="RETRIEVER")
    async def lookup(self, id: str) -> list[AddressRecord]:
        """Look up a location id; usually yields zero or one record."""
        url = f"{self.base_url}/lookup"
        payload = await self.get_json(url, params={"id": id})
        return decode_lookup_response(payload, url)

    @trace(name="locatieserver.suggest_addresses_for_lot", span_type="RETRIEVER")
    async def suggest_addresses_for_lot(
        self, lot_code: str, section: str, parcel_number: str | int,
    ) -> list[SuggestDoc]:
        """Addresses linked to a cadastral lot, e.g. ``("HTT02", "M", "5038")``."""
        url = f"{self.base_url}/free"
        params = {
            "q": f"gekoppeld_perceel:{lot_code}-{section}-{parcel_number}",
            "fq": "type:adres",
        }
        payload = await self.get_json(url, params=params)
        return decode_suggest_response(payload, url)

    async def lookup_tg_office(self) -> list[AddressRecord]:
        """Check that the service is up by looking up a known address."""
        return await self.lookup(TG_OFFICE_ADDRESS_ID)


class LookupClientBuilder(ClientBuilder):
    default_accept_crs = CoordinateSpace.GPS
    default_connection_timeout_secs = 10
    default_request_timeout_secs = 30

    def _default_base_url(self) -> str:
        return settings.locatieserver_url

    def build(self) -> LookupClient:
        return LookupClient(
            self._http_client(),
            base_url=self._base_url,
            accept_crs=self._accept_crs,
            request_timeout_secs=self._request_timeout_secs,
        )
