"""The Basisregistratie Adressen en Gebouwen (BAG): verblijfsobjecten and panden.

A verblijfsobject response embeds ``_links.maaktDeelUitVan``: hyperlinks to
every Pand the object is part of. ``resolve_buildings`` follows them; see
``pdokapis.pipeline.resolver``.
"""

import logging

from pdokapis.config import settings
from pdokapis.core.types import Building, BuildingObjectRecord, ResolvedPand
from pdokapis.observability.tracing import trace
from pdokapis.pipeline.resolver import resolve_buildings
from pdokapis.retrieval.decoders import decode_building, decode_building_object
from pdokapis.retrieval.http import ClientBuilder, RegistryClient

logger = logging.getLogger(__name__)

# Host that BAG writes into its own _links, whatever host was queried
CANONICAL_BAG_URL = "https://api.bag.kadaster.nl/lvbag/individuelebevragingen/v2"

# The TG office, which is part of exactly one Pand
STATUS_OBJECT_ID = "0268010000084126"


class BagClient(RegistryClient):
    registry = "bag"

    def __init__(self, *args, max_concurrency: int = 1, **kwargs):
        super().__init__(*args, **kwargs)
        self.max_concurrency = max_concurrency

    def building_url(self, link: str) -> str:
        """Absolute URL for a Pand link or bare Pand id, on the configured host."""
        if not link.startswith(("http://", "https://")):
            return f"{self.base_url}/panden/{link}"
        if link.startswith(CANONICAL_BAG_URL) and self.base_url != CANONICAL_BAG_URL:
            return self.base_url + link[len(CANONICAL_BAG_URL):]
        return link

    @trace(name="bag.get_building_object", span_type="RETRIEVER")
    async def get_building_object(self, object_id: str) -> BuildingObjectRecord:
        """Fetch one verblijfsobject with its links to Pand records."""
        url = f"{self.base_url}/verblijfsobjecten/{object_id}"
        payload = await self.get_json(url)
        return decode_building_object(payload, url)

    @trace(name="bag.get_building", span_type="RETRIEVER")
    async def get_building(self, link: str) -> Building:
        """Fetch one Pand by link (as found in ``_links``) or by id."""
        url = self.building_url(link)
        payload = await self.get_json(url)
        return decode_building(payload, url)

    async def resolve_buildings(self, object_id: str, strict: bool = False) -> list[ResolvedPand]:
        """All panden the verblijfsobject is part of, merged with its data.

        See ``pdokapis.pipeline.resolver.resolve_buildings``.
        """
        return await resolve_buildings(
            self, object_id, max_concurrency=self.max_concurrency, strict=strict,
        )

    async def get_bag_status(self) -> bool:
        """Check that the service is up: the TG office resolves to exactly one Pand."""
        panden = await self.resolve_buildings(STATUS_OBJECT_ID, strict=True)
        if len(panden) != 1:
            logger.warning("BAG status check returned %d panden, expected 1", len(panden))
        return len(panden) == 1


class BagClientBuilder(ClientBuilder):
    def __init__(self, user_agent: str):
        super().__init__(user_agent)
        self._api_key = settings.bag_api_key
        self._max_concurrency = settings.resolver_max_concurrency

    def _default_base_url(self) -> str:
        return settings.bag_url

    def api_key(self, api_key: str) -> "BagClientBuilder":
        self._api_key = api_key.strip()
        return self

    def max_concurrency(self, limit: int) -> "BagClientBuilder":
        """Number of linked Pand fetches allowed in flight at once (1 = sequential)."""
        if limit < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._max_concurrency = limit
        return self

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        if self._api_key:
            headers["X-Api-Key"] = self._api_key
        return headers

    def build(self) -> BagClient:
        return BagClient(
            self._http_client(),
            base_url=self._base_url,
            accept_crs=self._accept_crs,
            request_timeout_secs=self._request_timeout_secs,
            max_concurrency=self._max_concurrency,
        )
