"""The Basisregistratie Kadaster (BRK): cadastral lots via the PDOK WFS.

A lot is keyed by kadastrale gemeentecode, sectie and perceelnummer; all
three go into one OGC filter so the service returns only matching features.
"""

import logging
from xml.sax.saxutils import escape

from pdokapis.config import settings
from pdokapis.core.errors import EmptyResult
from pdokapis.core.types import Lot
from pdokapis.observability.tracing import trace
from pdokapis.retrieval.decoders import decode_lot_collection
from pdokapis.retrieval.http import ClientBuilder, RegistryClient

logger = logging.getLogger(__name__)

# The TG office plot, used to check that the service is up
STATUS_LOT = ("HTT02", "M", "5038")

_LOT_FILTER = """
<Filter>
  <And>
    <And>
      <PropertyIsEqualTo>
        <PropertyName>sectie</PropertyName>
        <Literal>{section}</Literal>
      </PropertyIsEqualTo>
      <PropertyIsEqualTo>
        <PropertyName>perceelnummer</PropertyName>
        <Literal>{parcel_number}</Literal>
      </PropertyIsEqualTo>
    </And>
    <PropertyIsEqualTo>
      <PropertyName>AKRKadastraleGemeenteCodeWaarde</PropertyName>
      <Literal>{municipality_code}</Literal>
    </PropertyIsEqualTo>
  </And>
</Filter>"""


def lot_filter(municipality_code: str, section: str, parcel_number: str | int) -> str:
    """OGC filter matching on all three parts of a lot key.

    Values are XML-escaped, so each one stays a single literal.
    """
    return _LOT_FILTER.format(
        municipality_code=escape(str(municipality_code)),
        section=escape(str(section)),
        parcel_number=escape(str(parcel_number)),
    )


class BrkClient(RegistryClient):
    registry = "brk"

    @trace(name="brk.get_lot", span_type="RETRIEVER")
    async def get_lot(
        self, municipality_code: str, section: str, parcel_number: str | int,
    ) -> list[Lot]:
        """Fetch the lot(s) matching a gemeentecode, sectie and perceelnummer.

        Raises EmptyResult when the service answers with no features; that
        covers both a lot that does not exist and a filter that matched nothing.
        """
        params = {
            "request": "GetFeature",
            "service": "WFS",
            "version": "2.0.0",
            "typenames": "kadastralekaartv5:perceel",
            "outputFormat": "application/json",
            "filter": lot_filter(municipality_code, section, parcel_number),
        }
        payload = await self.get_json(self.base_url, params=params)
        lots = decode_lot_collection(payload, self.base_url)

        if not lots:
            raise EmptyResult(f"lot {municipality_code}-{section}-{parcel_number}")
        logger.info(
            "BRK lot %s-%s-%s: %d feature(s)", municipality_code, section, parcel_number, len(lots),
        )
        return lots

    async def get_brk_status(self) -> list[Lot]:
        """Check that the service is up by fetching a known lot."""
        return await self.get_lot(*STATUS_LOT)


class BrkClientBuilder(ClientBuilder):
    def _default_base_url(self) -> str:
        return settings.brk_url

    def build(self) -> BrkClient:
        return BrkClient(
            self._http_client(),
            base_url=self._base_url,
            accept_crs=self._accept_crs,
            request_timeout_secs=self._request_timeout_secs,
        )
