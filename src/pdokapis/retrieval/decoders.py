"""Raw registry payloads -> domain records.

The pydantic models mirror the registry JSON (Dutch field names, HAL
``_links``); the ``decode_*`` functions validate a payload against them and
return the domain dataclasses from ``pdokapis.core.types``. A payload that
does not fit raises DecodeFailure.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pdokapis.core.errors import DecodeFailure
from pdokapis.core.types import AddressRecord, Building, BuildingObjectRecord, Lot, SuggestDoc

logger = logging.getLogger(__name__)


class _Model(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)


# ---------------------------------------------------------------------------
# Locatieserver (Solr responses)
# ---------------------------------------------------------------------------

class SuggestDocModel(_Model):
    id: str
    type: str
    weergavenaam: str
    score: float


class LookupDocModel(_Model):
    id: str
    gekoppeld_perceel: list[str] = []
    nummeraanduiding_id: str = ""
    adresseerbaarobject_id: str = ""
    postcode: str = ""
    huis_nlt: str = ""
    straatnaam: str = ""
    woonplaatsnaam: str = ""


class _SuggestDocs(_Model):
    docs: list[SuggestDocModel]


class _LookupDocs(_Model):
    docs: list[LookupDocModel]


class SuggestResponse(_Model):
    response: _SuggestDocs


class LookupResponse(_Model):
    response: _LookupDocs


# ---------------------------------------------------------------------------
# BAG (HAL+JSON)
# ---------------------------------------------------------------------------

class GeometryModel(_Model):
    """A GeoJSON geometry value; coordinates are checked later by the geometry helpers."""

    type: str
    coordinates: Any = None


class LinkModel(_Model):
    href: str


class VerblijfsobjectLinks(_Model):
    maakt_deel_uit_van: list[LinkModel] = Field(alias="maaktDeelUitVan")


class VerblijfsobjectModel(_Model):
    status: str = ""
    oppervlakte: int = 0
    gebruiksdoelen: list[str]


class VerblijfsobjectResponse(_Model):
    verblijfsobject: VerblijfsobjectModel
    links: VerblijfsobjectLinks = Field(alias="_links")


class PandModel(_Model):
    identificatie: str
    geometrie: GeometryModel
    oorspronkelijk_bouwjaar: str = Field(alias="oorspronkelijkBouwjaar")
    status: str


class PandResponse(_Model):
    pand: PandModel


# ---------------------------------------------------------------------------
# BRK (WFS GeoJSON feature collection)
# ---------------------------------------------------------------------------

class PerceelProperties(_Model):
    identificatie_lokaal_id: str | None = Field(default=None, alias="identificatieLokaalID")
    kadastrale_gemeente_waarde: str | None = Field(default=None, alias="kadastraleGemeenteWaarde")
    gemeente_code: str | None = Field(default=None, alias="AKRKadastraleGemeenteCodeWaarde")
    kadastrale_grootte_waarde: float | None = Field(default=None, alias="kadastraleGrootteWaarde")
    sectie: str | None = None
    perceelnummer: int | None = None


class FeatureModel(_Model):
    type: str = "Feature"
    geometry: GeometryModel | None = None
    properties: PerceelProperties | None = None


class FeatureCollectionModel(_Model):
    type: str = "FeatureCollection"
    features: list[FeatureModel]


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def _validate(model: type[_Model], payload: Any, url: str) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise DecodeFailure(url, f"{model.__name__}: {e.error_count()} validation error(s): {e}") from e


def decode_suggest_response(payload: Any, url: str = "") -> list[SuggestDoc]:
    """Ranked suggestions, in the order the registry returned them."""
    decoded = _validate(SuggestResponse, payload, url)
    return [
        SuggestDoc(id=d.id, result_type=d.type, display_name=d.weergavenaam, score=d.score)
        for d in decoded.response.docs
    ]


def decode_lookup_response(payload: Any, url: str = "") -> list[AddressRecord]:
    decoded = _validate(LookupResponse, payload, url)
    return [
        AddressRecord(
            id=d.id,
            lot_ids=tuple(d.gekoppeld_perceel),
            address_id=d.nummeraanduiding_id,
            object_id=d.adresseerbaarobject_id,
            postal_code=d.postcode,
            house_number=d.huis_nlt,
            street_name=d.straatnaam,
            settlement=d.woonplaatsnaam,
        )
        for d in decoded.response.docs
    ]


def decode_lot_collection(payload: Any, url: str = "") -> list[Lot]:
    """Lots from a WFS feature collection.

    Features without an identifier or geometry are skipped.
    """
    decoded = _validate(FeatureCollectionModel, payload, url)
    lots = []
    for feature in decoded.features:
        props = feature.properties
        if props is None or not props.identificatie_lokaal_id or feature.geometry is None:
            logger.debug("Skipping perceel feature without id or geometry")
            continue
        lots.append(Lot(
            id=props.identificatie_lokaal_id,
            municipality_name=props.kadastrale_gemeente_waarde,
            municipality_code=props.gemeente_code,
            area=props.kadastrale_grootte_waarde,
            section=props.sectie,
            parcel_number=props.perceelnummer,
            geometry=feature.geometry.model_dump(),
        ))
    return lots


def decode_building_object(payload: Any, url: str = "") -> BuildingObjectRecord:
    """A verblijfsobject with the links to the Pand records it is part of."""
    decoded = _validate(VerblijfsobjectResponse, payload, url)
    vbo = decoded.verblijfsobject
    return BuildingObjectRecord(
        status=vbo.status,
        floor_area=vbo.oppervlakte,
        usage_purposes=tuple(vbo.gebruiksdoelen),
        building_links=tuple(link.href for link in decoded.links.maakt_deel_uit_van),
    )


def decode_building(payload: Any, url: str = "") -> Building:
    decoded = _validate(PandResponse, payload, url)
    pand = decoded.pand
    return Building(
        id=pand.identificatie,
        geometry=pand.geometrie.model_dump(),
        construction_year=pand.oorspronkelijk_bouwjaar,
        status=pand.status,
    )
