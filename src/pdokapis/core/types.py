"""Domain types for the pdok-apis registry resolver.

All shared dataclasses live here to prevent circular imports and establish
a single source of truth for the domain model. Every other module imports
from here.

Lots, buildings and addresses compare and sort by identifier only; every
other field is excluded from equality, ordering and hashing.
"""

from __future__ import annotations

from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# Address service (Locatieserver) types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SuggestDoc:
    """One ranked candidate returned by the suggest or free-text endpoints."""

    id: str
    result_type: str
    display_name: str
    score: float

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.result_type,
            "weergavenaam": self.display_name,
            "score": self.score,
        }


@dataclass(frozen=True, order=True)
class AddressRecord:
    """A resolved address with references to its lots and building object."""

    id: str
    lot_ids: tuple[str, ...] = field(default=(), compare=False)
    address_id: str = field(default="", compare=False)
    object_id: str = field(default="", compare=False)
    postal_code: str = field(default="", compare=False)
    house_number: str = field(default="", compare=False)
    street_name: str = field(default="", compare=False)
    settlement: str = field(default="", compare=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "gekoppeld_perceel": list(self.lot_ids),
            "nummeraanduiding_id": self.address_id,
            "adresseerbaarobject_id": self.object_id,
            "postcode": self.postal_code,
            "huis_nlt": self.house_number,
            "straatnaam": self.street_name,
            "woonplaatsnaam": self.settlement,
        }


# ---------------------------------------------------------------------------
# Cadastral (BRK) types
# ---------------------------------------------------------------------------

@dataclass(frozen=True, order=True)
class Lot:
    """A cadastral parcel with its geometry in the registry's native CRS."""

    id: str
    municipality_name: str | None = field(default=None, compare=False)
    municipality_code: str | None = field(default=None, compare=False)
    area: float | None = field(default=None, compare=False)
    section: str | None = field(default=None, compare=False)
    parcel_number: int | None = field(default=None, compare=False)
    geometry: dict = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kadastraleGemeentenaam": self.municipality_name,
            "kadastraleGemeentecode": self.municipality_code,
            "kadastraleGrootte": self.area,
            "sectie": self.section,
            "perceelnummer": self.parcel_number,
            "geometry": self.geometry,
        }


# ---------------------------------------------------------------------------
# Building (BAG) types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BuildingObjectRecord:
    """A verblijfsobject: a usable space that is part of one or more Pand records.

    Only lives for the duration of a building resolution.
    """

    status: str
    floor_area: int
    usage_purposes: tuple[str, ...]
    building_links: tuple[str, ...]

    @property
    def usage_purpose(self) -> str:
        """All usage purposes joined into a single label."""
        return USAGE_SEPARATOR.join(self.usage_purposes)


USAGE_SEPARATOR = ", "


@dataclass(frozen=True, order=True)
class Building:
    """A physical building footprint (Pand) as returned by BAG."""

    id: str
    geometry: dict = field(default_factory=dict, compare=False)
    construction_year: str = field(default="", compare=False)
    status: str = field(default="", compare=False)


@dataclass(frozen=True, order=True)
class ResolvedPand:
    """A Pand merged with the data of the verblijfsobject it was reached from.

    ``floor_area``, ``object_status`` and ``usage_purpose`` are copied from the
    verblijfsobject and are therefore identical for every Pand resolved from it.
    """

    id: str
    footprint_area: int = field(compare=False)       # m², rounded
    floor_area: int = field(compare=False)           # m², from the verblijfsobject
    construction_year: str = field(compare=False)
    building_status: str = field(compare=False)
    object_status: str = field(compare=False)
    usage_purpose: str = field(compare=False)
    geometry: dict = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict:
        """Render with the registry's field names; areas as text."""
        return {
            "identificatiecode": self.id,
            "pandvlak": str(self.footprint_area),
            "vloeroppervlak": str(self.floor_area),
            "bouwjaar": self.construction_year,
            "pandstatus": self.building_status,
            "objectstatus": self.object_status,
            "gebruiksdoel": self.usage_purpose,
            "geometry": self.geometry,
        }


# ---------------------------------------------------------------------------
# Geometry types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle in any coordinate system.

    For geodetic coordinates x is longitude and y is latitude.
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def __post_init__(self) -> None:
        if self.min_x > self.max_x or self.min_y > self.max_y:
            raise ValueError(f"Inverted bounding box: {self.to_tuple()}")

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> tuple[float, float]:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def to_tuple(self) -> tuple[float, float, float, float]:
        """Return as (min_x, min_y, max_x, max_y)."""
        return (self.min_x, self.min_y, self.max_x, self.max_y)
