"""Core domain types and errors shared across all pdokapis modules."""

from pdokapis.core.errors import (
    DecodeFailure,
    EmptyResult,
    MalformedGeometry,
    NetworkFailure,
    PdokError,
)
from pdokapis.core.types import (
    USAGE_SEPARATOR,
    AddressRecord,
    BoundingBox,
    Building,
    BuildingObjectRecord,
    Lot,
    ResolvedPand,
    SuggestDoc,
)

__all__ = [
    "USAGE_SEPARATOR",
    "AddressRecord",
    "BoundingBox",
    "Building",
    "BuildingObjectRecord",
    "DecodeFailure",
    "EmptyResult",
    "Lot",
    "MalformedGeometry",
    "NetworkFailure",
    "PdokError",
    "ResolvedPand",
    "SuggestDoc",
]
