"""pdok-apis: resolve Dutch addresses, lots and buildings across the PDOK, BRK and BAG registries."""

__version__ = "0.4.0"

from pdokapis.core.errors import (  # noqa: E402
    DecodeFailure,
    EmptyResult,
    MalformedGeometry,
    NetworkFailure,
    PdokError,
)
from pdokapis.core.types import (  # noqa: E402
    AddressRecord,
    BoundingBox,
    Building,
    BuildingObjectRecord,
    Lot,
    ResolvedPand,
    SuggestDoc,
)
from pdokapis.retrieval.bag import BagClient, BagClientBuilder  # noqa: E402
from pdokapis.retrieval.brk import BrkClient, BrkClientBuilder  # noqa: E402
from pdokapis.retrieval.locatieserver import LookupClient, LookupClientBuilder  # noqa: E402

__all__ = [
    "AddressRecord",
    "BagClient",
    "BagClientBuilder",
    "BoundingBox",
    "BrkClient",
    "BrkClientBuilder",
    "Building",
    "BuildingObjectRecord",
    "DecodeFailure",
    "EmptyResult",
    "Lot",
    "LookupClient",
    "LookupClientBuilder",
    "MalformedGeometry",
    "NetworkFailure",
    "PdokError",
    "ResolvedPand",
    "SuggestDoc",
]
