"""pdok-apis CLI: address suggestions, lot lookups and building resolution."""

import asyncio
import json
import sys

from pdokapis.config import settings
from pdokapis.core.errors import PdokError
from pdokapis.observability.logging import setup_logging
from pdokapis.observability.tracing import init_tracing
from pdokapis.retrieval.bag import BagClientBuilder
from pdokapis.retrieval.brk import BrkClientBuilder
from pdokapis.retrieval.locatieserver import LookupClientBuilder


def _setup() -> None:
    setup_logging(json_format=False, level=settings.log_level)
    init_tracing(settings.mlflow_tracking_uri, settings.mlflow_experiment_name)


def _run(coro) -> None:
    """Run a command coroutine; registry errors end the process with status 1."""
    try:
        asyncio.run(coro)
    except PdokError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def suggest_main() -> None:
    """Suggest addresses: pdok-suggest <postcode> <housenumber>"""
    _setup()

    if len(sys.argv) != 3:
        print("Usage: pdok-suggest <postcode> <housenumber>")
        print("  Example: pdok-suggest 6542WZ 222")
        sys.exit(1)

    _run(_suggest(sys.argv[1], sys.argv[2]))


async def _suggest(postcode: str, house_number: str) -> None:
    async with LookupClientBuilder(settings.user_agent).build() as client:
        docs = await client.suggest(postcode, house_number)
        if not docs:
            print(f"No addresses found for {postcode} {house_number}")
            return

        print(f"\nSuggestions for {postcode} {house_number}")
        print(f"{'=' * 50}")
        for doc in docs:
            print(f"  {doc.score:8.3f}  {doc.id}  {doc.display_name}")

        # Resolve the best match to show its lot and building references
        records = await client.lookup(docs[0].id)

    for record in records:
        print(f"\n{record.street_name} {record.house_number}, {record.postal_code} {record.settlement}")
        if record.lot_ids:
            print(f"  Lots:              {', '.join(record.lot_ids)}")
        if record.object_id:
            print(f"  Verblijfsobject:   {record.object_id}")


def lot_main() -> None:
    """Fetch a cadastral lot: pdok-lot <gemeentecode> <sectie> <perceelnummer>"""
    _setup()

    if len(sys.argv) != 4:
        print("Usage: pdok-lot <gemeentecode> <sectie> <perceelnummer>")
        print("  Example: pdok-lot HTT02 M 5038")
        sys.exit(1)

    _run(_lot(*sys.argv[1:4]))


async def _lot(municipality_code: str, section: str, parcel_number: str) -> None:
    async with BrkClientBuilder(settings.user_agent).build() as brk:
        lots = await brk.get_lot(municipality_code, section, parcel_number)
    async with LookupClientBuilder(settings.user_agent).build() as lookup:
        addresses = await lookup.suggest_addresses_for_lot(municipality_code, section, parcel_number)

    for lot in lots:
        print(f"\nLot {lot.id}")
        print(f"{'=' * 50}")
        print(f"  Municipality: {lot.municipality_name} ({lot.municipality_code})")
        print(f"  Section:      {lot.section}")
        print(f"  Parcel:       {lot.parcel_number}")
        if lot.area is not None:
            print(f"  Area:         {lot.area:,.0f} m²")
    if addresses:
        print("\nAddresses on this lot:")
        for doc in addresses:
            print(f"  {doc.id}  {doc.display_name}")


def buildings_main() -> None:
    """Resolve the panden of a verblijfsobject: pdok-buildings <object id> [--json]"""
    _setup()

    args = [a for a in sys.argv[1:] if a != "--json"]
    if len(args) != 1:
        print("Usage: pdok-buildings <verblijfsobject id> [--json]")
        print("  Example: pdok-buildings 0268010000084126")
        sys.exit(1)

    _run(_buildings(args[0], as_json="--json" in sys.argv))


async def _buildings(object_id: str, as_json: bool) -> None:
    async with BagClientBuilder(settings.user_agent).build() as bag:
        panden = await bag.resolve_buildings(object_id, strict=True)

    if as_json:
        print(json.dumps([p.to_dict() for p in panden], indent=2))
        return

    if not panden:
        print(f"Verblijfsobject {object_id} is not part of any pand")
        return

    for pand in panden:
        print(f"\nPand {pand.id}")
        print(f"{'=' * 50}")
        print(f"  Footprint:       {pand.footprint_area} m²")
        print(f"  Floor area:      {pand.floor_area} m²")
        print(f"  Built:           {pand.construction_year}")
        print(f"  Pand status:     {pand.building_status}")
        print(f"  Object status:   {pand.object_status}")
        print(f"  Usage:           {pand.usage_purpose}")
