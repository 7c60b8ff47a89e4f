"""Building resolution: verblijfsobject -> linked panden -> ResolvedPand.

Pipeline:
  1. Fetch the verblijfsobject (BAG)
  2. Read its ``maaktDeelUitVan`` links, in registry order, duplicates kept
  3. Fetch the Pand behind every link
  4. Compute each footprint area and merge in the verblijfsobject's
     floor area, status and usage purposes
  5. Return the results in link order

A transport failure in step 1 yields an empty list unless ``strict`` is set;
callers on this path cannot tell "no panden" from "BAG unreachable". Any
failure in step 3 aborts the whole resolution.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from pdokapis.core.errors import MalformedGeometry, NetworkFailure
from pdokapis.core.types import Building, BuildingObjectRecord, ResolvedPand
from pdokapis.geometry.shapes import geometry_value_to_polygon, round_area, unsigned_area
from pdokapis.observability.logging import bind_object_id
from pdokapis.observability.tracing import start_span

if TYPE_CHECKING:
    from pdokapis.retrieval.bag import BagClient

logger = logging.getLogger(__name__)


def merge_building(building: Building, record: BuildingObjectRecord) -> ResolvedPand:
    """Combine a Pand with the verblijfsobject it was reached from."""
    polygon = geometry_value_to_polygon(building.geometry)
    if polygon is None:
        raise MalformedGeometry(
            building.geometry.get("type"), f"pand {building.id} has no Polygon geometry",
        )

    return ResolvedPand(
        id=building.id,
        footprint_area=round_area(unsigned_area(polygon)),
        floor_area=record.floor_area,
        construction_year=building.construction_year,
        building_status=building.status,
        object_status=record.status,
        usage_purpose=record.usage_purpose,
        geometry=building.geometry,
    )


async def _fetch_sequential(
    client: BagClient, record: BuildingObjectRecord,
) -> list[ResolvedPand]:
    results = []
    for link in record.building_links:
        building = await client.get_building(link)
        results.append(merge_building(building, record))
    return results


async def _fetch_concurrent(
    client: BagClient, record: BuildingObjectRecord, max_concurrency: int,
) -> list[ResolvedPand]:
    """Fetch all links with at most *max_concurrency* in flight.

    Results are placed by link index, so completion order does not matter.
    The first failure cancels the remaining fetches and is re-raised.
    """
    semaphore = asyncio.Semaphore(max_concurrency)

    async def fetch(index: int, link: str) -> tuple[int, ResolvedPand]:
        async with semaphore:
            building = await client.get_building(link)
        return index, merge_building(building, record)

    tasks = [
        asyncio.create_task(fetch(i, link)) for i, link in enumerate(record.building_links)
    ]
    results: list[ResolvedPand | None] = [None] * len(tasks)
    try:
        for next_done in asyncio.as_completed(tasks):
            index, pand = await next_done
            results[index] = pand
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return results  # type: ignore[return-value]


async def resolve_buildings(
    client: BagClient,
    object_id: str,
    max_concurrency: int = 1,
    strict: bool = False,
) -> list[ResolvedPand]:
    """Resolve a verblijfsobject id to the panden it is part of.

    Args:
        client: BAG client used for every request.
        object_id: verblijfsobject identificatie, e.g. ``"0268010000084126"``.
        max_concurrency: linked Pand fetches in flight at once; 1 is sequential.
        strict: raise NetworkFailure when the verblijfsobject cannot be fetched
            instead of returning an empty list.

    Returns:
        One ResolvedPand per ``maaktDeelUitVan`` link, in link order.
    """
    with bind_object_id(object_id), start_span(name="resolve_buildings", span_type="CHAIN") as span:
        span.set_inputs({"object_id": object_id, "max_concurrency": max_concurrency})

        try:
            record = await client.get_building_object(object_id)
        except NetworkFailure as e:
            if strict:
                raise
            logger.warning(
                "BAG unreachable for verblijfsobject %s, returning no panden: %s", object_id, e,
                extra={"registry": "bag"},
            )
            span.set_outputs({"pand_count": 0, "downgraded": True})
            return []

        links = record.building_links
        logger.info(
            "Verblijfsobject %s is part of %d pand(en)", object_id, len(links),
            extra={"registry": "bag"},
        )

        if max_concurrency <= 1 or len(links) <= 1:
            results = await _fetch_sequential(client, record)
        else:
            results = await _fetch_concurrent(client, record, max_concurrency)

        span.set_outputs({"pand_count": len(results), "pand_ids": [p.id for p in results]})
        return results
