"""API route handlers for pdok-apis.

GET /api/v1/addresses/suggest: suggestions for a postal code + house number
GET /api/v1/addresses/{id}: address lookup
GET /api/v1/lots/{code}/{section}/{number}: cadastral lot
GET /api/v1/lots/{code}/{section}/{number}/addresses: addresses on a lot
GET /api/v1/buildings/{object_id}: panden of a verblijfsobject
"""

import logging
from dataclasses import asdict
from typing import NoReturn

from fastapi import APIRouter, HTTPException, Request

from pdokapis.api.schemas import (
    AddressResponse,
    ErrorResponse,
    LotResponse,
    ResolvedPandResponse,
    SuggestDocResponse,
)
from pdokapis.core.errors import DecodeFailure, EmptyResult, MalformedGeometry, NetworkFailure, PdokError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["registries"])

_ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Registry returned no results"},
    502: {"model": ErrorResponse, "description": "Registry unreachable or answered unexpectedly"},
}

_STATUS_BY_ERROR: dict[type[PdokError], tuple[int, str]] = {
    EmptyResult: (404, "empty_result"),
    NetworkFailure: (502, "network_failure"),
    DecodeFailure: (502, "decode_failure"),
    MalformedGeometry: (502, "malformed_geometry"),
}


def _raise_http(e: PdokError) -> NoReturn:
    status_code, error_type = _STATUS_BY_ERROR.get(type(e), (502, "registry_error"))
    logger.warning("Registry error (%s): %s", error_type, e)
    raise HTTPException(status_code=status_code, detail=str(e), headers={"X-Error-Type": error_type})


@router.get("/addresses/suggest", response_model=list[SuggestDocResponse], responses=_ERROR_RESPONSES)
async def suggest(request: Request, postcode: str, huisnummer: str):
    """Ranked address suggestions, best match first."""
    try:
        docs = await request.app.state.lookup.suggest(postcode, huisnummer)
    except PdokError as e:
        _raise_http(e)
    return [SuggestDocResponse(**asdict(d)) for d in docs]


@router.get("/addresses/{address_id}", response_model=list[AddressResponse], responses=_ERROR_RESPONSES)
async def lookup(request: Request, address_id: str):
    try:
        records = await request.app.state.lookup.lookup(address_id)
    except PdokError as e:
        _raise_http(e)
    return [AddressResponse(**asdict(r)) for r in records]


@router.get(
    "/lots/{municipality_code}/{section}/{parcel_number}",
    response_model=list[LotResponse],
    responses=_ERROR_RESPONSES,
)
async def get_lot(request: Request, municipality_code: str, section: str, parcel_number: str):
    try:
        lots = await request.app.state.brk.get_lot(municipality_code, section, parcel_number)
    except PdokError as e:
        _raise_http(e)
    return [LotResponse(**asdict(lot)) for lot in lots]


@router.get(
    "/lots/{municipality_code}/{section}/{parcel_number}/addresses",
    response_model=list[SuggestDocResponse],
    responses=_ERROR_RESPONSES,
)
async def lot_addresses(request: Request, municipality_code: str, section: str, parcel_number: str):
    try:
        docs = await request.app.state.lookup.suggest_addresses_for_lot(
            municipality_code, section, parcel_number,
        )
    except PdokError as e:
        _raise_http(e)
    return [SuggestDocResponse(**asdict(d)) for d in docs]


@router.get(
    "/buildings/{object_id}",
    response_model=list[ResolvedPandResponse],
    responses=_ERROR_RESPONSES,
)
async def resolve_buildings(request: Request, object_id: str, strict: bool = False):
    """Panden the verblijfsobject is part of, in registry link order.

    Without ``strict``, an unreachable BAG yields an empty list.
    """
    try:
        panden = await request.app.state.bag.resolve_buildings(object_id, strict=strict)
    except PdokError as e:
        _raise_http(e)
    return [ResolvedPandResponse(**asdict(p)) for p in panden]
