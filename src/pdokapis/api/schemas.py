"""Pydantic response models for the pdok-apis HTTP API.

These are the API contract: decoupled from the internal domain dataclasses.
Route handlers bridge them with ``dataclasses.asdict()``.
"""

from typing import Any

from pydantic import BaseModel


class SuggestDocResponse(BaseModel):
    id: str
    result_type: str
    display_name: str
    score: float


class AddressResponse(BaseModel):
    id: str
    lot_ids: list[str] = []
    address_id: str = ""
    object_id: str = ""
    postal_code: str = ""
    house_number: str = ""
    street_name: str = ""
    settlement: str = ""


class LotResponse(BaseModel):
    id: str
    municipality_name: str | None = None
    municipality_code: str | None = None
    area: float | None = None
    section: str | None = None
    parcel_number: int | None = None
    geometry: dict[str, Any]


class ResolvedPandResponse(BaseModel):
    id: str
    footprint_area: int
    floor_area: int
    construction_year: str
    building_status: str
    object_status: str
    usage_purpose: str
    geometry: dict[str, Any]


class HealthResponse(BaseModel):
    status: str
    checks: dict[str, str]


class ErrorResponse(BaseModel):
    """Error response body."""

    detail: str
    error_type: str = "registry_error"
