"""
Loads API - Bulk import, photo updates and per-load analytics.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field

from loadrush.adapters.sqlite.repos import SQLiteLoadRepo
from loadrush.api.deps import get_analytics_cache, get_clock, get_load_repo, get_rules
from loadrush.components.cache import TTLCache
from loadrush.components.load_analytics import (
    ComputeAnalyticsInput,
    DriverFuelProfile,
    PriceOverrides,
    run_compute,
)
from loadrush.components.normalizer import ImportRowsInput, run_import
from loadrush.components.photos import UpdatePhotosInput, run_update_photos
from loadrush.ports.clock import TimePort
from loadrush.rules.models import Rules

router = APIRouter()


# --- Request/Response Models ---


class ImportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    owner_id: str = Field(alias="ownerId")
    rows: list[dict[str, Any]]


class ImportRowErrorResponse(BaseModel):
    index: int
    code: str
    message: str


class ImportResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    imported: int
    load_ids: list[str] = Field(alias="loadIds")
    errors: list[ImportRowErrorResponse]


class PhotosRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    photos: list[Any] = Field(default_factory=list)
    primary_photo: str | None = Field(default=None, alias="primaryPhoto")


class PhotosResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    photos: list[str]
    primary_photo: str = Field(alias="primaryPhoto")
    total_array_size: int = Field(alias="totalArraySize")
    percent_used: int = Field(alias="percentUsed")


class AnalyticsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    miles: float
    mpg: float
    fuel: str
    ppg: float
    gallons_needed: float = Field(alias="gallonsNeeded")
    fuel_cost: float = Field(alias="fuelCost")
    gross: float
    net_revenue: float = Field(alias="netRevenue")


class LoadAnalyticsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    load_id: str = Field(alias="loadId")
    cached: bool
    analytics: AnalyticsResponse | None


# --- Endpoints ---


@router.post("/import", response_model=ImportResponse, response_model_by_alias=True)
def import_loads(
    request: ImportRequest,
    repo: SQLiteLoadRepo = Depends(get_load_repo),
    clock: TimePort = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> ImportResponse:
    """Normalize and store parsed CSV rows."""
    try:
        out = run_import(
            ImportRowsInput(rows=tuple(request.rows), owner_id=request.owner_id),
            repo=repo,
            time_port=clock,
            rules=rules,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return ImportResponse(
        imported=out.imported,
        load_ids=list(out.load_ids),
        errors=[
            ImportRowErrorResponse(index=e.index, code=e.code, message=e.message)
            for e in out.errors
        ],
    )


@router.put("/{load_id}/photos", response_model=PhotosResponse, response_model_by_alias=True)
def update_photos(
    load_id: str,
    request: PhotosRequest,
    repo: SQLiteLoadRepo = Depends(get_load_repo),
    rules: Rules = Depends(get_rules),
) -> PhotosResponse:
    """Replace a load's photos with the sanitized subset of the request."""
    out = run_update_photos(
        UpdatePhotosInput(
            load_id=load_id,
            photos=tuple(request.photos),
            primary_photo=request.primary_photo,
        ),
        repo=repo,
        rules=rules,
    )
    if not out.success or out.load is None or out.sanitized is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Load not found")

    return PhotosResponse(
        photos=out.load.photos,
        primary_photo=out.load.primary_photo,
        total_array_size=out.sanitized.total_array_size,
        percent_used=out.sanitized.percent_used,
    )


@router.get(
    "/{load_id}/analytics",
    response_model=LoadAnalyticsResponse,
    response_model_by_alias=True,
)
def load_analytics(
    load_id: str,
    mpg: float | None = Query(default=None),
    fuel_type: str | None = Query(default=None, alias="fuelType"),
    diesel_price: float | None = Query(default=None, alias="dieselPrice"),
    gas_price: float | None = Query(default=None, alias="gasPrice"),
    repo: SQLiteLoadRepo = Depends(get_load_repo),
    cache: TTLCache = Depends(get_analytics_cache),
    rules: Rules = Depends(get_rules),
) -> LoadAnalyticsResponse:
    """Fuel cost and net revenue for a load; analytics is null when data is insufficient."""
    out = run_compute(
        ComputeAnalyticsInput(
            load_id=load_id,
            driver=DriverFuelProfile(mpg_rated=mpg, fuel_type=fuel_type),
            overrides=PriceOverrides(diesel_price=diesel_price, gas_price=gas_price),
        ),
        repo=repo,
        cache=cache,
        rules=rules,
    )
    if not out.success:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Load not found")

    result = out.result
    return LoadAnalyticsResponse(
        load_id=load_id,
        cached=out.cached,
        analytics=(
            AnalyticsResponse(
                miles=result.miles,
                mpg=result.mpg,
                fuel=result.fuel,
                ppg=result.ppg,
                gallons_needed=result.gallons_needed,
                fuel_cost=result.fuel_cost,
                gross=result.gross,
                net_revenue=result.net_revenue,
            )
            if result is not None
            else None
        ),
    )
