"""
Load analytics component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from loadrush.domain.entities import FuelType, LoadRecord

# --- Validation Error ---


@dataclass(frozen=True)
class AnalyticsValidationError:
    """Analytics lookup error."""

    code: str
    message: str
    load_id: str | None = None


# --- Calculator Inputs ---


@dataclass(frozen=True)
class FuelAnalyticsInput:
    """Distance and revenue fields of a load."""

    distance_miles: Any = None
    rate_total_usd: Any = None
    rpm: Any = None
    rate: Any = None

    @classmethod
    def from_load(cls, load: LoadRecord) -> FuelAnalyticsInput:
        return cls(
            distance_miles=load.distance_miles,
            rate_total_usd=load.rate_total_usd,
            rpm=load.rpm,
            rate=load.rate,
        )


@dataclass(frozen=True)
class DriverFuelProfile:
    """Vehicle profile of the driver hauling the load."""

    mpg_rated: Any = None
    fuel_type: str | None = None


@dataclass(frozen=True)
class PriceOverrides:
    """Per-call fuel prices, standing in for a live price feed."""

    diesel_price: float | None = None
    gas_price: float | None = None


# --- Calculator Outputs ---


@dataclass(frozen=True)
class LoadAnalyticsResult:
    """Fuel and revenue economics of one load. Values are unrounded."""

    miles: float
    mpg: float
    fuel: FuelType
    ppg: float
    gallons_needed: float
    fuel_cost: float
    gross: float
    net_revenue: float


@dataclass(frozen=True)
class AnalyticsSummary:
    """Totals over many analytics results."""

    total_gross: float
    total_fuel_cost: float
    total_net_revenue: float
    total_miles: float
    net_per_mile: float
    loads_counted: int


# --- Input Models ---


@dataclass(frozen=True)
class ComputeAnalyticsInput:
    """Input for computing analytics of a stored load."""

    load_id: str
    driver: DriverFuelProfile
    overrides: PriceOverrides | None = None
    use_cache: bool = True


@dataclass(frozen=True)
class SummarizeInput:
    """Input for summarizing computed results."""

    results: tuple[LoadAnalyticsResult | None, ...]


# --- Output Models ---


@dataclass(frozen=True)
class AnalyticsOutput:
    """Output for compute operation. result is None when data is insufficient."""

    result: LoadAnalyticsResult | None
    cached: bool = False
    errors: list[AnalyticsValidationError] = field(default_factory=list)
    success: bool = True
