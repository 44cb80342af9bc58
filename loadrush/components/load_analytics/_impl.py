"""
LoadAnalyticsService - Fuel consumption and net revenue per load.

Key behaviors:
- Missing or non-positive miles/mpg yield None (insufficient data)
- gas/gasoline price as gasoline, anything else as diesel
- Gross revenue: total rate, else rate-per-mile x miles, else flat rate
- Default prices are a fallback; rules and per-call overrides replace them
- No rounding; rounding is a presentation concern
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any

from loadrush.domain.entities import FuelType

from .models import (
    AnalyticsSummary,
    DriverFuelProfile,
    FuelAnalyticsInput,
    LoadAnalyticsResult,
    PriceOverrides,
)
from .ports import AnalyticsCachePort

logger = logging.getLogger(__name__)

# --- Configuration ---


@dataclass(frozen=True)
class FuelPriceConfig:
    """Fallback fuel prices in USD per gallon."""

    diesel_price: float = 4.10
    gas_price: float = 3.65
    cache_ttl_ms: int = 10 * 60 * 1000


DEFAULT_CONFIG = FuelPriceConfig()


# --- Resolution Helpers ---


def to_number(value: Any) -> float:
    """Lenient numeric coercion; None, blanks, garbage and NaN become 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def resolve_fuel_type(fuel_type: str | None) -> FuelType:
    if fuel_type and fuel_type.strip().lower() in ("gas", "gasoline"):
        return "gasoline"
    return "diesel"


def resolve_gross(load: FuelAnalyticsInput, miles: float) -> float:
    """Total rate, else rate-per-mile x miles, else flat rate, else 0."""
    total = to_number(load.rate_total_usd)
    if total:
        return total

    rpm = to_number(load.rpm)
    if rpm and miles:
        return rpm * miles

    return to_number(load.rate)


def resolve_price(
    fuel: FuelType,
    overrides: PriceOverrides | None,
    config: FuelPriceConfig = DEFAULT_CONFIG,
) -> float:
    if fuel == "gasoline":
        if overrides is not None and overrides.gas_price is not None:
            return overrides.gas_price
        return config.gas_price

    if overrides is not None and overrides.diesel_price is not None:
        return overrides.diesel_price
    return config.diesel_price


# --- Calculator ---


def compute_load_analytics(
    load: FuelAnalyticsInput,
    driver: DriverFuelProfile,
    overrides: PriceOverrides | None = None,
    config: FuelPriceConfig = DEFAULT_CONFIG,
) -> LoadAnalyticsResult | None:
    """
    Compute fuel cost and net revenue for a load.

    Returns None when miles or mpg are missing or not positive.
    """
    miles = to_number(load.distance_miles)
    mpg = to_number(driver.mpg_rated)
    if miles <= 0 or mpg <= 0:
        return None

    fuel = resolve_fuel_type(driver.fuel_type)
    gross = resolve_gross(load, miles)
    ppg = resolve_price(fuel, overrides, config)

    gallons_needed = miles / mpg
    fuel_cost = gallons_needed * ppg

    return LoadAnalyticsResult(
        miles=miles,
        mpg=mpg,
        fuel=fuel,
        ppg=ppg,
        gallons_needed=gallons_needed,
        fuel_cost=fuel_cost,
        gross=gross,
        net_revenue=gross - fuel_cost,
    )


def summarize_results(
    results: Iterable[LoadAnalyticsResult | None],
) -> AnalyticsSummary:
    """Total economics over results, skipping loads without analytics."""
    counted = [r for r in results if r is not None]
    total_miles = sum(r.miles for r in counted)
    total_net = sum(r.net_revenue for r in counted)

    return AnalyticsSummary(
        total_gross=sum(r.gross for r in counted),
        total_fuel_cost=sum(r.fuel_cost for r in counted),
        total_net_revenue=total_net,
        total_miles=total_miles,
        net_per_mile=total_net / total_miles if total_miles > 0 else 0.0,
        loads_counted=len(counted),
    )


# --- Cache Keys ---


def cache_key(
    load_id: str,
    load: FuelAnalyticsInput,
    driver: DriverFuelProfile,
    overrides: PriceOverrides | None,
    config: FuelPriceConfig = DEFAULT_CONFIG,
) -> str:
    """
    Key covering every input of the result.

    Editing a load's distance or revenue fields changes the key, so stale
    economics are never served for the edited load.
    """
    fuel = resolve_fuel_type(driver.fuel_type)
    ppg = resolve_price(fuel, overrides, config)
    load_part = ":".join(
        str(to_number(v))
        for v in (load.distance_miles, load.rate_total_usd, load.rpm, load.rate)
    )
    return f"analytics:{load_id}:{load_part}:{to_number(driver.mpg_rated)}:{fuel}:{ppg}"


def result_from_dict(data: Any) -> LoadAnalyticsResult | None:
    """Rebuild a cached result; None if the payload does not fit."""
    if not isinstance(data, dict):
        return None
    try:
        return LoadAnalyticsResult(**data)
    except TypeError:
        return None


# --- Analytics Service ---


class LoadAnalyticsService:
    """
    Analytics service.

    Memoizes non-null results through a TTL cache when one is provided.
    """

    def __init__(
        self,
        cache: AnalyticsCachePort | None = None,
        config: FuelPriceConfig | None = None,
    ) -> None:
        """Initialize service."""
        self._cache = cache
        self._config = config or DEFAULT_CONFIG

    def compute(
        self,
        load: FuelAnalyticsInput,
        driver: DriverFuelProfile,
        overrides: PriceOverrides | None = None,
    ) -> LoadAnalyticsResult | None:
        """Compute without memoization."""
        return compute_load_analytics(load, driver, overrides, self._config)

    def compute_cached(
        self,
        load_id: str,
        load: FuelAnalyticsInput,
        driver: DriverFuelProfile,
        overrides: PriceOverrides | None = None,
    ) -> tuple[LoadAnalyticsResult | None, bool]:
        """
        Compute through the cache.

        Returns:
            Tuple of (result, cached) where cached is True on a cache hit.
        """
        if self._cache is None:
            return self.compute(load, driver, overrides), False

        key = cache_key(load_id, load, driver, overrides, self._config)
        lookup = self._cache.get(key)
        if lookup.hit:
            cached = result_from_dict(lookup.data)
            if cached is not None:
                return cached, True
            logger.info("Discarding unusable cached analytics for %s", key)
            self._cache.clear(key)

        result = self.compute(load, driver, overrides)
        if result is not None:
            self._cache.set(key, asdict(result), self._config.cache_ttl_ms)
        return result, False


# --- Factory ---


def create_analytics_service(
    cache: AnalyticsCachePort | None = None,
    config: FuelPriceConfig | None = None,
) -> LoadAnalyticsService:
    """Create a LoadAnalyticsService."""
    return LoadAnalyticsService(cache=cache, config=config)
