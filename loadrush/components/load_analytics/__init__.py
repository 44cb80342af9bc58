"""
Load analytics component - Fuel consumption and net revenue.
"""

from ._impl import (
    FuelPriceConfig,
    LoadAnalyticsService,
    cache_key,
    compute_load_analytics,
    create_analytics_service,
    resolve_fuel_type,
    resolve_gross,
    summarize_results,
)
from .component import run, run_compute, run_summarize
from .models import (
    AnalyticsOutput,
    AnalyticsSummary,
    AnalyticsValidationError,
    ComputeAnalyticsInput,
    DriverFuelProfile,
    FuelAnalyticsInput,
    LoadAnalyticsResult,
    PriceOverrides,
    SummarizeInput,
)
from .ports import AnalyticsCachePort, LoadReaderPort

__all__ = [
    # Entry points
    "run",
    "run_compute",
    "run_summarize",
    # Input models
    "ComputeAnalyticsInput",
    "DriverFuelProfile",
    "FuelAnalyticsInput",
    "PriceOverrides",
    "SummarizeInput",
    # Output models
    "AnalyticsOutput",
    "AnalyticsSummary",
    "AnalyticsValidationError",
    "LoadAnalyticsResult",
    # Ports
    "AnalyticsCachePort",
    "LoadReaderPort",
    # Service
    "FuelPriceConfig",
    "LoadAnalyticsService",
    "cache_key",
    "compute_load_analytics",
    "create_analytics_service",
    "resolve_fuel_type",
    "resolve_gross",
    "summarize_results",
]
