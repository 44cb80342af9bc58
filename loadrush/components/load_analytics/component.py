"""
Load analytics component - Fuel cost and net revenue on the read path.

Invariants:
- Insufficient data (miles or mpg not positive) is a None result, not an error
- Arithmetic is unrounded floating point
- Only non-null results are memoized
"""

from __future__ import annotations

from loadrush.rules.models import Rules

from ._impl import FuelPriceConfig, LoadAnalyticsService, summarize_results
from .models import (
    AnalyticsOutput,
    AnalyticsSummary,
    AnalyticsValidationError,
    ComputeAnalyticsInput,
    FuelAnalyticsInput,
    SummarizeInput,
)
from .ports import AnalyticsCachePort, LoadReaderPort


def _build_config(rules: Rules | None) -> FuelPriceConfig:
    """Build fuel price config from rules."""
    if rules is None:
        return FuelPriceConfig()

    return FuelPriceConfig(
        diesel_price=rules.fuel.diesel_price,
        gas_price=rules.fuel.gas_price,
        cache_ttl_ms=rules.cache.analytics_ttl_seconds * 1000,
    )


# --- Component Entry Points ---


def run_compute(
    inp: ComputeAnalyticsInput,
    *,
    repo: LoadReaderPort,
    cache: AnalyticsCachePort | None = None,
    rules: Rules | None = None,
) -> AnalyticsOutput:
    """
    Compute analytics for a stored load.

    Args:
        inp: Load id, driver profile and optional price overrides.
        repo: Load repository port.
        cache: Optional cache for memoization.
        rules: Optional rules for default prices and TTL.

    Returns:
        AnalyticsOutput with result (possibly None) or a not-found error.
    """
    load = repo.get_by_id(inp.load_id)
    if load is None:
        return AnalyticsOutput(
            result=None,
            errors=[
                AnalyticsValidationError(
                    code="load_not_found",
                    message=f"Load {inp.load_id} not found",
                    load_id=inp.load_id,
                )
            ],
            success=False,
        )

    service = LoadAnalyticsService(
        cache=cache if inp.use_cache else None,
        config=_build_config(rules),
    )
    result, cached = service.compute_cached(
        inp.load_id, FuelAnalyticsInput.from_load(load), inp.driver, inp.overrides
    )
    return AnalyticsOutput(result=result, cached=cached)


def run_summarize(inp: SummarizeInput) -> AnalyticsSummary:
    """Summarize computed results."""
    return summarize_results(inp.results)


def run(
    inp: ComputeAnalyticsInput | SummarizeInput,
    *,
    repo: LoadReaderPort | None = None,
    cache: AnalyticsCachePort | None = None,
    rules: Rules | None = None,
) -> AnalyticsOutput | AnalyticsSummary:
    """
    Main entry point for the load analytics component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, ComputeAnalyticsInput):
        if repo is None:
            raise ValueError("LoadReaderPort is required for compute operations")
        return run_compute(inp, repo=repo, cache=cache, rules=rules)
    elif isinstance(inp, SummarizeInput):
        return run_summarize(inp)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
