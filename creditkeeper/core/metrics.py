"""Prometheus metrics for the CreditKeeper scoring service.

Metrics are organized into two categories:

Product Metrics (for the education/product team):
- creditkeeper_score_computed_total: Scores by model and health level
- creditkeeper_simulation_total: What-if simulations by scenario type
- creditkeeper_simulation_score_delta: Distribution of projected score deltas
- creditkeeper_loan_rating_total: Loan verdicts by outcome
- creditkeeper_assumed_income_total: Loan ratings that fell back to assumed income

Technical Metrics (for Engineering):
- creditkeeper_simulation_latency_seconds: Simulation latency
- creditkeeper_invalid_request_total: Requests rejected at validation
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Product Metrics
# =============================================================================

score_computed_total = Counter(
    "creditkeeper_score_computed_total",
    "Total number of scores computed",
    ["model", "health_level"],
)

simulation_total = Counter(
    "creditkeeper_simulation_total",
    "Total number of what-if simulations run",
    ["model", "scenario_type"],
)

simulation_score_delta = Histogram(
    "creditkeeper_simulation_score_delta",
    "Projected score delta per simulation",
    ["scenario_type"],
    buckets=[-150, -100, -50, -20, -5, 0, 5, 20, 50, 100],
)

loan_rating_total = Counter(
    "creditkeeper_loan_rating_total",
    "Total number of loan reasonableness ratings",
    ["verdict", "loan_type"],
)

assumed_income_total = Counter(
    "creditkeeper_assumed_income_total",
    "Loan ratings computed with the default assumed monthly income",
)


# =============================================================================
# Technical Metrics
# =============================================================================

simulation_latency = Histogram(
    "creditkeeper_simulation_latency_seconds",
    "Simulation latency in seconds",
    buckets=[0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1],
)

invalid_request_total = Counter(
    "creditkeeper_invalid_request_total",
    "Requests rejected by boundary validation",
    ["kind"],  # loan, scenario
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_score(model: str, health_level: str) -> None:
    """Record a computed score."""
    score_computed_total.labels(model=model, health_level=health_level).inc()


def record_simulation(model: str, scenario_type: str, score_delta: int) -> None:
    """Record a completed simulation and its delta."""
    simulation_total.labels(model=model, scenario_type=scenario_type).inc()
    simulation_score_delta.labels(scenario_type=scenario_type).observe(score_delta)


def record_loan_rating(verdict: str, loan_type: str, income_assumed: bool) -> None:
    """Record a loan reasonableness verdict."""
    loan_rating_total.labels(verdict=verdict, loan_type=loan_type).inc()
    if income_assumed:
        assumed_income_total.inc()


def record_invalid_request(kind: str) -> None:
    """Record a request rejected at validation."""
    invalid_request_total.labels(kind=kind).inc()


@contextmanager
def track_simulation_latency() -> Generator[None, None, None]:
    """Context manager to track simulation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        simulation_latency.observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
