"""Evaluation: replications, metrics, Erlang C reference, sweeps, plots."""

from eval.metrics import (
    aggregate_metrics,
    confidence_interval_95,
    erlang_c,
    compare_with_theory,
)

__all__ = [
    "aggregate_metrics",
    "confidence_interval_95",
    "erlang_c",
    "compare_with_theory",
]
