"""
Prometheus metrics exposed on /metrics.
"""
from prometheus_client import Counter, Histogram

SCORE_EVALUATIONS = Counter(
    "score_evaluations_total",
    "Application score calculations",
    ["endpoint", "outcome"],
)

SCORE_LATENCY = Histogram(
    "score_evaluation_seconds",
    "Time spent computing an application score",
    buckets=(0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1),
)

SCORE_TOTAL = Histogram(
    "application_total_score",
    "Distribution of computed total scores",
    buckets=(10, 20, 30, 40, 50, 60, 70, 80, 90, 100),
)
