"""Prometheus metrics for card statuses, degraded input records and dashboard builds"""

from prometheus_client import Counter, Histogram

from cardtracker_engine.domain.models import CardStatus, DashboardSummary

# Input quality
degraded_record_counter = Counter(
    "cardtracker_degraded_records_total",
    "Input records with a field replaced by a safe default, or rejected outright",
    ["record_type", "reason"],  # reason: field name | rejected
)

# Dashboard metrics
card_status_counter = Counter(
    "cardtracker_card_status_total",
    "Card statuses surfaced on dashboards",
    ["status"],  # urgent | upcoming | paid | unknown
)

overdue_cards_counter = Counter(
    "cardtracker_overdue_cards_total",
    "Past-due cards surfaced on dashboards",
)

dashboard_build_histogram = Histogram(
    "cardtracker_dashboard_build_seconds",
    "Time to build a dashboard view",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)


def record_degraded(record_type: str, reason: str) -> None:
    degraded_record_counter.labels(record_type=record_type, reason=reason).inc()


def record_dashboard(summary: DashboardSummary, duration_seconds: float) -> None:
    """Record status distribution and build time of one dashboard"""
    by_status = {
        CardStatus.URGENT: summary.urgent_count,
        CardStatus.UPCOMING: summary.upcoming_count,
        CardStatus.PAID: summary.paid_count,
        CardStatus.UNKNOWN: summary.unknown_count,
    }
    for status, count in by_status.items():
        card_status_counter.labels(status=status.value).inc(count)

    overdue_cards_counter.inc(summary.overdue_count)
    dashboard_build_histogram.observe(duration_seconds)
