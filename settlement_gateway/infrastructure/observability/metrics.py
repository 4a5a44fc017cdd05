"""Prometheus metrics for schedule generation, reconciliation outcomes and back-office calls"""

from prometheus_client import Counter, Histogram

# Schedule metrics
schedule_counter = Counter(
    "settlement_schedule_total",
    "Installment schedules generated",
    ["cadence"],  # monthly | weekly | offsets | lump_sum
)

schedule_installments_histogram = Histogram(
    "settlement_schedule_installments",
    "Installments per generated schedule",
    buckets=[1, 2, 3, 4, 6, 8, 10, 12],
)

parse_failure_counter = Counter(
    "settlement_parse_failures_total",
    "Installment specs rejected by the parser",
    ["reason"],
)

schedule_validation_failure_counter = Counter(
    "settlement_schedule_validation_failures_total",
    "Schedules rejected at submission",
    ["reason"],
)

# Reconciliation metrics
reconciliation_counter = Counter(
    "settlement_reconciliation_total",
    "Payment reconciliations by outcome",
    ["mode", "outcome"],  # outcome: settled | partial | <error reason>
)

# Back-office API metrics
backoffice_latency_histogram = Histogram(
    "backoffice_latency_seconds",
    "Back-office API response time",
    ["operation"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

backoffice_failure_counter = Counter(
    "backoffice_failures_total",
    "Failed back-office API calls",
    ["operation"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def schedule_cadence(is_grouped: bool, by_offsets: bool, lump_sum: bool = False) -> str:
    """Metric label for the date placement strategy used"""
    if lump_sum:
        return "lump_sum"
    if by_offsets:
        return "offsets"
    return "weekly" if is_grouped else "monthly"


def record_schedule(cadence: str, installment_count: int) -> None:
    """Record a generated schedule"""
    schedule_counter.labels(cadence=cadence).inc()
    schedule_installments_histogram.observe(installment_count)


def record_reconciliation(mode: str, outcome: str) -> None:
    """Record reconciliation outcome for monitoring rejection rates"""
    reconciliation_counter.labels(mode=mode, outcome=outcome).inc()
