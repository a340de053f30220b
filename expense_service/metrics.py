"""
Prometheus Metrics for the Expense Tracker API.

This module defines all metrics exposed at the /metrics endpoint.
Metrics are categorized into:

1. Domain Metrics - signups, logins, transactions and reports
2. Technical Metrics - HTTP traffic and storage failures
"""
from prometheus_client import Counter, Histogram, Info

# =============================================================================
# SERVICE INFO
# =============================================================================

SERVICE_INFO = Info(
    "expense_service",
    "Service information"
)
SERVICE_INFO.info({
    "version": "0.1.0",
    "service": "expense-tracker-api",
})

# =============================================================================
# DOMAIN METRICS
# =============================================================================

SIGNUPS = Counter(
    "expense_signups_total",
    "Signup attempts by outcome",
    ["outcome"]  # created, duplicate
)

LOGINS = Counter(
    "expense_logins_total",
    "Login attempts by outcome",
    ["outcome"]  # success, invalid
)

TRANSACTIONS_CREATED = Counter(
    "expense_transactions_created_total",
    "Transactions recorded",
    ["type"]  # income, expense
)

TRANSACTIONS_DELETED = Counter(
    "expense_transactions_deleted_total",
    "Delete requests by outcome",
    ["outcome"]  # deleted, not_found
)

REPORT_TRANSACTIONS = Histogram(
    "expense_report_transactions",
    "Transactions aggregated per monthly report",
    buckets=[0, 10, 25, 50, 100, 250, 500, 1000, 5000]
)

# =============================================================================
# TECHNICAL METRICS
# =============================================================================

STORAGE_ERRORS = Counter(
    "expense_storage_errors_total",
    "Database operations that raised",
    ["operation"]
)

HTTP_REQUESTS = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

HTTP_REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
)

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def record_request(method: str, endpoint: str, status: int, latency_seconds: float) -> None:
    """Record a completed HTTP request."""
    HTTP_REQUESTS.labels(method=method, endpoint=endpoint, status=status).inc()
    HTTP_REQUEST_LATENCY.labels(method=method, endpoint=endpoint).observe(latency_seconds)


def record_signup(created: bool) -> None:
    SIGNUPS.labels(outcome="created" if created else "duplicate").inc()


def record_login(success: bool) -> None:
    LOGINS.labels(outcome="success" if success else "invalid").inc()


def record_transaction_created(txn_type: str) -> None:
    TRANSACTIONS_CREATED.labels(type=txn_type).inc()


def record_transaction_deleted(found: bool) -> None:
    TRANSACTIONS_DELETED.labels(outcome="deleted" if found else "not_found").inc()


def record_report(transaction_count: int) -> None:
    """Record how many rows a monthly report reduced."""
    REPORT_TRANSACTIONS.observe(transaction_count)


def record_storage_error(operation: str) -> None:
    STORAGE_ERRORS.labels(operation=operation).inc()
