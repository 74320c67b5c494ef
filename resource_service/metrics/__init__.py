# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics — single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""
from prometheus_client import Counter, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "resource_requests_total",
    "Total HTTP requests to the resource-management service",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "resource_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "resource_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Business Metrics (updated by service layer only) ──
USERS_REGISTERED = Counter(
    "resource_users_registered_total",
    "Total users registered",
    ["role"],
)
LOGINS_TOTAL = Counter(
    "resource_logins_total",
    "Login attempts by outcome",
    ["result"],
)
PROJECTS_CREATED = Counter(
    "resource_projects_created_total",
    "Total projects created",
)
PROJECTS_DELETED = Counter(
    "resource_projects_deleted_total",
    "Total projects deleted",
)
TASKS_ASSIGNED = Counter(
    "resource_tasks_assigned_total",
    "Total tasks assigned",
)
AUTO_ENROLLMENTS = Counter(
    "resource_auto_enrollments_total",
    "Engineers added to a project as a side effect of task assignment",
)
