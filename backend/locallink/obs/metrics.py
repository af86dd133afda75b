"""Central registry for Prometheus metrics used across the backend."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram, Summary


REQUEST_COUNTER = Counter(
	"locallink_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"locallink_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

LOCATION_FIXES = Counter(
	"locallink_location_fixes_total",
	"Location fixes applied to home sessions",
)

LOCATION_FIX_REJECTS = Counter(
	"locallink_location_fix_rejects_total",
	"Location fixes rejected before reaching a session",
	["reason"],
)

LOCATION_UNAVAILABLE = Counter(
	"locallink_location_unavailable_total",
	"Location acquisitions that ended without a position",
	["reason"],
)

ROSTER_FETCHES = Counter(
	"locallink_roster_fetches_total",
	"Roster fetches by outcome",
	["outcome"],
)

FILTER_UPDATES = Summary(
	"locallink_filter_active_tags",
	"Number of active interest tags after a filter update",
)

SHARING_TOGGLES = Counter(
	"locallink_sharing_toggles_total",
	"Location sharing toggles",
	["state"],
)

HOME_SESSIONS = Gauge(
	"locallink_home_sessions_active",
	"Open home sessions",
)

LAUNCH_COMPLETED = Counter(
	"locallink_launch_completed_total",
	"Devices that finished onboarding",
)

ACCOUNT_FORMS = Counter(
	"locallink_account_forms_total",
	"Signup and login submissions",
	["form", "result"],
)

REDIS_UP = Gauge("locallink_redis_up", "Redis availability (1=up,0=down)")
REDIS_LATENCY = Summary("locallink_redis_latency_seconds", "Redis ping latency (seconds)")


def observe_request(route: str, method: str, status: int, elapsed_seconds: float) -> None:
	REQUEST_COUNTER.labels(route=route, method=method, status=str(status)).inc()
	REQUEST_LATENCY.labels(route=route, method=method).observe(elapsed_seconds)


def inc_location_fix() -> None:
	LOCATION_FIXES.inc()


def inc_location_fix_reject(reason: str) -> None:
	LOCATION_FIX_REJECTS.labels(reason=reason).inc()


def inc_location_unavailable(reason: str) -> None:
	LOCATION_UNAVAILABLE.labels(reason=reason).inc()


def inc_roster_fetch(outcome: str) -> None:
	ROSTER_FETCHES.labels(outcome=outcome).inc()


def inc_filter_update(active_tags: int) -> None:
	FILTER_UPDATES.observe(active_tags)


def inc_sharing_toggle(state: str) -> None:
	SHARING_TOGGLES.labels(state=state).inc()


def set_home_sessions(count: int) -> None:
	HOME_SESSIONS.set(count)


def inc_launch_completed() -> None:
	LAUNCH_COMPLETED.inc()


def inc_account_form(form: str, result: str) -> None:
	ACCOUNT_FORMS.labels(form=form, result=result).inc()


def mark_redis(ok: bool, *, latency_seconds: float | None = None) -> None:
	REDIS_UP.set(1 if ok else 0)
	if latency_seconds is not None:
		REDIS_LATENCY.observe(latency_seconds)
