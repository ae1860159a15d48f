"""Central registry for Prometheus metrics used across the backend."""

from __future__ import annotations

import logging

from prometheus_client import Counter, Gauge, Histogram

log = logging.getLogger(__name__)


REQUEST_COUNTER = Counter(
	"nodex_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"nodex_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

POCKETBASE_CALLS = Counter(
	"nodex_pocketbase_calls_total",
	"Calls made to the PocketBase store",
	["collection", "method", "outcome"],
)

POCKETBASE_LATENCY = Histogram(
	"nodex_pocketbase_call_duration_seconds",
	"PocketBase call latency in seconds",
	["collection", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

POCKETBASE_UP = Gauge(
	"nodex_pocketbase_up",
	"PocketBase store reachability (1 up, 0 down)",
)

REDIS_UP = Gauge(
	"nodex_redis_up",
	"Redis reachability (1 up, 0 down)",
)

REDIS_LATENCY = Histogram(
	"nodex_redis_ping_seconds",
	"Redis ping latency in seconds",
	buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25),
)

AUTH_CHECKS = Counter(
	"nodex_auth_checks_total",
	"Recruiter auth-key lookups",
	["result"],
)

APPLICATION_DECISIONS = Counter(
	"nodex_application_decisions_total",
	"Applications approved or rejected",
	["status"],
)

APPLICATION_ROLLBACKS = Counter(
	"nodex_application_rollbacks_total",
	"Applications rolled back to pending",
	["previous_status"],
)

APPLICATIONS_SUBMITTED = Counter(
	"nodex_applications_submitted_total",
	"Membership applications received through the join flow",
)

PUBLIC_FORM_REJECTS = Counter(
	"nodex_public_form_rejects_total",
	"Public form submissions rejected before reaching the store",
	["form", "reason"],
)

EXEC_ACTIVITY_WRITES = Counter(
	"nodex_exec_activity_writes_total",
	"Exec activity audit writes",
	["result"],
)

RATE_LIMITED_EVENTS = Counter(
	"nodex_rate_limited_total",
	"Requests dropped due to rate limiting",
	["kind"],
)


def observe_request(route: str, method: str, status: int, elapsed_seconds: float) -> None:
	REQUEST_COUNTER.labels(route=route, method=method, status=str(status)).inc()
	REQUEST_LATENCY.labels(route=route, method=method).observe(elapsed_seconds)


def observe_pocketbase(collection: str, method: str, outcome: str, elapsed_seconds: float) -> None:
	POCKETBASE_CALLS.labels(collection=collection, method=method, outcome=outcome).inc()
	POCKETBASE_LATENCY.labels(collection=collection, method=method).observe(elapsed_seconds)


def mark_pocketbase(ok: bool) -> None:
	POCKETBASE_UP.set(1 if ok else 0)


def mark_redis(ok: bool, *, latency_seconds: float | None = None) -> None:
	REDIS_UP.set(1 if ok else 0)
	if latency_seconds is not None:
		REDIS_LATENCY.observe(latency_seconds)


def inc_auth_check(result: str) -> None:
	AUTH_CHECKS.labels(result=result).inc()


def inc_application_decision(status: str) -> None:
	APPLICATION_DECISIONS.labels(status=status).inc()


def inc_application_rollback(previous_status: str) -> None:
	APPLICATION_ROLLBACKS.labels(previous_status=previous_status).inc()


def inc_application_submitted() -> None:
	APPLICATIONS_SUBMITTED.inc()


def inc_public_form_reject(form: str, reason: str) -> None:
	PUBLIC_FORM_REJECTS.labels(form=form, reason=reason).inc()


def inc_exec_activity(result: str) -> None:
	EXEC_ACTIVITY_WRITES.labels(result=result).inc()


def inc_rate_limited(kind: str) -> None:
	RATE_LIMITED_EVENTS.labels(kind=kind).inc()
