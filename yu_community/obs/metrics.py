"""Central registry for Prometheus metrics used across the backend."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNTER = Counter(
	"yu_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"yu_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

LOGIN_ATTEMPTS = Counter(
	"yu_login_attempts_total",
	"Administrator login attempts",
	["result"],
)

POST_TRANSITIONS = Counter(
	"yu_post_transitions_total",
	"Post lifecycle transitions",
	["transition"],
)

EVENTS_CREATED = Counter(
	"yu_events_created_total",
	"Events created",
)

CLUBS_UPDATED = Counter(
	"yu_clubs_updated_total",
	"Club records updated",
)

NOTIFICATIONS_APPENDED = Counter(
	"yu_notifications_appended_total",
	"Notifications appended to the log",
	["kind"],
)

NOTIFICATIONS_MARKED_READ = Counter(
	"yu_notifications_marked_read_total",
	"Notifications flipped to read",
	["scope"],
)

AUTHZ_DENIED = Counter(
	"yu_authorization_denied_total",
	"Operations refused for lack of scope",
	["operation"],
)

REMINDERS = Counter(
	"yu_event_reminders_total",
	"Upcoming event reminder outcomes",
	["result"],
)

STREAM_PUBLISH_FAILURES = Counter(
	"yu_stream_publish_failures_total",
	"Lifecycle stream entries that failed to publish",
	["stream"],
)


def observe_request(route: str, method: str, status: int, elapsed_seconds: float) -> None:
	REQUEST_COUNTER.labels(route=route, method=method, status=str(status)).inc()
	REQUEST_LATENCY.labels(route=route, method=method).observe(elapsed_seconds)


def login_attempt(result: str) -> None:
	LOGIN_ATTEMPTS.labels(result=result).inc()


def post_transition(transition: str) -> None:
	POST_TRANSITIONS.labels(transition=transition).inc()


def inc_event_created() -> None:
	EVENTS_CREATED.inc()


def inc_club_updated() -> None:
	CLUBS_UPDATED.inc()


def notification_appended(kind: str) -> None:
	NOTIFICATIONS_APPENDED.labels(kind=kind).inc()


def notifications_marked_read(scope: str, count: int = 1) -> None:
	if count > 0:
		NOTIFICATIONS_MARKED_READ.labels(scope=scope).inc(count)


def authorization_denied(operation: str) -> None:
	AUTHZ_DENIED.labels(operation=operation).inc()


def reminder_outcome(result: str) -> None:
	REMINDERS.labels(result=result).inc()


def stream_publish_failed(stream: str) -> None:
	STREAM_PUBLISH_FAILURES.labels(stream=stream).inc()
