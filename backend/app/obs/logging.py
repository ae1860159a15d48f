"""JSON log lines carrying the request context."""

from __future__ import annotations

import json
import logging
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from app.settings import settings

# request_id, route, recruiter_id and ip of the request being served
_CONTEXT: ContextVar[Mapping[str, str]] = ContextVar("nodex_log_context", default={})

_LOGGER_NAME = "nodex"

# Applicant and recruiter PII never reaches the log stream
_REDACTED_KEYS = ("auth_key", "authkey", "token", "secret", "cookie", "password", "email", "phone", "payload")

_MAX_STRING_LENGTH = 256

_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "taskName"}


def bind_context(**fields: Optional[str]) -> Token:
	"""Merge non-empty fields into the log context; pass the token to reset_context."""
	merged = dict(_CONTEXT.get())
	merged.update({key: value for key, value in fields.items() if value})
	return _CONTEXT.set(merged)


def reset_context(token: Token) -> None:
	_CONTEXT.reset(token)


def bind_recruiter(recruiter_id: str) -> None:
	bind_context(recruiter_id=recruiter_id)


def current_request_id() -> Optional[str]:
	return _CONTEXT.get().get("request_id")


def _scrub(key: str, value: Any) -> Any:
	if any(word in key.lower() for word in _REDACTED_KEYS):
		return "[redacted]"
	if isinstance(value, str) and len(value) > _MAX_STRING_LENGTH:
		return value[:_MAX_STRING_LENGTH] + "…"
	if isinstance(value, dict):
		return {k: _scrub(str(k), v) for k, v in value.items()}
	return value


class JSONLogFormatter(logging.Formatter):
	def format(self, record: logging.LogRecord) -> str:  # noqa: A003
		line: dict[str, Any] = {
			"ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
			"level": record.levelname.lower(),
			"logger": record.name,
			"msg": record.getMessage(),
			"service": settings.service_name,
			"env": settings.environment,
			"commit": settings.git_commit,
		}
		for key, value in _CONTEXT.get().items():
			line["ip" if key == "client_ip" else key] = value
		if record.exc_info:
			line["exc_info"] = self.formatException(record.exc_info)
		for key, value in vars(record).items():
			if key not in _STANDARD_ATTRS and key not in line:
				line[key] = _scrub(key, value)
		return json.dumps(line, separators=(",", ":"), default=str)


def configure_logging() -> logging.Logger:
	handler = logging.StreamHandler()
	handler.setFormatter(JSONLogFormatter())
	root = logging.getLogger()
	root.handlers = [handler]
	root.setLevel(settings.obs_log_level)
	return logging.getLogger(_LOGGER_NAME)


def get_logger(name: Optional[str] = None) -> logging.Logger:
	return logging.getLogger(name or _LOGGER_NAME)
