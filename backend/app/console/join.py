"""Public join form state."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from app.console.client import ConsoleClient, RequestFailed
from app.console.notices import Notifier
from app.domain.applications.schemas import JoinSubmission

TURNSTILE_REQUIRED = "Please complete the Turnstile verification."
INVALID_EMAIL = "Invalid email address"

EMPTY_VALUES: dict[str, Any] = {
	"name": "",
	"email": "",
	"phone": "",
	"batch": "",
	"rollNumber": "",
	"registrationNumber": "",
	"department": "",
	"interestedTracks": [],
	"whyJoin": "",
	"experience": "",
	"projects": "",
	"otherRemarks": "",
}


def field_errors(exc: ValidationError) -> dict[str, str]:
	errors: dict[str, str] = {}
	for error in exc.errors():
		loc = error.get("loc") or ()
		field = str(loc[0]) if loc else "form"
		if field in errors:
			continue
		if field == "email":
			errors[field] = INVALID_EMAIL
		elif error.get("type") == "join_field":
			errors[field] = error["msg"]
		else:
			errors[field] = f"{field} is required" if error.get("type") == "missing" else f"Invalid {field}"
	return errors


class JoinForm:
	def __init__(self, client: ConsoleClient, notifier: Notifier) -> None:
		self._client = client
		self.notifier = notifier
		self.values: dict[str, Any] = {}
		self.turnstile_token = ""
		self.errors: dict[str, str] = {}
		self.submitting = False
		self.reset()

	def reset(self) -> None:
		self.values = {key: (list(value) if isinstance(value, list) else value) for key, value in EMPTY_VALUES.items()}
		self.turnstile_token = ""
		self.errors = {}

	def set(self, field: str, value: Any) -> None:
		self.values[field] = value
		self.errors.pop(field, None)

	def toggle_track(self, track: str) -> None:
		tracks = self.values["interestedTracks"]
		if track in tracks:
			tracks.remove(track)
		else:
			tracks.append(track)
		self.errors.pop("interestedTracks", None)

	def validate(self) -> JoinSubmission | None:
		payload = {key: value for key, value in self.values.items() if value not in ("", None)}
		submission: JoinSubmission | None = None
		try:
			submission = JoinSubmission.model_validate(payload)
			self.errors = {}
		except ValidationError as exc:
			self.errors = field_errors(exc)
		if not self.turnstile_token:
			self.errors["turnstile"] = TURNSTILE_REQUIRED
		return submission if not self.errors else None

	async def submit(self) -> bool:
		submission = self.validate()
		if submission is None or self.submitting:
			return False
		self.submitting = True
		try:
			body = await self._client.post(
				"/api/join",
				{**submission.model_dump(exclude_none=True), "turnstileToken": self.turnstile_token},
			)
		except RequestFailed as exc:
			title = "Connection Error" if exc.kind == "network" else "Submission Failed"
			self.notifier.error(title, exc.message)
			return False
		finally:
			self.submitting = False
		if not body.get("success"):
			self.notifier.error("Submission Failed", str(body.get("message") or "Failed to submit application"))
			return False
		self.reset()
		self.notifier.success(
			"Application Submitted",
			str(body.get("message") or "Your application has been submitted successfully"),
		)
		return True
