import pytest
from pydantic import ValidationError

from app.domain.applications.schemas import JoinSubmission

VALID = {
	"name": "Asha Rao",
	"email": "asha@example.com",
	"phone": "9876543210",
	"batch": "2027",
	"rollNumber": "21CS001",
	"registrationNumber": "REG-77",
	"department": "CSE",
	"interestedTracks": ["Web", "AI/ML"],
	"whyJoin": "I want to build real projects with a team and learn from seniors who ship.",
}


def _errors(payload):
	with pytest.raises(ValidationError) as info:
		JoinSubmission.model_validate(payload)
	return {str(e["loc"][0]): e["msg"] for e in info.value.errors()}


def test_valid_submission_flattens_tracks():
	submission = JoinSubmission.model_validate(VALID)
	record = submission.to_record()
	assert record["interestedTracks"] == "Web, AI/ML"
	assert "experience" not in record


def test_short_fields_report_form_messages():
	errors = _errors({**VALID, "name": "A", "phone": "12345", "whyJoin": "too short"})
	assert errors["name"] == "Name must be at least 2 characters"
	assert errors["phone"] == "Phone number must be at least 10 digits"
	assert errors["whyJoin"] == "Please provide at least 50 characters explaining why you want to join"


def test_at_least_one_track_required():
	errors = _errors({**VALID, "interestedTracks": ["  "]})
	assert errors["interestedTracks"] == "Please select at least one track"


def test_invalid_email_rejected():
	errors = _errors({**VALID, "email": "not-an-email"})
	assert "email" in errors


def test_why_join_counts_characters_as_typed():
	errors = _errors({**VALID, "whyJoin": "x" * 49})
	assert errors["whyJoin"] == "Please provide at least 50 characters explaining why you want to join"
	submission = JoinSubmission.model_validate({**VALID, "whyJoin": "x" * 49 + " "})
	assert submission.to_record()["whyJoin"] == "x" * 49
