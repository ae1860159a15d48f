from datetime import datetime, timezone

from app.domain.applications import history

NOW = datetime(2026, 3, 4, 5, 6, 7, tzinfo=timezone.utc)


def test_decision_entry_layout():
	entry = history.decision_entry("approved", "Alice", "great work", now=NOW)
	assert entry.splitlines() == [
		"**Approved Action** ✅",
		"• Status: **APPROVED**",
		"• Recruiter: Alice",
		"• Date: 2026-03-04 05:06:07 UTC",
		"• Remarks: *great work*",
		"",
		"---",
	]


def test_rejected_entry_uses_cross_icon():
	entry = history.decision_entry("rejected", "Bob", "later", now=NOW)
	assert entry.startswith("**Rejected Action** ❌")
	assert "• Status: **REJECTED**" in entry


def test_rollback_entry_names_previous_status():
	entry = history.rollback_entry("approved", "Alice", "wrong person", now=NOW)
	assert "• Status: Rolled back from **approved**" in entry
	assert "• Reason: wrong person" in entry
	assert entry.endswith("---")


def test_history_is_append_only_oldest_first():
	first = history.decision_entry("approved", "Alice", "ok", now=NOW)
	second = history.rollback_entry("approved", "Bob", "oops", now=NOW)
	combined = history.append(history.append(None, first), second)
	assert combined == f"{first}\n\n{second}"
	assert combined.index("Approved Action") < combined.index("Rollback Action")
	assert history.append("", first) == first
