"""Modification history kept on each application as ``modRemarks``.

History is append-only: entries are Markdown blocks terminated by ``---`` and
joined oldest first with a blank line between them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

_STATUS_ICONS = {"approved": "✅", "rejected": "❌"}


def _stamp(now: Optional[datetime]) -> str:
	moment = now or datetime.now(timezone.utc)
	return moment.strftime("%Y-%m-%d %H:%M:%S UTC")


def decision_entry(status: str, recruiter: str, remarks: str, *, now: Optional[datetime] = None) -> str:
	icon = _STATUS_ICONS.get(status, "")
	heading = f"**{status.capitalize()} Action** {icon}".rstrip()
	return "\n".join(
		[
			heading,
			f"• Status: **{status.upper()}**",
			f"• Recruiter: {recruiter}",
			f"• Date: {_stamp(now)}",
			f"• Remarks: *{remarks}*",
			"",
			"---",
		]
	)


def rollback_entry(previous_status: str, recruiter: str, reason: str, *, now: Optional[datetime] = None) -> str:
	return "\n".join(
		[
			"**Rollback Action**",
			f"• Status: Rolled back from **{previous_status}**",
			f"• Recruiter: {recruiter}",
			f"• Date: {_stamp(now)}",
			f"• Reason: {reason}",
			"• Action: Application moved back to pending status",
			"",
			"---",
		]
	)


def append(existing: Optional[str], entry: str) -> str:
	if not existing:
		return entry
	return f"{existing}\n\n{entry}"
