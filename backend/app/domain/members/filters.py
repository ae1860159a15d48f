"""In-memory member directory filtering."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

_SEARCH_FIELDS = ("name", "email", "title", "position", "bio", "skills", "student_id")


def _haystack(member: Mapping[str, Any]) -> str:
	parts: list[str] = []
	for field in _SEARCH_FIELDS:
		value = member.get(field)
		if value is None:
			continue
		if isinstance(value, (list, tuple)):
			parts.extend(str(item) for item in value)
		else:
			parts.append(str(value))
	return "\n".join(parts).lower()


def matches(
	member: Mapping[str, Any],
	*,
	search: Optional[str] = None,
	status: Optional[str] = None,
	member_type: Optional[str] = None,
	team: Optional[str] = None,
) -> bool:
	if search and search.strip().lower() not in _haystack(member):
		return False
	if status and str(member.get("status") or "") != status:
		return False
	if member_type and str(member.get("member_type") or "") != member_type:
		return False
	if team and team not in (member.get("teams") or []):
		return False
	return True


def filter_members(
	members: Iterable[Mapping[str, Any]],
	search: Optional[str] = None,
	status: Optional[str] = None,
	member_type: Optional[str] = None,
	team: Optional[str] = None,
) -> list[Mapping[str, Any]]:
	"""Keep the members matching every given filter.

	``search`` is a case-insensitive substring match over name, email,
	title/position, bio and skills. Empty filters match everything.
	"""
	return [
		member
		for member in members
		if matches(member, search=search, status=status, member_type=member_type, team=team)
	]
