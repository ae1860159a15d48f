"""User-facing notices (toasts) raised by console view models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

NoticeLevel = Literal["success", "error"]


@dataclass(frozen=True, slots=True)
class Notice:
	level: NoticeLevel
	title: str
	message: str


@dataclass
class Notifier:
	"""Collects notices in emission order."""

	notices: list[Notice] = field(default_factory=list)

	def success(self, title: str, message: str) -> None:
		self.notices.append(Notice("success", title, message))

	def error(self, title: str, message: str) -> None:
		self.notices.append(Notice("error", title, message))

	@property
	def last(self) -> Notice | None:
		return self.notices[-1] if self.notices else None
