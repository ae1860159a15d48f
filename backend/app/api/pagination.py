from __future__ import annotations

import math
from typing import Any, Sequence


def clamp_page(page: int | None, *, default: int = 1) -> int:
	if page is None or page < 1:
		return default
	return page


def clamp_limit(limit: int | None, *, default: int = 20, maximum: int = 200) -> int:
	if limit is None or limit < 1:
		return default
	return min(limit, maximum)


def total_pages(total_items: int, per_page: int) -> int:
	if per_page <= 0:
		return 0
	return int(math.ceil(total_items / per_page))


def paginate(items: Sequence[Any], page: int, per_page: int) -> tuple[list[Any], int, int]:
	"""Slice ``items`` to one page and return ``(page_items, total_items, total_pages)``."""
	total = len(items)
	start = (page - 1) * per_page
	return list(items[start : start + per_page]), total, total_pages(total, per_page)
