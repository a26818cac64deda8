"""
Cursor pagination shared by list endpoints.

A page is (cursor, limit, order). The cursor is the paging token of the last
record the client saw; the next page starts strictly after it in `order`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

ORDER_ASC = "asc"
ORDER_DESC = "desc"

DEFAULT_LIMIT = 10
MAX_LIMIT = 200


class PageQueryError(ValueError):
    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def default_limit() -> int:
    return _env_int("ACCOUNTS_DEFAULT_LIMIT", DEFAULT_LIMIT)


def max_limit() -> int:
    return _env_int("ACCOUNTS_MAX_LIMIT", MAX_LIMIT)


@dataclass(frozen=True)
class PageQuery:
    cursor: str = ""
    limit: int = DEFAULT_LIMIT
    order: str = ORDER_ASC

    @property
    def descending(self) -> bool:
        return self.order == ORDER_DESC


def _parse_limit(raw: str | int | None) -> int:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return default_limit()
    try:
        return int(raw)
    except ValueError as exc:
        raise PageQueryError("limit", "limit must be an integer.") from exc


def parse_page_query(cursor: str | None, limit: str | int | None, order: str | None) -> PageQuery:
    """
    Validate raw query parameters into a PageQuery.

    The cursor is passed through untouched; it is compared against account
    ids in SQL, so any string is a valid resume point.
    """
    order = (order or ORDER_ASC).strip().lower()
    if order not in (ORDER_ASC, ORDER_DESC):
        raise PageQueryError("order", "order must be 'asc' or 'desc'.")

    limit = _parse_limit(limit)
    if limit < 1 or limit > max_limit():
        raise PageQueryError("limit", f"limit must be between 1 and {max_limit()}.")

    return PageQuery(cursor=(cursor or "").strip(), limit=limit, order=order)
