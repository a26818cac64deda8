"""
Batch loading of account child rows.

For one page of accounts we issue a single query per child kind
(signers, trust lines, data) and group the rows client-side by account id,
instead of querying once per account.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

from history import repository as history_repository
from history.repository import AccountData, AccountSigner, TrustLine

from .errors import QueryFailure

T = TypeVar("T")


def group_by_account(rows: Iterable[T], key: Callable[[T], str]) -> dict[str, list[T]]:
    """
    Group rows by account id, keeping the order rows arrived in.
    """
    grouped: dict[str, list[T]] = {}
    for row in rows:
        grouped.setdefault(key(row), []).append(row)
    return grouped


def _account_id(row: AccountSigner | TrustLine | AccountData) -> str:
    return row.account_id


async def load_signers(account_ids: list[str]) -> dict[str, list[AccountSigner]]:
    try:
        rows = await history_repository.signers_for_accounts(account_ids)
    except Exception as exc:
        raise QueryFailure("batch-signers") from exc
    return group_by_account(rows, _account_id)


async def load_trust_lines(account_ids: list[str]) -> dict[str, list[TrustLine]]:
    try:
        rows = await history_repository.trust_lines_for_accounts(account_ids)
    except Exception as exc:
        raise QueryFailure("batch-trustlines") from exc
    return group_by_account(rows, _account_id)


async def load_data(account_ids: list[str]) -> dict[str, list[AccountData]]:
    try:
        rows = await history_repository.data_for_accounts(account_ids)
    except Exception as exc:
        raise QueryFailure("batch-data") from exc
    return group_by_account(rows, _account_id)
