"""
Account query orchestration.

Single account (ledger store):
1) account row (missing -> AccountNotFoundError)
2) data entries, signers, trust lines for that address
3) merge into one resource

Account listing (history store):
- by signer: one paged query, each row becomes an account-signer summary
- by asset:  one paged query for the base rows, then one batch query per
             child kind for the whole page, then zip rows with children

Lookups are awaited one after another. Any failure aborts the call with a
QueryFailure naming the stage; task cancellation passes through unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TypeVar

from core.assets import Asset
from core.paging import PageQuery
from history import repository as history_repository
from ledger import repository as ledger_repository

from . import loaders, resources, schemas
from .errors import AccountNotFoundError, QueryFailure
from .params import AccountsFilter, SignerFilter

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _query(stage: str, call: Awaitable[T]) -> T:
    try:
        return await call
    except Exception as exc:
        raise QueryFailure(stage) from exc


async def get_account(address: str) -> schemas.Account:
    account = await _query("account", ledger_repository.account_by_address(address))
    if account is None:
        raise AccountNotFoundError(address)

    data = await _query("data", ledger_repository.all_data_by_address(address))
    signers = await _query("signers", ledger_repository.signers_by_address(address))
    trust_lines = await _query("trustlines", ledger_repository.trustlines_by_address(address))

    return resources.populate_account(account, data, signers, trust_lines)


async def list_accounts(
    accounts_filter: AccountsFilter,
    page: PageQuery,
) -> list[schemas.Account] | list[schemas.AccountSignerResource]:
    if isinstance(accounts_filter, SignerFilter):
        return await _list_for_signer(accounts_filter.signer, page)
    return await _list_for_asset(accounts_filter.asset, page)


async def _list_for_signer(signer: str, page: PageQuery) -> list[schemas.AccountSignerResource]:
    rows = await _query("base-page", history_repository.accounts_for_signer(signer, page))
    logger.debug("accounts_page_loaded mode=signer count=%s", len(rows))
    return [resources.populate_account_signer(row) for row in rows]


async def _list_for_asset(asset: Asset, page: PageQuery) -> list[schemas.Account]:
    rows = await _query("base-page", history_repository.accounts_for_asset(asset, page))
    if not rows:
        logger.debug("accounts_page_loaded mode=asset count=0")
        return []

    # Distinct ids, first-seen order.
    account_ids = list(dict.fromkeys(row.account_id for row in rows))

    signers = await loaders.load_signers(account_ids)
    trust_lines = await loaders.load_trust_lines(account_ids)
    data = await loaders.load_data(account_ids)

    logger.debug("accounts_page_loaded mode=asset count=%s", len(rows))
    return [
        resources.populate_account_entry(
            row,
            data.get(row.account_id, []),
            signers.get(row.account_id, []),
            trust_lines.get(row.account_id, []),
        )
        for row in rows
    ]
