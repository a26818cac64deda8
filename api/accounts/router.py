"""
Account API endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query

from core import paging

from . import params, service
from .errors import AccountNotFoundError, QueryFailure

router = APIRouter()

logger = logging.getLogger(__name__)


def _bad_request(field: str, reason: str) -> HTTPException:
    return HTTPException(status_code=400, detail={"invalid_field": field, "reason": reason})


def _query_failed(exc: QueryFailure) -> HTTPException:
    logger.exception("accounts_query_failed stage=%s", exc.stage)
    return HTTPException(status_code=500, detail=f"Failed loading accounts ({exc.stage}).")


@router.get("/accounts/{account_id}")
async def get_account(account_id: str) -> dict:
    try:
        address = params.parse_account_id(account_id, field="account_id")
    except params.InvalidParamError as exc:
        raise _bad_request(exc.field, exc.reason) from exc

    try:
        account = await service.get_account(address)
    except AccountNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except QueryFailure as exc:
        raise _query_failed(exc) from exc

    return account.model_dump()


@router.get("/accounts")
async def list_accounts(
    signer: str | None = Query(default=None),
    asset_type: str | None = Query(default=None),
    asset_code: str | None = Query(default=None),
    asset_issuer: str | None = Query(default=None),
    cursor: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    order: str | None = Query(default=None),
) -> dict:
    """
    List accounts that have `signer` as a signer, or that hold the asset
    given by asset_type/asset_code/asset_issuer. Signer wins if both are set.
    """
    try:
        page = paging.parse_page_query(cursor, limit, order)
        accounts_filter = params.parse_filter(
            signer=signer,
            asset_type=asset_type,
            asset_code=asset_code,
            asset_issuer=asset_issuer,
        )
    except (paging.PageQueryError, params.InvalidParamError) as exc:
        raise _bad_request(exc.field, exc.reason) from exc

    try:
        records = await service.list_accounts(accounts_filter, page)
    except QueryFailure as exc:
        raise _query_failed(exc) from exc

    return {
        "records": [r.model_dump() for r in records],
        "cursor": page.cursor,
        "limit": page.limit,
        "order": page.order,
        "next_cursor": records[-1].paging_token if records else page.cursor,
        "count": len(records),
    }
