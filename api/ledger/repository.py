"""
Ledger store (authoritative) SQL.

Single-address lookups against the current-state tables the ledger node
maintains: `accounts`, `accountdata`, `signers`, `trustlines`.

The node stores `thresholds` and `datavalue` base64-encoded; both are decoded
to bytes here so callers never see the storage encoding.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any

from core import db


@dataclass(frozen=True)
class LedgerAccount:
    account_id: str
    balance: int
    seq_num: int
    num_subentries: int
    inflation_dest: str | None
    home_domain: str
    thresholds: bytes  # [master weight, low, medium, high]
    flags: int
    last_modified: int
    buying_liabilities: int
    selling_liabilities: int


@dataclass(frozen=True)
class LedgerData:
    account_id: str
    name: str
    value: bytes
    last_modified: int


@dataclass(frozen=True)
class LedgerSigner:
    account_id: str
    public_key: str
    weight: int


@dataclass(frozen=True)
class LedgerTrustLine:
    account_id: str
    asset_type: int
    issuer: str
    asset_code: str
    limit: int
    balance: int
    flags: int
    last_modified: int
    buying_liabilities: int
    selling_liabilities: int


def _b64(raw: Any) -> bytes:
    return base64.b64decode(raw or "")


def _to_account(row: dict[str, Any]) -> LedgerAccount:
    return LedgerAccount(
        account_id=str(row["accountid"]),
        balance=int(row["balance"]),
        seq_num=int(row["seqnum"]),
        num_subentries=int(row["numsubentries"]),
        inflation_dest=row["inflationdest"],
        home_domain=str(row["homedomain"] or ""),
        thresholds=_b64(row["thresholds"]),
        flags=int(row["flags"]),
        last_modified=int(row["lastmodified"]),
        buying_liabilities=int(row["buyingliabilities"] or 0),
        selling_liabilities=int(row["sellingliabilities"] or 0),
    )


async def account_by_address(address: str) -> LedgerAccount | None:
    row = await db.fetch_one(
        db.LEDGER,
        """
        SELECT
          a.accountid,
          a.balance,
          a.seqnum,
          a.numsubentries,
          a.inflationdest,
          a.homedomain,
          a.thresholds,
          a.flags,
          a.lastmodified,
          a.buyingliabilities,
          a.sellingliabilities
        FROM accounts a
        WHERE a.accountid = $1
        """,
        address,
    )
    return _to_account(row) if row is not None else None


async def all_data_by_address(address: str) -> list[LedgerData]:
    rows = await db.fetch_all(
        db.LEDGER,
        """
        SELECT ad.accountid, ad.dataname, ad.datavalue, ad.lastmodified
        FROM accountdata ad
        WHERE ad.accountid = $1
        ORDER BY ad.dataname
        """,
        address,
    )
    return [
        LedgerData(
            account_id=str(row["accountid"]),
            name=str(row["dataname"]),
            value=_b64(row["datavalue"]),
            last_modified=int(row["lastmodified"]),
        )
        for row in rows
    ]


async def signers_by_address(address: str) -> list[LedgerSigner]:
    rows = await db.fetch_all(
        db.LEDGER,
        """
        SELECT si.accountid, si.publickey, si.weight
        FROM signers si
        WHERE si.accountid = $1
        ORDER BY si.publickey
        """,
        address,
    )
    return [
        LedgerSigner(
            account_id=str(row["accountid"]),
            public_key=str(row["publickey"]),
            weight=int(row["weight"]),
        )
        for row in rows
    ]


async def trustlines_by_address(address: str) -> list[LedgerTrustLine]:
    rows = await db.fetch_all(
        db.LEDGER,
        """
        SELECT
          tl.accountid,
          tl.assettype,
          tl.issuer,
          tl.assetcode,
          tl.tlimit,
          tl.balance,
          tl.flags,
          tl.lastmodified,
          tl.buyingliabilities,
          tl.sellingliabilities
        FROM trustlines tl
        WHERE tl.accountid = $1
        ORDER BY tl.assettype, tl.assetcode, tl.issuer
        """,
        address,
    )
    return [
        LedgerTrustLine(
            account_id=str(row["accountid"]),
            asset_type=int(row["assettype"]),
            issuer=str(row["issuer"]),
            asset_code=str(row["assetcode"]),
            limit=int(row["tlimit"]),
            balance=int(row["balance"]),
            flags=int(row["flags"]),
            last_modified=int(row["lastmodified"]),
            buying_liabilities=int(row["buyingliabilities"] or 0),
            selling_liabilities=int(row["sellingliabilities"] or 0),
        )
        for row in rows
    ]
