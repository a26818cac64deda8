"""
History store (indexed) SQL.

Tables:
- accounts          one row per account, thresholds split into columns
- accounts_signers  (account, signer, weight)
- trust_lines       one row per (account, asset)
- accounts_data     one row per (account, name), value base64-encoded

List queries page on the account id: the cursor is the last account id the
client saw and rows strictly after it (in the requested order) are returned.
Batch queries take a list of account ids and are never paged.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any

from core import db
from core.assets import Asset
from core.paging import PageQuery


@dataclass(frozen=True)
class AccountEntry:
    account_id: str
    balance: int
    buying_liabilities: int
    selling_liabilities: int
    sequence_number: int
    num_subentries: int
    inflation_destination: str
    flags: int
    home_domain: str
    master_weight: int
    threshold_low: int
    threshold_medium: int
    threshold_high: int
    last_modified_ledger: int


@dataclass(frozen=True)
class AccountSigner:
    account_id: str
    signer: str
    weight: int


@dataclass(frozen=True)
class TrustLine:
    account_id: str
    asset_type: int
    asset_issuer: str
    asset_code: str
    balance: int
    limit: int
    buying_liabilities: int
    selling_liabilities: int
    flags: int
    last_modified_ledger: int


@dataclass(frozen=True)
class AccountData:
    account_id: str
    name: str
    value: bytes
    last_modified_ledger: int


_ACCOUNT_COLUMNS = """
          a.account_id,
          a.balance,
          a.buying_liabilities,
          a.selling_liabilities,
          a.sequence_number,
          a.num_subentries,
          a.inflation_destination,
          a.flags,
          a.home_domain,
          a.master_weight,
          a.threshold_low,
          a.threshold_medium,
          a.threshold_high,
          a.last_modified_ledger
"""


def _page_clause(column: str, page: PageQuery, cursor_arg: int, limit_arg: int) -> str:
    """
    Cursor condition + ordering + limit for `column`.

    `column` is always one of the constants in this module, never user input.
    """
    op, direction = ("<", "DESC") if page.descending else (">", "ASC")
    return (
        f"AND (${cursor_arg} = '' OR {column} {op} ${cursor_arg})\n"
        f"        ORDER BY {column} {direction}\n"
        f"        LIMIT ${limit_arg}"
    )


def _to_account_entry(row: dict[str, Any]) -> AccountEntry:
    return AccountEntry(
        account_id=str(row["account_id"]),
        balance=int(row["balance"]),
        buying_liabilities=int(row["buying_liabilities"]),
        selling_liabilities=int(row["selling_liabilities"]),
        sequence_number=int(row["sequence_number"]),
        num_subentries=int(row["num_subentries"]),
        inflation_destination=str(row["inflation_destination"] or ""),
        flags=int(row["flags"]),
        home_domain=str(row["home_domain"] or ""),
        master_weight=int(row["master_weight"]),
        threshold_low=int(row["threshold_low"]),
        threshold_medium=int(row["threshold_medium"]),
        threshold_high=int(row["threshold_high"]),
        last_modified_ledger=int(row["last_modified_ledger"]),
    )


async def accounts_for_signer(signer: str, page: PageQuery) -> list[AccountSigner]:
    """
    Accounts that list `signer` as one of their signers.
    """
    rows = await db.fetch_all(
        db.HISTORY,
        f"""
        SELECT s.account, s.signer, s.weight
        FROM accounts_signers s
        WHERE s.signer = $1
        {_page_clause('s.account', page, 2, 3)}
        """,
        signer,
        page.cursor,
        page.limit,
    )
    return [
        AccountSigner(account_id=str(row["account"]), signer=str(row["signer"]), weight=int(row["weight"]))
        for row in rows
    ]


async def accounts_for_asset(asset: Asset, page: PageQuery) -> list[AccountEntry]:
    """
    Accounts holding `asset`.

    Every account holds the native asset, so that case reads `accounts`
    directly instead of joining trust lines.
    """
    if asset.is_native:
        rows = await db.fetch_all(
            db.HISTORY,
            f"""
            SELECT {_ACCOUNT_COLUMNS}
            FROM accounts a
            WHERE true
            {_page_clause('a.account_id', page, 1, 2)}
            """,
            page.cursor,
            page.limit,
        )
    else:
        rows = await db.fetch_all(
            db.HISTORY,
            f"""
            SELECT {_ACCOUNT_COLUMNS}
            FROM accounts a
            JOIN trust_lines tl ON tl.account_id = a.account_id
            WHERE tl.asset_type = $1
              AND tl.asset_code = $2
              AND tl.asset_issuer = $3
            {_page_clause('a.account_id', page, 4, 5)}
            """,
            asset.type_code,
            asset.code,
            asset.issuer,
            page.cursor,
            page.limit,
        )
    return [_to_account_entry(row) for row in rows]


async def signers_for_accounts(account_ids: list[str]) -> list[AccountSigner]:
    rows = await db.fetch_all(
        db.HISTORY,
        """
        SELECT s.account, s.signer, s.weight
        FROM accounts_signers s
        WHERE s.account = ANY($1::text[])
        ORDER BY s.account, s.signer
        """,
        account_ids,
    )
    return [
        AccountSigner(account_id=str(row["account"]), signer=str(row["signer"]), weight=int(row["weight"]))
        for row in rows
    ]


async def trust_lines_for_accounts(account_ids: list[str]) -> list[TrustLine]:
    rows = await db.fetch_all(
        db.HISTORY,
        """
        SELECT
          tl.account_id,
          tl.asset_type,
          tl.asset_issuer,
          tl.asset_code,
          tl.balance,
          tl.trust_line_limit,
          tl.buying_liabilities,
          tl.selling_liabilities,
          tl.flags,
          tl.last_modified_ledger
        FROM trust_lines tl
        WHERE tl.account_id = ANY($1::text[])
        ORDER BY tl.account_id, tl.asset_type, tl.asset_code, tl.asset_issuer
        """,
        account_ids,
    )
    return [
        TrustLine(
            account_id=str(row["account_id"]),
            asset_type=int(row["asset_type"]),
            asset_issuer=str(row["asset_issuer"]),
            asset_code=str(row["asset_code"]),
            balance=int(row["balance"]),
            limit=int(row["trust_line_limit"]),
            buying_liabilities=int(row["buying_liabilities"]),
            selling_liabilities=int(row["selling_liabilities"]),
            flags=int(row["flags"]),
            last_modified_ledger=int(row["last_modified_ledger"]),
        )
        for row in rows
    ]


async def data_for_accounts(account_ids: list[str]) -> list[AccountData]:
    rows = await db.fetch_all(
        db.HISTORY,
        """
        SELECT d.account_id, d.name, d.value, d.last_modified_ledger
        FROM accounts_data d
        WHERE d.account_id = ANY($1::text[])
        ORDER BY d.account_id, d.name
        """,
        account_ids,
    )
    return [
        AccountData(
            account_id=str(row["account_id"]),
            name=str(row["name"]),
            value=base64.b64decode(row["value"] or ""),
            last_modified_ledger=int(row["last_modified_ledger"]),
        )
        for row in rows
    ]
