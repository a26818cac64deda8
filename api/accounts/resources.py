"""
Resource assembly: merged store records -> API resources.

Pure functions, no I/O. Two account sources feed the same `Account` shape:
- ledger store rows (single-account lookup)
- history store rows (asset listing)

Balances list trust lines first, native balance last. Signers list the
stored signer rows, then the account's master key with its master weight.
"""

from __future__ import annotations

import base64
import logging

from core import assets, strkey
from history.repository import AccountData, AccountEntry, AccountSigner, TrustLine
from ledger.repository import LedgerAccount, LedgerData, LedgerSigner, LedgerTrustLine

from . import schemas

STROOPS_PER_UNIT = 10_000_000

AUTH_REQUIRED_FLAG = 0x1
AUTH_REVOCABLE_FLAG = 0x2
AUTH_IMMUTABLE_FLAG = 0x4

TRUST_LINE_AUTHORIZED_FLAG = 0x1

UNKNOWN_KEY_TYPE = "unknown"

logger = logging.getLogger(__name__)


def amount(stroops: int) -> str:
    """
    Fixed 7-decimal string, e.g. 20000 -> "0.0020000".
    """
    sign = "-" if stroops < 0 else ""
    whole, frac = divmod(abs(int(stroops)), STROOPS_PER_UNIT)
    return f"{sign}{whole}.{frac:07d}"


def _flags(flags: int) -> schemas.AccountFlags:
    return schemas.AccountFlags(
        auth_required=bool(flags & AUTH_REQUIRED_FLAG),
        auth_revocable=bool(flags & AUTH_REVOCABLE_FLAG),
        auth_immutable=bool(flags & AUTH_IMMUTABLE_FLAG),
    )


def _signer(key: str, weight: int) -> schemas.Signer:
    try:
        key_type = strkey.key_type(key)
    except strkey.StrKeyError:
        logger.warning("unrecognized_signer_key key=%s", key)
        key_type = UNKNOWN_KEY_TYPE
    return schemas.Signer(key=key, weight=int(weight), type=key_type)


def _with_master(signers: list[schemas.Signer], account_id: str, master_weight: int) -> list[schemas.Signer]:
    if any(s.key == account_id for s in signers):
        return signers
    return [*signers, _signer(account_id, master_weight)]


def _native_balance(balance: int, buying: int, selling: int) -> schemas.Balance:
    return schemas.Balance(
        balance=amount(balance),
        buying_liabilities=amount(buying),
        selling_liabilities=amount(selling),
        asset_type=assets.NATIVE,
    )


def _trust_line_balance(
    *,
    asset_type: int,
    asset_code: str,
    asset_issuer: str,
    balance: int,
    limit: int,
    buying: int,
    selling: int,
    flags: int,
    last_modified_ledger: int,
) -> schemas.Balance:
    return schemas.Balance(
        balance=amount(balance),
        limit=amount(limit),
        buying_liabilities=amount(buying),
        selling_liabilities=amount(selling),
        last_modified_ledger=last_modified_ledger,
        is_authorized=bool(flags & TRUST_LINE_AUTHORIZED_FLAG),
        asset_type=assets.type_name(asset_type),
        asset_code=asset_code,
        asset_issuer=asset_issuer,
    )


def _data(entries: list[LedgerData] | list[AccountData]) -> dict[str, str]:
    return {d.name: base64.b64encode(d.value).decode("ascii") for d in entries}


def populate_account(
    account: LedgerAccount,
    data: list[LedgerData],
    signers: list[LedgerSigner],
    trust_lines: list[LedgerTrustLine],
) -> schemas.Account:
    """
    Build the full account resource from ledger store rows.
    """
    master_weight, low, med, high = (list(account.thresholds) + [0, 0, 0, 0])[:4]

    balances = [
        _trust_line_balance(
            asset_type=tl.asset_type,
            asset_code=tl.asset_code,
            asset_issuer=tl.issuer,
            balance=tl.balance,
            limit=tl.limit,
            buying=tl.buying_liabilities,
            selling=tl.selling_liabilities,
            flags=tl.flags,
            last_modified_ledger=tl.last_modified,
        )
        for tl in trust_lines
    ]
    balances.append(_native_balance(account.balance, account.buying_liabilities, account.selling_liabilities))

    resource_signers = [_signer(s.public_key, s.weight) for s in signers]

    return schemas.Account(
        id=account.account_id,
        account_id=account.account_id,
        paging_token=account.account_id,
        sequence=str(account.seq_num),
        subentry_count=account.num_subentries,
        inflation_destination=account.inflation_dest or None,
        home_domain=account.home_domain or None,
        last_modified_ledger=account.last_modified,
        thresholds=schemas.Thresholds(low_threshold=low, med_threshold=med, high_threshold=high),
        flags=_flags(account.flags),
        balances=balances,
        signers=_with_master(resource_signers, account.account_id, master_weight),
        data=_data(data),
    )


def populate_account_entry(
    account: AccountEntry,
    data: list[AccountData],
    signers: list[AccountSigner],
    trust_lines: list[TrustLine],
) -> schemas.Account:
    """
    Build the full account resource from history store rows.
    """
    balances = [
        _trust_line_balance(
            asset_type=tl.asset_type,
            asset_code=tl.asset_code,
            asset_issuer=tl.asset_issuer,
            balance=tl.balance,
            limit=tl.limit,
            buying=tl.buying_liabilities,
            selling=tl.selling_liabilities,
            flags=tl.flags,
            last_modified_ledger=tl.last_modified_ledger,
        )
        for tl in trust_lines
    ]
    balances.append(_native_balance(account.balance, account.buying_liabilities, account.selling_liabilities))

    resource_signers = [_signer(s.signer, s.weight) for s in signers]

    return schemas.Account(
        id=account.account_id,
        account_id=account.account_id,
        paging_token=account.account_id,
        sequence=str(account.sequence_number),
        subentry_count=account.num_subentries,
        inflation_destination=account.inflation_destination or None,
        home_domain=account.home_domain or None,
        last_modified_ledger=account.last_modified_ledger,
        thresholds=schemas.Thresholds(
            low_threshold=account.threshold_low,
            med_threshold=account.threshold_medium,
            high_threshold=account.threshold_high,
        ),
        flags=_flags(account.flags),
        balances=balances,
        signers=_with_master(resource_signers, account.account_id, account.master_weight),
        data=_data(data),
    )


def populate_account_signer(row: AccountSigner) -> schemas.AccountSignerResource:
    return schemas.AccountSignerResource(
        id=row.account_id,
        account_id=row.account_id,
        paging_token=row.account_id,
        signer=_signer(row.signer, row.weight),
    )
