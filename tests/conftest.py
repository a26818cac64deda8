"""
Shared fixtures: account constants and in-memory stand-ins for both stores.

The fakes replace the repository functions via monkeypatch, so service,
loader and router code runs unchanged on top of them.
"""

from __future__ import annotations

import base64
from collections import Counter
from dataclasses import dataclass, field

import pytest

from core import strkey
from core.assets import Asset
from core.paging import PageQuery
from history import repository as history_repository
from history.repository import AccountData, AccountEntry, AccountSigner, TrustLine
from ledger import repository as ledger_repository
from ledger.repository import LedgerAccount, LedgerData, LedgerSigner, LedgerTrustLine

TRUST_LINE_ISSUER = "GBRPYHIL2CI3FNQ4BXLFMNDLFJUNPU2HY3ZMFSHONUCEOASW7QC7OX2H"
ACCOUNT_ONE = "GABGMPEKKDWR2WFH5AJOZV5PDKLJEHGCR3Q24ALETWR5H3A7GI3YTS7V"
ACCOUNT_TWO = "GADTXHUTHIAESMMQ2ZWSTIIGBZRLHUCBLCHPLLUEIAWDEFRDC4SYDKOZ"
ACCOUNT_THREE = "GDP347UYM2ZKE6ED6T5OM3BQ5IAS76NKRVEUPNB5PCQ26Z5D7Q7PJOMI"
SIGNER = "GCXKG6RN4ONIEPCMNFB732A436Z5PNDSRLGWK7GBLCMQLIFO4S7EYWVU"

USD = Asset(type="credit_alphanum4", code="USD", issuer=TRUST_LINE_ISSUER)
EUR = Asset(type="credit_alphanum4", code="EUR", issuer=TRUST_LINE_ISSUER)


def encode_key(version: int, payload: bytes) -> str:
    body = bytes([version]) + payload
    raw = body + strkey._crc16_xmodem(body).to_bytes(2, "little")
    return base64.b32encode(raw).decode("ascii").rstrip("=")


SIGNED_PAYLOAD_SIGNER = encode_key(
    strkey.VERSION_SIGNED_PAYLOAD,
    bytes(range(32)) + (4).to_bytes(4, "big") + b"\x01\x02\x03\x04",
)


def _page(rows: list, key, page: PageQuery) -> list:
    ordered = sorted(rows, key=key, reverse=page.descending)
    if page.cursor:
        if page.descending:
            ordered = [r for r in ordered if key(r) < page.cursor]
        else:
            ordered = [r for r in ordered if key(r) > page.cursor]
    return ordered[: page.limit]


@dataclass
class FakeHistoryStore:
    accounts: list[AccountEntry] = field(default_factory=list)
    signers: list[AccountSigner] = field(default_factory=list)
    trust_lines: list[TrustLine] = field(default_factory=list)
    data: list[AccountData] = field(default_factory=list)
    calls: Counter = field(default_factory=Counter)
    fail: set[str] = field(default_factory=set)

    def _enter(self, name: str) -> None:
        self.calls[name] += 1
        if name in self.fail:
            raise ConnectionError(f"{name} unavailable")

    async def accounts_for_signer(self, signer: str, page: PageQuery) -> list[AccountSigner]:
        self._enter("accounts_for_signer")
        rows = [s for s in self.signers if s.signer == signer]
        return _page(rows, lambda r: r.account_id, page)

    async def accounts_for_asset(self, asset: Asset, page: PageQuery) -> list[AccountEntry]:
        self._enter("accounts_for_asset")
        holders = {
            tl.account_id
            for tl in self.trust_lines
            if (tl.asset_type, tl.asset_code, tl.asset_issuer) == (asset.type_code, asset.code, asset.issuer)
        }
        rows = [a for a in self.accounts if asset.is_native or a.account_id in holders]
        return _page(rows, lambda r: r.account_id, page)

    async def signers_for_accounts(self, account_ids: list[str]) -> list[AccountSigner]:
        self._enter("signers_for_accounts")
        return [s for s in self.signers if s.account_id in account_ids]

    async def trust_lines_for_accounts(self, account_ids: list[str]) -> list[TrustLine]:
        self._enter("trust_lines_for_accounts")
        return [tl for tl in self.trust_lines if tl.account_id in account_ids]

    async def data_for_accounts(self, account_ids: list[str]) -> list[AccountData]:
        self._enter("data_for_accounts")
        return [d for d in self.data if d.account_id in account_ids]

    @property
    def batch_calls(self) -> int:
        return sum(
            self.calls[name]
            for name in ("signers_for_accounts", "trust_lines_for_accounts", "data_for_accounts")
        )


@dataclass
class FakeLedgerStore:
    accounts: dict[str, LedgerAccount] = field(default_factory=dict)
    data: list[LedgerData] = field(default_factory=list)
    signers: list[LedgerSigner] = field(default_factory=list)
    trust_lines: list[LedgerTrustLine] = field(default_factory=list)
    calls: Counter = field(default_factory=Counter)
    fail: set[str] = field(default_factory=set)

    def _enter(self, name: str) -> None:
        self.calls[name] += 1
        if name in self.fail:
            raise ConnectionError(f"{name} unavailable")

    async def account_by_address(self, address: str) -> LedgerAccount | None:
        self._enter("account_by_address")
        return self.accounts.get(address)

    async def all_data_by_address(self, address: str) -> list[LedgerData]:
        self._enter("all_data_by_address")
        return [d for d in self.data if d.account_id == address]

    async def signers_by_address(self, address: str) -> list[LedgerSigner]:
        self._enter("signers_by_address")
        return [s for s in self.signers if s.account_id == address]

    async def trustlines_by_address(self, address: str) -> list[LedgerTrustLine]:
        self._enter("trustlines_by_address")
        return [tl for tl in self.trust_lines if tl.account_id == address]


def account_entry(account_id: str, **overrides) -> AccountEntry:
    values = dict(
        account_id=account_id,
        balance=20000,
        buying_liabilities=3,
        selling_liabilities=4,
        sequence_number=223456789,
        num_subentries=10,
        inflation_destination="",
        flags=1,
        home_domain="stellar.org",
        master_weight=1,
        threshold_low=2,
        threshold_medium=3,
        threshold_high=4,
        last_modified_ledger=1234,
    )
    values.update(overrides)
    return AccountEntry(**values)


def trust_line(account_id: str, asset: Asset, **overrides) -> TrustLine:
    values = dict(
        account_id=account_id,
        asset_type=asset.type_code,
        asset_issuer=asset.issuer,
        asset_code=asset.code,
        balance=10000,
        limit=123456789,
        buying_liabilities=1,
        selling_liabilities=2,
        flags=0,
        last_modified_ledger=1235,
    )
    values.update(overrides)
    return TrustLine(**values)


def account_signers() -> list[AccountSigner]:
    return [
        AccountSigner(account_id=ACCOUNT_ONE, signer=SIGNER, weight=1),
        AccountSigner(account_id=ACCOUNT_TWO, signer=SIGNER, weight=2),
        AccountSigner(account_id=ACCOUNT_THREE, signer=SIGNER, weight=3),
    ]


@pytest.fixture
def history_store(monkeypatch: pytest.MonkeyPatch) -> FakeHistoryStore:
    store = FakeHistoryStore()
    for name in (
        "accounts_for_signer",
        "accounts_for_asset",
        "signers_for_accounts",
        "trust_lines_for_accounts",
        "data_for_accounts",
    ):
        monkeypatch.setattr(history_repository, name, getattr(store, name))
    return store


@pytest.fixture
def ledger_store(monkeypatch: pytest.MonkeyPatch) -> FakeLedgerStore:
    store = FakeLedgerStore()
    for name in (
        "account_by_address",
        "all_data_by_address",
        "signers_by_address",
        "trustlines_by_address",
    ):
        monkeypatch.setattr(ledger_repository, name, getattr(store, name))
    return store


@pytest.fixture
def asset_scenario(history_store: FakeHistoryStore) -> FakeHistoryStore:
    """
    Two accounts: one trusting EUR, one trusting USD with two signers and
    one data entry. Trust lines are added by the tests that need them.
    """
    history_store.accounts = [
        account_entry(ACCOUNT_ONE),
        account_entry(
            ACCOUNT_TWO,
            balance=50000,
            buying_liabilities=30,
            selling_liabilities=40,
            sequence_number=648736,
            flags=2,
            home_domain="meridian.stellar.org",
            master_weight=5,
            threshold_low=6,
            threshold_medium=7,
            threshold_high=8,
        ),
    ]
    history_store.signers = account_signers()
    history_store.data = [
        AccountData(account_id=ACCOUNT_ONE, name="test data", value=bytes(range(10)), last_modified_ledger=1234),
        AccountData(account_id=ACCOUNT_TWO, name="test data2", value=bytes(range(10, 20)), last_modified_ledger=1234),
    ]
    return history_store
