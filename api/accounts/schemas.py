"""
Account API schemas (response models).
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Thresholds(BaseModel):
    low_threshold: int
    med_threshold: int
    high_threshold: int


class AccountFlags(BaseModel):
    auth_required: bool
    auth_revocable: bool
    auth_immutable: bool


class Balance(BaseModel):
    balance: str
    limit: str | None = None
    buying_liabilities: str
    selling_liabilities: str
    last_modified_ledger: int | None = None
    is_authorized: bool | None = None
    asset_type: str
    asset_code: str | None = None
    asset_issuer: str | None = None


class Signer(BaseModel):
    key: str
    weight: int
    type: str


class Account(BaseModel):
    id: str
    account_id: str
    paging_token: str
    sequence: str
    subentry_count: int
    inflation_destination: str | None = None
    home_domain: str | None = None
    last_modified_ledger: int
    thresholds: Thresholds
    flags: AccountFlags
    balances: list[Balance] = Field(default_factory=list)
    signers: list[Signer] = Field(default_factory=list)
    data: dict[str, str] = Field(default_factory=dict)


class AccountSignerResource(BaseModel):
    id: str
    account_id: str
    paging_token: str
    signer: Signer
