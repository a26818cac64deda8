"""
Query parameter parsing for account endpoints.

The list endpoint filters either by signer or by asset. When a request
carries both, the signer filter wins and the asset parameters are ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from core import assets, strkey

_ASSET_CODE_RE = re.compile(r"^[A-Za-z0-9]+$")


class InvalidParamError(ValueError):
    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


@dataclass(frozen=True)
class SignerFilter:
    signer: str


@dataclass(frozen=True)
class AssetFilter:
    asset: assets.Asset


AccountsFilter = Union[SignerFilter, AssetFilter]


def parse_account_id(raw: str | None, *, field: str) -> str:
    value = (raw or "").strip()
    if not value:
        raise InvalidParamError(field, f"{field} is required.")
    if not strkey.is_account_id(value):
        raise InvalidParamError(field, f"{field} is not a valid account id.")
    return value


def parse_asset(
    asset_type: str | None,
    asset_code: str | None,
    asset_issuer: str | None,
) -> assets.Asset:
    type_name = (asset_type or "").strip()
    code = (asset_code or "").strip()
    issuer = (asset_issuer or "").strip()

    if type_name not in assets.TYPE_CODES:
        raise InvalidParamError(
            "asset_type",
            "asset_type must be one of: native, credit_alphanum4, credit_alphanum12.",
        )

    if type_name == assets.NATIVE:
        if code or issuer:
            raise InvalidParamError("asset_type", "native asset does not take a code or issuer.")
        return assets.Asset(type=assets.NATIVE)

    min_len, max_len = (1, 4) if type_name == assets.CREDIT_ALPHANUM4 else (5, 12)
    if not (min_len <= len(code) <= max_len) or not _ASSET_CODE_RE.match(code):
        raise InvalidParamError(
            "asset_code",
            f"asset_code must be {min_len}-{max_len} alphanumeric characters for {type_name}.",
        )

    return assets.Asset(type=type_name, code=code, issuer=parse_account_id(issuer, field="asset_issuer"))


def parse_filter(
    *,
    signer: str | None,
    asset_type: str | None,
    asset_code: str | None,
    asset_issuer: str | None,
) -> AccountsFilter:
    if (signer or "").strip():
        return SignerFilter(signer=parse_account_id(signer, field="signer"))

    if not any((asset_type, asset_code, asset_issuer)):
        raise InvalidParamError("signer", "Provide either signer or asset_type/asset_code/asset_issuer.")

    return AssetFilter(asset=parse_asset(asset_type, asset_code, asset_issuer))
