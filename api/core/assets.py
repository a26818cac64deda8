"""
Asset descriptor shared by stores and resources.

Stores keep the asset type as its ledger enum value; resources and query
parameters use the type name.
"""

from __future__ import annotations

from dataclasses import dataclass

NATIVE = "native"
CREDIT_ALPHANUM4 = "credit_alphanum4"
CREDIT_ALPHANUM12 = "credit_alphanum12"

TYPE_CODES = {
    NATIVE: 0,
    CREDIT_ALPHANUM4: 1,
    CREDIT_ALPHANUM12: 2,
}
TYPE_NAMES = {code: name for name, code in TYPE_CODES.items()}


@dataclass(frozen=True)
class Asset:
    type: str
    code: str = ""
    issuer: str = ""

    @property
    def type_code(self) -> int:
        return TYPE_CODES[self.type]

    @property
    def is_native(self) -> bool:
        return self.type == NATIVE


def type_name(type_code: int) -> str:
    return TYPE_NAMES[int(type_code)]
