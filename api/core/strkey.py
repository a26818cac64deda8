"""
StrKey address checks.

A StrKey is base32(version_byte + payload + crc16 little-endian).
Account ids, pre-auth tx and sha256 hash keys carry a 32-byte payload.
Signed-payload signers carry a 32-byte key, a 4-byte big-endian length and
the payload itself zero-padded to a multiple of 4 bytes (1..64 bytes).

Only decoding/validation is needed here; the service never builds keys.
"""

from __future__ import annotations

import base64
import binascii

VERSION_ACCOUNT_ID = 6 << 3  # "G..."
VERSION_SIGNED_PAYLOAD = 15 << 3  # "P..."
VERSION_PRE_AUTH_TX = 19 << 3  # "T..."
VERSION_SHA256_HASH = 23 << 3  # "X..."

ENCODED_LENGTH = 56
PAYLOAD_LENGTH = 32
SIGNED_PAYLOAD_MAX_INNER = 64

KEY_TYPES = {
    VERSION_ACCOUNT_ID: "ed25519_public_key",
    VERSION_SIGNED_PAYLOAD: "ed25519_signed_payload",
    VERSION_PRE_AUTH_TX: "preauth_tx",
    VERSION_SHA256_HASH: "sha256_hash",
}


class StrKeyError(ValueError):
    pass


def _crc16_xmodem(data: bytes) -> int:
    crc = 0
    for byte in data:
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ 0x1021) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return crc


def _check_signed_payload(payload: bytes) -> None:
    if len(payload) < PAYLOAD_LENGTH + 4:
        raise StrKeyError("signed payload too short.")
    inner_len = int.from_bytes(payload[PAYLOAD_LENGTH:PAYLOAD_LENGTH + 4], "big")
    if not (1 <= inner_len <= SIGNED_PAYLOAD_MAX_INNER):
        raise StrKeyError(f"signed payload length {inner_len} out of range.")
    padded = inner_len + (-inner_len % 4)
    if len(payload) != PAYLOAD_LENGTH + 4 + padded:
        raise StrKeyError("signed payload length mismatch.")
    if any(payload[PAYLOAD_LENGTH + 4 + inner_len:]):
        raise StrKeyError("signed payload padding is not zero.")


def decode(encoded: str) -> tuple[int, bytes]:
    """
    Return (version_byte, payload) or raise StrKeyError.
    """
    raw = encoded or ""
    if not raw or "=" in raw:
        raise StrKeyError("empty or padded key.")

    try:
        decoded = base64.b32decode(raw + "=" * (-len(raw) % 8))
    except binascii.Error as exc:
        raise StrKeyError("not valid base32.") from exc
    if len(decoded) < 3:
        raise StrKeyError("key too short.")

    version, payload, checksum = decoded[0], decoded[1:-2], decoded[-2:]
    if int.from_bytes(checksum, "little") != _crc16_xmodem(decoded[:-2]):
        raise StrKeyError("checksum mismatch.")
    if version not in KEY_TYPES:
        raise StrKeyError(f"unknown version byte {version}.")

    if version == VERSION_SIGNED_PAYLOAD:
        _check_signed_payload(payload)
    elif len(raw) != ENCODED_LENGTH or len(payload) != PAYLOAD_LENGTH:
        raise StrKeyError(f"expected {ENCODED_LENGTH} characters, got {len(raw)}.")
    return version, payload


def is_account_id(encoded: str) -> bool:
    try:
        version, _ = decode(encoded)
    except StrKeyError:
        return False
    return version == VERSION_ACCOUNT_ID


def key_type(encoded: str) -> str:
    """
    Signer type name for a key, e.g. "ed25519_public_key".
    """
    version, _ = decode(encoded)
    return KEY_TYPES[version]
