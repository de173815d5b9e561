"""Canonical encodings of the messages the bridge verifies.

A conversion message is the tightly packed concatenation of

    direction tag (utf-8) | amount (uint256, big endian) | counterparty (20 bytes)
    | conversion id (32 bytes) | bridge address (20 bytes)

hashed with keccak-256. Binding the direction tag and the bridge's own address
means an authorization can only ever be redeemed in one direction on one bridge.
"""

from __future__ import annotations

from eth_utils import keccak, to_canonical_address

from ..domain.bridge.entities import ConversionDirection
from ..domain.shared.addresses import UINT256_MAX

CONVERSION_ID_LENGTH = 32
PERSONAL_MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n"


def encode_conversion_message(
    direction: ConversionDirection,
    amount: int,
    counterparty: str,
    conversion_id: bytes,
    bridge_address: str,
) -> bytes:
    """Packed encoding of a conversion request."""
    if amount < 0 or amount > UINT256_MAX:
        raise ValueError("Amount must fit in an unsigned 256-bit integer")
    if len(conversion_id) != CONVERSION_ID_LENGTH:
        raise ValueError(
            f"Conversion id must be {CONVERSION_ID_LENGTH} bytes, got {len(conversion_id)}"
        )
    return b"".join(
        [
            direction.tag.encode("utf-8"),
            amount.to_bytes(32, "big"),
            to_canonical_address(counterparty),
            conversion_id,
            to_canonical_address(bridge_address),
        ]
    )


def build_digest(
    direction: ConversionDirection,
    amount: int,
    counterparty: str,
    conversion_id: bytes,
    bridge_address: str,
) -> bytes:
    """Keccak-256 digest of the packed conversion message."""
    return keccak(
        encode_conversion_message(
            direction, amount, counterparty, conversion_id, bridge_address
        )
    )


def personal_message_hash(digest: bytes) -> bytes:
    """EIP-191 hash of a digest, i.e. what wallets actually sign."""
    return keccak(PERSONAL_MESSAGE_PREFIX + str(len(digest)).encode("ascii") + digest)


def conversion_id_from_text(text: str) -> bytes:
    """Right zero-padded 32-byte id from a short string (at most 31 bytes)."""
    raw = text.encode("utf-8")
    if len(raw) > CONVERSION_ID_LENGTH - 1:
        raise ValueError("Conversion id text must be at most 31 bytes")
    return raw.ljust(CONVERSION_ID_LENGTH, b"\x00")


def request_digest(
    method: str, path: str, timestamp: int, body: bytes, bridge_address: str
) -> bytes:
    """Digest a caller signs to authenticate one HTTP request to one bridge."""
    return keccak(
        b"\n".join(
            [
                to_canonical_address(bridge_address),
                method.upper().encode("ascii"),
                path.encode("utf-8"),
                str(timestamp).encode("ascii"),
                body,
            ]
        )
    )
