"""Identity and fixed-width value types shared by every layer."""

from __future__ import annotations

from typing import Annotated

from eth_utils import is_address, to_checksum_address
from pydantic import AfterValidator

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

UINT256_MAX = 2**256 - 1


def normalize_address(value: str) -> str:
    """Return the checksummed form of a 20-byte hex address."""
    if not isinstance(value, str) or not is_address(value):
        raise ValueError(f"Invalid address: {value!r}")
    return to_checksum_address(value)


def is_zero_address(value: str) -> bool:
    return int(value, 16) == 0


def normalize_bytes32_hex(value: str) -> str:
    """Return a lowercase 0x-prefixed hex string of exactly 32 bytes."""
    if not isinstance(value, str):
        raise ValueError("Expected a hex string")
    raw = value[2:] if value.startswith(("0x", "0X")) else value
    try:
        decoded = bytes.fromhex(raw)
    except ValueError as e:
        raise ValueError(f"Invalid hex value: {value!r}") from e
    if len(decoded) != 32:
        raise ValueError(f"Expected 32 bytes, got {len(decoded)}")
    return "0x" + decoded.hex()


def bytes32_from_hex(value: str) -> bytes:
    return bytes.fromhex(normalize_bytes32_hex(value)[2:])


Address = Annotated[str, AfterValidator(normalize_address)]
Bytes32Hex = Annotated[str, AfterValidator(normalize_bytes32_hex)]
