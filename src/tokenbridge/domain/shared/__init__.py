"""Shared domain utilities.

This package is domain-accessible and should not depend on application code.
"""

from .addresses import (
    ZERO_ADDRESS,
    Address,
    Bytes32Hex,
    is_zero_address,
    normalize_address,
)
from .ledger_protocol import LedgerFactory, LedgerProtocol

__all__ = [
    "ZERO_ADDRESS",
    "Address",
    "Bytes32Hex",
    "is_zero_address",
    "normalize_address",
    "LedgerFactory",
    "LedgerProtocol",
]
