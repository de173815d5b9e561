"""Pure validation functions for conversion amount and supply limits.

These functions contain business logic validation rules that can be tested
in isolation without dependencies on repositories or infrastructure.
"""

from __future__ import annotations

from ...domain.bridge.entities import ConversionConfiguration
from ...domain.errors import (
    InvalidUpdateConfigurations,
    MintingMoreThanMaxSupply,
    ViolationOfTxAmountLimits,
)


def check_amount(amount: int, configuration: ConversionConfiguration) -> None:
    """Validate a conversion amount against the per-transaction limits. Pure function.

    Args:
        amount: Gross amount of the conversion
        configuration: Configuration snapshot taken at call time

    Raises:
        ViolationOfTxAmountLimits: If amount is below min or above max.
    """
    if amount < configuration.min_amount or amount > configuration.max_amount:
        raise ViolationOfTxAmountLimits(
            f"Amount {amount} outside limits "
            f"[{configuration.min_amount}, {configuration.max_amount}]"
        )


def check_supply(
    minted_total: int, amount: int, configuration: ConversionConfiguration
) -> None:
    """Validate that an inbound conversion keeps the minted total under the cap.

    Args:
        minted_total: Total minted so far, as reported by the ledger
        amount: Gross amount of the conversion
        configuration: Configuration snapshot taken at call time

    Raises:
        MintingMoreThanMaxSupply: If minted_total + amount exceeds max_supply.
    """
    if minted_total + amount > configuration.max_supply:
        raise MintingMoreThanMaxSupply(
            f"Minting {amount} on top of {minted_total} exceeds max supply "
            f"{configuration.max_supply}"
        )


def validate_configuration(min_amount: int, max_amount: int, max_supply: int) -> None:
    """Validate the min <= max <= max_supply ordering of new limits."""
    if min_amount < 0 or not (min_amount <= max_amount <= max_supply):
        raise InvalidUpdateConfigurations(
            f"Invalid limits: min={min_amount}, max={max_amount}, "
            f"max_supply={max_supply}"
        )
