"""Commission computation and activation rules.

Exactly one mode is active at a time. The token modes take their fee out of the
converted tokens and split it between the commission receiver and the bridge
owner at conversion time; the native mode takes a flat native-currency payment
that accrues in the vault and is later claimed, whole, by the receiver.

Shares are floored: ``receiver_share = token_commission * receiver_proportion
// 100`` and the bridge owner gets the rest, so any rounding remainder always
lands with the bridge owner. This bias is accepted as-is.
"""

from __future__ import annotations

from ...domain.bridge.entities import (
    CommissionBreakdown,
    CommissionConfig,
    CommissionMode,
)
from ...domain.errors import (
    CommissionExceedsAmount,
    EnablingZeroFixedNativeTokenCommission,
    EnablingZeroFixedTokenCommission,
    EnablingZeroTokenPercentageCommission,
    InsufficientNativeCommission,
    InvalidProportionSum,
    NativeCommissionMismatch,
    PercentageLimitExceeded,
    ViolationOfFixedNativeTokensLimit,
    ZeroFixedNativeTokensCommissionLimit,
)

PROPORTION_TOTAL = 100


def split_commission(
    token_commission: int, commission: CommissionConfig
) -> tuple[int, int]:
    """Return (receiver_share, bridge_owner_share) for a token commission."""
    receiver_share = token_commission * commission.receiver_proportion // PROPORTION_TOTAL
    return receiver_share, token_commission - receiver_share


def compute_commission(
    gross_amount: int, native_payment: int, commission: CommissionConfig
) -> CommissionBreakdown:
    """Compute the fee for one conversion under the active mode. Pure function.

    Args:
        gross_amount: Amount being converted
        native_payment: Native currency attached to the call (0 if none)
        commission: Commission settings snapshot taken at call time

    Returns:
        The token commission, the accepted native commission and the split.

    Raises:
        InsufficientNativeCommission: Native mode and the payment is too small.
        NativeCommissionMismatch: Payment attached outside native mode, or too large.
        CommissionExceedsAmount: Token commission larger than the gross amount.
    """
    mode = commission.active_mode

    if mode is CommissionMode.FIXED_NATIVE:
        if native_payment < commission.fixed_native_amount:
            raise InsufficientNativeCommission(
                f"Native commission of {commission.fixed_native_amount} required, "
                f"got {native_payment}"
            )
        if native_payment > commission.fixed_native_amount:
            raise NativeCommissionMismatch(
                f"Native commission of exactly {commission.fixed_native_amount} "
                f"required, got {native_payment}"
            )
        return CommissionBreakdown(native_commission_accepted=native_payment)

    if native_payment:
        raise NativeCommissionMismatch(
            "Native payment attached while native commission is not active"
        )

    if mode is CommissionMode.DISABLED:
        return CommissionBreakdown()

    if mode is CommissionMode.PERCENTAGE_TOKEN:
        token_commission = (
            gross_amount
            * commission.percentage_numerator
            // commission.percentage_offset_points
        )
    else:
        token_commission = commission.fixed_token_amount

    if token_commission > gross_amount:
        raise CommissionExceedsAmount(
            f"Commission {token_commission} exceeds amount {gross_amount}"
        )

    receiver_share, bridge_owner_share = split_commission(token_commission, commission)
    return CommissionBreakdown(
        token_commission=token_commission,
        receiver_share=receiver_share,
        bridge_owner_share=bridge_owner_share,
    )


def validate_proportions(receiver_proportion: int, bridge_owner_proportion: int) -> None:
    if (
        receiver_proportion < 0
        or bridge_owner_proportion < 0
        or receiver_proportion + bridge_owner_proportion != PROPORTION_TOTAL
    ):
        raise InvalidProportionSum(
            f"Proportions {receiver_proportion} + {bridge_owner_proportion} "
            f"must sum to {PROPORTION_TOTAL}"
        )


def validate_percentage_commission(
    numerator: int, offset_points: int, percentage_limit: int
) -> None:
    """Reject zero parameters and rates above ``percentage_limit`` percent."""
    if numerator <= 0 or offset_points <= 0:
        raise EnablingZeroTokenPercentageCommission()
    if numerator * PROPORTION_TOTAL > percentage_limit * offset_points:
        raise PercentageLimitExceeded(
            f"{numerator}/{offset_points} exceeds the {percentage_limit}% limit"
        )


def validate_fixed_token_commission(amount: int) -> None:
    if amount <= 0:
        raise EnablingZeroFixedTokenCommission()


def validate_fixed_native_commission(amount: int, limit: int) -> None:
    if amount <= 0:
        raise EnablingZeroFixedNativeTokenCommission()
    if amount > limit:
        raise ViolationOfFixedNativeTokensLimit(
            f"Fixed native commission {amount} exceeds limit {limit}"
        )


def validate_fixed_native_limit(limit: int) -> None:
    if limit <= 0:
        raise ZeroFixedNativeTokensCommissionLimit()


def activate_percentage_commission(
    commission: CommissionConfig, numerator: int, offset_points: int
) -> CommissionConfig:
    validate_percentage_commission(numerator, offset_points, commission.percentage_limit)
    return commission.cleared().model_copy(
        update={
            "enabled": True,
            "mode": CommissionMode.PERCENTAGE_TOKEN,
            "percentage_numerator": numerator,
            "percentage_offset_points": offset_points,
        }
    )


def activate_fixed_token_commission(
    commission: CommissionConfig, amount: int
) -> CommissionConfig:
    validate_fixed_token_commission(amount)
    return commission.cleared().model_copy(
        update={
            "enabled": True,
            "mode": CommissionMode.FIXED_TOKEN,
            "fixed_token_amount": amount,
        }
    )


def activate_fixed_native_commission(
    commission: CommissionConfig, amount: int
) -> CommissionConfig:
    validate_fixed_native_commission(amount, commission.fixed_native_limit)
    return commission.cleared().model_copy(
        update={
            "enabled": True,
            "mode": CommissionMode.FIXED_NATIVE,
            "fixed_native_amount": amount,
        }
    )
