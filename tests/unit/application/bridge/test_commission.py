"""Unit tests for commission computation and activation (pure functions)."""

import pytest

from tokenbridge.application.bridge.commission import (
    activate_fixed_native_commission,
    activate_fixed_token_commission,
    activate_percentage_commission,
    compute_commission,
    split_commission,
    validate_fixed_native_commission,
    validate_fixed_native_limit,
    validate_fixed_token_commission,
    validate_percentage_commission,
    validate_proportions,
)
from tokenbridge.domain.bridge.entities import CommissionConfig, CommissionMode
from tokenbridge.domain.errors import (
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

RECEIVER = "0x" + "11" * 20
BRIDGE_OWNER = "0x" + "22" * 20


def make_commission(**overrides) -> CommissionConfig:
    values = dict(
        fixed_native_limit=1000,
        receiver_proportion=20,
        bridge_owner_proportion=80,
        receiver_address=RECEIVER,
        bridge_owner_address=BRIDGE_OWNER,
    )
    values.update(overrides)
    return CommissionConfig(**values)


class TestComputeCommission:
    """Test compute_commission function."""

    def test_disabled_charges_nothing(self) -> None:
        breakdown = compute_commission(10_000, 0, make_commission())
        assert breakdown.token_commission == 0
        assert breakdown.native_commission_accepted == 0
        assert breakdown.receiver_share == 0
        assert breakdown.bridge_owner_share == 0

    def test_mode_set_but_not_enabled_charges_nothing(self) -> None:
        commission = make_commission(
            enabled=False, mode=CommissionMode.FIXED_TOKEN, fixed_token_amount=100
        )
        assert compute_commission(10_000, 0, commission).token_commission == 0

    def test_percentage_example(self) -> None:
        """10% of 10_000_000_000 split 20/80."""
        commission = activate_percentage_commission(make_commission(), 10, 100)
        breakdown = compute_commission(10_000_000_000, 0, commission)
        assert breakdown.token_commission == 1_000_000_000
        assert breakdown.receiver_share == 200_000_000
        assert breakdown.bridge_owner_share == 800_000_000

    def test_percentage_floors(self) -> None:
        commission = activate_percentage_commission(make_commission(), 1, 3)
        assert compute_commission(10, 0, commission).token_commission == 3

    def test_rounding_remainder_goes_to_bridge_owner(self) -> None:
        commission = make_commission(receiver_proportion=50, bridge_owner_proportion=50)
        assert split_commission(3, commission) == (1, 2)

    def test_fixed_token_independent_of_amount(self) -> None:
        commission = activate_fixed_token_commission(make_commission(), 100)
        for amount in (100, 5_000, 10**18):
            breakdown = compute_commission(amount, 0, commission)
            assert breakdown.token_commission == 100
            assert breakdown.receiver_share == 20
            assert breakdown.bridge_owner_share == 80

    def test_fixed_token_larger_than_amount_raises(self) -> None:
        commission = activate_fixed_token_commission(make_commission(), 100)
        with pytest.raises(CommissionExceedsAmount):
            compute_commission(99, 0, commission)

    def test_fixed_native_exact_payment_accepted(self) -> None:
        commission = activate_fixed_native_commission(make_commission(), 200)
        breakdown = compute_commission(5_000, 200, commission)
        assert breakdown.token_commission == 0
        assert breakdown.native_commission_accepted == 200
        assert breakdown.receiver_share == 0

    def test_fixed_native_underpayment_raises(self) -> None:
        commission = activate_fixed_native_commission(make_commission(), 200)
        with pytest.raises(InsufficientNativeCommission):
            compute_commission(5_000, 199, commission)

    def test_fixed_native_overpayment_raises(self) -> None:
        commission = activate_fixed_native_commission(make_commission(), 200)
        with pytest.raises(NativeCommissionMismatch) as exc_info:
            compute_commission(5_000, 201, commission)
        assert not isinstance(exc_info.value, InsufficientNativeCommission)

    @pytest.mark.parametrize(
        "commission",
        [
            make_commission(),
            activate_fixed_token_commission(make_commission(), 10),
            activate_percentage_commission(make_commission(), 1, 100),
        ],
    )
    def test_native_payment_outside_native_mode_raises(
        self, commission: CommissionConfig
    ) -> None:
        with pytest.raises(NativeCommissionMismatch):
            compute_commission(5_000, 1, commission)


class TestValidators:
    """Test activation validators."""

    def test_proportions_must_sum_to_100(self) -> None:
        validate_proportions(20, 80)
        validate_proportions(0, 100)
        with pytest.raises(InvalidProportionSum):
            validate_proportions(100, 100)
        with pytest.raises(InvalidProportionSum):
            validate_proportions(50, 49)

    def test_percentage_zero_parameters_raise(self) -> None:
        with pytest.raises(EnablingZeroTokenPercentageCommission):
            validate_percentage_commission(0, 100, 100)
        with pytest.raises(EnablingZeroTokenPercentageCommission):
            validate_percentage_commission(10, 0, 100)

    def test_percentage_above_limit_raises(self) -> None:
        with pytest.raises(PercentageLimitExceeded):
            validate_percentage_commission(100, 10, 100)

    def test_percentage_at_limit_allowed(self) -> None:
        validate_percentage_commission(100, 100, 100)
        validate_percentage_commission(5, 100, 5)
        with pytest.raises(PercentageLimitExceeded):
            validate_percentage_commission(6, 100, 5)

    def test_fixed_token_zero_raises(self) -> None:
        with pytest.raises(EnablingZeroFixedTokenCommission):
            validate_fixed_token_commission(0)

    def test_fixed_native_bounds(self) -> None:
        validate_fixed_native_commission(1000, 1000)
        with pytest.raises(EnablingZeroFixedNativeTokenCommission):
            validate_fixed_native_commission(0, 1000)
        with pytest.raises(ViolationOfFixedNativeTokensLimit):
            validate_fixed_native_commission(1001, 1000)

    def test_fixed_native_limit_must_be_positive(self) -> None:
        with pytest.raises(ZeroFixedNativeTokensCommissionLimit):
            validate_fixed_native_limit(0)


class TestActivation:
    """Activating one mode clears the parameters of every other mode."""

    def test_modes_are_mutually_exclusive(self) -> None:
        commission = activate_percentage_commission(make_commission(), 10, 100)
        assert commission.mode is CommissionMode.PERCENTAGE_TOKEN

        commission = activate_fixed_token_commission(commission, 100)
        assert commission.mode is CommissionMode.FIXED_TOKEN
        assert commission.percentage_numerator == 0
        assert commission.percentage_offset_points == 0

        commission = activate_fixed_native_commission(commission, 200)
        assert commission.mode is CommissionMode.FIXED_NATIVE
        assert commission.fixed_token_amount == 0
        assert commission.fixed_native_amount == 200
        assert commission.enabled is True

    def test_cleared_disables_and_keeps_recipients(self) -> None:
        commission = activate_fixed_native_commission(make_commission(), 200).cleared()
        assert commission.enabled is False
        assert commission.active_mode is CommissionMode.DISABLED
        assert commission.fixed_native_amount == 0
        assert commission.fixed_native_limit == 1000
        assert commission.receiver_proportion == 20

    def test_rejected_activation_leaves_input_unchanged(self) -> None:
        commission = activate_fixed_token_commission(make_commission(), 100)
        with pytest.raises(ViolationOfFixedNativeTokensLimit):
            activate_fixed_native_commission(commission, 5000)
        assert commission.fixed_token_amount == 100
