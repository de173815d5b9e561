"""Domain-specific exceptions.

Every failure a bridge call can end with is a ``BridgeError``. The ``code``
attribute is the stable error name clients match on; the families group errors
by how a client should react (fix the request, get a fresh authorization, wait
for the ledger, ...). All of them abort the whole call.
"""

from __future__ import annotations

from typing import Optional


class BridgeError(ValueError):
    """Base class for all bridge failures."""

    code: str = "BridgeError"
    default_message: str = "Bridge operation failed"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


# Families


class AuthorizationError(BridgeError):
    code = "AuthorizationError"


class ReplayError(BridgeError):
    code = "ReplayError"


class LimitError(BridgeError):
    code = "LimitError"


class ConfigurationError(BridgeError):
    code = "ConfigurationError"


class CollaboratorFailure(BridgeError):
    code = "CollaboratorFailure"


class ResourceError(BridgeError):
    code = "ResourceError"


# Authorization


class InvalidRequestOrSignature(AuthorizationError):
    code = "InvalidRequestOrSignature"
    default_message = "Request is not signed by the conversion authorizer"


class UnauthorizedCommissionReceiver(AuthorizationError):
    code = "UnauthorizedCommissionReceiver"
    default_message = "Caller is not the commission receiver"


class CallerNotOwner(AuthorizationError):
    code = "CallerNotOwner"
    default_message = "Ownable: caller is not the owner"


class CallerNotPendingOwner(AuthorizationError):
    code = "CallerNotPendingOwner"
    default_message = "Ownable2Step: caller is not the new owner"


# Replay


class UsedSignature(ReplayError):
    code = "UsedSignature"
    default_message = "Signature was already used"


# Limits


class ViolationOfTxAmountLimits(LimitError):
    code = "ViolationOfTxAmountLimits"
    default_message = "Amount is outside the allowed conversion limits"


class MintingMoreThanMaxSupply(LimitError):
    code = "MintingMoreThanMaxSupply"
    default_message = "Conversion would mint more than the max supply"


class ViolationOfFixedNativeTokensLimit(LimitError):
    code = "ViolationOfFixedNativeTokensLimit"
    default_message = "Fixed native commission exceeds its limit"


class CommissionExceedsAmount(LimitError):
    code = "CommissionExceedsAmount"
    default_message = "Token commission exceeds the conversion amount"


class NativeCommissionMismatch(LimitError):
    code = "NativeCommissionMismatch"
    default_message = "Attached native payment does not match the commission"


class InsufficientNativeCommission(NativeCommissionMismatch):
    code = "InsufficientNativeCommission"
    default_message = "Attached native payment is below the fixed native commission"


# Configuration


class InvalidUpdateConfigurations(ConfigurationError):
    code = "InvalidUpdateConfigurations"
    default_message = "Configuration must satisfy min <= max <= max supply"


class InvalidProportionSum(ConfigurationError):
    code = "InvalidProportionSum"
    default_message = "Commission proportions must sum to 100"


class PercentageLimitExceeded(ConfigurationError):
    code = "PercentageLimitExceeded"
    default_message = "Percentage commission exceeds the configured limit"


class EnablingZeroTokenPercentageCommission(ConfigurationError):
    code = "EnablingZeroTokenPercentageCommission"
    default_message = "Percentage and offset points must be non-zero"


class EnablingZeroFixedTokenCommission(ConfigurationError):
    code = "EnablingZeroFixedTokenCommission"
    default_message = "Fixed token commission must be non-zero"


class EnablingZeroFixedNativeTokenCommission(ConfigurationError):
    code = "EnablingZeroFixedNativeTokenCommission"
    default_message = "Fixed native commission must be non-zero"


class ZeroFixedNativeTokensCommissionLimit(ConfigurationError):
    code = "ZeroFixedNativeTokensCommissionLimit"
    default_message = "Fixed native commission limit must be non-zero"


class ZeroAddress(ConfigurationError):
    code = "ZeroAddress"
    default_message = "Address must not be the zero address"


class BridgeNotInitialized(ConfigurationError):
    code = "BridgeNotInitialized"
    default_message = "Bridge state has not been initialized"


# Collaborator


class ConversionFailed(CollaboratorFailure):
    code = "ConversionFailed"
    default_message = "Ledger refused the token transfer"


class ConversionMintFailed(CollaboratorFailure):
    code = "ConversionMintFailed"
    default_message = "Ledger refused to mint"


# Resources


class NotEnoughBalance(ResourceError):
    code = "NotEnoughBalance"
    default_message = "Nothing to claim"
