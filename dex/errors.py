"""Exchange error classes.

Every failure the engine can report is a DexError subclass carrying an
ErrorKind and an ErrorCategory. Errors are enumerated, never free text:
callers branch on the class or on `kind`, and the message only adds context.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar


class ErrorCategory(str, Enum):
    """Broad classes of failure."""

    INPUT_VALIDATION = "input_validation"
    LIQUIDITY = "liquidity"
    CALLER_BOUND = "caller_bound"
    ACCESS = "access"


class ErrorKind(str, Enum):
    """Specific failure kinds."""

    IDENTICAL_ASSETS = "identical_assets"
    ZERO_ASSET = "zero_asset"
    INVALID_ADDRESS = "invalid_address"
    INVALID_PATH = "invalid_path"
    INVALID_RECIPIENT = "invalid_recipient"
    INVALID_ASSET = "invalid_asset"
    INSUFFICIENT_AMOUNT = "insufficient_amount"
    INSUFFICIENT_INPUT_AMOUNT = "insufficient_input_amount"
    PAIR_EXISTS = "pair_exists"
    PAIR_NOT_FOUND = "pair_not_found"
    INSUFFICIENT_LIQUIDITY = "insufficient_liquidity"
    INSUFFICIENT_LIQUIDITY_MINTED = "insufficient_liquidity_minted"
    INSUFFICIENT_LIQUIDITY_BURNED = "insufficient_liquidity_burned"
    K_INVARIANT_VIOLATION = "k_invariant_violation"
    OVERFLOW = "overflow"
    TRANSFER_FAILED = "transfer_failed"
    EXPIRED = "expired"
    INSUFFICIENT_A_AMOUNT = "insufficient_a_amount"
    INSUFFICIENT_B_AMOUNT = "insufficient_b_amount"
    INSUFFICIENT_OUTPUT_AMOUNT = "insufficient_output_amount"
    EXCESSIVE_INPUT_AMOUNT = "excessive_input_amount"
    PERIOD_NOT_ELAPSED = "period_not_elapsed"
    LOCKED = "locked"
    NOT_AUTHORIZED = "not_authorized"


class DexError(Exception):
    """Base error for exchange operations.

    Attributes:
        kind: The enumerated failure kind (class-level)
        category: The failure class (class-level)
        context: Keyword details attached at the raise site
    """

    kind: ClassVar[ErrorKind]
    category: ClassVar[ErrorCategory]

    def __init__(self, message: str | None = None, **context: Any) -> None:
        self.context = context
        super().__init__(message or self.kind.value)

    def to_dict(self) -> dict[str, Any]:
        """Structured form for logs and API responses."""
        return {
            "error": self.kind.value,
            "category": self.category.value,
            "detail": str(self),
        }


# =============================================================================
# Input validation
# =============================================================================


class InputValidationError(DexError):
    """Rejected before any state is read."""

    category = ErrorCategory.INPUT_VALIDATION


class IdenticalAssets(InputValidationError):
    """Both sides of a pair are the same asset."""

    kind = ErrorKind.IDENTICAL_ASSETS


class ZeroAsset(InputValidationError):
    """An asset identifier is the zero address."""

    kind = ErrorKind.ZERO_ASSET


class InvalidAddress(InputValidationError):
    """A value is not a 0x-prefixed 20-byte hex address."""

    kind = ErrorKind.INVALID_ADDRESS


class InvalidPath(InputValidationError):
    """A swap path has fewer than two assets."""

    kind = ErrorKind.INVALID_PATH


class InvalidRecipient(InputValidationError):
    """Recipient is the zero address or one of the pooled assets."""

    kind = ErrorKind.INVALID_RECIPIENT


class InvalidAsset(InputValidationError):
    """Asset is not part of the pair being queried."""

    kind = ErrorKind.INVALID_ASSET


class InsufficientAmount(InputValidationError):
    """Quote requested for a zero amount."""

    kind = ErrorKind.INSUFFICIENT_AMOUNT


class InsufficientInputAmount(InputValidationError):
    """Swap input is zero."""

    kind = ErrorKind.INSUFFICIENT_INPUT_AMOUNT


class PairExists(InputValidationError):
    """A pair for this asset combination was already created."""

    kind = ErrorKind.PAIR_EXISTS


class PairNotFound(InputValidationError):
    """No pair is registered for this asset combination."""

    kind = ErrorKind.PAIR_NOT_FOUND


# =============================================================================
# Liquidity / invariant
# =============================================================================


class LiquidityError(DexError):
    """Rejected after computing, before committing state."""

    category = ErrorCategory.LIQUIDITY


class InsufficientLiquidity(LiquidityError):
    """Reserves are empty or too small for the requested output."""

    kind = ErrorKind.INSUFFICIENT_LIQUIDITY


class InsufficientLiquidityMinted(LiquidityError):
    """Deposit would mint zero shares."""

    kind = ErrorKind.INSUFFICIENT_LIQUIDITY_MINTED


class InsufficientLiquidityBurned(LiquidityError):
    """Burn would return zero of an underlying asset."""

    kind = ErrorKind.INSUFFICIENT_LIQUIDITY_BURNED


class KInvariantViolation(LiquidityError):
    """Fee-adjusted reserve product decreased across a swap."""

    kind = ErrorKind.K_INVARIANT_VIOLATION


class Overflow(LiquidityError):
    """A balance does not fit in the 112-bit reserve slot."""

    kind = ErrorKind.OVERFLOW


class TransferFailed(LiquidityError):
    """An asset contract reported a failed transfer."""

    kind = ErrorKind.TRANSFER_FAILED


# =============================================================================
# Caller-bound violations
# =============================================================================


class CallerBoundError(DexError):
    """The caller's constraints cannot be met right now."""

    category = ErrorCategory.CALLER_BOUND


class Expired(CallerBoundError):
    """Deadline is earlier than the current ledger time."""

    kind = ErrorKind.EXPIRED


class InsufficientAAmount(CallerBoundError):
    """Realized amount of asset A is below the caller's minimum."""

    kind = ErrorKind.INSUFFICIENT_A_AMOUNT


class InsufficientBAmount(CallerBoundError):
    """Realized amount of asset B is below the caller's minimum."""

    kind = ErrorKind.INSUFFICIENT_B_AMOUNT


class InsufficientOutputAmount(CallerBoundError):
    """Output is zero or below the caller's minimum."""

    kind = ErrorKind.INSUFFICIENT_OUTPUT_AMOUNT


class ExcessiveInputAmount(CallerBoundError):
    """Required input exceeds the caller's maximum."""

    kind = ErrorKind.EXCESSIVE_INPUT_AMOUNT


class PeriodNotElapsed(CallerBoundError):
    """Oracle window has not elapsed since the last observation."""

    kind = ErrorKind.PERIOD_NOT_ELAPSED


# =============================================================================
# Concurrency / authorization
# =============================================================================


class AccessError(DexError):
    """Call rejected because of lock state or caller identity."""

    category = ErrorCategory.ACCESS


class Locked(AccessError):
    """Pair is already inside mint, burn, swap, skim or sync."""

    kind = ErrorKind.LOCKED


class NotAuthorized(AccessError):
    """Caller is not the fee admin."""

    kind = ErrorKind.NOT_AUTHORIZED


__all__ = [
    "ErrorCategory",
    "ErrorKind",
    "DexError",
    "InputValidationError",
    "IdenticalAssets",
    "ZeroAsset",
    "InvalidAddress",
    "InvalidPath",
    "InvalidRecipient",
    "InvalidAsset",
    "InsufficientAmount",
    "InsufficientInputAmount",
    "PairExists",
    "PairNotFound",
    "LiquidityError",
    "InsufficientLiquidity",
    "InsufficientLiquidityMinted",
    "InsufficientLiquidityBurned",
    "KInvariantViolation",
    "Overflow",
    "TransferFailed",
    "CallerBoundError",
    "Expired",
    "InsufficientAAmount",
    "InsufficientBAmount",
    "InsufficientOutputAmount",
    "ExcessiveInputAmount",
    "PeriodNotElapsed",
    "AccessError",
    "Locked",
    "NotAuthorized",
]
