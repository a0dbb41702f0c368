"""
Client-side withdrawal preconditions.

validate_withdrawal() is pure: the same (requested, snapshot, now) always
yields the same verdict. Rules are checked in a fixed order and the first
failing rule decides.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .state import VaultSnapshot


class RejectReason(Enum):
    NON_POSITIVE_AMOUNT = "non_positive_amount"
    BALANCE_UNAVAILABLE = "balance_unavailable"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    STILL_LOCKED = "still_locked"


_MESSAGES = {
    RejectReason.NON_POSITIVE_AMOUNT: "Withdraw amount must be greater than 0.",
    RejectReason.BALANCE_UNAVAILABLE: "Unable to read vault balance.",
    RejectReason.INSUFFICIENT_BALANCE: "Insufficient vault balance.",
    RejectReason.STILL_LOCKED: "Funds are still locked. Try again in ~{remaining} seconds.",
}


@dataclass(frozen=True)
class ValidationVerdict:
    """Outcome of a withdrawal precondition check"""
    accepted: bool
    reason: Optional[RejectReason] = None
    remaining_seconds: Optional[int] = None

    @classmethod
    def accept(cls) -> 'ValidationVerdict':
        return cls(True)

    @classmethod
    def reject(cls, reason: RejectReason, remaining_seconds: Optional[int] = None) -> 'ValidationVerdict':
        return cls(False, reason, remaining_seconds)

    @property
    def message(self) -> str:
        if self.accepted:
            return "Withdrawal allowed"
        return _MESSAGES[self.reason].format(remaining=self.remaining_seconds)


def validate_withdrawal(requested: int, snapshot: VaultSnapshot, now: int) -> ValidationVerdict:
    """Decide whether a withdrawal of `requested` ledger units may be sent"""
    if requested <= 0:
        return ValidationVerdict.reject(RejectReason.NON_POSITIVE_AMOUNT)

    if snapshot.balance is None:
        return ValidationVerdict.reject(RejectReason.BALANCE_UNAVAILABLE)

    if requested > snapshot.balance:
        return ValidationVerdict.reject(RejectReason.INSUFFICIENT_BALANCE)

    # Unknown lock parameters do not block; the contract has the final say
    last_deposit = snapshot.last_deposit_timestamp
    lock_period = snapshot.lock_period_seconds
    if last_deposit is not None and last_deposit > 0 and lock_period is not None:
        unlock_time = last_deposit + lock_period
        if now <= unlock_time:
            return ValidationVerdict.reject(RejectReason.STILL_LOCKED, unlock_time - now)

    return ValidationVerdict.accept()
