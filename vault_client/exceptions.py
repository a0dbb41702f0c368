"""
Error taxonomy for the vault client
"""

from typing import Optional


class VaultClientError(Exception):
    """Base class for every error raised by the vault client"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedAmount(VaultClientError, ValueError):
    """Amount string is not a non-negative decimal within unit precision"""


class ContractInterfaceError(VaultClientError, ValueError):
    """Compiled contract ABI does not expose what the client relies on"""

    def __init__(self, problems: list):
        self.problems = list(problems)
        super().__init__("Vault ABI mismatch: " + "; ".join(self.problems))


class WithdrawalRejected(VaultClientError):
    """Withdrawal refused locally, no transaction was sent"""

    def __init__(self, verdict: 'ValidationVerdict'):
        self.verdict = verdict
        super().__init__(verdict.message)

    @property
    def reason(self):
        return self.verdict.reason

    @property
    def remaining_seconds(self) -> Optional[int]:
        return self.verdict.remaining_seconds


class GatewayFailure(VaultClientError):
    """A transaction could not be submitted through the ledger gateway"""


class HistoryUnavailable(VaultClientError):
    """One of the event log scans failed, so no history was produced"""
