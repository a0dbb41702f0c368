"""
Simple Vault client - reads vault state, gates withdrawals on the time lock,
submits transactions and rebuilds the deposit/withdraw history from event logs
"""

from .amounts import to_display_form, to_ledger_form
from .config import VaultConfig
from .exceptions import (
    ContractInterfaceError,
    GatewayFailure,
    HistoryUnavailable,
    MalformedAmount,
    VaultClientError,
    WithdrawalRejected,
)
from .gateway import LedgerGateway, LedgerGatewayError, RawLog
from .history import EntryKind, HistoryEntry, HistoryReconstructor
from .rules import RejectReason, ValidationVerdict, validate_withdrawal
from .state import VaultSnapshot, VaultStateReader
from .submitter import TransactionSubmitter
from .vault import OperationOutcome, VaultClient

__version__ = "0.1.0"
__all__ = [
    "VaultClient",
    "OperationOutcome",
    "VaultConfig",
    "LedgerGateway",
    "LedgerGatewayError",
    "RawLog",
    "VaultSnapshot",
    "VaultStateReader",
    "TransactionSubmitter",
    "HistoryReconstructor",
    "HistoryEntry",
    "EntryKind",
    "validate_withdrawal",
    "ValidationVerdict",
    "RejectReason",
    "to_ledger_form",
    "to_display_form",
    "VaultClientError",
    "MalformedAmount",
    "WithdrawalRejected",
    "GatewayFailure",
    "HistoryUnavailable",
    "ContractInterfaceError",
]
