"""
High-level vault client exposed to the presentation layer.

Holds the connected account, the latest VaultSnapshot and history, and the
last status message. Snapshot and history are always replaced wholesale.
"""

import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from .config import VaultConfig
from .exceptions import VaultClientError
from .gateway import LedgerGateway
from .history import HistoryEntry, HistoryReconstructor
from .logger import get_logger
from .state import VaultSnapshot, VaultStateReader
from .submitter import TransactionSubmitter

logger = get_logger(__name__)

NOT_CONNECTED_MESSAGE = "Connect a wallet first."
PENDING_MESSAGE = "A transaction is already pending."


@dataclass(frozen=True)
class OperationOutcome:
    """Result of a deposit or withdraw attempt"""
    ok: bool
    message: str
    transaction_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'success': self.ok,
            'message': self.message,
            'transaction_id': self.transaction_id,
        }


class VaultClient:
    """Vault state, history and transactions for one connected account"""

    def __init__(self, gateway: LedgerGateway, config: VaultConfig,
                 clock: Callable[[], float] = time.time):
        self.config = config
        self.clock = clock
        self.reader = VaultStateReader(gateway, config)
        self.submitter = TransactionSubmitter(gateway, config)
        self.reconstructor = HistoryReconstructor(gateway, config)

        self.account: Optional[str] = None
        self.snapshot = VaultSnapshot.empty()
        self.history: List[HistoryEntry] = []
        self.status_message: Optional[str] = None
        self.history_error: Optional[str] = None
        self.is_loading_history = False
        self.is_submitting = False

    @property
    def is_connected(self) -> bool:
        return self.account is not None

    async def connect(self, account: str) -> None:
        """Switch to `account` and load its state and history"""
        if not account:
            raise ValueError("Account address is required")

        if account != self.account:
            self.account = account
            self.snapshot = VaultSnapshot.empty()
            self.history = []
            self.status_message = None
            self.history_error = None
        logger.info("account_connected", account=account)

        await self.refresh()
        await self.refresh_history()

    def disconnect(self) -> None:
        logger.info("account_disconnected", account=self.account)
        self.account = None
        self.snapshot = VaultSnapshot.empty()
        self.history = []
        self.status_message = None
        self.history_error = None

    async def refresh(self) -> VaultSnapshot:
        """Re-read the vault state of the connected account"""
        account = self.account
        snapshot = await self.reader.snapshot(account)
        # the account may have changed while the reads were pending
        if account == self.account:
            self.snapshot = snapshot
        return snapshot

    async def refresh_history(self) -> List[HistoryEntry]:
        """Rebuild the history; on failure the previous history is kept"""
        account = self.account
        if account is None:
            return self.history

        self.is_loading_history = True
        try:
            entries = await self.reconstructor.reconstruct(account)
        except VaultClientError as e:
            if account == self.account:
                self.history_error = e.message
            return self.history
        finally:
            self.is_loading_history = False

        if account == self.account:
            self.history = entries
            self.history_error = None
        return entries

    async def deposit(self, amount_display: str) -> OperationOutcome:
        return await self._submit("deposit", amount_display)

    async def withdraw(self, amount_display: str) -> OperationOutcome:
        return await self._submit("withdraw", amount_display)

    async def _submit(self, action: str, amount_display: str) -> OperationOutcome:
        if self.is_submitting:
            return self._fail(action, PENDING_MESSAGE)

        self.status_message = None
        if self.account is None:
            return self._fail(action, NOT_CONNECTED_MESSAGE)

        self.is_submitting = True
        try:
            if action == "deposit":
                tx_hash = await self.submitter.submit_deposit(amount_display)
            else:
                # validated against the snapshot as it is right now
                tx_hash = await self.submitter.submit_withdraw(
                    amount_display, self.snapshot, int(self.clock())
                )
        except VaultClientError as e:
            return self._fail(action, e.message)
        finally:
            self.is_submitting = False

        self.status_message = f"{action.capitalize()} transaction sent: {tx_hash}"
        await self.refresh()
        return OperationOutcome(True, self.status_message, tx_hash)

    def _fail(self, action: str, message: str) -> OperationOutcome:
        logger.warning("operation_failed", action=action, account=self.account, error=message)
        self.status_message = message
        return OperationOutcome(False, message)
