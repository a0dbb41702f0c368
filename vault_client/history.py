"""
Transaction history rebuilt from the vault's Deposited and Withdrawn logs.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

from . import contract
from .amounts import to_display_form
from .config import VaultConfig
from .exceptions import HistoryUnavailable, MalformedAmount
from .gateway import LedgerGateway, RawLog, failure_message
from .logger import get_logger

logger = get_logger(__name__)

HISTORY_FALLBACK_MESSAGE = "Error loading history"


class EntryKind(Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"


@dataclass(frozen=True)
class HistoryEntry:
    """One deposit or withdrawal of the connected account"""
    kind: EntryKind
    amount: str  # display form
    transaction_id: str
    block_number: int

    def to_dict(self) -> dict:
        return {
            'type': self.kind.value,
            'amount': self.amount,
            'transaction_id': self.transaction_id,
            'block_number': self.block_number,
        }


class HistoryReconstructor:
    """Scans both event streams for an account and merges them by block"""

    def __init__(self, gateway: LedgerGateway, config: VaultConfig):
        self.gateway = gateway
        self.config = config

    async def _scan(self, event_name: str, account: str) -> Sequence[RawLog]:
        return await self.gateway.scan_logs(
            self.config.contract_address,
            contract.event_signature(event_name),
            {'user': account},
            self.config.from_block,
            self.config.to_block,
        )

    def _to_entry(self, kind: EntryKind, log: RawLog) -> HistoryEntry:
        return HistoryEntry(
            kind=kind,
            amount=to_display_form(log.args['amount'], self.config.decimals),
            transaction_id=log.transaction_hash,
            block_number=log.block_number or 0,
        )

    async def reconstruct(self, account: str) -> List[HistoryEntry]:
        """Return the full, block-ordered history of `account`.

        Each call rescans from `config.from_block`, so the result is always a
        complete sequence. Raises HistoryUnavailable if either scan fails.
        """
        scans = [
            asyncio.ensure_future(self._scan(contract.DEPOSITED, account)),
            asyncio.ensure_future(self._scan(contract.WITHDRAWN, account)),
        ]
        try:
            deposit_logs, withdraw_logs = await asyncio.gather(*scans)
        except Exception as e:
            # gather does not stop the other scan on failure
            for scan in scans:
                scan.cancel()
            await asyncio.gather(*scans, return_exceptions=True)
            message = failure_message(e, HISTORY_FALLBACK_MESSAGE)
            logger.error("history_failed", account=account, error=message)
            raise HistoryUnavailable(message) from e

        try:
            entries = [self._to_entry(EntryKind.DEPOSIT, log) for log in deposit_logs]
            entries += [self._to_entry(EntryKind.WITHDRAW, log) for log in withdraw_logs]
        except KeyError as e:
            logger.error("history_failed", account=account, error=f"missing log field {e}")
            raise HistoryUnavailable(f"Malformed event log: missing field {e}") from e
        except MalformedAmount as e:
            logger.error("history_failed", account=account, error=e.message)
            raise HistoryUnavailable(f"Malformed event log: {e.message}") from e

        # sorted() is stable: within a block, deposits stay ahead of withdrawals
        entries = sorted(entries, key=lambda entry: entry.block_number)
        logger.info("history_reconstructed", account=account, entries=len(entries))
        return entries
