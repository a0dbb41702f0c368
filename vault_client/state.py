"""
Vault state reader: balance, lock period and last deposit time.
"""

from dataclasses import dataclass
from typing import Optional

from . import contract
from .amounts import to_display_form
from .config import VaultConfig
from .gateway import LedgerGateway
from .logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class VaultSnapshot:
    """Latest known vault state for one account; None means unknown"""
    balance: Optional[int] = None  # ledger units
    lock_period_seconds: Optional[int] = None
    last_deposit_timestamp: Optional[int] = None  # unix seconds, 0 = never deposited

    @classmethod
    def empty(cls) -> 'VaultSnapshot':
        return cls()

    @property
    def is_complete(self) -> bool:
        return None not in (self.balance, self.lock_period_seconds, self.last_deposit_timestamp)

    @property
    def unlock_time(self) -> Optional[int]:
        """Unix time after which withdrawals are allowed, if a lock applies"""
        if not self.last_deposit_timestamp or self.lock_period_seconds is None:
            return None
        return self.last_deposit_timestamp + self.lock_period_seconds

    def balance_display(self, decimals: int = 18) -> str:
        if self.balance is None:
            return "0.0"
        return to_display_form(self.balance, decimals)


class VaultStateReader:
    """Idempotent reads of the vault state through the ledger gateway"""

    def __init__(self, gateway: LedgerGateway, config: VaultConfig):
        self.gateway = gateway
        self.config = config
        self._lock_period: Optional[int] = None

    async def _read_uint(self, function_name: str, *args) -> Optional[int]:
        try:
            value = await self.gateway.read_state(self.config.contract_address, function_name, args)
            return _as_uint(value)
        except Exception as e:
            logger.warning("state_query_failed", function=function_name, error=str(e))
            return None

    async def get_balance(self, account: Optional[str]) -> Optional[int]:
        """Vault balance of account in ledger units, None until known"""
        if not account:
            return None
        return await self._read_uint(contract.BALANCE_OF, account)

    async def get_lock_period(self) -> Optional[int]:
        """Global lock period in seconds, fetched once per session"""
        if self._lock_period is None:
            self._lock_period = await self._read_uint(contract.LOCK_PERIOD)
        return self._lock_period

    async def get_last_deposit_timestamp(self, account: Optional[str]) -> Optional[int]:
        if not account:
            return None
        return await self._read_uint(contract.LAST_DEPOSIT_TIME, account)

    async def snapshot(self, account: Optional[str]) -> VaultSnapshot:
        """Fetch a complete new snapshot; each field degrades to None on its own"""
        balance = await self.get_balance(account)
        lock_period = await self.get_lock_period()
        last_deposit = await self.get_last_deposit_timestamp(account)
        return VaultSnapshot(balance, lock_period, last_deposit)


def _as_uint(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an unsigned integer, got {value!r}")
    if value < 0:
        raise ValueError(f"expected an unsigned integer, got {value}")
    return value
