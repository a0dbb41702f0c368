"""
Deposit and withdraw submission through the ledger gateway.

The submitter holds no balances of its own. After a successful submission
the caller is expected to refresh the vault state.
"""

from . import contract
from .amounts import to_ledger_form
from .config import VaultConfig
from .exceptions import GatewayFailure, MalformedAmount, WithdrawalRejected
from .gateway import LedgerGateway, failure_message
from .logger import get_logger
from .rules import validate_withdrawal
from .state import VaultSnapshot

logger = get_logger(__name__)

DEPOSIT_FALLBACK_MESSAGE = "Error sending deposit transaction"
WITHDRAW_FALLBACK_MESSAGE = "Error sending withdraw transaction"


class TransactionSubmitter:
    """Sends deposit/withdraw calls on behalf of the connected account"""

    def __init__(self, gateway: LedgerGateway, config: VaultConfig):
        self.gateway = gateway
        self.config = config

    async def submit_deposit(self, amount_display: str) -> str:
        """Send `amount_display` ether to the vault; returns the transaction hash"""
        value = to_ledger_form(amount_display, self.config.decimals)
        if value == 0:
            raise MalformedAmount("Deposit amount must be greater than 0.")

        try:
            tx_hash = await self.gateway.send_transaction(
                self.config.contract_address, contract.DEPOSIT, (), value=value
            )
        except Exception as e:
            message = failure_message(e, DEPOSIT_FALLBACK_MESSAGE)
            logger.error("deposit_failed", amount=amount_display, error=message)
            raise GatewayFailure(message) from e

        logger.info("deposit_sent", amount=amount_display, tx_hash=tx_hash)
        return tx_hash

    async def submit_withdraw(self, amount_display: str, snapshot: VaultSnapshot, now: int) -> str:
        """Validate against `snapshot` and, if allowed, send the withdraw call.

        The snapshot is used as given; nothing is re-fetched. A rejected
        withdrawal raises WithdrawalRejected and never reaches the gateway.
        """
        amount = to_ledger_form(amount_display, self.config.decimals)

        verdict = validate_withdrawal(amount, snapshot, now)
        if not verdict.accepted:
            logger.info("withdraw_rejected", amount=amount_display, reason=verdict.reason.value,
                        remaining_seconds=verdict.remaining_seconds)
            raise WithdrawalRejected(verdict)

        try:
            tx_hash = await self.gateway.send_transaction(
                self.config.contract_address, contract.WITHDRAW, (amount,)
            )
        except Exception as e:
            message = failure_message(e, WITHDRAW_FALLBACK_MESSAGE)
            logger.error("withdraw_failed", amount=amount_display, error=message)
            raise GatewayFailure(message) from e

        logger.info("withdraw_sent", amount=amount_display, tx_hash=tx_hash)
        return tx_hash
