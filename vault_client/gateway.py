"""
Ledger gateway capability consumed by the vault client.

The transport (JSON-RPC node, wallet provider, ...) lives outside this
package; it only has to implement LedgerGateway.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Union


@dataclass(frozen=True)
class RawLog:
    """Decoded event log as returned by a log scan"""
    args: Dict[str, Any]
    transaction_hash: str
    block_number: Optional[int] = None  # None while the log is pending


class LedgerGatewayError(Exception):
    """Structured failure raised by gateway implementations"""

    def __init__(self, message: str, short_message: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.short_message = short_message


class LedgerGateway(ABC):
    """Read, scan and submit operations against a remote ledger"""

    @abstractmethod
    async def read_state(self, contract_address: str, function_name: str,
                         args: Sequence[Any] = ()) -> Any:
        """Call a read-only contract function and return its decoded value"""

    @abstractmethod
    async def scan_logs(self, contract_address: str, event_signature: str,
                        filters: Dict[str, Any], from_block: int,
                        to_block: Union[int, str]) -> Sequence[RawLog]:
        """Return the matching event logs in ledger order"""

    @abstractmethod
    async def send_transaction(self, contract_address: str, function_name: str,
                               args: Sequence[Any] = (),
                               value: Optional[int] = None) -> str:
        """Submit a state-changing call and return its transaction hash"""


def failure_message(error: BaseException, fallback: str) -> str:
    """Pick the most useful human text out of a gateway error"""
    for attr in ('short_message', 'message'):
        text = getattr(error, attr, None)
        if isinstance(text, str) and text.strip():
            return text

    text = str(error)
    return text if text.strip() else fallback
