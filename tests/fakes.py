"""In-memory ledger gateway used by the tests"""

from vault_client import contract
from vault_client.gateway import LedgerGateway, LedgerGatewayError, RawLog

ALICE = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
BOB = "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"

ONE_ETHER = 10 ** 18


class FakeLedgerGateway(LedgerGateway):
    """Serves canned state and logs, records every call"""

    def __init__(self):
        self.state = {}        # (function_name, args) -> value
        self.logs = {}         # event name -> list of RawLog
        self.read_errors = {}  # function_name -> exception
        self.scan_errors = {}  # event name -> exception
        self.send_error = None
        self.reads = []
        self.scans = []
        self.sent = []
        self._tx_counter = 0

    def set_account_state(self, account, balance, last_deposit, lock_period=600):
        self.state[(contract.BALANCE_OF, (account,))] = balance
        self.state[(contract.LAST_DEPOSIT_TIME, (account,))] = last_deposit
        self.state[(contract.LOCK_PERIOD, ())] = lock_period

    def add_log(self, event_name, account, amount, tx_hash, block_number):
        self.logs.setdefault(event_name, []).append(
            RawLog({'user': account, 'amount': amount}, tx_hash, block_number)
        )

    async def read_state(self, contract_address, function_name, args=()):
        self.reads.append((function_name, tuple(args)))
        if function_name in self.read_errors:
            raise self.read_errors[function_name]
        try:
            return self.state[(function_name, tuple(args))]
        except KeyError:
            raise LedgerGatewayError(f"execution reverted: {function_name}")

    async def scan_logs(self, contract_address, event_signature, filters, from_block, to_block):
        name = event_signature.split()[1].split("(")[0]
        self.scans.append((name, dict(filters), from_block, to_block))
        if name in self.scan_errors:
            raise self.scan_errors[name]
        return [log for log in self.logs.get(name, []) if log.args.get('user') == filters.get('user')]

    async def send_transaction(self, contract_address, function_name, args=(), value=None):
        self.sent.append((contract_address, function_name, tuple(args), value))
        if self.send_error is not None:
            raise self.send_error
        self._tx_counter += 1
        return "0x" + format(self._tx_counter, "064x")
