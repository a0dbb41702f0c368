import asyncio
import unittest
from vault_client import contract
from vault_client.config import VaultConfig
from vault_client.gateway import LedgerGatewayError
from vault_client.history import EntryKind
from vault_client.state import VaultSnapshot
from vault_client.vault import VaultClient
from tests.fakes import ALICE, BOB, ONE_ETHER, FakeLedgerGateway

T = 1_700_000_000

class TestVaultClient(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        """Set up test fixtures"""
        self.gateway = FakeLedgerGateway()
        self.gateway.set_account_state(ALICE, balance=ONE_ETHER, last_deposit=T)
        self.gateway.add_log(contract.DEPOSITED, ALICE, ONE_ETHER, "0xd1", 3)
        self.now = T + 10_000
        self.client = VaultClient(self.gateway, VaultConfig.local_dev(), clock=lambda: self.now)
        await self.client.connect(ALICE)

    async def test_connect_loads_state_and_history(self):
        self.assertTrue(self.client.is_connected)
        self.assertEqual(self.client.snapshot, VaultSnapshot(ONE_ETHER, 600, T))
        self.assertEqual(len(self.client.history), 1)
        self.assertEqual(self.client.history[0].kind, EntryKind.DEPOSIT)
        self.assertIsNone(self.client.history_error)

    async def test_connect_requires_account(self):
        with self.assertRaises(ValueError):
            await self.client.connect("")

    async def test_deposit_refreshes_state(self):
        self.gateway.state[(contract.BALANCE_OF, (ALICE,))] = 2 * ONE_ETHER

        outcome = await self.client.deposit("1")

        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.message, f"Deposit transaction sent: {outcome.transaction_id}")
        self.assertEqual(self.client.status_message, outcome.message)
        self.assertEqual(self.client.snapshot.balance, 2 * ONE_ETHER)

    async def test_withdraw(self):
        outcome = await self.client.withdraw("0.5")
        self.assertTrue(outcome.ok)
        self.assertTrue(outcome.message.startswith("Withdraw transaction sent: 0x"))
        self.assertEqual(self.gateway.sent[-1][1:3], (contract.WITHDRAW, (ONE_ETHER // 2,)))

    async def test_locked_withdraw_sets_message(self):
        self.now = T + 100
        outcome = await self.client.withdraw("0.5")
        self.assertFalse(outcome.ok)
        self.assertEqual(self.client.status_message, "Funds are still locked. Try again in ~500 seconds.")
        self.assertEqual(self.gateway.sent, [])

    async def test_withdraw_uses_current_snapshot_without_refetch(self):
        # on-chain balance grew, but the client has not refreshed yet
        self.gateway.state[(contract.BALANCE_OF, (ALICE,))] = 5 * ONE_ETHER
        reads_before = len(self.gateway.reads)

        outcome = await self.client.withdraw("2")

        self.assertFalse(outcome.ok)
        self.assertEqual(outcome.message, "Insufficient vault balance.")
        self.assertEqual(len(self.gateway.reads), reads_before)

    async def test_failure_replaces_previous_message(self):
        await self.client.deposit("1")
        self.gateway.send_error = LedgerGatewayError("boom", short_message="User rejected the request.")

        outcome = await self.client.deposit("1")
        self.assertFalse(outcome.ok)
        self.assertEqual(self.client.status_message, "User rejected the request.")

        await self.client.deposit("not a number")
        self.assertIn("Invalid amount", self.client.status_message)

    async def test_overlong_amount_sets_message(self):
        outcome = await self.client.deposit("1" * 5000)
        self.assertFalse(outcome.ok)
        self.assertIn("exceeds the largest ledger value", self.client.status_message)

        outcome = await self.client.withdraw("9" * 5000)
        self.assertFalse(outcome.ok)
        self.assertEqual(self.gateway.sent, [])

    async def test_failed_submission_does_not_refresh(self):
        self.gateway.send_error = LedgerGatewayError("reverted")
        reads_before = len(self.gateway.reads)
        await self.client.deposit("1")
        self.assertEqual(len(self.gateway.reads), reads_before)

    async def test_only_one_submission_at_a_time(self):
        release = asyncio.Event()
        original = self.gateway.send_transaction

        async def slow_send(*args, **kwargs):
            await release.wait()
            return await original(*args, **kwargs)

        self.gateway.send_transaction = slow_send
        first = asyncio.create_task(self.client.deposit("1"))
        await asyncio.sleep(0)

        second = await self.client.deposit("1")
        self.assertFalse(second.ok)
        self.assertEqual(second.message, "A transaction is already pending.")
        self.assertEqual(self.client.status_message, "A transaction is already pending.")

        release.set()
        self.assertTrue((await first).ok)
        self.assertFalse(self.client.is_submitting)

    async def test_history_failure_keeps_previous_history(self):
        previous = list(self.client.history)
        self.gateway.scan_errors[contract.WITHDRAWN] = LedgerGatewayError("rpc down")

        await self.client.refresh_history()

        self.assertEqual(self.client.history, previous)
        self.assertEqual(self.client.history_error, "rpc down")
        self.assertFalse(self.client.is_loading_history)

        del self.gateway.scan_errors[contract.WITHDRAWN]
        self.gateway.add_log(contract.WITHDRAWN, ALICE, ONE_ETHER, "0xw1", 4)
        await self.client.refresh_history()
        self.assertIsNone(self.client.history_error)
        self.assertEqual(len(self.client.history), 2)

    async def test_switching_account_resets_state(self):
        self.gateway.set_account_state(BOB, balance=0, last_deposit=0)
        await self.client.connect(BOB)
        self.assertEqual(self.client.snapshot, VaultSnapshot(0, 600, 0))
        self.assertEqual(self.client.history, [])

    async def test_disconnect(self):
        self.client.disconnect()
        self.assertFalse(self.client.is_connected)
        self.assertEqual(self.client.snapshot, VaultSnapshot.empty())

        outcome = await self.client.withdraw("0.1")
        self.assertFalse(outcome.ok)
        self.assertEqual(outcome.message, "Connect a wallet first.")

if __name__ == '__main__':
    unittest.main()
