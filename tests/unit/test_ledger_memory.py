"""
Unit tests for the in-memory ledger adapter.

Tests:
- InMemoryLedger satisfies LedgerPort
- Transfers are all-or-nothing
- Failure injection helpers
"""

from escrow_gate.adapters.ledger_memory import InMemoryLedger
from escrow_gate.core.ports.ledger import LedgerPort, TransferResult


class TestInMemoryLedger:
    def test_satisfies_ledger_port_protocol(self) -> None:
        """InMemoryLedger satisfies LedgerPort protocol."""
        ledger: LedgerPort = InMemoryLedger()
        assert isinstance(ledger, InMemoryLedger)

    def test_transfer_moves_value(self) -> None:
        ledger = InMemoryLedger(balances={"alice": 10})

        result = ledger.transfer(4, "alice", "bob")

        assert result == TransferResult(ok=True)
        assert ledger.balance_of("alice") == 6
        assert ledger.balance_of("bob") == 4

    def test_overdraft_moves_nothing(self) -> None:
        ledger = InMemoryLedger(balances={"alice": 3})

        result = ledger.transfer(4, "alice", "bob")

        assert result.ok is False
        assert result.reason is not None
        assert ledger.balance_of("alice") == 3
        assert ledger.balance_of("bob") == 0

    def test_non_positive_amount_rejected(self) -> None:
        ledger = InMemoryLedger(balances={"alice": 3})
        assert ledger.transfer(0, "alice", "bob").ok is False

    def test_mint_credits_account(self) -> None:
        ledger = InMemoryLedger()
        ledger.mint("alice", 5)
        ledger.mint("alice", 5)
        assert ledger.balance_of("alice") == 10


class TestInMemoryLedgerFailures:
    def test_failing_sender(self) -> None:
        ledger = InMemoryLedger(balances={"alice": 10, "carol": 10})
        ledger.fail_transfers_from("alice")

        assert ledger.transfer(1, "alice", "bob").ok is False
        assert ledger.transfer(1, "carol", "bob").ok is True

    def test_fail_all_and_clear(self) -> None:
        ledger = InMemoryLedger(balances={"alice": 10})
        ledger.set_fail_all(True)
        assert ledger.transfer(1, "alice", "bob").ok is False

        ledger.clear_failures()
        assert ledger.transfer(1, "alice", "bob").ok is True
