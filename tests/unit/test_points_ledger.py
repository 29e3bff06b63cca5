"""Unit tests for PointsLedger."""

import threading

import pytest

from offerflow.interview_prep import ContextStore, InMemorySettingsStore, PointsLedger


@pytest.mark.unit
def test_credit_returns_new_balance(ledger):
    """Test credit adds points and reports the balance."""
    assert ledger.credit(200) == 200
    assert ledger.credit(50) == 250
    assert ledger.balance == 250


@pytest.mark.unit
def test_debit_declined_leaves_balance(ledger):
    """Test a debit larger than the balance changes nothing."""
    ledger.credit(150)

    assert ledger.debit(200) is False
    assert ledger.balance == 150


@pytest.mark.unit
def test_debit_exact_balance(ledger):
    """Test the balance can be spent down to zero."""
    ledger.credit(200)

    assert ledger.debit(200) is True
    assert ledger.balance == 0


@pytest.mark.unit
def test_negative_amounts_rejected(ledger):
    """Test negative credits and debits raise."""
    with pytest.raises(ValueError):
        ledger.credit(-1)
    with pytest.raises(ValueError):
        ledger.debit(-5)
    assert ledger.balance == 0


@pytest.mark.unit
def test_balance_persists_across_instances(store):
    """Test a new ledger over the same store sees the saved balance."""
    PointsLedger(store, initial_balance=0).credit(300)

    reopened = PointsLedger(store, initial_balance=1000)
    assert reopened.balance == 300


@pytest.mark.unit
def test_initial_balance_used_when_nothing_stored(store):
    """Test the configured starting balance applies to a fresh installation."""
    assert PointsLedger(store, initial_balance=500).balance == 500
    assert store.get_points_balance() is None


@pytest.mark.unit
def test_concurrent_debits_never_overdraw():
    """Test parallel debits succeed exactly as many times as the balance allows."""
    ledger = PointsLedger(ContextStore(InMemorySettingsStore()), initial_balance=1000)
    results = []

    def spend():
        results.append(ledger.debit(200))

    threads = [threading.Thread(target=spend) for _ in range(12)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(True) == 5
    assert ledger.balance == 0


@pytest.mark.unit
def test_ledgers_sharing_a_store_see_one_balance(store):
    """Test credits from one ledger are visible to, and kept by, another."""
    cli = PointsLedger(store, initial_balance=0)
    ui = PointsLedger(store, initial_balance=0)

    cli.credit(200)
    assert ui.balance == 200

    ui.credit(10)
    assert store.get_points_balance() == 210
    assert cli.balance == 210


@pytest.mark.unit
def test_ledgers_sharing_a_store_cannot_double_spend(store):
    """Test two sessions cannot each spend the same points."""
    first = PointsLedger(store, initial_balance=0)
    second = PointsLedger(store, initial_balance=0)
    first.credit(200)

    assert first.debit(200) is True
    assert second.debit(200) is False
    assert second.balance == 0
    assert store.get_points_balance() == 0


@pytest.mark.unit
def test_concurrent_debits_across_ledgers():
    """Test parallel debits through separate ledgers never overdraw the shared balance."""
    store = ContextStore(InMemorySettingsStore())
    PointsLedger(store, initial_balance=0).credit(600)
    results = []

    def spend():
        results.append(PointsLedger(store, initial_balance=0).debit(200))

    threads = [threading.Thread(target=spend) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(True) == 3
    assert store.get_points_balance() == 0
