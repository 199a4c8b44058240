import pytest

from apps.variations.services import DeletionLedger


def test_record_is_idempotent():
    ledger = DeletionLedger()

    assert ledger.record_deleted(42) is True
    assert ledger.record_deleted(7) is True
    assert ledger.record_deleted(42) is False

    assert ledger.snapshot() == [42, 7]
    assert 42 in ledger
    assert len(ledger) == 2


def test_snapshot_does_not_clear():
    ledger = DeletionLedger()
    ledger.record_deleted(1)

    ledger.snapshot()

    assert list(ledger) == [1]


def test_reset():
    ledger = DeletionLedger()
    ledger.record_deleted(1)
    ledger.reset()
    assert ledger.snapshot() == []


def test_unsaved_variations_cannot_be_ledgered():
    with pytest.raises(ValueError):
        DeletionLedger().record_deleted(None)
