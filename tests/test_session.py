import itertools
import re
from types import SimpleNamespace

import pytest

from receipts import session as session_module
from receipts.data import ReceiptMode
from receipts.session import MAX_OPEN_SESSIONS, ReceiptSession, ReceiptSessionStore, SESSION_KEY
from receipts.sizes import ReceiptSize


@pytest.fixture
def receipt_session(jane_payment, school_info):
    return ReceiptSession.open(jane_payment, school_info)


def test_open_seeds_defaults(receipt_session):
    assert re.fullmatch(r'RCP-\d{6}-\d{4}', receipt_session.receipt_number)
    assert receipt_session.mode == ReceiptMode.INDIVIDUAL
    assert receipt_session.size == ReceiptSize.A5
    assert receipt_session.selected_ids == [1]
    assert receipt_session.fields.amount_in_words == 'Fifteen Thousand'


def test_open_with_signature_label(jane_payment, school_info):
    receipt_session = ReceiptSession.open(jane_payment, school_info, size='A7', signature_label='Bursar')
    assert receipt_session.fields.signature_label == 'Bursar'
    assert receipt_session.size == ReceiptSize.A7


def test_payer_cannot_be_toggled_off(receipt_session):
    assert receipt_session.toggle_student(1) is False
    assert receipt_session.selected_ids == [1]


def test_toggle_sibling(receipt_session):
    assert receipt_session.toggle_student(2)
    assert receipt_session.selected_ids == [1, 2]
    assert receipt_session.toggle_student(2)
    assert receipt_session.selected_ids == [1]


def test_update_keeps_unset_fields(receipt_session):
    receipt_session.update(mode='family', size='A6', notes='Paid in full')
    assert receipt_session.mode == ReceiptMode.FAMILY
    assert receipt_session.size == ReceiptSize.A6
    assert receipt_session.fields.notes == 'Paid in full'
    assert receipt_session.fields.amount_in_words == 'Fifteen Thousand'


def test_update_rejects_bad_size(receipt_session):
    with pytest.raises(ValueError):
        receipt_session.update(size='B5')


def test_round_trip_keeps_receipt_number(receipt_session):
    receipt_session.toggle_student(3)
    restored = ReceiptSession.from_dict(receipt_session.to_dict())
    assert restored.receipt_number == receipt_session.receipt_number
    assert restored.selected_ids == [1, 3]
    assert restored.fields == receipt_session.fields
    assert restored.school == receipt_session.school


def test_store(receipt_session):
    storage = {}
    store = ReceiptSessionStore(storage)

    store.save(receipt_session)
    assert receipt_session.token in storage[SESSION_KEY]
    assert store.get(receipt_session.token).receipt_number == receipt_session.receipt_number

    assert store.discard(receipt_session.token)
    assert store.get(receipt_session.token) is None
    assert not store.discard(receipt_session.token)


@pytest.fixture
def ticking_clock(monkeypatch):
    monkeypatch.setattr(session_module, 'time', SimpleNamespace(time=itertools.count().__next__))


def test_store_keeps_at_most_the_limit(jane_payment, school_info, ticking_clock):
    storage = {}
    store = ReceiptSessionStore(storage, limit=3)
    opened = [ReceiptSession.open(jane_payment, school_info) for _ in range(5)]

    for receipt_session in opened:
        store.save(receipt_session)

    assert set(storage[SESSION_KEY]) == {s.token for s in opened[2:]}


def test_saving_refreshes_a_session(jane_payment, school_info, ticking_clock):
    storage = {}
    store = ReceiptSessionStore(storage, limit=2)
    first, second, third = [ReceiptSession.open(jane_payment, school_info) for _ in range(3)]

    store.save(first)
    store.save(second)
    store.save(first)
    store.save(third)

    assert set(storage[SESSION_KEY]) == {first.token, third.token}


def test_add_replaces_the_open_session_for_a_payment(jane_payment, school_info):
    storage = {}
    store = ReceiptSessionStore(storage)
    old = ReceiptSession.open(jane_payment, school_info)
    new = ReceiptSession.open(jane_payment, school_info)

    store.add(old)
    store.add(new)

    assert list(storage[SESSION_KEY]) == [new.token]


def test_default_limit():
    assert ReceiptSessionStore({}).limit == MAX_OPEN_SESSIONS == 10
