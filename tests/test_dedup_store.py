import threading

import pytest

from invoice_reconstruction.records import (
    HeaderField,
    InvoiceRecord,
    InvoiceStore,
    assign_key,
    base_key,
)
from invoice_reconstruction.utils.exceptions import RecordNotFoundError


def _record(account="X", period="Y"):
    return InvoiceRecord(headers=[
        HeaderField("Account Number", account),
        HeaderField("Service Period", period),
    ])


def test_assign_key_suffixes():
    assert base_key("X", "Y") == "X_Y"
    assert assign_key("X", "Y", set()) == "X_Y"
    assert assign_key("X", "Y", {"X_Y"}) == "X_Y_2"
    assert assign_key("X", "Y", {"X_Y", "X_Y_2"}) == "X_Y_3"
    assert assign_key("X", "Y", {"X_Y_2"}) == "X_Y"


def test_store_keeps_every_duplicate_in_order():
    store = InvoiceStore()
    records = [_record(), _record(), _record(), _record("X", "Z")]
    assert store.add_all(records) == ["X_Y", "X_Y_2", "X_Y_3", "X_Z"]
    assert store.keys() == ["X_Y", "X_Y_2", "X_Y_3", "X_Z"]
    assert [record for _, record in store.snapshot()] == records
    assert store.get("X_Y_2") is records[1]


def test_store_require_and_clear():
    store = InvoiceStore()
    key = store.add(_record())
    assert key in store
    assert store.require(key).account_number == "X"

    store.clear()
    assert len(store) == 0
    assert store.get(key) is None
    with pytest.raises(RecordNotFoundError) as excinfo:
        store.require(key)
    assert excinfo.value.message == "No invoice record stored under key: 'X_Y'"


def test_store_keys_restart_after_clear():
    store = InvoiceStore()
    store.add(_record())
    store.clear()
    assert store.add(_record()) == "X_Y"


def test_concurrent_adds_get_distinct_keys():
    store = InvoiceStore()
    barrier = threading.Barrier(8)
    keys = []
    keys_lock = threading.Lock()

    def worker():
        barrier.wait()
        for _ in range(25):
            key = store.add(_record())
            with keys_lock:
                keys.append(key)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(keys) == 200
    assert len(set(keys)) == 200
    assert len(store) == 200
    assert set(store.keys()) == {"X_Y"} | {f"X_Y_{n}" for n in range(2, 201)}


def test_store_serializes_in_insertion_order():
    store = InvoiceStore()
    store.add(_record("B", "1"))
    store.add(_record("A", "1"))
    assert list(store.to_dict()) == ["B_1", "A_1"]
    assert store.to_dict()["A_1"]["headers"][0] == {"name": "Account Number", "value": "A"}
