import threading

import pytest

from models import LedgerStore, Occupant, SlotAlreadyBooked
from utils.seed import build_initial_companies


@pytest.fixture
def store():
    store = LedgerStore()
    store.reset(build_initial_companies())
    return store


def test_concurrent_bookers_get_exactly_one_success(store):
    barrier = threading.Barrier(8)
    results = []
    lock = threading.Lock()

    def attempt(n):
        barrier.wait()
        try:
            store.book("c1", "c1-s1", Occupant(name=f"booker-{n}"))
            outcome = "ok"
        except SlotAlreadyBooked:
            outcome = "taken"
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=attempt, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count("ok") == 1
    assert results.count("taken") == 7
    assert store.snapshot.total_booked == 1


def test_failed_operation_keeps_snapshot(store):
    before = store.snapshot
    booked = store.book("c1", "c1-s1", Occupant(name="A"))
    assert booked is store.snapshot
    assert booked is not before

    with pytest.raises(SlotAlreadyBooked):
        store.book("c1", "c1-s1", Occupant(name="B"))
    assert store.snapshot is booked
    assert store.snapshot.get("c1").slots[0].occupant.name == "A"


def test_snapshots_are_history(store):
    s0 = store.snapshot
    s1 = store.book("c2", "c2-s1", Occupant(name="A"))
    s2 = store.cancel("c2", "c2-s1")
    assert s0.total_booked == 0
    assert s1.total_booked == 1
    assert s2.total_booked == 0


def test_upsert_uses_configured_slot_count():
    store = LedgerStore()
    store.slot_count = 5
    _, company = store.upsert({
        "name": "N", "industry": "I", "location": "L",
        "website": "w", "established": "2020", "description": "D",
    })
    assert len(company.slots) == 5


def test_seed_gives_every_company_three_free_slots(store):
    for company in store.snapshot:
        assert len(company.slots) == 3
        assert company.available_slots == 3
