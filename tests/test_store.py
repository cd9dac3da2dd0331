"""Tests for the in-memory donation store."""

from __future__ import annotations

import threading

import pytest
from pydantic import ValidationError

from donations.app.store import Donation, DonationStore


def _donation(donation_id: str, name: str = "Alice", amount: int = 1000) -> Donation:
    return Donation(id=donation_id, donor_name=name, amount=amount)


class TestDonationModel:
    def test_frozen(self):
        donation = _donation("a")
        with pytest.raises(ValidationError):
            donation.amount = 5

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            Donation(id="a", amount=-1)

    def test_integral_amount_stays_int(self):
        assert Donation(id="a", amount=5000).model_dump()["amount"] == 5000
        assert isinstance(Donation(id="a", amount=5000).amount, int)


class TestAdd:
    def test_fresh_donation_stored(self):
        store = DonationStore()
        assert store.add(_donation("a", amount=5000)) is True
        assert len(store) == 1
        assert store.is_duplicate("a")
        assert store.total_for("Alice") == 5000

    def test_duplicate_not_stored(self):
        store = DonationStore()
        store.add(_donation("a", amount=5000))
        assert store.add(_donation("a", amount=9999)) is False
        assert len(store) == 1
        assert store.total_for("Alice") == 5000

    def test_totals_accumulate_per_donor(self):
        store = DonationStore()
        store.add(_donation("a", "Alice", 1000))
        store.add(_donation("b", "Alice", 2500))
        store.add(_donation("c", "Bob", 700))
        assert store.total_for("Alice") == 3500
        assert store.total_for("Bob") == 700
        assert store.total_for("Nobody") == 0
        assert store.donor_count == 2

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            DonationStore(capacity=0)


class TestEviction:
    def test_oldest_evicted_at_capacity(self):
        store = DonationStore(capacity=100)
        for i in range(101):
            store.add(_donation(f"d{i}", amount=10))

        assert len(store) == 100
        ids = [d.id for d in store.latest(100)]
        assert "d0" not in ids
        assert ids[0] == "d100"
        assert ids[-1] == "d1"

    def test_evicted_id_can_be_stored_again(self):
        store = DonationStore(capacity=2)
        store.add(_donation("a"))
        store.add(_donation("b"))
        store.add(_donation("c"))

        assert not store.is_duplicate("a")
        assert store.add(_donation("a")) is True

    def test_totals_survive_eviction(self):
        store = DonationStore(capacity=1)
        store.add(_donation("a", "Alice", 1000))
        store.add(_donation("b", "Bob", 500))
        assert store.total_for("Alice") == 1000
        assert len(store) == 1


class TestQueries:
    def test_latest_newest_first(self):
        store = DonationStore()
        for i in range(15):
            store.add(_donation(f"d{i}"))
        latest = store.latest(10)
        assert [d.id for d in latest] == [f"d{i}" for i in range(14, 4, -1)]

    def test_latest_fewer_than_limit(self):
        store = DonationStore()
        store.add(_donation("only"))
        assert [d.id for d in store.latest(10)] == ["only"]

    def test_latest_zero_limit(self):
        store = DonationStore()
        store.add(_donation("a"))
        assert store.latest(0) == []

    def test_top_donators_sorted(self):
        store = DonationStore()
        store.add(_donation("a", "Alice", 1000))
        store.add(_donation("b", "Bob", 5000))
        store.add(_donation("c", "Cici", 3000))
        store.add(_donation("d", "Alice", 4500))
        assert store.top_donators() == [("Alice", 5500), ("Bob", 5000), ("Cici", 3000)]
        assert store.top_donators(2) == [("Alice", 5500), ("Bob", 5000)]

    def test_top_donators_ties_keep_first_seen_order(self):
        store = DonationStore()
        store.add(_donation("a", "Zed", 100))
        store.add(_donation("b", "Amy", 100))
        assert store.top_donators() == [("Zed", 100), ("Amy", 100)]


class TestClear:
    def test_clear_resets_everything(self):
        store = DonationStore()
        store.add(_donation("a", "Alice", 1000))
        store.clear()
        assert len(store) == 0
        assert store.top_donators() == []
        assert not store.is_duplicate("a")
        assert store.add(_donation("a")) is True


class TestThreadSafety:
    def test_concurrent_adds_keep_store_consistent(self):
        store = DonationStore(capacity=50)

        def worker(offset: int) -> None:
            for i in range(200):
                store.add(_donation(f"t{offset}-{i}", name=f"donor{offset}", amount=1))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 50
        assert sum(amount for _, amount in store.top_donators()) == 800
        latest_ids = {d.id for d in store.latest(50)}
        assert all(store.is_duplicate(i) for i in latest_ids)
