"""Tests for basket change notifications"""
from foodshare.cart import CartChanged, CartStore, ChangeFeed, CollectionChanged, CollectionList
from conftest import make_listing


class TestChangeFeed:
    def test_late_subscriber_gets_latest_event(self):
        feed = ChangeFeed()
        feed.publish(CartChanged(3))

        received = []
        feed.subscribe(received.append)

        assert received == [CartChanged(3)]

    def test_no_replay_without_event(self):
        received = []
        ChangeFeed().subscribe(received.append)
        assert received == []

    def test_unsubscribe(self):
        feed = ChangeFeed()
        received = []
        unsubscribe = feed.subscribe(received.append)
        unsubscribe()
        feed.publish(CartChanged(1))
        assert received == []

    def test_failing_listener_does_not_block_others(self):
        feed = ChangeFeed()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        feed.subscribe(broken)
        feed.subscribe(received.append)
        feed.publish(CartChanged(2))

        assert received == [CartChanged(2)]


class TestCartNotifications:
    def test_subscribe_replays_current_count(self, memory_storage, fixed_clock):
        CartStore(memory_storage, fixed_clock).add(make_listing(1))

        received = []
        CartStore(memory_storage, fixed_clock).subscribe(received.append)

        assert received == [CartChanged(1)]

    def test_add_remove_clear_publish_counts(self, memory_storage, fixed_clock):
        cart = CartStore(memory_storage, fixed_clock)
        received = []
        cart.subscribe(received.append)

        cart.add(make_listing(1))
        cart.add(make_listing(2))
        cart.remove(1)
        cart.clear()

        assert [event.cart_count for event in received] == [0, 1, 2, 1, 0]

    def test_refused_add_publishes_nothing(self, memory_storage, fixed_clock):
        cart = CartStore(memory_storage, fixed_clock)
        cart.add(make_listing(1))
        received = []
        cart.subscribe(received.append)

        cart.add(make_listing(1))

        assert received == [CartChanged(1)]

    def test_set_quantity_publishes_nothing(self, memory_storage, fixed_clock):
        cart = CartStore(memory_storage, fixed_clock)
        cart.add(make_listing(1))
        received = []
        cart.subscribe(received.append)

        cart.set_quantity(1, 5)

        assert received == [CartChanged(1)]


def test_collection_notifications(memory_storage, fixed_clock):
    collection = CollectionList(memory_storage, fixed_clock)
    received = []
    collection.subscribe(received.append)

    collection.add(make_listing(1))
    collection.add(make_listing(1))
    collection.remove(1)

    assert received == [CollectionChanged(0), CollectionChanged(1), CollectionChanged(0)]
