import asyncio
import threading

from skilltrade.services.realtime import RealtimeHub


def _drain(subscriber):
    items = []
    while not subscriber.queue.empty():
        items.append(subscriber.queue.get_nowait())
    return items


async def _settle():
    # Let callbacks handed over with call_soon_threadsafe run.
    await asyncio.sleep(0.01)


def test_publish_reaches_only_swap_subscribers():
    async def scenario():
        hub = RealtimeHub(queue_size=10)
        alice = hub.register("alice")
        bob = hub.register("bob")
        carol = hub.register("carol")
        hub.subscribe_swap(alice.connection_id, 1)
        hub.subscribe_swap(bob.connection_id, 1)
        hub.subscribe_swap(carol.connection_id, 2)

        delivered = hub.publish({"type": "message", "swapId": 1}, swap_id=1)
        await _settle()

        assert delivered == 2
        assert _drain(alice) == [{"type": "message", "swapId": 1}]
        assert _drain(bob) == [{"type": "message", "swapId": 1}]
        assert _drain(carol) == []

    asyncio.run(scenario())


def test_publish_can_exclude_the_sender_connection():
    async def scenario():
        hub = RealtimeHub()
        alice = hub.register("alice")
        bob = hub.register("bob")
        for sub in (alice, bob):
            hub.subscribe_swap(sub.connection_id, 7)

        hub.publish({"type": "message"}, swap_id=7, exclude=alice.connection_id)
        await _settle()

        assert _drain(alice) == []
        assert len(_drain(bob)) == 1

    asyncio.run(scenario())


def test_publish_to_user_connections_without_subscription():
    async def scenario():
        hub = RealtimeHub()
        phone = hub.register("bob")
        laptop = hub.register("bob")
        alice = hub.register("alice")
        hub.subscribe_swap(alice.connection_id, 3)

        # Both of bob's connections plus alice's swap subscription, once each.
        delivered = hub.publish({"type": "message"}, swap_id=3, user_ids=("bob", "alice"))
        await _settle()

        assert delivered == 3
        assert len(_drain(phone)) == 1
        assert len(_drain(laptop)) == 1
        assert len(_drain(alice)) == 1

    asyncio.run(scenario())


def test_full_queue_drops_events_instead_of_blocking():
    async def scenario():
        hub = RealtimeHub(queue_size=2)
        slow = hub.register("slow")
        hub.subscribe_swap(slow.connection_id, 1)

        for n in range(5):
            hub.publish({"n": n}, swap_id=1)
        await _settle()

        assert slow.dropped == 3
        assert [e["n"] for e in _drain(slow)] == [0, 1]

    asyncio.run(scenario())


def test_unregister_prunes_every_index():
    async def scenario():
        hub = RealtimeHub()
        alice = hub.register("alice")
        hub.subscribe_swap(alice.connection_id, 1)
        hub.subscribe_swap(alice.connection_id, 2)

        hub.unregister(alice.connection_id)
        hub.unregister(alice.connection_id)  # second call is a no-op

        assert hub.connection_count() == 0
        assert hub.swap_subscriber_ids(1) == set()
        assert hub.publish({"type": "message"}, swap_id=1, user_ids=("alice",)) == 0

    asyncio.run(scenario())


def test_unsubscribe_stops_swap_delivery():
    async def scenario():
        hub = RealtimeHub()
        alice = hub.register("alice")
        hub.subscribe_swap(alice.connection_id, 1)
        assert hub.is_subscribed(alice.connection_id, 1)

        hub.unsubscribe_swap(alice.connection_id, 1)
        assert not hub.is_subscribed(alice.connection_id, 1)
        assert hub.publish({"type": "message"}, swap_id=1) == 0

    asyncio.run(scenario())


def test_subscribe_unknown_connection_is_refused():
    hub = RealtimeHub()
    assert hub.subscribe_swap("ghost_1", 1) is False


def test_closed_loop_subscriber_is_pruned_on_publish():
    hub = RealtimeHub()
    loop = asyncio.new_event_loop()
    loop.close()
    gone = hub.register("gone", loop=loop)
    hub.subscribe_swap(gone.connection_id, 1)

    assert hub.publish({"type": "message"}, swap_id=1) == 0
    assert hub.connection_count() == 0


def test_publish_from_worker_thread():
    async def scenario():
        hub = RealtimeHub()
        alice = hub.register("alice")
        hub.subscribe_swap(alice.connection_id, 1)

        worker = threading.Thread(target=hub.publish, args=({"type": "message"},), kwargs={"swap_id": 1})
        worker.start()
        worker.join()

        envelope = await asyncio.wait_for(alice.queue.get(), timeout=1)
        assert envelope == {"type": "message"}

    asyncio.run(scenario())
