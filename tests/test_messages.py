import pytest

from tilesmith.messages import MessageManager, MessageManagerError, NotifyEvent


def test_get_returns_newest_first():
    manager = MessageManager(30)
    for text in ["one", "two", "three"]:
        manager.add(text)
    assert manager.get() == ["three", "two", "one"]
    assert len(manager) == 3


def test_get_with_count():
    manager = MessageManager(30)
    for text in ["one", "two", "three"]:
        manager.add(text)
    assert manager.get(2) == ["three", "two"]
    assert manager.get(10) == ["three", "two", "one"]


def test_last():
    manager = MessageManager(30)
    manager.add("a")
    manager.add("b")
    assert manager.last() == "b"


def test_last_on_empty_raises():
    with pytest.raises(MessageManagerError):
        MessageManager(30).last()


def test_tick_expires_old_messages_and_notifies():
    events = []
    manager = MessageManager(1.0)
    manager.add("old")
    manager.subscribe("k", events.append)
    manager.tick(0.6)
    manager.add("new")
    manager.tick(0.6)
    assert manager.get() == ["new"]
    assert events == [NotifyEvent.ADD, NotifyEvent.EXPIRE]


def test_tick_keeps_message_at_exact_limit():
    events = []
    manager = MessageManager(1.0)
    manager.add("m")
    manager.subscribe("k", events.append)
    manager.tick(1.0)
    assert manager.get() == ["m"]
    assert events == []


def test_clear_notifies():
    events = []
    manager = MessageManager(5)
    manager.subscribe("k", events.append)
    manager.add("m")
    manager.clear()
    assert len(manager) == 0
    assert events == [NotifyEvent.ADD, NotifyEvent.CLEAR]


def test_subscribe_twice_raises():
    manager = MessageManager(5)
    manager.subscribe("k", lambda e: None)
    with pytest.raises(MessageManagerError):
        manager.subscribe("k", lambda e: None)


def test_unsubscribe_unknown_raises():
    with pytest.raises(MessageManagerError):
        MessageManager(5).unsubscribe("nobody")


def test_unsubscribed_callback_not_called():
    events = []
    manager = MessageManager(5)
    manager.subscribe("k", events.append)
    manager.unsubscribe("k")
    manager.add("m")
    assert events == []


def test_subscribers_notified_in_key_order():
    order = []
    manager = MessageManager(5)
    manager.subscribe("b", lambda e: order.append("b"))
    manager.subscribe("a", lambda e: order.append("a"))
    manager.add("m")
    assert order == ["a", "b"]