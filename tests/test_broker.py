from aircontrib.notification.broker import (
    NotificationBroker,
    NotificationBrokerFactory,
    get_factory,
)


class Recorder:
    def __init__(self):
        self.events = []

    def process_event(self, notifier, event):
        self.events.append((notifier, event))


def test_get_factory_is_singleton():
    factory = get_factory()
    broker = factory.create_broker("singleton-check", Recorder())
    assert get_factory().get_broker("singleton-check") is broker


def test_get_missing_broker():
    factory = NotificationBrokerFactory()
    assert factory.get_broker("none") is None


def test_create_and_get_broker():
    factory = NotificationBrokerFactory()
    listener = Recorder()
    broker = factory.create_broker("b1", listener)
    assert broker.id == "b1"
    assert factory.get_broker("b1") is broker


def test_create_broker_keeps_existing():
    factory = NotificationBrokerFactory()
    first = Recorder()
    broker = factory.create_broker("b1", first)
    again = factory.create_broker("b1", Recorder())
    assert again is broker
    assert again.listener is first


def test_create_brokers_splits_ids():
    factory = NotificationBrokerFactory()
    brokers = factory.create_brokers("a,b,c", Recorder())
    assert [b.id for b in brokers] == ["a", "b", "c"]
    assert all(factory.get_broker(b.id) is b for b in brokers)


def test_send_event_reaches_listener():
    listener = Recorder()
    broker = NotificationBroker("gw", listener)
    event = {"reading": {"value": "1"}}
    broker.send_event(event)
    assert listener.events == [("gw", event)]


def test_start_and_stop():
    broker = NotificationBroker("gw", Recorder())
    broker.start()
    assert broker.running is True
    broker.stop()
    assert broker.running is False