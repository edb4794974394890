import pytest

from ripple.core.events import EVENTS
from ripple.core.events import EventCategory
from ripple.core.events import EventSeverity
from ripple.core.events import Events


class Emitter(Events):
    pass


@pytest.fixture
def emitter():
    return Emitter()


@pytest.fixture
def calls():
    return []


@pytest.mark.unit
class TestEvents:
    def test_emit_calls_subscribers_in_order(self, emitter, calls):
        emitter.on("ping", lambda *args: calls.append(("first", args)))
        emitter.on("ping", lambda *args: calls.append(("second", args)))
        assert emitter.emit("ping", 1, 2) is True
        assert calls == [("first", (1, 2)), ("second", (1, 2))]

    def test_emit_without_subscribers(self, emitter):
        assert emitter.emit("nobody") is True

    def test_on_is_chainable(self, emitter, calls):
        result = emitter.on("a", calls.append).on("b", calls.append)
        assert result is emitter

    def test_context_is_passed_first(self, emitter, calls):
        context = object()
        emitter.on(
            "ping", lambda ctx, value: calls.append((ctx, value)), context
        )
        emitter.emit("ping", 7)
        assert calls == [(context, 7)]

    def test_once(self, emitter, calls):
        emitter.once("ping", calls.append)
        emitter.emit("ping", 1)
        emitter.emit("ping", 2)
        assert calls == [1]

    def test_off_callback(self, emitter, calls):
        emitter.on("ping", calls.append)
        emitter.on("pong", calls.append)
        emitter.off(callback=calls.append)
        emitter.emit("ping", 1)
        emitter.emit("pong", 2)
        assert calls == []

    def test_off_event(self, emitter, calls):
        emitter.on("ping", calls.append)
        emitter.on("pong", calls.append)
        emitter.off("ping")
        emitter.emit("ping", 1)
        emitter.emit("pong", 2)
        assert calls == [2]

    def test_off_everything(self, emitter, calls):
        emitter.on("ping", calls.append)
        emitter.on("pong", calls.append)
        assert emitter.off() is emitter
        emitter.emit("ping", 1)
        emitter.emit("pong", 2)
        assert calls == []

    def test_all_receives_event_name(self, emitter, calls):
        emitter.on("all", lambda *args: calls.append(args))
        emitter.emit("change:color", "red", "black", "color")
        assert calls == [("change:color", "red", "black", "color")]

    def test_returns_false_when_a_subscriber_does(self, emitter):
        emitter.on("ping", lambda: False)
        emitter.on("ping", lambda: None)
        assert emitter.emit("ping") is False

    def test_subscribing_during_emit_does_not_affect_it(self, emitter, calls):
        def subscribe():
            calls.append("outer")
            emitter.on("ping", lambda: calls.append("inner"))

        emitter.on("ping", subscribe)
        emitter.emit("ping")
        assert calls == ["outer"]

    def test_subscriber_errors_propagate(self, emitter):
        def explode():
            raise RuntimeError("kaboom")

        emitter.on("ping", explode)
        with pytest.raises(RuntimeError, match="kaboom"):
            emitter.emit("ping")

    def test_callback_must_be_callable(self, emitter):
        with pytest.raises(TypeError, match="must be callable"):
            emitter.on("ping", "not callable")

    def test_trigger_is_emit(self, emitter, calls):
        emitter.on("ping", calls.append)
        emitter.trigger("ping", "pong")
        assert calls == ["pong"]

    def test_instances_do_not_share_subscriptions(self, calls):
        first, second = Emitter(), Emitter()
        first.on("ping", calls.append)
        second.emit("ping", 1)
        assert calls == []


@pytest.mark.unit
@pytest.mark.parametrize("name", sorted(EVENTS))
def test_catalogued_events(name):
    entry = EVENTS[name]
    assert isinstance(entry["category"], EventCategory)
    assert isinstance(entry["severity"], EventSeverity)
    assert entry["description"]
