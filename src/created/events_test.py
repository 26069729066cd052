import unittest
from unittest.mock import Mock

from hamcrest import assert_that, contains_exactly, equal_to, is_, is_not

from created.events import DeviceHandledEvent, DeviceRemovedEvent, EventSource, SessionFailedEvent


class EventSourceTest(unittest.TestCase):

    def test_add_and_fire(self):
        sut = EventSource()
        listener = Mock()
        sut += listener
        sut.fire("event")
        listener.assert_called_once_with("event")

    def test_no_listeners(self):
        EventSource().fire("event")

    def test_fired_in_order_added(self):
        sut = EventSource()
        calls = []
        sut += lambda e: calls.append(("first", e))
        sut += lambda e: calls.append(("second", e))
        sut.fire(1)
        assert_that(calls, contains_exactly(("first", 1), ("second", 1)))


class DeviceEventTest(unittest.TestCase):

    def test_attributes(self):
        sut = DeviceHandledEvent(self, '/dev/ttyUSB0')
        assert_that(sut.source, is_(self))
        assert_that(sut.path, is_('/dev/ttyUSB0'))

    def test_equality(self):
        assert_that(DeviceHandledEvent(self, 'a'), is_(equal_to(DeviceHandledEvent(self, 'a'))))
        assert_that(DeviceHandledEvent(self, 'a'), is_not(equal_to(DeviceHandledEvent(self, 'b'))))
        assert_that(DeviceHandledEvent(self, 'a'), is_not(equal_to(DeviceRemovedEvent(self, 'a'))))

    def test_session_failed_carries_error(self):
        error = Exception("boom")
        sut = SessionFailedEvent(self, 'a', error)
        assert_that(sut.error, is_(error))
        assert_that(repr(sut), is_("SessionFailedEvent('a')"))
