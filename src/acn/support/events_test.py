import unittest
from unittest.mock import Mock

from hamcrest import assert_that, empty, is_

from acn.support.events import EventSource


class EventsTest(unittest.TestCase):

    def test_handlers_empty(self):
        sut = EventSource()
        assert_that(sut.handlers(), is_(empty()))

    def test_no_listeners(self):
        sut = EventSource()
        sut.fire(1)

    def test_manage_handlers(self):
        sut = EventSource()
        m1 = Mock()
        sut.add(m1)
        assert_that(sut.handlers(), is_((m1,)))

        sut.remove(m1)
        assert_that(sut.handlers(), is_(()))

        sut.remove(m1)
        assert_that(sut.handlers(), is_(()))

        sut += m1
        assert_that(sut.handlers(), is_((m1,)))

        sut -= m1
        assert_that(sut.handlers(), is_(()))

    def test_adding_twice_registers_once(self):
        sut = EventSource()
        handler = Mock()
        sut.add(handler).add(handler)
        sut.fire('event')
        handler.assert_called_once_with('event')

    def test_listeners(self):
        sut = EventSource()
        l1 = Mock()
        l2 = Mock()
        sut += l1
        sut += l2
        sut.fire(1, v="hey")
        l1.assert_called_once_with(1, v="hey")
        l2.assert_called_once_with(1, v="hey")

    def test_handler_may_unsubscribe_while_firing(self):
        sut = EventSource()
        later = Mock()

        def once(event):
            sut.remove(once)

        sut.add(once)
        sut.add(later)
        sut.fire(1)
        later.assert_called_once_with(1)
        assert_that(sut.handlers(), is_((later,)))
