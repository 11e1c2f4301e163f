import threading
import unittest
from unittest.mock import Mock

import timeout_decorator
from hamcrest import assert_that, calling, greater_than_or_equal_to, is_, none, raises

from acn.support.loop import AsyncLoop


class CountingLoop(AsyncLoop):
    """ counts its steps, running `step` on each """

    def __init__(self, step=None):
        super().__init__(name='test-loop', log=Mock())
        self.step = step
        self.count = 0
        self.called = threading.Event()

    def loop(self):
        self.count += 1
        self.called.set()
        if self.step:
            self.step()
        self.stop_event.wait(0.001)


class AsyncLoopTest(unittest.TestCase):

    def test_loop_must_be_implemented(self):
        assert_that(calling(AsyncLoop().loop), raises(NotImplementedError))

    def test_stop_without_start(self):
        sut = AsyncLoop()
        sut.stop()
        assert_that(sut.running(), is_(False))

    @timeout_decorator.timeout(5)
    def test_runs_until_stopped(self):
        sut = CountingLoop()
        sut.start()
        sut.called.wait()
        sut.stop()
        assert_that(sut.count, is_(greater_than_or_equal_to(1)))
        assert_that(sut.background_thread, is_(none()))

    @timeout_decorator.timeout(5)
    def test_exceptions_are_logged_and_loop_continues(self):
        steps = []
        recovered = threading.Event()

        def step():
            steps.append(1)
            if len(steps) == 1:
                raise ValueError('boom')
            recovered.set()

        sut = CountingLoop(step)
        sut.start()
        recovered.wait()
        sut.stop()
        assert_that(len(steps), is_(greater_than_or_equal_to(2)))
        assert_that(sut.logger.exception.call_count, is_(1))

    @timeout_decorator.timeout(5)
    def test_stop_from_loop_thread(self):
        sut = CountingLoop()
        sut.step = sut.stop
        sut.start()
        thread = sut.background_thread
        if thread is not None:
            thread.join()
        assert_that(sut.running(), is_(False))
