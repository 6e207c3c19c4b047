"""
Tests for the background task queue.
"""

import threading
from unittest.mock import Mock

from bookmaru.services.task_queue import TaskQueue


class TestEagerQueue:

    def test_runs_inline(self):
        queue = TaskQueue(eager=True)
        func = Mock(__name__='task')

        queue.enqueue(func, 1, key='value')

        func.assert_called_once_with(1, key='value')
        assert queue.completed == 1

    def test_retries_then_succeeds(self):
        queue = TaskQueue(eager=True, max_retries=2, retry_delay=0)
        func = Mock(__name__='flaky', side_effect=[RuntimeError('1'), RuntimeError('2'), None])

        queue.enqueue(func)

        assert func.call_count == 3
        assert queue.completed == 1
        assert queue.dropped == 0

    def test_drops_after_last_attempt(self):
        queue = TaskQueue(eager=True, max_retries=1, retry_delay=0)
        func = Mock(__name__='broken', side_effect=RuntimeError('always'))

        queue.enqueue(func)

        assert func.call_count == 2
        assert queue.dropped == 1
        assert queue.completed == 0

    def test_negative_retries_means_one_attempt(self):
        queue = TaskQueue(eager=True, max_retries=-3, retry_delay=0)
        func = Mock(__name__='broken', side_effect=RuntimeError('always'))

        queue.enqueue(func)

        assert func.call_count == 1


class TestThreadedQueue:

    def test_runs_on_worker_thread(self):
        queue = TaskQueue(retry_delay=0)
        threads = []

        queue.enqueue(lambda: threads.append(threading.current_thread().name))
        queue.join()
        queue.shutdown()

        assert threads == ['bookmaru-task-queue']
        assert queue.completed == 1

    def test_enqueue_does_not_wait_for_the_task(self):
        queue = TaskQueue(retry_delay=0)
        release = threading.Event()
        done = []

        def slow():
            release.wait(timeout=5)
            done.append(True)

        queue.enqueue(slow)
        assert done == []

        release.set()
        queue.join()
        queue.shutdown()
        assert done == [True]

    def test_failures_do_not_stop_the_worker(self):
        queue = TaskQueue(max_retries=0, retry_delay=0)
        after = Mock(__name__='after')

        queue.enqueue(Mock(__name__='broken', side_effect=RuntimeError('boom')))
        queue.enqueue(after)
        queue.join()
        queue.shutdown()

        after.assert_called_once()
        assert queue.dropped == 1
        assert queue.completed == 1

    def test_shutdown_without_worker_is_a_no_op(self):
        TaskQueue().shutdown()
