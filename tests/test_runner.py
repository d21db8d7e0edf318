"""Tests for the task runners."""

from __future__ import annotations

import threading

import pytest

from syscleaner.core import runner as runner_module
from syscleaner.core.runner import InlineRunner, TaskRunner, make_runner


class TestTaskRunner:
    def test_outstanding_drops_to_zero(self):
        release = threading.Event()
        runner = TaskRunner(max_workers=2)
        futures = [runner.submit(release.wait, 5) for _ in range(3)]
        assert runner.outstanding() == 3
        release.set()
        for future in futures:
            future.result(timeout=5)
        # done callbacks may still be running until the pool is joined
        runner.shutdown()
        assert runner.outstanding() == 0

    def test_tasks_overlap(self):
        barrier = threading.Barrier(2, timeout=5)
        with TaskRunner(max_workers=2) as runner:
            futures = [runner.submit(barrier.wait) for _ in range(2)]
            # both tasks must be running at once to pass the barrier
            assert sorted(f.result(timeout=5) for f in futures) == [0, 1]

    def test_returns_results(self):
        with TaskRunner(max_workers=2) as runner:
            assert runner.submit(sum, [1, 2, 3]).result(timeout=5) == 6

    def test_default_workers(self, monkeypatch):
        monkeypatch.setattr(runner_module.os, "cpu_count", lambda: 16)
        with TaskRunner() as runner:
            assert runner.max_workers == runner_module.DEFAULT_MAX_WORKERS


class TestInlineRunner:
    def test_runs_immediately(self):
        calls = []
        future = InlineRunner().submit(calls.append, 1)
        assert future.done()
        assert calls == [1]

    def test_exception_stored_on_future(self):
        def boom():
            raise ValueError("boom")

        future = InlineRunner().submit(boom)
        with pytest.raises(ValueError, match="boom"):
            future.result()

    def test_nothing_outstanding(self):
        assert InlineRunner().outstanding() == 0


class TestMakeRunner:
    def test_single_worker_is_inline(self):
        assert isinstance(make_runner(1), InlineRunner)

    def test_single_core_is_inline(self, monkeypatch):
        monkeypatch.setattr(runner_module.os, "cpu_count", lambda: 1)
        assert isinstance(make_runner(), InlineRunner)

    def test_multi_core_uses_pool(self, monkeypatch):
        monkeypatch.setattr(runner_module.os, "cpu_count", lambda: 8)
        runner = make_runner()
        try:
            assert isinstance(runner, TaskRunner)
        finally:
            runner.shutdown()

    def test_explicit_workers(self):
        runner = make_runner(3)
        try:
            assert isinstance(runner, TaskRunner)
            assert runner.max_workers == 3
        finally:
            runner.shutdown()
