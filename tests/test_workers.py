"""Tests for wavecode.workers base and render workers."""

import pytest

from wavecode.core.batch import BatchRenderResult
from wavecode.workers.base_worker import BaseWorker
from wavecode.workers.render_worker import RenderWorker


class TestBaseWorker:
    """Tests for the BaseWorker class."""

    def test_base_worker_creation(self):
        """Test BaseWorker can be instantiated."""
        worker = BaseWorker()
        assert worker is not None
        assert worker._cancel_event.is_set() is False

    def test_base_worker_cancel(self):
        """Test cancel sets the event."""
        worker = BaseWorker()
        worker.cancel()
        assert worker._cancel_event.is_set() is True
        assert worker._is_cancelled is True

    def test_base_worker_signals_exist(self):
        """Test all expected signals are defined."""
        worker = BaseWorker()
        for name in ("started", "progress", "finished", "error", "cancelled"):
            assert hasattr(worker, name)

    def test_base_worker_work_not_implemented(self):
        """Test _work() must be overridden."""
        worker = BaseWorker()
        with pytest.raises(NotImplementedError):
            worker._work()

    def test_base_worker_run_reports_missing_work_as_error(self):
        """Test run() turns a failing job into one error signal."""
        worker = BaseWorker()
        started = []
        errors = []
        finished = []
        worker.started.connect(lambda: started.append(True))
        worker.error.connect(errors.append)
        worker.finished.connect(finished.append)

        worker.run()

        assert started == [True]
        assert len(errors) == 1
        assert "NotImplementedError" in errors[0]
        assert finished == []

    def test_base_worker_run_emits_work_result(self):
        """Test run() emits finished with whatever _work returns."""

        class EchoWorker(BaseWorker):
            def _work(self):
                return {"done": 3}

        worker = EchoWorker()
        finished = []
        worker.finished.connect(finished.append)

        worker.run()

        assert finished == [{"done": 3}]

    def test_base_worker_cancel_before_run(self):
        """Test a cancelled job emits cancelled instead of finished."""

        class EchoWorker(BaseWorker):
            def _work(self):
                return "result"

        worker = EchoWorker()
        cancelled = []
        finished = []
        worker.cancelled.connect(lambda: cancelled.append(True))
        worker.finished.connect(finished.append)

        worker.cancel()
        worker.run()

        assert cancelled == [True]
        assert finished == []


class TestRenderWorker:
    """Tests for the RenderWorker class."""

    def test_render_worker_finishes_with_result(self):
        worker = RenderWorker(["ABC123", "XYZ789"], chunk_size=1)
        started = []
        progress = []
        finished = []
        worker.started.connect(lambda: started.append(True))
        worker.progress.connect(lambda cur, total, msg: progress.append((cur, total, msg)))
        worker.finished.connect(finished.append)

        worker.run()

        assert started == [True]
        assert progress == [(1, 2, "Rendered ABC123"), (2, 2, "Rendered XYZ789")]
        assert len(finished) == 1
        result = finished[0]
        assert isinstance(result, BatchRenderResult)
        assert len(result.rendered) == 2

    def test_render_worker_cancel_before_run(self):
        worker = RenderWorker(["ABC123"])
        cancelled = []
        finished = []
        worker.cancelled.connect(lambda: cancelled.append(True))
        worker.finished.connect(finished.append)

        worker.cancel()
        worker.run()

        assert cancelled == [True]
        assert finished == []

    def test_render_worker_reports_item_failures_in_result(self):
        worker = RenderWorker(["ABC123", "BAD"])
        finished = []
        worker.finished.connect(finished.append)

        worker.run()

        assert [o.code for o in finished[0].failed] == ["BAD"]

    def test_render_worker_emits_error_on_crash(self, monkeypatch):
        def boom(*_args, **_kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr("wavecode.workers.render_worker.render_batch", boom)
        worker = RenderWorker(["ABC123"])
        errors = []
        worker.error.connect(errors.append)

        worker.run()

        assert len(errors) == 1
        assert "Access denied" in errors[0]
