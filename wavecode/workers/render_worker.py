"""Worker for rendering wave code images in the background."""

from __future__ import annotations

from wavecode.core.batch import DEFAULT_CHUNK_SIZE, BatchRenderResult, render_batch
from wavecode.render.renderer import ThemeInput
from wavecode.workers.base_worker import BaseWorker


class RenderWorker(BaseWorker):
    """Renders a list of codes with one theme, chunk by chunk.

    Emits ``finished`` with the BatchRenderResult, or ``cancelled`` when the
    cancel request landed before the last chunk started.
    """

    def __init__(
        self,
        codes: list[str],
        theme: ThemeInput = None,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        super().__init__()
        self._codes = list(codes)
        self._theme = theme
        self._chunk_size = chunk_size

    def _work(self) -> BatchRenderResult:
        return render_batch(
            self._codes,
            self._theme,
            chunk_size=self._chunk_size,
            cancel_event=self._cancel_event,
            progress=self._emit_progress,
        )

    def _was_cancelled(self, result: object) -> bool:
        return isinstance(result, BatchRenderResult) and result.cancelled

    def _emit_progress(self, current: int, total: int, code: str) -> None:
        self.progress.emit(current, total, f"Rendered {code}")
