"""Chunked batch rendering of wave code images."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
import logging
import os
from threading import Event
from typing import Callable, Iterable

from wavecode.errors import classify_exception
from wavecode.render.renderer import ThemeInput, render_wave_code
from wavecode.themes.merge import merge_with_default
from wavecode.themes.models import ThemeConfig

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 50

ProgressCallback = Callable[[int, int, str], None]


@dataclass(slots=True)
class RenderOutcome:
    code: str
    image: bytes | None = None
    error: str = ""

    @property
    def success(self) -> bool:
        return self.image is not None


@dataclass
class BatchRenderResult:
    outcomes: list[RenderOutcome] = field(default_factory=list)
    cancelled: bool = False
    total: int = 0

    @property
    def rendered(self) -> list[RenderOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failed(self) -> list[RenderOutcome]:
        return [o for o in self.outcomes if not o.success]

    def images(self) -> dict[str, bytes]:
        return {o.code: o.image for o in self.outcomes if o.image is not None}


def render_one(code: str, theme: ThemeConfig) -> RenderOutcome:
    """Render a single code, capturing any failure in the outcome."""
    try:
        return RenderOutcome(code=code, image=render_wave_code(code, theme))
    except Exception as exc:
        error = classify_exception(exc)
        logger.warning("render failed for %r: %s", code, error.message)
        return RenderOutcome(code=code, error=error.message)


def render_batch(
    codes: Iterable[str],
    theme: ThemeInput = None,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    cancel_event: Event | None = None,
    max_workers: int | None = None,
    progress: ProgressCallback | None = None,
) -> BatchRenderResult:
    """Render codes chunk by chunk; each code succeeds or fails on its own.

    ``cancel_event`` is checked before each chunk starts. Codes in chunks
    that never started are left out of the result.
    """
    code_list = list(codes)
    full_theme = merge_with_default(theme)
    result = BatchRenderResult(total=len(code_list))
    if not code_list:
        return result

    chunk_size = max(1, chunk_size)
    workers = max_workers or min(os.cpu_count() or 4, 8)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        for start in range(0, len(code_list), chunk_size):
            if cancel_event is not None and cancel_event.is_set():
                result.cancelled = True
                logger.info(
                    "batch render cancelled after %d of %d codes",
                    len(result.outcomes),
                    len(code_list),
                )
                break
            chunk = code_list[start:start + chunk_size]
            for outcome in executor.map(lambda code: render_one(code, full_theme), chunk):
                result.outcomes.append(outcome)
                if progress is not None:
                    progress(len(result.outcomes), len(code_list), outcome.code)
    return result
