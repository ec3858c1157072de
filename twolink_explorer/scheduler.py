"""
Redraw Scheduler Module

Debounce-to-next-frame redraw requests: any number of requests made before
the pending frame fires collapse into a single draw.
"""

import logging
from typing import Callable

logger = logging.getLogger(__name__)


class RedrawScheduler:
    """Coalesces redraw requests into at most one pending frame."""

    def __init__(self, draw: Callable[[], None],
                 call_later: Callable[[Callable[[], None]], None]):
        """
        Args:
            draw: Callback that renders one frame
            call_later: Schedules a zero-argument callable to run on the next
                frame (for example a single-shot GUI timer)
        """
        self._draw = draw
        self._call_later = call_later
        self._pending = False
        self.frames_drawn = 0

    @property
    def pending(self) -> bool:
        return self._pending

    def request_redraw(self):
        if self._pending:
            return
        self._pending = True
        self._call_later(self._run_frame)

    def _run_frame(self):
        # Cleared before drawing so a request made during the draw gets its own frame
        self._pending = False
        self.frames_drawn += 1
        self._draw()
