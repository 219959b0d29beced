"""Progress reporting contract for import and export runs.

The orchestrators size the tracker once with the count-pass total and then
tick it once per processed file. The base class is a no-op so callers that
don't render progress (tests, quiet runs) can use it directly.
"""


class ProgressTracker:
    """No-op progress tracker.

    Subclasses render progress; ``current`` is clamped to ``total`` so
    ticks stay monotonic and never overshoot.
    """

    def __init__(self) -> None:
        self.total = 0
        self.current = 0

    def start(self, total: int) -> None:
        self.total = max(0, total)
        self.current = 0

    def tick(self, n: int = 1) -> None:
        self.current = min(self.total, self.current + max(0, n))

    def stop(self) -> None:
        pass
