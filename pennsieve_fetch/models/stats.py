"""
Dataclass for tracking run statistics.
"""

import time
from dataclasses import dataclass, field


@dataclass
class RunStats:
    """Tracks the outcome of every manifest entry processed in a run."""

    files_total: int = 0
    files_downloaded: int = 0
    files_failed: int = 0
    failed_files: list[str] = field(default_factory=list)
    _start_time: float = field(default=0.0, repr=False)
    _end_time: float | None = field(default=None, repr=False)

    def __post_init__(self):
        self._start_time = time.monotonic()

    def record_success(self) -> None:
        self.files_total += 1
        self.files_downloaded += 1

    def record_failure(self, target_name: str) -> None:
        self.files_total += 1
        self.files_failed += 1
        self.failed_files.append(target_name)

    def finish(self) -> None:
        """Freezes the elapsed time."""
        self._end_time = time.monotonic()

    @property
    def duration_s(self) -> float:
        end = self._end_time if self._end_time is not None else time.monotonic()
        return end - self._start_time
