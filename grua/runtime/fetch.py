"""Background fetch workers for change lists and file diffs.

Every request runs on its own daemon thread and posts exactly one
``FetchResult`` to a queue the main loop drains. Results carry a sequence
number and a target tag so the loop can drop anything stale.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from queue import Empty, Queue

logger = logging.getLogger(__name__)

FETCH_LIST = "list"
FETCH_DIFF = "diff"


@dataclass(frozen=True)
class FetchResult:
    """Completed fetch. Exactly one of ``payload``/``error`` is meaningful."""

    kind: str
    seq: int
    target: object = None
    payload: object = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class FetchScheduler:
    """Spawn one worker per request; no cancellation, no timeouts."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._next_seq = 1
        self._results: Queue[FetchResult] = Queue()

    def _allocate_seq(self) -> int:
        with self._lock:
            seq = self._next_seq
            self._next_seq += 1
            return seq

    def _worker(self, kind: str, seq: int, target: object, job: Callable[[], object]) -> None:
        try:
            payload = job()
        except Exception as exc:
            logger.warning("%s fetch #%d failed: %s", kind, seq, exc)
            self._results.put(FetchResult(kind=kind, seq=seq, target=target, error=exc))
            return
        self._results.put(FetchResult(kind=kind, seq=seq, target=target, payload=payload))

    def submit(self, kind: str, job: Callable[[], object], target: object = None) -> int:
        """Start ``job`` in the background and return its sequence number."""
        seq = self._allocate_seq()
        logger.debug("dispatch %s fetch #%d target=%r", kind, seq, target)
        worker = threading.Thread(
            target=self._worker,
            args=(kind, seq, target, job),
            name=f"grua-{kind}-fetch-{seq}",
            daemon=True,
        )
        worker.start()
        return seq

    def drain_results(self) -> list[FetchResult]:
        """Drain all completed fetch results."""
        out: list[FetchResult] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out


__all__ = ["FETCH_DIFF", "FETCH_LIST", "FetchResult", "FetchScheduler"]
