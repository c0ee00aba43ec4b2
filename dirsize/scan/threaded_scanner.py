# Threaded scanner: bounded worker pool over a shared directory work queue.
#
# Work distribution:
#   Every top-level directory is enqueued as a _Task tagged with its index.
#   A worker pops one directory, lists it with read_dir, and enqueues the
#   subdirectories under the same index, so parallelism extends below the
#   top level.  The queue finishes when _outstanding drops to 0.
#
# Result merging:
#   Each worker owns a _WorkerState and is the only thread writing to it.
#   Sizes and errors accumulate there per top-level index; once the queue
#   drains, the calling thread sums all worker states.  No lock is taken for
#   result bookkeeping, and no ordering between branches is assumed.

from __future__ import annotations

import collections
import collections.abc
import logging
import threading
from dataclasses import dataclass, field
from typing import override

from dirsize.models.scan import CancelCheck, ScanError, ScanStats, WalkResult
from dirsize.scan._base import Progress, ScannerBase
from dirsize.scan.walker import read_dir
from dirsize.services.fs import DEFAULT_FS, FileSystem

log = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class _Task:
    """Work queue item: a directory and the index of the top-level entry it belongs to."""

    index: int
    path: str


@dataclass(slots=True)
class _WorkerState:
    sizes: dict[int, int] = field(default_factory=dict)
    errors: dict[int, list[ScanError]] = field(default_factory=dict)
    stats: ScanStats = field(default_factory=ScanStats)


class _WorkQueue:
    """Lightweight work queue with a single lock.

    stdlib queue.Queue uses three Conditions (not_empty, not_full, all_tasks_done),
    each wrapping its own lock.  This queue is unbounded (no not_full) and uses a
    simple Event for completion (no all_tasks_done Condition).
    """

    __slots__ = ("_deque", "_lock", "_not_empty", "_outstanding", "_done", "_shutdown")

    def __init__(self) -> None:
        self._deque: collections.deque[_Task] = collections.deque()
        self._lock = threading.Lock()
        # Condition wraps _lock: `with self._not_empty` also acquires _lock.
        self._not_empty = threading.Condition(self._lock)
        self._outstanding = 0
        self._done = threading.Event()
        self._shutdown = False

    def put_many(self, tasks: collections.abc.Iterable[_Task]) -> None:
        with self._lock:
            # tasks is often a generator (can't len()), so measure the
            # deque before/after to count how many were added.
            prev = len(self._deque)
            self._deque.extend(tasks)
            added = len(self._deque) - prev
            self._outstanding += added
            if added:
                self._not_empty.notify(added)
            elif self._outstanding == 0:
                self._done.set()

    def get(self) -> _Task | None:
        """Block until a task is available.  Returns None on shutdown (exit sentinel)."""
        with self._not_empty:
            while not self._deque:
                if self._shutdown:
                    return None
                self._not_empty.wait()
            return self._deque.popleft()

    def task_done(self) -> None:
        with self._lock:
            self._outstanding -= 1
            if self._outstanding == 0:
                self._done.set()

    def join(self) -> None:
        self._done.wait()

    def shutdown(self) -> None:
        with self._lock:
            self._shutdown = True
            self._not_empty.notify_all()


class ThreadedScanner(ScannerBase):
    """Scanner that lists directories on a bounded pool of worker threads."""

    def __init__(self, workers: int = 4, fs: FileSystem = DEFAULT_FS) -> None:
        super().__init__(workers=workers, fs=fs)

    @override
    def _measure(
        self,
        dirs: list[str],
        stats: ScanStats,
        progress: Progress,
        is_cancelled: CancelCheck,
    ) -> list[WalkResult]:
        q = _WorkQueue()
        states = [_WorkerState() for _ in range(self._workers)]

        def run_worker(state: _WorkerState) -> None:
            while True:
                task = q.get()
                if task is None:
                    break

                if is_cancelled():
                    q.task_done()
                    continue

                try:
                    listing = read_dir(task.path, self._fs)
                except OSError as exc:
                    log.debug("cannot list %s: %s", task.path, exc)
                    state.errors.setdefault(task.index, []).append(ScanError.from_exception(task.path, exc))
                else:
                    state.sizes[task.index] = state.sizes.get(task.index, 0) + listing.file_bytes
                    if listing.errors:
                        state.errors.setdefault(task.index, []).extend(listing.errors)
                    state.stats.files += listing.files
                    state.stats.symlinks += listing.symlinks
                    state.stats.directories += 1
                    # Enqueue children before task_done so _outstanding never
                    # touches 0 while this subtree still has work.
                    q.put_many(_Task(task.index, sub) for sub in listing.subdirs)
                    progress.advance(task.path, listing.files + listing.symlinks, 1)
                finally:
                    q.task_done()

        threads = [threading.Thread(target=run_worker, args=(state,), daemon=True) for state in states]
        for thread in threads:
            thread.start()
        q.put_many(_Task(index, path) for index, path in enumerate(dirs))
        # join() waits until every enqueued task is done; only then is it safe
        # to shut down and release workers blocked in get().
        q.join()
        q.shutdown()
        for thread in threads:
            thread.join()

        results: list[WalkResult] = []
        for index in range(len(dirs)):
            size = sum(state.sizes.get(index, 0) for state in states)
            errors = tuple(err for state in states for err in state.errors.get(index, ()))
            results.append(WalkResult(size, errors))
        for state in states:
            stats.merge(state.stats)
        return results
