"""Fire-and-forget execution for side effects whose outcome is only logged."""

from __future__ import annotations

from concurrent.futures import Executor, Future, ThreadPoolExecutor
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

log = getLogger(__name__)


class BackgroundTasks:
    """Submit callables without joining them into the caller's control flow.

    Failures are reported through the logger under the supplied ``label`` and
    never propagate. ``wait`` exists for shutdown and tests; the reconciliation
    run itself never waits on these tasks.
    """

    def __init__(self, executor: Executor | None = None, *, max_workers: int = 2) -> None:
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="catchwatch-background",
        )
        self._pending: list[Future[object]] = []

    def __enter__(self) -> BackgroundTasks:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown()

    def submit(self, func: Callable[[], object], *, label: str) -> Future[object]:
        future: Future[object] = self._executor.submit(func)
        self._pending.append(future)

        def _report(done: Future[object]) -> None:
            self._pending.remove(done)
            error = done.exception()
            if error is not None:
                log.error("%s[ERROR][%s]", label, error)

        future.add_done_callback(_report)
        return future

    def wait(self) -> None:
        for future in list(self._pending):
            # exceptions are reported by the done callback
            future.exception()

    def shutdown(self) -> None:
        self.wait()
        if self._owns_executor:
            self._executor.shutdown(wait=True)
