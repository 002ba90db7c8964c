"""Run deeply recursive lab code on a worker thread with a large stack."""

import logging
import sys
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)

DEFAULT_STACK_SIZE = 64 * 1024 * 1024
DEFAULT_RECURSION_LIMIT = 100_000


def run_with_large_stack[T](
    fn: Callable[[], T],
    *,
    stack_size: int = DEFAULT_STACK_SIZE,
    recursion_limit: int = DEFAULT_RECURSION_LIMIT,
) -> T:
    """Call ``fn`` on a fresh thread with an enlarged stack and return its result.

    Incremental scenarios recurse once per list element, so large inputs need
    far more stack than the main thread has. The recursion limit is raised
    for the duration of the call and restored afterwards. An exception raised
    by ``fn`` is re-raised in the calling thread.
    """
    result: list[T] = []
    errors: list[BaseException] = []

    def target() -> None:
        try:
            result.append(fn())
        except BaseException as e:  # noqa: BLE001 - re-raised in the caller
            errors.append(e)

    old_limit = sys.getrecursionlimit()
    sys.setrecursionlimit(max(old_limit, recursion_limit))
    old_stack_size = threading.stack_size(stack_size)
    try:
        worker = threading.Thread(target=target, name="incrlab-worker")
        worker.start()
    finally:
        threading.stack_size(old_stack_size)
    logger.debug("Started %s with a %d byte stack", worker.name, stack_size)
    try:
        worker.join()
    finally:
        sys.setrecursionlimit(old_limit)

    if errors:
        raise errors[0]
    return result[0]
