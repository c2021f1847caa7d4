"""
Settle-all fan-out over a thread pool.

Every item gets its own outcome: a failing item never cancels or hides
the result of its siblings.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class Settled(Generic[T, R]):
    """Outcome of one item: either ``value`` or ``error`` is set."""

    item: T
    value: Optional[R] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def settle_all(
    fn: Callable[[T], R],
    items: Sequence[T],
    max_workers: int = 5,
) -> List[Settled[T, R]]:
    """Run *fn* over *items* concurrently and wait for all of them.

    Args:
        fn: Work function applied to each item.
        items: Inputs; outcome order matches input order.
        max_workers: Thread pool size.

    Returns:
        One Settled per item.
    """
    if not items:
        return []

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(items)))) as executor:
        futures = [executor.submit(fn, item) for item in items]

    outcomes: List[Settled[T, R]] = []
    for item, future in zip(items, futures):
        error = future.exception()
        if error is None:
            outcomes.append(Settled(item=item, value=future.result()))
        else:
            outcomes.append(Settled(item=item, error=error))
    return outcomes
