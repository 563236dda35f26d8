"""Ordered, bounded-concurrency map over a thread pool (after ``p-map``).

Used by callers that categorize many transactions: each remote call is
independent, so they can run side by side under a concurrency cap while the
output keeps input order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import TypeVar

InT = TypeVar("InT")
OutT = TypeVar("OutT")


def p_map(
    iterable: Iterable[InT],
    mapper: Callable[[InT], OutT],
    *,
    concurrency: int,
) -> list[OutT]:
    """Map ``iterable`` through ``mapper`` with at most ``concurrency`` in flight.

    Results come back in input order. The first mapper error propagates and
    work not yet started is cancelled.
    """

    if not isinstance(concurrency, int) or isinstance(concurrency, bool) or concurrency < 1:
        raise ValueError("concurrency must be a positive integer")

    items = list(iterable)
    if not items:
        return []
    if concurrency == 1 or len(items) == 1:
        return [mapper(item) for item in items]

    results: list[OutT | None] = [None] * len(items)
    pending = iter(enumerate(items))
    future_to_idx: dict[Future[OutT], int] = {}

    with ThreadPoolExecutor(
        max_workers=min(concurrency, len(items)), thread_name_prefix="spend-pmap"
    ) as pool:

        def _submit_next() -> Future[OutT] | None:
            try:
                idx, item = next(pending)
            except StopIteration:
                return None
            fut = pool.submit(mapper, item)
            future_to_idx[fut] = idx
            return fut

        active: set[Future[OutT]] = set()
        for _ in range(concurrency):
            fut = _submit_next()
            if fut is None:
                break
            active.add(fut)

        while active:
            done, active = wait(active, return_when=FIRST_COMPLETED)
            for fut in done:
                idx = future_to_idx.pop(fut)
                try:
                    results[idx] = fut.result()
                except Exception:
                    pool.shutdown(wait=False, cancel_futures=True)
                    raise
                nxt = _submit_next()
                if nxt is not None:
                    active.add(nxt)

    return results  # type: ignore[return-value]


__all__ = ["p_map"]
