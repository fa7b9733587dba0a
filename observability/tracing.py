"""Span helper for recording remote-call timings on session state."""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Iterator


@contextmanager
def span(state: Any, name: str, **fields: Any) -> Iterator[dict]:
    """Time the enclosed block and append ``{"span", "ms", ...}`` to ``state.events``.

    The yielded dict may be updated inside the block (e.g. with an outcome).
    """

    record: dict = {"span": name, **fields}
    start = time.perf_counter()
    try:
        yield record
    finally:
        record["ms"] = int((time.perf_counter() - start) * 1000)
        state.events.append(record)


__all__ = ["span"]
