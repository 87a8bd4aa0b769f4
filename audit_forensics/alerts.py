"""Audit Forensics - Alert prioritisation"""

import heapq
import logging
from typing import List, Tuple

from .models import Alert
from .source import as_source

logger = logging.getLogger(__name__)


def top_alerts(source, n: int) -> List[Alert]:
    """Return the ``n`` most severe alerts, highest severity first.

    Every well-formed row is pushed onto a max-heap keyed on severity; equal
    severities come out in log order. When ``n`` exceeds the number of rows
    all of them are returned.
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    if n == 0:
        return []

    source = as_source(source)
    heap: List[Tuple[int, int, Alert]] = []
    for position, alert in enumerate(source.alerts()):
        heapq.heappush(heap, (alert.sort_key, position, alert))

    count = min(n, len(heap))
    result = [heapq.heappop(heap)[2] for _ in range(count)]

    logger.info("Selected %d of %d alerts", len(result), count + len(heap))
    return result
