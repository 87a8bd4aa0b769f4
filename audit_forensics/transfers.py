"""Audit Forensics - Data transfer spike detection"""

import logging
from typing import Dict, List, Optional, Sequence

from .source import as_source

logger = logging.getLogger(__name__)


def next_larger_positions(values: Sequence[int]) -> List[Optional[int]]:
    """For each position, the nearest later position holding a strictly larger value.

    Scans right to left keeping a stack of candidate positions whose values
    strictly decrease from bottom to top. Anything not larger than the current
    value is popped for good: the current position shadows it for every
    earlier one.
    """
    result: List[Optional[int]] = [None] * len(values)
    stack: List[int] = []

    for i in range(len(values) - 1, -1, -1):
        while stack and values[stack[-1]] <= values[i]:
            stack.pop()
        if stack:
            result[i] = stack[-1]
        stack.append(i)

    return result


def find_transfer_spikes(source) -> Dict[int, int]:
    """Map each timestamp to the timestamp of the next larger transfer.

    Positions follow log order, not timestamp order. Timestamps without a
    later, larger transfer get no entry; a repeated timestamp keeps the
    mapping of its earliest occurrence in the log, since the scan runs
    backwards and the earliest one is written last.
    """
    source = as_source(source)
    timestamps: List[int] = []
    transferred: List[int] = []

    for record in source.transfers():
        timestamps.append(record.timestamp)
        transferred.append(record.bytes_transferred)

    spikes: Dict[int, int] = {}
    for i, j in reversed(list(enumerate(next_larger_positions(transferred)))):
        if j is not None:
            spikes[timestamps[i]] = timestamps[j]

    logger.info("Found %d transfer spikes in %d events", len(spikes), len(timestamps))
    return spikes
