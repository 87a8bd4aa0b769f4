"""Audit Forensics - Log ingestion"""

import logging
import os
import re
from pathlib import Path
from typing import Generator, List, Optional, Tuple, Type, Union

from .constants import DEFAULT_ENCODING, DELIMITER, FULL_VIEW, HEADER_MARKER, SESSION_VIEW
from .models import Alert, LogEvent, ParseStats, SessionRecord, TransferRecord

logger = logging.getLogger(__name__)

INT_PATTERN = re.compile(r'^[+-]?\d+$')

INT32_RANGE = (-2 ** 31, 2 ** 31 - 1)
INT64_RANGE = (-2 ** 63, 2 ** 63 - 1)


def parse_int(text: str, bounds: Tuple[int, int] = INT64_RANGE) -> int:
    """Parse a signed decimal integer that must fit in the given bounds"""
    if not INT_PATTERN.match(text):
        raise ValueError(f"not an integer: {text!r}")
    value = int(text)
    low, high = bounds
    if not low <= value <= high:
        raise ValueError(f"integer out of range: {text}")
    return value


class LogEventSource:
    """Lazy, forward-only reader over a comma-separated audit log.

    Every stream opens its own handle and skips the header line. Rows that
    are too short or carry unparsable numbers are dropped and counted in
    ``stats``; read failures propagate as ``OSError``.
    """

    def __init__(self, path: Union[str, os.PathLike], encoding: str = DEFAULT_ENCODING,
                 delimiter: str = DELIMITER):
        self.path = Path(path)
        self.encoding = encoding
        self.delimiter = delimiter
        self.stats = ParseStats()

    def __repr__(self):
        return f"LogEventSource({str(self.path)!r})"

    def _lines(self) -> Generator[Tuple[int, str], None, None]:
        if not self.path.exists():
            raise FileNotFoundError(f"Log file not found: {self.path}")

        try:
            with open(self.path, 'r', encoding=self.encoding, errors='ignore') as f:
                f.readline()
                for line_number, line in enumerate(f, 2):
                    yield line_number, line
        except OSError as e:
            logger.error("Failed reading %s: %s", self.path, e)
            raise

    def _split(self, line: str, width: int) -> List[str]:
        if width < FULL_VIEW:
            # trailing columns stay joined in the last slot
            return line.split(self.delimiter, width)
        return line.split(self.delimiter)

    def _skip(self, stats: ParseStats, reason: str, line_number: int):
        stats.skip(reason)
        logger.debug("Skipping line %d of %s (%s)", line_number, self.path, reason)

    def rows(self, width: int, stats: Optional[ParseStats] = None) -> Generator[Tuple[int, List[str]], None, None]:
        """Yield (line_number, fields) for every row with at least ``width`` fields.

        Counters go to ``stats`` when given; otherwise a fresh ``ParseStats`` is
        published on ``self.stats`` once the pass completes.
        """
        publish = stats is None
        if publish:
            stats = ParseStats()

        for line_number, line in self._lines():
            stats.rows_read += 1
            line = line.strip()
            if not line:
                self._skip(stats, 'blank', line_number)
                continue

            parts = [p.strip() for p in self._split(line, width)]
            if len(parts) < width:
                self._skip(stats, 'short_row', line_number)
                continue
            if width == FULL_VIEW and parts[0] == HEADER_MARKER:
                self._skip(stats, 'header', line_number)
                continue

            yield line_number, parts

        if publish:
            self.stats = stats

    def session_records(self) -> Generator[SessionRecord, None, None]:
        """4-field view: rows missing a user, session or action are dropped"""
        stats = ParseStats()
        for line_number, parts in self.rows(SESSION_VIEW, stats):
            timestamp, user_id, session_id, action_type = parts[:SESSION_VIEW]
            if not (user_id and session_id and action_type):
                self._skip(stats, 'missing_field', line_number)
                continue

            stats.rows_yielded += 1
            yield SessionRecord(
                timestamp=timestamp,
                user_id=user_id,
                session_id=session_id,
                action_type=action_type,
                line_number=line_number,
            )
        self.stats = stats

    def events(self, event_type: Type[LogEvent] = LogEvent) -> Generator[LogEvent, None, None]:
        """7-field view with numeric columns parsed; an empty byte count reads as 0"""
        stats = ParseStats()
        for line_number, parts in self.rows(FULL_VIEW, stats):
            try:
                timestamp = parse_int(parts[0])
                severity = parse_int(parts[5], INT32_RANGE)
                transferred = parse_int(parts[6]) if parts[6] else 0
            except ValueError:
                self._skip(stats, 'bad_number', line_number)
                continue

            stats.rows_yielded += 1
            yield event_type(
                timestamp=timestamp,
                user_id=parts[1],
                session_id=parts[2],
                action_type=parts[3],
                target_resource=parts[4],
                severity_level=severity,
                bytes_transferred=transferred,
                line_number=line_number,
            )
        self.stats = stats

    def alerts(self) -> Generator[Alert, None, None]:
        return self.events(Alert)

    def transfers(self) -> Generator[TransferRecord, None, None]:
        """7-field view parsing only the timestamp and byte count; other columns may hold anything"""
        stats = ParseStats()
        for line_number, parts in self.rows(FULL_VIEW, stats):
            try:
                timestamp = parse_int(parts[0])
                transferred = parse_int(parts[6]) if parts[6] else 0
            except ValueError:
                self._skip(stats, 'bad_number', line_number)
                continue

            stats.rows_yielded += 1
            yield TransferRecord(
                timestamp=timestamp,
                bytes_transferred=transferred,
                line_number=line_number,
            )
        self.stats = stats


def as_source(source: Union['LogEventSource', str, os.PathLike]) -> LogEventSource:
    """Accept either a ready source or a path to the log file"""
    if isinstance(source, LogEventSource):
        return source
    return LogEventSource(source)
