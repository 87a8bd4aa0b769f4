"""Audit Forensics - Data models"""

from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Dict

from .constants import ACTION_LOGIN, ACTION_LOGOUT


@dataclass(frozen=True)
class SessionRecord:
    """4-field view of a log row; numeric columns are never parsed"""
    timestamp: str
    user_id: str
    session_id: str
    action_type: str
    line_number: int = field(default=0, compare=False)

    @property
    def is_login(self) -> bool:
        return self.action_type.upper() == ACTION_LOGIN

    @property
    def is_logout(self) -> bool:
        return self.action_type.upper() == ACTION_LOGOUT


@dataclass(frozen=True)
class LogEvent:
    """Fully parsed 7-field log row"""
    timestamp: int
    user_id: str
    session_id: str
    action_type: str
    target_resource: str
    severity_level: int
    bytes_transferred: int = 0
    line_number: int = field(default=0, compare=False)

    @property
    def is_login(self) -> bool:
        return self.action_type.upper() == ACTION_LOGIN

    @property
    def is_logout(self) -> bool:
        return self.action_type.upper() == ACTION_LOGOUT

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class Alert(LogEvent):
    """Log event ranked by severity"""

    @property
    def sort_key(self) -> int:
        return -self.severity_level


@dataclass(frozen=True)
class TransferRecord:
    """Timestamp and byte count of a row; the remaining columns are not parsed"""
    timestamp: int
    bytes_transferred: int = 0
    line_number: int = field(default=0, compare=False)


@dataclass
class ParseStats:
    """Row counters for one pass over the log"""
    rows_read: int = 0
    rows_yielded: int = 0
    skipped: Counter = field(default_factory=Counter)

    @property
    def rows_skipped(self) -> int:
        return sum(self.skipped.values())

    def skip(self, reason: str):
        self.skipped[reason] += 1

    def to_dict(self) -> Dict:
        return {
            'rows_read': self.rows_read,
            'rows_yielded': self.rows_yielded,
            'rows_skipped': self.rows_skipped,
            'skipped_by_reason': dict(self.skipped),
        }
