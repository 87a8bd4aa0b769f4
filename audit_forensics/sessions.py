"""Audit Forensics - Session validity checking"""

import logging
from collections import defaultdict
from typing import Dict, List, Set

from .models import SessionRecord
from .source import as_source

logger = logging.getLogger(__name__)


class SessionValidator:
    """Per-user stack of open sessions, fed one record at a time in log order.

    A LOGIN while the user already has an open session marks the new session
    invalid. A LOGOUT is invalid when nothing is open or when it does not close
    the most recent session; in the latter case the stack is left untouched.
    Sessions still open once the log ends are invalid too.
    """

    def __init__(self):
        self.open_sessions: Dict[str, List[str]] = defaultdict(list)
        self.invalid: Set[str] = set()

    def process(self, record: SessionRecord):
        if record.is_login:
            stack = self.open_sessions[record.user_id]
            if stack:
                self.invalid.add(record.session_id)
            stack.append(record.session_id)

        elif record.is_logout:
            stack = self.open_sessions[record.user_id]
            if not stack:
                self.invalid.add(record.session_id)
            elif stack[-1] == record.session_id:
                stack.pop()
            else:
                self.invalid.add(record.session_id)

    def finish(self) -> Set[str]:
        unclosed = set()
        for stack in self.open_sessions.values():
            unclosed.update(stack)
        return self.invalid | unclosed


def find_invalid_sessions(source) -> Set[str]:
    """Return the ids of every session with a broken LOGIN/LOGOUT sequence"""
    source = as_source(source)
    validator = SessionValidator()

    for record in source.session_records():
        validator.process(record)

    invalid = validator.finish()
    logger.info("Found %d invalid sessions across %d users",
                len(invalid), len(validator.open_sessions))
    return invalid
