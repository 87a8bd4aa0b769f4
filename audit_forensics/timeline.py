"""Audit Forensics - Session timeline reconstruction"""

import logging
from typing import List, Optional

from .source import as_source

logger = logging.getLogger(__name__)


def reconstruct_timeline(source, session_id: Optional[str]) -> List[str]:
    """Actions performed in ``session_id``, in log order, repeats included"""
    if not session_id:
        return []

    source = as_source(source)
    actions = [
        record.action_type
        for record in source.session_records()
        if record.session_id == session_id
    ]

    logger.info("Session %s: %d actions", session_id, len(actions))
    return actions
