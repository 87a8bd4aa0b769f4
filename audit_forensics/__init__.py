"""Audit Forensics package"""

import logging

from rich.logging import RichHandler

from .constants import VERSION, ANALYSIS_NAMES, LOG_FIELDS
from .models import Alert, LogEvent, ParseStats, SessionRecord, TransferRecord
from .source import LogEventSource, as_source
from .sessions import SessionValidator, find_invalid_sessions
from .timeline import reconstruct_timeline
from .alerts import top_alerts
from .transfers import find_transfer_spikes, next_larger_positions
from .contamination import build_resource_graph, shortest_path, trace_contamination
from .analyzer import ANALYSES, ForensicAnalyzer, get_analysis
from .output import print_report

__all__ = [
    'VERSION', 'ANALYSIS_NAMES', 'LOG_FIELDS',
    'Alert', 'LogEvent', 'ParseStats', 'SessionRecord', 'TransferRecord',
    'LogEventSource', 'as_source',
    'SessionValidator', 'find_invalid_sessions',
    'reconstruct_timeline',
    'top_alerts',
    'find_transfer_spikes', 'next_larger_positions',
    'build_resource_graph', 'shortest_path', 'trace_contamination',
    'ANALYSES', 'ForensicAnalyzer', 'get_analysis',
    'print_report',
]

__version__ = VERSION


# Logging setup
MAIN_LOGGER = logging.getLogger("audit_forensics")
MAIN_LOGGER.setLevel(logging.WARNING)
if not MAIN_LOGGER.handlers:
    MAIN_LOGGER.addHandler(RichHandler(show_path=False))
MAIN_LOGGER.propagate = False
