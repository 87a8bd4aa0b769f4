"""Audit Forensics - Constants and log schema"""

VERSION = "1.0.0"

# Log record columns, in file order
LOG_FIELDS = [
    'TIMESTAMP',
    'USER_ID',
    'SESSION_ID',
    'ACTION_TYPE',
    'TARGET_RESOURCE',
    'SEVERITY_LEVEL',
    'BYTES_TRANSFERRED',
]

HEADER_MARKER = LOG_FIELDS[0]
DELIMITER = ','
DEFAULT_ENCODING = 'utf-8'

# Field-count views requested by the analyses
SESSION_VIEW = 4
FULL_VIEW = len(LOG_FIELDS)

ACTION_LOGIN = 'LOGIN'
ACTION_LOGOUT = 'LOGOUT'

DEFAULT_TOP_N = 5

# Analysis names, in report order
ANALYSIS_INVALID_SESSIONS = 'invalid-sessions'
ANALYSIS_TIMELINE = 'timeline'
ANALYSIS_TOP_ALERTS = 'top-alerts'
ANALYSIS_TRANSFER_SPIKES = 'transfer-spikes'
ANALYSIS_CONTAMINATION = 'contamination'

ANALYSIS_NAMES = [
    ANALYSIS_INVALID_SESSIONS,
    ANALYSIS_TIMELINE,
    ANALYSIS_TOP_ALERTS,
    ANALYSIS_TRANSFER_SPIKES,
    ANALYSIS_CONTAMINATION,
]

# Severity bands used when colouring alerts
SEVERITY_COLORS = [
    (9, 'red bold'),
    (7, 'red'),
    (4, 'yellow'),
    (0, 'blue'),
]
