"""Audit Forensics - Analysis registry and report engine"""

import logging
import time
from typing import Callable, Dict, Iterable, List, Optional, Set

from rich.progress import Progress, SpinnerColumn, TextColumn

from .alerts import top_alerts
from .constants import (
    ANALYSIS_CONTAMINATION,
    ANALYSIS_INVALID_SESSIONS,
    ANALYSIS_NAMES,
    ANALYSIS_TIMELINE,
    ANALYSIS_TOP_ALERTS,
    ANALYSIS_TRANSFER_SPIKES,
    DEFAULT_TOP_N,
)
from .contamination import trace_contamination
from .models import Alert
from .sessions import find_invalid_sessions
from .source import LogEventSource, as_source
from .timeline import reconstruct_timeline
from .transfers import find_transfer_spikes

logger = logging.getLogger(__name__)

ANALYSES: Dict[str, Callable] = {
    ANALYSIS_INVALID_SESSIONS: find_invalid_sessions,
    ANALYSIS_TIMELINE: reconstruct_timeline,
    ANALYSIS_TOP_ALERTS: top_alerts,
    ANALYSIS_TRANSFER_SPIKES: find_transfer_spikes,
    ANALYSIS_CONTAMINATION: trace_contamination,
}


def get_analysis(name: str) -> Callable:
    try:
        return ANALYSES[name]
    except KeyError:
        raise KeyError(f"Unknown analysis {name!r}; expected one of {', '.join(ANALYSIS_NAMES)}") from None


class ForensicAnalyzer:
    """Runs the forensic analyses over one audit log"""

    def __init__(self, source, console=None):
        self.source: LogEventSource = as_source(source)
        self.console = console
        self.timings: Dict[str, float] = {}
        self.parse_stats: Dict[str, Optional[Dict]] = {}

    def invalid_sessions(self) -> Set[str]:
        return find_invalid_sessions(self.source)

    def timeline(self, session_id: Optional[str]) -> List[str]:
        return reconstruct_timeline(self.source, session_id)

    def top_alerts(self, n: int = DEFAULT_TOP_N) -> List[Alert]:
        return top_alerts(self.source, n)

    def transfer_spikes(self) -> Dict[int, int]:
        return find_transfer_spikes(self.source)

    def contamination(self, start: Optional[str], end: Optional[str]) -> Optional[List[str]]:
        return trace_contamination(self.source, start, end)

    def run(self, name: str, **params):
        """Dispatch a single analysis by registry name"""
        return get_analysis(name)(self.source, **params)

    def _timed(self, name: str, **params):
        stats_before = self.source.stats
        started = time.perf_counter()
        result = self.run(name, **params)
        self.timings[name] = (time.perf_counter() - started) * 1000

        # an analysis that short-circuits never opens the log
        stats = self.source.stats
        self.parse_stats[name] = stats.to_dict() if stats is not stats_before else None
        return result

    def _plan(self, names: Optional[Iterable[str]], session_id, top_n, start, end) -> Dict[str, Dict]:
        plan = {
            ANALYSIS_INVALID_SESSIONS: {},
            ANALYSIS_TIMELINE: {'session_id': session_id},
            ANALYSIS_TOP_ALERTS: {'n': top_n},
            ANALYSIS_TRANSFER_SPIKES: {},
            ANALYSIS_CONTAMINATION: {'start': start, 'end': end},
        }
        if names is None:
            if not session_id:
                del plan[ANALYSIS_TIMELINE]
            if not (start and end):
                del plan[ANALYSIS_CONTAMINATION]
            return plan

        selected = {}
        for name in names:
            get_analysis(name)
            selected[name] = plan[name]
        return selected

    def analyze(self, names: Optional[Iterable[str]] = None, session_id: Optional[str] = None,
                top_n: int = DEFAULT_TOP_N, start: Optional[str] = None,
                end: Optional[str] = None) -> Dict:
        """Run the selected analyses (all applicable ones by default) and build a report"""
        self.timings = {}
        self.parse_stats = {}
        plan = self._plan(names, session_id, top_n, start, end)
        results = {}

        if self.console:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=self.console,
                transient=True
            ) as progress:
                task = progress.add_task("Analyzing audit log...", total=len(plan))
                for name, params in plan.items():
                    progress.update(task, description=f"Running {name}...")
                    results[name] = self._timed(name, **params)
                    progress.update(task, advance=1)
        else:
            for name, params in plan.items():
                results[name] = self._timed(name, **params)

        return self.generate_report(results, plan)

    def generate_report(self, results: Dict, plan: Dict[str, Dict]) -> Dict:
        report = {
            'summary': {
                'log_file': str(self.source.path),
                'analyses': list(results),
                'elapsed_ms': {name: round(ms, 3) for name, ms in self.timings.items()},
                'parse_stats': self.parse_stats,
            },
        }

        if ANALYSIS_INVALID_SESSIONS in results:
            report[ANALYSIS_INVALID_SESSIONS] = sorted(results[ANALYSIS_INVALID_SESSIONS])

        if ANALYSIS_TIMELINE in results:
            report[ANALYSIS_TIMELINE] = {
                'session_id': plan[ANALYSIS_TIMELINE]['session_id'],
                'actions': results[ANALYSIS_TIMELINE],
            }

        if ANALYSIS_TOP_ALERTS in results:
            report[ANALYSIS_TOP_ALERTS] = [a.to_dict() for a in results[ANALYSIS_TOP_ALERTS]]

        if ANALYSIS_TRANSFER_SPIKES in results:
            report[ANALYSIS_TRANSFER_SPIKES] = [
                {'from': source, 'to': target}
                for source, target in results[ANALYSIS_TRANSFER_SPIKES].items()
            ]

        if ANALYSIS_CONTAMINATION in results:
            report[ANALYSIS_CONTAMINATION] = {
                'start': plan[ANALYSIS_CONTAMINATION]['start'],
                'end': plan[ANALYSIS_CONTAMINATION]['end'],
                'path': results[ANALYSIS_CONTAMINATION],
            }

        return report
