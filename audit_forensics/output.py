"""Audit Forensics - Report output"""

import json
from typing import Dict

from rich import box
from rich.panel import Panel
from rich.table import Table

from .constants import (
    ANALYSIS_CONTAMINATION,
    ANALYSIS_INVALID_SESSIONS,
    ANALYSIS_TIMELINE,
    ANALYSIS_TOP_ALERTS,
    ANALYSIS_TRANSFER_SPIKES,
    SEVERITY_COLORS,
)


def severity_color(level: int) -> str:
    for threshold, color in SEVERITY_COLORS:
        if level >= threshold:
            return color
    return 'white'


def _section(console, title: str, style: str = "bold"):
    console.print("\n" + "─" * 70, style="cyan")
    console.print(title, style=style)


def print_report(report: Dict, console=None):
    if console is None:
        print(json.dumps(report, indent=2))
        return

    console.print("\n" + "═" * 70, style="cyan")
    console.print("              FORENSIC AUDIT REPORT", style="bold cyan")
    console.print("═" * 70, style="cyan")

    # Summary
    summary = report['summary']
    lines = [f"Log File: [cyan]{summary['log_file']}[/]"]
    for name, elapsed in summary['elapsed_ms'].items():
        stats = summary['parse_stats'].get(name)
        rows = f"{stats['rows_yielded']:,} rows, {stats['rows_skipped']:,} skipped" if stats else "log not read"
        lines.append(f"{name}: [cyan]{elapsed:.3f} ms[/] ({rows})")
    console.print(Panel.fit("\n".join(lines), title="Summary", border_style="cyan"))

    # Invalid sessions
    if ANALYSIS_INVALID_SESSIONS in report:
        invalid = report[ANALYSIS_INVALID_SESSIONS]
        _section(console, f"INVALID SESSIONS ({len(invalid)})", "bold red" if invalid else "bold")
        if invalid:
            table = Table(box=box.ROUNDED)
            table.add_column("#", style="white")
            table.add_column("Session ID", style="red")
            for i, session_id in enumerate(invalid, 1):
                table.add_row(str(i), session_id)
            console.print(table)
        else:
            console.print("  [green]No invalid sessions found[/]")

    # Timeline
    if ANALYSIS_TIMELINE in report:
        timeline = report[ANALYSIS_TIMELINE]
        _section(console, f"TIMELINE FOR {timeline['session_id']}")
        if not timeline['actions']:
            console.print("  [yellow]No actions recorded for this session[/]")
        for i, action in enumerate(timeline['actions'], 1):
            console.print(f"  {i:02d}. {action}")

    # Top alerts
    if ANALYSIS_TOP_ALERTS in report:
        alerts = report[ANALYSIS_TOP_ALERTS]
        _section(console, f"TOP ALERTS ({len(alerts)})", "bold red")
        table = Table(box=box.ROUNDED)
        table.add_column("Severity", style="white")
        table.add_column("Timestamp", style="cyan")
        table.add_column("User", style="cyan")
        table.add_column("Session", style="cyan")
        table.add_column("Action", style="white")
        table.add_column("Resource", style="yellow")
        for alert in alerts:
            color = severity_color(alert['severity_level'])
            table.add_row(
                f"[{color}]{alert['severity_level']}[/]",
                str(alert['timestamp']),
                alert['user_id'],
                alert['session_id'],
                alert['action_type'],
                alert['target_resource'],
            )
        console.print(table)

    # Transfer spikes
    if ANALYSIS_TRANSFER_SPIKES in report:
        spikes = report[ANALYSIS_TRANSFER_SPIKES]
        _section(console, f"TRANSFER SPIKES ({len(spikes)})")
        if spikes:
            table = Table(box=box.ROUNDED)
            table.add_column("Timestamp", style="cyan")
            table.add_column("Next Larger Transfer At", style="red")
            for spike in spikes:
                table.add_row(str(spike['from']), str(spike['to']))
            console.print(table)
        else:
            console.print("  [green]No transfer spikes found[/]")

    # Contamination path
    if ANALYSIS_CONTAMINATION in report:
        trace = report[ANALYSIS_CONTAMINATION]
        _section(console, f"CONTAMINATION PATH {trace['start']} -> {trace['end']}")
        if trace['path'] is None:
            console.print("  [green]No path found[/]")
        else:
            console.print("  [red]" + " -> ".join(trace['path']) + "[/]")
            console.print(f"  Hops: {len(trace['path']) - 1}")

    console.print("\n" + "═" * 70, style="cyan")
