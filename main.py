#!/usr/bin/env python3
"""Audit Forensics - Entry point"""

import argparse
import json
import logging
import sys

from rich.console import Console

from audit_forensics import ANALYSIS_NAMES, VERSION, ForensicAnalyzer, print_report
from audit_forensics.constants import ANALYSIS_CONTAMINATION, ANALYSIS_TIMELINE, DEFAULT_TOP_N


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Audit Forensics - Forensic analysis of user audit logs",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument("logfile", help="Audit log (CSV) to analyze")
    parser.add_argument("-a", "--analysis", action="append", choices=ANALYSIS_NAMES,
                        help="Analysis to run (repeatable, default: all applicable)")
    parser.add_argument("-s", "--session", help="Session ID whose timeline to reconstruct")
    parser.add_argument("-n", "--top", type=int, default=DEFAULT_TOP_N,
                        help=f"Number of top alerts (default: {DEFAULT_TOP_N})")
    parser.add_argument("--from", dest="start", help="Resource where contamination starts")
    parser.add_argument("--to", dest="end", help="Resource to trace contamination to")
    parser.add_argument("-o", "--output", help="Output file (JSON)")
    parser.add_argument("-j", "--json", action="store_true", help="JSON output only")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log skipped rows and analysis details")
    parser.add_argument("--version", action="version", version=f"AuditForensics v{VERSION}")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.top < 0:
        parser.error("--top must be non-negative")

    selected = args.analysis or []
    if ANALYSIS_TIMELINE in selected and not args.session:
        parser.error("-a timeline requires -s/--session")
    if ANALYSIS_CONTAMINATION in selected and not (args.start and args.end):
        parser.error("-a contamination requires --from and --to")

    if args.verbose:
        logging.getLogger("audit_forensics").setLevel(logging.DEBUG)

    console = None if args.json else Console()
    analyzer = ForensicAnalyzer(args.logfile, console=console)

    try:
        report = analyzer.analyze(
            names=args.analysis,
            session_id=args.session,
            top_n=args.top,
            start=args.start,
            end=args.end,
        )
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print_report(report, console)

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(report, f, indent=2)
        if console:
            console.print(f"\n[green]Report saved to:[/] {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
