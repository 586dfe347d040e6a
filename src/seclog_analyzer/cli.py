from __future__ import annotations

import argparse
import asyncio
import random
import sys
from collections.abc import Sequence
from datetime import UTC, tzinfo
from pathlib import Path

from seclog_analyzer.core.aggregate import aggregate, filter_by_ip
from seclog_analyzer.core.export import write_report
from seclog_analyzer.core.generator import generate
from seclog_analyzer.core.models import Stats, TimelineBucket
from seclog_analyzer.core.normalize import normalize
from seclog_analyzer.core.session import DEMO_COUNT, AnalysisSession
from seclog_analyzer.server.log_server import configure_logging


def _parse_count(s: str) -> int:
    try:
        value = int(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError("count must be an integer") from e
    if value < 1:
        raise argparse.ArgumentTypeError("count must be >= 1")
    return value


def _parse_tz(s: str) -> tzinfo | None:
    if s == "utc":
        return UTC
    return None


def _print_stats(stats: Stats, timeline: list[TimelineBucket]) -> None:
    print(f"Total events:    {stats.total}")
    print(f"Failed events:   {stats.failed}")
    print(f"Unique IPs:      {stats.unique_ips}")
    print(f"Critical alerts: {stats.critical}")
    if timeline:
        print("\nTimeline (time  count  failed):")
        for b in timeline:
            print(f"  {b.time_label}  {b.total_count:5d}  {b.failed_count:6d}")


async def _export(session: AnalysisSession, export_dir: str | None) -> int:
    if export_dir is None:
        return 0
    report = session.export_report()
    if report is None:
        print("No analysis to export.", file=sys.stderr)
        return 1
    path = await write_report(report, export_dir)
    print(f"\nReport written to {path}")
    return 0


async def _cmd_analyze(args: argparse.Namespace) -> int:
    raw = Path(args.path).read_text(encoding="utf-8", errors="replace")
    session = AnalysisSession()
    reply = await session.ingest(raw)
    print(reply)
    return await _export(session, args.export)


async def _cmd_demo(args: argparse.Namespace) -> int:
    rng = random.Random(args.seed) if args.seed is not None else None
    if not args.analyze:
        stats, timeline = aggregate(generate(args.count, rng=rng), tz=_parse_tz(args.tz))
        _print_stats(stats, timeline)
        return 0

    session = AnalysisSession(rng=rng)
    reply = await session.run_demo(args.count)
    print(reply)
    return await _export(session, args.export)


def _cmd_stats(args: argparse.Namespace) -> int:
    raw = Path(args.path).read_text(encoding="utf-8", errors="replace")
    batch = filter_by_ip(normalize(raw), args.ip or "")
    stats, timeline = aggregate(batch, tz=_parse_tz(args.tz))
    _print_stats(stats, timeline)
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    p = argparse.ArgumentParser(description="Security log analysis (local stats + Gemini report).")
    sub = p.add_subparsers(dest="command", required=True)

    p_analyze = sub.add_parser("analyze", help="Send a log file for analysis")
    p_analyze.add_argument("path")
    p_analyze.add_argument(
        "--export", metavar="DIR", default=None, help="Write a JSON report to DIR"
    )

    p_stats = sub.add_parser("stats", help="Local counters and timeline (no analyzer call)")
    p_stats.add_argument("path")
    p_stats.add_argument("--ip", default=None, help="Only records whose ip contains this text")
    p_stats.add_argument("--tz", choices=["utc", "local"], default="local")

    p_demo = sub.add_parser("demo", help="Generate synthetic logs with a brute-force burst")
    p_demo.add_argument("--count", type=_parse_count, default=DEMO_COUNT)
    p_demo.add_argument("--seed", type=int, default=None)
    p_demo.add_argument("--tz", choices=["utc", "local"], default="local")
    p_demo.add_argument(
        "--analyze", action="store_true", help="Also send the demo logs for analysis"
    )
    p_demo.add_argument("--export", metavar="DIR", default=None, help="Write a JSON report to DIR")

    args = p.parse_args(argv)
    configure_logging()

    try:
        if args.command == "analyze":
            code = asyncio.run(_cmd_analyze(args))
        elif args.command == "demo":
            code = asyncio.run(_cmd_demo(args))
        else:
            code = _cmd_stats(args)
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    raise SystemExit(code)


if __name__ == "__main__":
    main()
