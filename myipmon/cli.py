"""Command-line entry point for the dashboard."""

from __future__ import annotations

import argparse
import functools
import sys
from argparse import ArgumentParser

from loguru import logger
from rich.console import Console
from rich.live import Live

from myipmon import __version__, configure_logging
from myipmon.exceptions import StartupError
from myipmon.public_ip import GLOBAL_TIMEOUT_S, REQUEST_TIMEOUT_S, PublicIpResolver
from myipmon.rates import HISTORY_SIZE
from myipmon.reconcile import build_snapshot, refresh_snapshot
from myipmon.render import render
from myipmon.scheduler import MIN_TICK_S, TICK_S, RefreshScheduler
from myipmon.stats import PsutilStatsProvider, RawStatsProvider
from myipmon.terminal import TerminalSession


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="myipmon",
        description="Live terminal dashboard for network interfaces and the public IP.",
        epilog="Press 'q' or ESC to exit.",
    )
    parser.add_argument("--interval", type=float, default=TICK_S,
                        help=f"Refresh interval in seconds (default: {TICK_S})")
    parser.add_argument("--history", type=int, default=HISTORY_SIZE,
                        help=f"Samples kept per chart (default: {HISTORY_SIZE})")
    parser.add_argument("--ip-timeout", type=float, default=GLOBAL_TIMEOUT_S,
                        help=f"Overall public IP lookup deadline in seconds (default: {GLOBAL_TIMEOUT_S})")
    parser.add_argument("--request-timeout", type=float, default=REQUEST_TIMEOUT_S,
                        help=f"Per-endpoint request timeout in seconds (default: {REQUEST_TIMEOUT_S})")
    parser.add_argument("--endpoint", action="append", default=None, metavar="URL",
                        help="IP-echo endpoint, repeatable, tried in order (replaces the defaults)")
    parser.add_argument("--no-public-ip", action="store_true",
                        help="Skip the public IP lookup")
    parser.add_argument(
        "--netstat",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Backfill missing counters from 'netstat -i' at startup (default: on)",
    )
    parser.add_argument(
        "--debug-panel",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Show the debug information strip (default: on)",
    )
    parser.add_argument("--log-file", default=None, metavar="PATH",
                        help="Write logs to this file while the dashboard runs")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run_dashboard(snapshot, provider: RawStatsProvider, args, console: Console | None = None) -> None:
    """Own the terminal until the user quits; always restores it."""
    console = console or Console()
    tick_s = max(MIN_TICK_S, args.interval)
    draw_snapshot = functools.partial(
        render, rate_scale=1.0 / tick_s, show_debug=args.debug_panel
    )

    with TerminalSession() as term, Live(console=console, screen=True, auto_refresh=False) as live:

        def draw(snap) -> None:
            size = console.size
            live.update(draw_snapshot(snap, (size.width, size.height)), refresh=True)

        scheduler = RefreshScheduler(
            snapshot,
            refresh=functools.partial(refresh_snapshot, provider=provider),
            render=draw,
            poll_quit=term.poll_quit,
            tick_s=tick_s,
        )
        scheduler.run()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    handler_id = configure_logging(args.log_file)

    provider = PsutilStatsProvider()
    try:
        snapshot = build_snapshot(provider, history=max(2, args.history), use_netstat=args.netstat)
    except StartupError as e:
        if args.log_file:
            logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.no_public_ip:
        snapshot.public_ip = PublicIpResolver(
            args.endpoint,
            global_timeout=args.ip_timeout,
            request_timeout=args.request_timeout,
        ).resolve()

    # stderr belongs to the dashboard while it is on screen.
    if args.log_file is None:
        logger.remove(handler_id)
    try:
        run_dashboard(snapshot, provider, args)
    except KeyboardInterrupt:
        pass
    finally:
        if args.log_file is None:
            configure_logging()
    logger.info(f"exiting after {snapshot.cycle_count} refreshes")
    return 0
