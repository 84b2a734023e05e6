#!/usr/bin/env python3
"""
Jamulus Dashboard - live terminal view of a session's participants

Usage:
    python run.py <host>

Examples:
    python run.py jamulus.example.org          # https://jamulus.example.org/events
    python run.py localhost:8123               # https://localhost:8123/events

Keys: q / Ctrl-C quit, r full repaint.
"""

import argparse
import asyncio
import locale
import sys


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog='jamulus-dashboard',
        description='Live terminal dashboard for a Jamulus session',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py jamulus.example.org     Connect to https://jamulus.example.org/events

Keys:
  q, Ctrl-C   quit
  r           full repaint
"""
    )
    parser.add_argument('host', help='Server host (and optional port) publishing the event stream')

    args = parser.parse_args(argv)

    from core.config import settings
    from core.logging_utils import setup_logging
    logger = setup_logging(settings.log_level, settings.log_file)

    # Clock column uses the user's locale time format
    try:
        locale.setlocale(locale.LC_TIME, "")
    except locale.Error as e:
        logger.debug("Locale unavailable, using C time format: %s", e)

    from dashboard.controller import run_dashboard
    return asyncio.run(run_dashboard(args.host))


if __name__ == "__main__":
    sys.exit(main())
