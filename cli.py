#!/usr/bin/env python3
"""
pagediff CLI
Compare the structured data (JSON-LD) or the simplified HTML of two pages.
"""

import argparse
import asyncio
import logging
import sys
import uuid
from pathlib import Path
from typing import List, Tuple

from rich.markup import escape

from pagediff.fetch import FetchError, FetchSettings
from pagediff.logs import setup as setup_logs
from pagediff.render import make_console
from pipelines.html_diff import run as run_html
from pipelines.schema_diff import run as run_schema


def normalize_host(host: str) -> str:
    """Prefix ``https://`` when the host carries no scheme."""
    if not host.startswith("http://") and not host.startswith("https://"):
        return f"https://{host}"
    return host


def normalize_path(path: str) -> str:
    return path if path.startswith("/") else f"/{path}"


def build_urls(targets: List[str]) -> Tuple[str, str]:
    """
    Turn positional arguments into the two URLs to compare.

        [url1, url2]          -> as given
        [host1, host2, path]  -> https://host1/path, https://host2/path
    """
    if len(targets) == 2:
        return targets[0], targets[1]

    if len(targets) == 3:
        host_a, host_b, path = targets
        path = normalize_path(path)
        return normalize_host(host_a) + path, normalize_host(host_b) + path

    raise ValueError("expected <url1> <url2> or <host1> <host2> <path>")


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or more, got {value}")
    return number


def positive_float(value: str) -> float:
    number = float(value)
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value}")
    return number


def fetch_settings(timeout: float, user_agent: str) -> FetchSettings:
    """
    Settings for one run. ``timeout`` bounds the whole request, so the
    connect and read limits never exceed it.
    """
    defaults = FetchSettings()
    return FetchSettings(
        total=timeout,
        connect=min(defaults.connect, timeout),
        sock_read=timeout,
        user_agent=user_agent
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagediff",
        description="Compare JSON-LD structured data or simplified HTML of two pages."
    )
    parser.add_argument("--timeout", type=positive_float, default=FetchSettings.total,
                        help="Request timeout in seconds; connect and read limits are capped to it")
    parser.add_argument("--user-agent", default=FetchSettings.user_agent)
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="cmd", required=True)

    # ───────────────────────── SCHEMA DIFF ─────────────────────────
    ps = sub.add_parser("schema", help="Compare JSON-LD structured data")
    ps.add_argument("targets", nargs="+", metavar="TARGET",
                    help="<url1> <url2> or <host1> <host2> <path>")
    ps.add_argument("--json-out", type=Path, default=None,
                    help="Also write the report as JSON to this path")

    # ───────────────────────── HTML DIFF ─────────────────────────
    ph = sub.add_parser("html", help="Compare simplified and formatted HTML")
    ph.add_argument("targets", nargs="+", metavar="TARGET",
                    help="<url1> <url2> or <host1> <host2> <path>")
    ph.add_argument("--context", type=non_negative_int, default=3,
                    help="Unchanged lines kept at each end of a long unchanged run")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        url_a, url_b = build_urls(args.targets)
    except ValueError as e:
        parser.error(str(e))

    log = setup_logs(
        level=getattr(logging, args.log_level),
        run_id=uuid.uuid4().hex[:12],
        mode=args.cmd
    )
    console = make_console()
    settings = fetch_settings(args.timeout, args.user_agent)

    if len(args.targets) == 3:
        console.print("[blue]Constructed URLs:[/blue]")
        console.print(f"   [dim]URL 1:[/dim] {escape(url_a)}")
        console.print(f"   [dim]URL 2:[/dim] {escape(url_b)}")
        console.print()

    # ───────────────────────── DISPATCH COMMANDS ─────────────────────────
    try:
        if args.cmd == "schema":
            asyncio.run(run_schema(url_a, url_b, args.json_out, settings, console, log))
        elif args.cmd == "html":
            asyncio.run(run_html(url_a, url_b, settings, console, args.context, log))
        else:
            parser.print_help()
            return 2

    except FetchError as e:
        log.error("fetch failed", extra={"url": e.url, "error_code": "FETCH_FAIL"})
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
