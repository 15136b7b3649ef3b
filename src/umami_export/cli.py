#!/usr/bin/env python3
from __future__ import annotations
import argparse
import sys
from typing import List, Optional

from dotenv import load_dotenv

from umami_export.common.output import write_totals
from umami_export.common.secrets import load_umami_secret, merge_umami_secret_into_env
from umami_export.errors import UmamiError
from umami_export.pipeline import export_path_visitors, stderr_log
from umami_export.settings import DEFAULT_LIMIT, Settings

ENV_HELP = (
    "Env vars (optional defaults):\n"
    "  UMAMI_BASE_URL, UMAMI_WEBSITE_ID, UMAMI_SHARE_ID, UMAMI_USERNAME,\n"
    "  UMAMI_PASSWORD, UMAMI_TOKEN, UMAMI_LIMIT, UMAMI_TIMEOUT_S, UMAMI_SECRET_ARN"
)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="umami-export",
        description="Umami export CLI",
        epilog=ENV_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = ap.add_subparsers(dest="command", metavar="<command>")

    exp = sub.add_parser(
        "export-path-visitors",
        help="Export visitors aggregated by URL path",
        description="Export visitors aggregated by normalized URL path as JSON.",
        epilog=ENV_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    req = exp.add_argument_group("required")
    req.add_argument(
        "--baseUrl",
        dest="base_url",
        help="Base URL, e.g. https://analytics.example.com (or env UMAMI_BASE_URL)",
    )
    req.add_argument("--startAt", dest="start_at", help="Start time (epoch ms)")
    req.add_argument("--endAt", dest="end_at", help="End time (epoch ms)")

    site = exp.add_argument_group("website")
    site.add_argument(
        "--websiteId",
        dest="website_id",
        help="Website ID (or env UMAMI_WEBSITE_ID). With --shareId it may be "
        "omitted; the share response's websiteId is used.",
    )

    auth = exp.add_argument_group("auth (choose ONE)")
    auth.add_argument("--shareId", dest="share_id", help="Share ID (or env UMAMI_SHARE_ID)")
    auth.add_argument(
        "--username",
        help="Username (or env UMAMI_USERNAME), requires --password / UMAMI_PASSWORD",
    )
    auth.add_argument("--password", help="Password (or env UMAMI_PASSWORD)")
    auth.add_argument("--token", help="Bearer token (or env UMAMI_TOKEN)")

    other = exp.add_argument_group("output and paging")
    other.add_argument(
        "--out",
        help="Write JSON to a file or s3://bucket/key (default: stdout)",
    )
    other.add_argument(
        "--limit", help=f"Page size (default: UMAMI_LIMIT or {DEFAULT_LIMIT})"
    )
    other.add_argument(
        "--timeout", help="Per-request timeout in seconds (default: none)"
    )
    other.add_argument(
        "--quiet", action="store_true", help="Only print errors to stderr"
    )
    exp.set_defaults(func=cmd_export_path_visitors)
    return ap


def cmd_export_path_visitors(args: argparse.Namespace) -> int:
    log = (lambda msg: None) if args.quiet else stderr_log
    merge_umami_secret_into_env(load_umami_secret())
    cfg = Settings.from_args(args)
    result = export_path_visitors(cfg, log=log)
    dest = write_totals(result.totals, cfg.out)
    if cfg.out:
        log(f"[umami-export] wrote {len(result.totals)} paths to {dest}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(override=False)
    ap = build_parser()
    args = ap.parse_args(argv)
    if not getattr(args, "func", None):
        ap.print_help()
        return 0
    try:
        return args.func(args)
    except UmamiError as e:
        print(str(e).rstrip(), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
