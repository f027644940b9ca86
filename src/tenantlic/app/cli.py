# src/tenantlic/app/cli.py
"""
Command line entry point.

    tenantlic copy-license --source alice@contoso.com --target bob@contoso.com --target carol@contoso.com
    tenantlic diff-catalog --snapshot ./license_catalog.csv

Credentials come from config/appsettings.json or TENANTLIC_* environment variables.
"""
from __future__ import annotations
import argparse
import sys
from typing import List, Optional

from tenantlic.app import orchestrator
from tenantlic.app.log import setup_logging
from tenantlic.core.auth import AuthError
from tenantlic.core.errors import LicenseToolError
from tenantlic.http.errors import HttpError
from tenantlic.report.render import render_changes, render_copy_results


EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tenantlic", description="Microsoft 365 license admin helpers.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging incl. HTTP calls")
    sub = parser.add_subparsers(dest="command", required=True)

    cp = sub.add_parser("copy-license", help="Copy one user's licenses onto other users")
    cp.add_argument("--source", required=True, help="UPN or object id of the reference user")
    cp.add_argument("--target", dest="targets", action="append", required=True,
                    help="UPN or object id of a user to update (repeatable)")
    cp.add_argument("--copy-usage-location", action="store_true",
                    help="Set the source's usageLocation on targets that have none")

    df = sub.add_parser("diff-catalog", help="Report new SKUs/service plans since the last snapshot")
    df.add_argument("--snapshot", help="Snapshot CSV path (default: per-tenant data dir)")
    return parser


def _print_lines(lines: List[str]) -> None:
    for line in lines:
        print(line)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        if args.command == "copy-license":
            results = orchestrator.copy_user_license(
                args.targets, args.source, copy_usage_location=args.copy_usage_location
            )
            _print_lines(render_copy_results(results))
            return EXIT_OK if all(r.ok for r in results) else EXIT_PARTIAL

        changes = orchestrator.diff_license_catalog(args.snapshot)
        _print_lines(render_changes(changes))
        return EXIT_OK

    except (AuthError, LicenseToolError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        if e.hint:
            print(f"  hint: {e.hint}", file=sys.stderr)
        return EXIT_FATAL
    except HttpError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FATAL


if __name__ == "__main__":
    sys.exit(main())
