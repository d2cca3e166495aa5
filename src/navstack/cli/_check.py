"""``navstack check``: wiring validation command.

Resolves an import string to a Coordinator, runs the contract checks and
prints the summary.  Exits with code 1 if errors are found.
"""

import argparse
import sys

from navstack.cli._resolve import resolve_coordinator
from navstack.contracts import check_coordinator


def run_check(args: argparse.Namespace) -> None:
    try:
        coordinator = resolve_coordinator(args.coordinator)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    result = check_coordinator(coordinator)
    print(result.summary())
    if not result.ok:
        raise SystemExit(1)
