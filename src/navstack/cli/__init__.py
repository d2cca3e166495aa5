"""navstack CLI: wiring validation and stack inspection.

Entry point registered as ``navstack`` in ``pyproject.toml``::

    [project.scripts]
    navstack = "navstack.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``navstack`` command."""
    parser = argparse.ArgumentParser(
        prog="navstack",
        description="navstack: inspect and validate navigation coordinators.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- navstack check ---------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Validate stack and layout wiring")
    check_parser.add_argument(
        "coordinator",
        help="Import string (e.g. myapp.nav:coordinator)",
    )

    # -- navstack stacks --------------------------------------------------
    stacks_parser = subparsers.add_parser("stacks", help="Print the stack tree")
    stacks_parser.add_argument(
        "coordinator",
        help="Import string (e.g. myapp.nav:coordinator)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "check":
        from navstack.cli._check import run_check

        run_check(args)
    elif args.command == "stacks":
        from navstack.cli._stacks import run_stacks

        run_stacks(args)
