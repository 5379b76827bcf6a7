from __future__ import annotations

import argparse

from prepush import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prepush",
        description="Run the repository's pre-push checks in parallel.",
    )

    parser.add_argument(
        "--config",
        default=None,
        help="Path to config file (default: prepush.yml if present, else built-in checks)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log launches and completions to stderr",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.set_defaults(names=[])

    subparsers = parser.add_subparsers(dest="command")

    # run
    run = subparsers.add_parser("run", help="Run checks (default)")
    run.add_argument(
        "names",
        nargs="*",
        help="Only run these checks",
    )

    # list
    subparsers.add_parser("list", help="List checks in launch order")

    # install
    install = subparsers.add_parser("install", help="Install the git pre-push hook")
    install.add_argument(
        "--force",
        action="store_true",
        help="Replace an existing pre-push hook",
    )

    return parser
