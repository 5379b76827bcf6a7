from __future__ import annotations

import argparse
import logging
import sys

from prepush.config import ConfigError, resolve_config
from prepush.hook import HookError, find_hooks_dir, install_hook
from prepush.runner import LaunchFault, OverallStatus, TaskRunner, tasks_from_config

from .args import build_parser

LAUNCH_FAULT_EXIT = 127


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        _setup_logging(args.verbose)

        match args.command:
            case None | "run":
                return cmd_run(args)
            case "list":
                return cmd_list(args)
            case "install":
                return cmd_install(args)
            case _:
                return 2

    except LaunchFault as exc:
        print(f"error: {exc}", file=sys.stderr)
        return LAUNCH_FAULT_EXIT

    except (ConfigError, HookError) as exc:
        print(str(exc), file=sys.stderr)
        return 2

    except KeyboardInterrupt:
        return 130


def main() -> None:
    sys.exit(run_cli())


def cmd_run(args: argparse.Namespace) -> int:
    config = resolve_config(args.config)
    if args.names:
        config = config.select(args.names)

    status = TaskRunner().run(tasks_from_config(config))
    _print_result(status)
    return exit_code(status)


def cmd_list(args: argparse.Namespace) -> int:
    config = resolve_config(args.config)
    for task in config:
        print(f"{task.name} (quiet)" if task.quiet else task.name)
    return 0


def cmd_install(args: argparse.Namespace) -> int:
    if args.config is not None:
        # Fail now rather than on the next push.
        resolve_config(args.config)

    target = install_hook(find_hooks_dir(), config=args.config, force=args.force)
    print(f"Installed {target}")
    return 0


def exit_code(status: OverallStatus) -> int:
    """Turn the aggregate status into a process exit code."""
    if status.ok:
        return 0

    code = status.exit_status
    if code < 0:
        return 128 - code
    if code % 256 == 0:
        return 1
    return code % 256


def _print_result(status: OverallStatus) -> None:
    for result in status.results:
        if result.ok:
            print(f"OK {result.task_name}, {result.duration_s:.3f}s, exit code = 0")
        else:
            print(
                f"FAIL {result.task_name}, {result.duration_s:.3f}s, exit code = {result.exit_status}"
            )


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
