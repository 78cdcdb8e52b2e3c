# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for scorerun.

This is the single root command; every operation is a subcommand of
`scorerun`. The global options (--config, --log-level, --dry-run) are
inherited by every subcommand through argparse's parent parser mechanism.

Usage:
    scorerun run --config config.yaml
    scorerun run --config config.yaml --num-threads 4 --no-progress
    scorerun info
"""

import argparse
import sys

from scorerun.cli.commands import handle_info, handle_run
from scorerun.cli.exit_codes import USER_ERROR
from scorerun.config.loader import DEFAULT_CONFIG_PATH


def _build_global_parser() -> argparse.ArgumentParser:
    """
    Build the parent parser with global options.

    We use a separate parent parser (with add_help=False) so that help text
    doesn't collide between the parent and the subcommand parsers.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=str(DEFAULT_CONFIG_PATH),
        help=f"Path to YAML configuration file (default: {DEFAULT_CONFIG_PATH}).",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level (overrides the config file).",
    )
    parent.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Show what would run without starting any process.",
    )
    return parent


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    """
    Register all subcommands with their handler functions.

    Each subcommand gets the global options from the parent parser and sets
    its handler function via set_defaults(func=...).
    """
    commands = [
        ("run", "Score and visualize every input case, then write the report.", handle_run),
        ("info", "Display environment and version info.", handle_info),
    ]

    for name, help_text, handler in commands:
        parser = subparsers.add_parser(name, parents=[parent], help=help_text)
        parser.set_defaults(func=handler, num_threads=None, no_progress=False)

    run_parser = subparsers.choices["run"]
    run_parser.add_argument(
        "--num-threads",
        type=int,
        default=None,
        dest="num_threads",
        help="Concurrent tester processes (overrides parallel.num_threads; 0 = one per CPU).",
    )
    run_parser.add_argument(
        "--no-progress",
        action="store_true",
        default=False,
        dest="no_progress",
        help="Disable the live progress bars.",
    )


def build_parser() -> argparse.ArgumentParser:
    parent = _build_global_parser()
    root_parser = argparse.ArgumentParser(
        prog="scorerun",
        description="scorerun: batch scoring and visualization of solver outputs.",
        parents=[parent],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, parent)
    return root_parser


def main() -> None:
    """
    Main CLI entrypoint. This is what pyproject.toml's [project.scripts] points to.

    If no subcommand is given, we show help and exit with USER_ERROR.
    """
    root_parser = build_parser()
    args = root_parser.parse_args()

    if not hasattr(args, "func") or args.func is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
