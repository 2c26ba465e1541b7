"""Argument parser for the ``d1-kyt`` console script."""

import argparse

from d1kyt import __version__
from d1kyt.commands import init, migrate

COMMANDS = [init, migrate]


def get_parent_parser(suppress: bool = False) -> argparse.ArgumentParser:
    """Options shared by every command.

    Args:
        suppress: Leave options unset when absent, so a subcommand's copy
            does not overwrite values given before the command name.
    """
    parent_parser = argparse.ArgumentParser(add_help=False)

    log_level_group = parent_parser.add_mutually_exclusive_group()
    log_level_group.add_argument(
        "-q",
        "--quiet",
        action="count",
        default=argparse.SUPPRESS if suppress else 0,
        help="Be quiet.",
    )
    log_level_group.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=argparse.SUPPRESS if suppress else 0,
        help="Be verbose.",
    )
    parent_parser.add_argument(
        "--cd",
        default=argparse.SUPPRESS if suppress else None,
        metavar="<path>",
        help="Run as if d1-kyt was started in <path>.",
    )
    return parent_parser


def get_main_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="d1-kyt",
        description="Opinionated SQLite/D1 migration toolkit.",
        parents=[get_parent_parser()],
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "-V", "--version", action="version", version=__version__
    )

    subparsers = parser.add_subparsers(
        title="Available Commands",
        metavar="COMMAND",
        dest="cmd",
        help="Use `d1-kyt COMMAND --help` for command-specific help.",
    )
    subparsers.required = True

    command_parent = get_parent_parser(suppress=True)
    for command in COMMANDS:
        command.add_parser(subparsers, command_parent)

    return parser


def parse_args(argv=None) -> argparse.Namespace:
    return get_main_parser().parse_args(argv)
