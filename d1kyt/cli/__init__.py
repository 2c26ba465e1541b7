"""Entry point for the ``d1-kyt`` command line."""

import logging

from d1kyt import log
from d1kyt.domain.exceptions import D1KytError
from d1kyt.log import logger
from d1kyt.ui import ui

logger = logger.getChild(__name__)


def _log_level(args) -> int:
    if args.quiet:
        return logging.CRITICAL
    if args.verbose:
        return logging.DEBUG
    return logging.INFO


def main(argv=None) -> int:
    """Run the d1-kyt CLI.

    Args:
        argv: Command line arguments, ``sys.argv[1:]`` when omitted.

    Returns:
        Process exit code.
    """
    from d1kyt.cli.parser import parse_args

    args = parse_args(argv)
    log.setup(_log_level(args))

    try:
        cmd = args.func(args)
        return cmd.do_run()
    except D1KytError as exc:
        logger.debug("Command %s failed", args.cmd, exc_info=True)
        ui.error_write(f"Error: {exc}")
        return 1
