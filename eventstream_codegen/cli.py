"""Command-line entry point for the event-stream code generator."""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .codegen.cli_integration import add_codegen_args, handle_codegen_command
from .logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="eventstream-codegen",
        description="Generate models and clients for event-stream RPC services",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  eventstream-codegen -l python -s aws.greengrass#GreengrassCoreIPC model.json
  eventstream-codegen -l cpp -s ns#Service --client-stubs -o out/ model.json
  eventstream-codegen --list-languages
  eventstream-codegen --language-info java
        """.strip(),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Only log warnings and errors")

    add_codegen_args(parser)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return its exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)
    logger.debug("Arguments: %s", vars(args))
    return handle_codegen_command(args)


if __name__ == "__main__":
    sys.exit(main())
