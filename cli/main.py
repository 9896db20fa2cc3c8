"""CLI entry point."""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from common.logging_config import setup_logging
from aas_sdk.exceptions import AasError
from cli.commands import close_client, configure, dispatch_command
from cli.config import DEFAULT_CONFIG_PATH, Config
from cli.constants import HELP_TEXT
from cli.parser import ParseError, parse_tokens
from cli.repl import repl_loop


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aas",
        description="Archive files to disc with the AAS service. Run without a command for an interactive shell.",
        epilog=HELP_TEXT,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--client-id", help="API client id (default: $AAS_CLIENT_ID)")
    parser.add_argument("--secret", help="API secret (default: $AAS_SECRET)")
    parser.add_argument("--server", help="Service base URL (default: $AAS_SERVER or the public service)")
    parser.add_argument("--max-chunk-bytes", type=int, help="Chunked upload threshold (default: $AAS_MAX_CHUNK_BYTES or 1 GiB)")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to config JSON file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("command", nargs=argparse.REMAINDER, help="Command and its arguments")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Entry point for CLI.

    Returns:
        Process exit status: 0 on success, 1 on error
    """
    args = build_arg_parser().parse_args(argv)

    logger = setup_logging(('cli', 'aas_sdk'), log_level='DEBUG' if args.debug else None)
    if args.debug:
        logger.info("Debug logging enabled")

    try:
        config = Config(args.config)
        config.apply_overrides(
            client_id=args.client_id,
            secret=args.secret,
            server=args.server,
            max_chunk_bytes=args.max_chunk_bytes,
            timeout=args.timeout,
        )
        configure(config)

        if not args.command:
            repl_loop()
            return 0

        print(dispatch_command(parse_tokens(args.command)))
        return 0
    except (ParseError, AasError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        close_client()


if __name__ == "__main__":
    sys.exit(main())
