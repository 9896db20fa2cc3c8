"""Command parser for CLI input."""

import shlex
from typing import Sequence

from common.constants import COLLECTION_TYPES
from cli.constants import SHIP_TO_FIELDS
from cli.models import (
    CommandRequest,
    CompleteCollectionCommand,
    CreateCollectionCommand,
    CreateOrderCommand,
    DeleteCollectionCommand,
    DeleteFileCommand,
    ListCollectionsCommand,
    ListFilesCommand,
    ListOrdersCommand,
    ListPartsCommand,
    ShowCollectionCommand,
    ShowFileCommand,
    ShowOrderCommand,
    UploadCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse a line of user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    return parse_tokens(tokens)


def parse_tokens(tokens: Sequence[str]) -> CommandRequest:
    """Parse already-split tokens (e.g. from sys.argv) into a CommandRequest."""
    if not tokens:
        raise ParseError("Empty command")

    command_name, args = tokens[0], list(tokens[1:])

    if command_name == "collections":
        _expect_args(command_name, args, 0)
        return ListCollectionsCommand()
    elif command_name == "create-collection":
        return _parse_create_collection(args)
    elif command_name == "show-collection":
        return ShowCollectionCommand(*_expect_args(command_name, args, 1, "<id>"))
    elif command_name == "complete-collection":
        return CompleteCollectionCommand(*_expect_args(command_name, args, 1, "<id>"))
    elif command_name == "delete-collection":
        return DeleteCollectionCommand(*_expect_args(command_name, args, 1, "<id>"))
    elif command_name == "files":
        return ListFilesCommand(*_expect_args(command_name, args, 1, "<collection_id>"))
    elif command_name == "show-file":
        return ShowFileCommand(*_expect_args(command_name, args, 2, "<collection_id> <file_id>"))
    elif command_name == "delete-file":
        return DeleteFileCommand(*_expect_args(command_name, args, 2, "<collection_id> <file_id>"))
    elif command_name == "parts":
        return ListPartsCommand(*_expect_args(command_name, args, 2, "<collection_id> <file_id>"))
    elif command_name == "upload":
        return _parse_upload(args)
    elif command_name == "orders":
        _expect_args(command_name, args, 0)
        return ListOrdersCommand()
    elif command_name == "show-order":
        return ShowOrderCommand(*_expect_args(command_name, args, 1, "<id>"))
    elif command_name == "create-order":
        return _parse_create_order(args)
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _expect_args(command_name: str, args: list[str], count: int, usage: str = "") -> list[str]:
    """Check that exactly count positional arguments were given."""
    if len(args) != count:
        if count == 0:
            raise ParseError(f"{command_name} takes no arguments")
        noun = "argument" if count == 1 else "arguments"
        raise ParseError(f"{command_name} requires exactly {count} {noun}: {usage}")
    return args


def _parse_create_collection(args: list[str]) -> CreateCollectionCommand:
    """Parse 'create-collection [type]' command."""
    if len(args) > 1:
        raise ParseError("create-collection takes at most 1 argument: [dvd_4_7G|blueray_25G]")
    if not args:
        return CreateCollectionCommand()
    if args[0] not in COLLECTION_TYPES:
        raise ParseError(f"Unknown collection type: {args[0]} (expected one of {', '.join(COLLECTION_TYPES)})")
    return CreateCollectionCommand(collection_type=args[0])


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <collection_id> <path>... [--prefix <dir>]' command."""
    prefix = ""
    positional = []
    i = 0
    while i < len(args):
        if args[i] == "--prefix":
            if i + 1 >= len(args):
                raise ParseError("--prefix requires a value")
            prefix = args[i + 1]
            i += 2
            continue
        positional.append(args[i])
        i += 1

    if len(positional) < 2:
        raise ParseError("upload requires a collection id and at least one local path")

    return UploadCommand(
        collection_id=positional[0],
        local_paths=tuple(positional[1:]),
        prefix=prefix,
    )


def _parse_create_order(args: list[str]) -> CreateOrderCommand:
    """Parse 'create-order <collection_id> <title> key=value... [--no-disc]' command."""
    no_disc = "--no-disc" in args
    args = [a for a in args if a != "--no-disc"]

    if len(args) < 2:
        raise ParseError("create-order requires <collection_id> <title> and shipping fields")

    collection_id, title = args[0], args[1]
    ship_to = []
    for pair in args[2:]:
        key, sep, value = pair.partition("=")
        if not sep:
            raise ParseError(f"Expected key=value, got: {pair}")
        if key not in SHIP_TO_FIELDS:
            raise ParseError(f"Unknown shipping field: {key} (expected one of {', '.join(SHIP_TO_FIELDS)})")
        ship_to.append((key, value))

    return CreateOrderCommand(
        collection_id=collection_id,
        title=title,
        ship_to=tuple(ship_to),
        no_disc=no_disc,
    )
