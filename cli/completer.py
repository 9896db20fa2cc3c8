"""Custom completer for AAS CLI with local path autocompletion."""

from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS


class AasCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Local file and directory completion for 'upload' paths (after the collection id)
    """

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        if tokens[0].lower() != "upload":
            return

        # The collection id comes first; paths start at the third token.
        position = len(tokens) if is_typing_new_token else len(tokens) - 1
        if position < 2 or tokens[position - 1] == "--prefix":
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        already_typed = set(tokens[2:])
        if not is_typing_new_token:
            already_typed.discard(current_word)

        yield from self._complete_paths(current_word, already_typed)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_paths(self, partial: str, exclude: set) -> Iterable[Completion]:
        """
        Complete local paths relative to the current directory.

        Directories are suggested with a trailing '/'; hidden entries are skipped
        unless the partial name starts with '.'.
        """
        directory_part, _, name_part = partial.rpartition("/")
        prefix = f"{directory_part}/" if directory_part or partial.startswith("/") else ""
        search_dir = Path.cwd() / directory_part if directory_part else (
            Path("/") if partial.startswith("/") else Path.cwd()
        )

        if not search_dir.is_dir():
            return

        for item in sorted(search_dir.iterdir(), key=lambda p: p.name):
            if item.name.startswith(".") and not name_part.startswith("."):
                continue
            if not item.name.lower().startswith(name_part.lower()):
                continue
            candidate = f"{prefix}{item.name}" + ("/" if item.is_dir() else "")
            if candidate in exclude or candidate.rstrip("/") in exclude:
                continue
            yield Completion(candidate, start_position=-len(partial))
