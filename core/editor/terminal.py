"""Terminal implementation of the editor host.

The "document" is a text file, or standard input when no file is given, and the "selection"
is an inclusive range of 1-based line numbers. Prompts and notifications are written to
standard error so that standard output only ever carries the edited document.
"""

from __future__ import annotations

import asyncio
import sys
from typing import TYPE_CHECKING, TextIO

from core.editor.interface import EditorHost
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Iterable, Sequence
    from pathlib import Path

__all__: list[str] = ["SelectionRangeError", "TerminalEditor"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class SelectionRangeError(ValueError):
    """The requested line range does not fit the document."""


class TerminalEditor(EditorHost):
    """Editor host backed by a file (or stdin) and the terminal.

    Args:
        path (Path | None): File to edit. None reads the document from ``stdin`` and prints the
            edited document to ``stdout``.
        start_line (int | None): First selected line, 1-based. Defaults to the first line.
        end_line (int | None): Last selected line, inclusive. Defaults to the last line and is
            clamped to the document length.
        answers (Iterable[str | None] | None): Scripted quick-pick answers, one per prompt in
            order. A None entry, or running out of answers, prompts interactively instead. In stdin
            mode there is no input left to prompt with, so such a prompt is dismissed.
        stdin, stdout, stderr (TextIO | None): Streams, defaulting to the ``sys`` ones.

    Raises:
        SelectionRangeError: If the line range is invalid for the document.
        OSError: If the file cannot be read.
    """

    def __init__(
        self,
        path: Path | None = None,
        *,
        start_line: int | None = None,
        end_line: int | None = None,
        answers: Iterable[str | None] | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.path: Path | None = path
        self._stdin: TextIO = stdin or sys.stdin
        self._stdout: TextIO = stdout or sys.stdout
        self._stderr: TextIO = stderr or sys.stderr
        self._answers: list[str | None] = list(answers or [])

        self.document: str = self._read_document()
        self._start, self._end = self._selection_offsets(start_line, end_line)
        logger.debug("Selection offsets: %d-%d of %d characters", self._start, self._end, len(self.document))

    def _read_document(self) -> str:
        if self.path is None:
            return self._stdin.read()
        # newline="" keeps the original line endings when the file is written back.
        with self.path.open(encoding="utf-8", newline="") as f:
            return f.read()

    def _selection_offsets(self, start_line: int | None, end_line: int | None) -> tuple[int, int]:
        lines: list[str] = self.document.splitlines(keepends=True)
        if start_line is None and end_line is None:
            return 0, len(self.document)

        first: int = start_line if start_line is not None else 1
        last: int = min(end_line if end_line is not None else len(lines), len(lines))
        if first < 1 or first > len(lines) or last < first:
            msg: str = f"Invalid line range {start_line}-{end_line} for a document of {len(lines)} lines"
            raise SelectionRangeError(msg)

        start: int = sum(len(line) for line in lines[: first - 1])
        end: int = start + sum(len(line) for line in lines[first - 1 : last])
        return start, end

    def get_selected_text(self) -> str | None:
        return self.document[self._start : self._end]

    async def quick_pick(self, items: Sequence[str], *, placeholder: str) -> str | None:
        """Pick an item by number or by name.

        An exact (case-insensitive) name wins; otherwise a text matching exactly one item is
        accepted. Empty input or end of input dismisses the prompt.
        """
        answer: str | None = self._answers.pop(0) if self._answers else None
        if answer is not None:
            picked: str | None = self._match(items, answer)
            logger.debug("Scripted answer '%s' for '%s' resolved to '%s'", answer, placeholder, picked)
            return picked

        if self.path is None:
            logger.warning("Cannot prompt for '%s': standard input holds the document", placeholder)
            return None

        self._print_items(items, placeholder)
        while True:
            self._stderr.write("> ")
            self._stderr.flush()
            line: str = await asyncio.to_thread(self._stdin.readline)
            if not line or not line.strip():
                logger.debug("Quick pick '%s' dismissed", placeholder)
                return None

            picked = self._match(items, line.strip())
            if picked is not None:
                return picked
            print(f"No single item matches '{line.strip()}'. Try again or press Enter to cancel.", file=self._stderr)

    def _print_items(self, items: Sequence[str], placeholder: str) -> None:
        width: int = len(str(len(items)))
        print(placeholder, file=self._stderr)
        for number, item in enumerate(items, start=1):
            print(f"  {number:>{width}}. {item}", file=self._stderr)

    @staticmethod
    def _match(items: Sequence[str], text: str) -> str | None:
        if text.isdigit():
            index: int = int(text) - 1
            return items[index] if 0 <= index < len(items) else None

        folded: str = text.casefold()
        for item in items:
            if item.casefold() == folded:
                return item

        candidates: list[str] = [item for item in items if folded in item.casefold()]
        return candidates[0] if len(candidates) == 1 else None

    def show_information_message(self, message: str) -> None:
        logger.debug("Information notification: %s", message)
        print(message, file=self._stderr)

    def show_error_message(self, message: str) -> None:
        logger.debug("Error notification: %s", message)
        print(message, file=self._stderr)

    async def replace_selection(self, text: str) -> bool:
        """Splice ``text`` into the document and write it out.

        Returns:
            bool: False if the file could not be written; the in-memory document is then unchanged.
        """
        edited: str = self.document[: self._start] + text + self.document[self._end :]

        if self.path is None:
            self._stdout.write(edited)
            self._stdout.flush()
        else:
            try:
                await asyncio.to_thread(self._write_file, self.path, edited)
            except OSError as err:
                logger.error("Failed to write '%s': %s", self.path, err)
                return False

        self.document = edited
        self._end = self._start + len(text)
        logger.info("Replaced selection with %d characters", len(text))
        return True

    @staticmethod
    def _write_file(path: Path, content: str) -> None:
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(content)
