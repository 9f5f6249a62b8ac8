"""Narrow interface between the commands and the editor hosting them.

Commands only talk to the editor through ``EditorHost``, which keeps the translation logic
testable without a running editor.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__: list[str] = ["EditorHost"]


class EditorHost(ABC):
    """Editor capabilities a command may use."""

    @abstractmethod
    def get_selected_text(self) -> str | None:
        """Get the text of the current selection.

        Returns:
            str | None: The selected text. None or "" when there is no active editor or selection.
        """
        raise NotImplementedError

    @abstractmethod
    async def quick_pick(self, items: Sequence[str], *, placeholder: str) -> str | None:
        """Ask the user to pick one item from a list.

        Args:
            items (Sequence[str]): Items to choose from, in display order.
            placeholder (str): Prompt shown with the list.

        Returns:
            str | None: The picked item, or None if the prompt was dismissed.
        """
        raise NotImplementedError

    @abstractmethod
    def show_information_message(self, message: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def show_error_message(self, message: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def replace_selection(self, text: str) -> bool:
        """Replace the current selection with ``text``.

        Returns:
            bool: True if the document was edited, False if the host refused the edit.
        """
        raise NotImplementedError
