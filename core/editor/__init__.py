"""Editor host abstraction and the terminal host used by the command-line entry point."""

from core.editor.interface import EditorHost
from core.editor.terminal import SelectionRangeError, TerminalEditor

__all__: list[str] = ["EditorHost", "SelectionRangeError", "TerminalEditor"]
