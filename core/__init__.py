"""Core of ZeTranslate.

This package contains the extension lifecycle, the user-invocable commands, the editor host
abstraction and the translation engines.
"""

from core.extension import EXTENSION_NAME, Extension, UnknownCommandError
from core.version import VERSION

__all__: list[str] = [
    "EXTENSION_NAME",
    "VERSION",
    "Extension",
    "UnknownCommandError",
]
