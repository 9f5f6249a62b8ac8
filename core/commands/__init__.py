"""User-invocable commands.

Importing this package registers every command with ``CommandBase.registry``.
"""

from core.commands.base import CommandBase
from core.commands.hello import HelloWorldCommand
from core.commands.translate import TranslateCommand

__all__: list[str] = ["CommandBase", "HelloWorldCommand", "TranslateCommand"]
