"""Base class for user-invocable commands.

Every subclass with a ``command_id`` is registered in ``CommandBase.registry`` when it is
defined, which is how the extension discovers the commands it exposes to the host.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from core.editor.interface import EditorHost
    from core.trans.manager import TransManager

__all__: list[str] = ["CommandBase"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class CommandBase(ABC):
    """Base class for commands run by the extension.

    Attributes:
        command_id (ClassVar[str]): Identifier the host uses to invoke the command.
        title (ClassVar[str]): Human readable name.
        registry (ClassVar[dict[str, type[CommandBase]]]): Registered command classes by identifier.
        host (EditorHost): Editor the command operates on.
        trans_manager (TransManager): Translation manager shared by all commands.
    """

    command_id: ClassVar[str] = ""
    title: ClassVar[str] = ""
    registry: ClassVar[dict[str, type[CommandBase]]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        """Register the subclass under its command identifier.

        Raises:
            ValueError: If another command already uses the identifier.
        """
        super().__init_subclass__(**kwargs)
        if not cls.command_id:
            return

        if cls.command_id in CommandBase.registry:
            msg: str = f"A command with the id '{cls.command_id}' is already registered."
            raise ValueError(msg)
        CommandBase.registry[cls.command_id] = cls

    def __init__(self, host: EditorHost, trans_manager: TransManager) -> None:
        self.host: EditorHost = host
        self.trans_manager: TransManager = trans_manager

    @abstractmethod
    async def run(self) -> None:
        """Execute the command.

        Implementations report failures to the user through the host and do not raise for
        expected error conditions.
        """
        raise NotImplementedError
