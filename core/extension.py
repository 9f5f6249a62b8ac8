"""Extension lifecycle: activation, command dispatch and deactivation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Self

from core.commands import CommandBase
from core.trans.manager import TransManager
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from core.editor.interface import EditorHost
    from models.config_models import Config

__all__: list[str] = ["EXTENSION_NAME", "Extension", "UnknownCommandError"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

EXTENSION_NAME: str = "zemizer-translator"


class UnknownCommandError(KeyError):
    """No command is registered under the requested identifier."""


class Extension:
    """The extension as seen by its host.

    ``activate()`` sets up the translation engine and one instance of every registered command;
    ``execute()`` runs a command by identifier; ``deactivate()`` releases the engine.

    Args:
        config (Config): Application configuration.
        host (EditorHost): Editor the commands operate on.
    """

    def __init__(self, config: Config, host: EditorHost) -> None:
        self.config: Config = config
        self.host: EditorHost = host
        self.trans_manager: TransManager = TransManager(config)
        self.commands: dict[str, CommandBase] = {}
        self._active: bool = False

    async def __aenter__(self) -> Self:
        self.activate()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        _ = exc_type, exc_val, exc_tb
        await self.deactivate()

    @property
    def is_active(self) -> bool:
        return self._active

    def activate(self) -> None:
        if self._active:
            logger.debug("'%s' is already active", EXTENSION_NAME)
            return

        self.trans_manager.initialize()
        for command_id, command_cls in CommandBase.registry.items():
            self.commands[command_id] = command_cls(self.host, self.trans_manager)
            logger.debug("Registered command '%s'", command_id)

        self._active = True
        logger.info('Congratulations, extension "%s" is now active!', EXTENSION_NAME)

    async def execute(self, command_id: str) -> None:
        """Run the command registered under ``command_id``.

        Raises:
            RuntimeError: If the extension has not been activated.
            UnknownCommandError: If no such command exists.
        """
        if not self._active:
            msg = "The extension must be activated before executing commands"
            raise RuntimeError(msg)

        command: CommandBase | None = self.commands.get(command_id)
        if command is None:
            msg: str = f"Unknown command '{command_id}'. Available: {', '.join(sorted(self.commands))}"
            raise UnknownCommandError(msg)

        logger.info("Executing command '%s'", command_id)
        await command.run()

    async def deactivate(self) -> None:
        await self.trans_manager.close()
        self.commands.clear()
        self._active = False
        logger.info("'%s' deactivated", EXTENSION_NAME)
