from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Final

from core.commands.base import CommandBase
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

__all__: list[str] = ["HelloWorldCommand"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

GREETING: Final[str] = "Hello from ZeMizer Translator!"


class HelloWorldCommand(CommandBase):
    """Show a greeting. Handy for checking that the extension is wired to the host."""

    command_id: ClassVar[str] = "zemizer-translator.helloWorld"
    title: ClassVar[str] = "Hello World"

    async def run(self) -> None:
        logger.debug("'%s' invoked", self.command_id)
        self.host.show_information_message(GREETING)
