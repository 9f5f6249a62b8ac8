from __future__ import annotations

from typing import TYPE_CHECKING

from core.trans.engines import (
    DeeplTranslation,  # noqa: F401
    DeepTranslation,  # noqa: F401
    GoogleCloudTranslation,  # noqa: F401
)
from core.trans.interface import Result, TransInterface, TranslateExceptionError
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config
    from models.translation_models import TranslationInfo


__all__: list[str] = ["TransManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class TransManager:
    """Owner of the translation engine selected in the configuration.

    The manager creates the engine named by ``TRANSLATION.ENGINE``, hands out its supported
    languages and runs translations for ``TranslationInfo`` objects. It never retries a
    failed call; errors propagate to the caller unchanged.
    """

    def __init__(self, config: Config) -> None:
        self.config: Config = config
        self._engine: TransInterface | None = None
        logger.debug("Registered translation engines: %s", list(TransInterface.registered))

    def initialize(self) -> None:
        """Instantiate and initialize the configured engine.

        Failures are logged and leave the manager without an engine, so that the first command
        using it reports the problem to the user instead of the extension failing to load.
        """
        _name: str = self.config.TRANSLATION.ENGINE
        _cls: type[TransInterface] | None = TransInterface.registered.get(_name)
        if _cls is None:
            logger.critical("Translation class not found: '%s'", _name)
            return

        _instance: TransInterface = _cls()
        try:
            _instance.initialize(self.config)
        except RuntimeError as err:
            logger.critical("RuntimeError in '%s' translation setup: %s", _name, err)
            return
        except TranslateExceptionError as err:
            logger.critical("Exception in '%s' translation setup: %s", _name, err)
            return

        self._engine = _instance
        logger.info("Translation engine initialized: '%s'", _name)
        logger.debug("Engine attributes: %s", _instance.engine_attributes)

    @property
    def engine(self) -> TransInterface:
        """Get the active translation engine.

        Raises:
            TranslateExceptionError: If no engine could be initialized.
        """
        if self._engine is None or not self._engine.is_available:
            msg: str = f"Translation engine '{self.config.TRANSLATION.ENGINE}' is not available"
            raise TranslateExceptionError(msg)
        return self._engine

    async def fetch_languages(self) -> list[str]:
        """Get the language codes supported by the active engine.

        Raises:
            TranslateExceptionError: If the engine is unavailable or the request fails.
        """
        codes: list[str] = await self.engine.fetch_languages()
        logger.debug("Supported language codes: %s", codes)
        return codes

    async def translate(self, trans_info: TranslationInfo) -> Result:
        """Translate ``trans_info.content`` and store the text in ``trans_info.translated_text``.

        Raises:
            TranslateExceptionError: If the engine is unavailable, rejects the request or returns no text.
        """
        result: Result = await self.engine.translation(
            trans_info.content, tgt_lang=trans_info.tgt_lang, src_lang=trans_info.src_lang
        )
        if result.text is None:
            msg = "The translation engine returned no text"
            raise TranslateExceptionError(msg)

        trans_info.translated_text = result.text
        return result

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.close()
            self._engine = None
        logger.debug("'%s' process termination", self.__class__.__name__)
