"""Contract shared by the translation engines.

An engine lists the language codes its service accepts and translates text between two of them.
Engines register themselves by name when their class is defined; ``TransManager`` looks them up
in ``TransInterface.registered``.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config

__all__: list[str] = [
    "EngineAttributes",
    "NotSupportedLanguagesError",
    "Result",
    "TransInterface",
    "TranslateExceptionError",
    "TranslationAuthenticationError",
    "TranslationRateLimitError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

API_KEY_SUFFIX: str = "_API_OAUTH"


@dataclass
class EngineAttributes:
    """Static facts about an engine.

    Attributes:
        name (str): Engine name as shown in log messages.
        supports_language_list_api (bool): True when the language list comes from the service,
            False when it is bundled with the client library.
    """

    name: str
    supports_language_list_api: bool = True


@dataclass
class Result:
    """Outcome of one translation request.

    Attributes:
        text (str | None): Translated text, None when the service returned nothing.
        source_lang (str | None): Code the text was translated from.
        target_lang (str | None): Code the text was translated to.
        metadata (dict[str, str] | None): Extra engine details.
    """

    text: str | None = None
    source_lang: str | None = None
    target_lang: str | None = None
    metadata: dict[str, str] | None = None

    def __str__(self) -> str:
        return self.text or ""


class TranslateExceptionError(Exception):
    """Translation or language listing failed."""


class NotSupportedLanguagesError(TranslateExceptionError):
    """The service does not accept one of the language codes."""


class TranslationAuthenticationError(TranslateExceptionError):
    """The service rejected the API key."""


class TranslationRateLimitError(TranslateExceptionError):
    """The service refused the request because of its rate limit."""


class TransInterface(ABC):
    """Base class of every translation engine.

    Each call sends a single request and failures are never retried.

    Attributes:
        registered (ClassVar[dict[str, type[TransInterface]]]): Engine classes by name.
    """

    registered: ClassVar[dict[str, type[TransInterface]]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        """Add the new engine class to ``registered``.

        Classes whose ``fetch_engine_name()`` returns an empty string are left out.

        Raises:
            TypeError: If ``fetch_engine_name`` is missing.
            ValueError: If the name is taken by another engine.
        """
        super().__init_subclass__(**kwargs)
        fetch_name = getattr(cls, "fetch_engine_name", None)
        if not callable(fetch_name):
            msg = f"{cls.__name__} does not define fetch_engine_name()"
            raise TypeError(msg)

        name = fetch_name()
        if not isinstance(name, str) or not name:
            return
        if name in cls.registered:
            msg = f"Translation engine name '{name}' is used by {cls.registered[name].__name__}"
            raise ValueError(msg)
        cls.registered[name] = cls
        logger.debug("Translation engine '%s' registered", name)

    def __init__(self) -> None:
        self._engine_attributes: EngineAttributes | None = None

    @property
    def engine_attributes(self) -> EngineAttributes:
        """Attributes assigned by ``initialize()``.

        Raises:
            RuntimeError: If read before ``initialize()`` or assigned twice.
        """
        if self._engine_attributes is None:
            msg = f"{self.__class__.__name__} is not initialized"
            raise RuntimeError(msg)
        return self._engine_attributes

    @engine_attributes.setter
    def engine_attributes(self, attributes: EngineAttributes) -> None:
        if self._engine_attributes is not None:
            msg = f"{self.__class__.__name__} attributes are already set"
            raise RuntimeError(msg)
        self._engine_attributes = attributes

    @property
    def engine_name(self) -> str:
        return self.engine_attributes.name

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """True between a successful ``initialize()`` and ``close()``."""
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def fetch_engine_name() -> str:
        """Name under which the engine is registered and selected in the configuration.

        Called while the class body is being registered, so it cannot depend on instance state.
        """
        raise NotImplementedError

    @abstractmethod
    def initialize(self, config: Config) -> None:
        """Prepare the client for the service.

        Raises:
            RuntimeError: If the client library could not be set up.
            TranslateExceptionError: If ``config`` makes the engine unusable.
        """
        raise NotImplementedError

    @abstractmethod
    async def fetch_languages(self) -> list[str]:
        """Return the language codes the service supports, in the service's order.

        Raises:
            TranslationAuthenticationError: If the API key is rejected.
            TranslateExceptionError: If the list could not be retrieved.
        """
        raise NotImplementedError

    @abstractmethod
    async def translation(self, content: str, tgt_lang: str, src_lang: str | None = None) -> Result:
        """Translate ``content`` from ``src_lang`` into ``tgt_lang``.

        Args:
            content (str): Text to translate.
            tgt_lang (str): Code of the language to translate into.
            src_lang (str | None): Code of the language of ``content``. None lets the service detect it.

        Raises:
            NotSupportedLanguagesError: If either code is refused.
            TranslationAuthenticationError: If the API key is rejected.
            TranslationRateLimitError: If the rate limit was hit.
            TranslateExceptionError: For any other failure.
        """
        raise NotImplementedError

    @abstractmethod
    async def close(self) -> None:
        """Release the engine's network resources."""
        raise NotImplementedError

    def get_authentication_key(self) -> str:
        """API key from the environment, or an empty string.

        The variable is the upper-cased engine name followed by ``_API_OAUTH``, for example
        ``DEEPL_API_OAUTH``.
        """
        return os.getenv(self.fetch_engine_name().upper() + API_KEY_SUFFIX, "")
