"""Deep Translate (RapidAPI) implementation.

The service exposes two endpoints below its base URL:

- ``GET  /languages`` returning ``{"languages": [{"language": "<code>"}, ...]}``
- ``POST /`` with ``{"q": text, "source": src, "target": tgt}`` returning
  ``{"data": {"translations": {"translatedText": "..."}}}``

Both are authenticated with the ``x-rapidapi-key`` header.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any, Final

from core.trans.interface import (
    EngineAttributes,
    NotSupportedLanguagesError,
    Result,
    TransInterface,
    TranslateExceptionError,
    TranslationAuthenticationError,
    TranslationRateLimitError,
)
from handlers.async_comm import AsyncCommError, AsyncCommTimeoutError, AsyncHttp
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config

__all__: list[str] = ["DeepTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

LEGACY_KEY_VARIABLE: Final[str] = "API_KEY"

HTTP_BAD_REQUEST: Final[int] = 400
HTTP_UNAUTHORIZED: Final[int] = 401
HTTP_FORBIDDEN: Final[int] = 403
HTTP_TOO_MANY_REQUESTS: Final[int] = 429


class DeepTranslation(TransInterface):
    """Deep Translate engine over plain HTTPS using ``AsyncHttp``."""

    def __init__(self) -> None:
        super().__init__()
        self.__http: AsyncHttp | None = None
        self._base_url: str = ""
        self._host: str = ""
        self._api_key: str = ""
        self._timeout: float = 10.0

    @property
    def _http(self) -> AsyncHttp:
        if self.__http is None:
            msg = "The Deep Translate client is not initialised"
            raise TranslateExceptionError(msg)
        return self.__http

    @property
    def is_available(self) -> bool:
        return self.__http is not None

    @staticmethod
    def fetch_engine_name() -> str:
        return "deep_translate"

    def get_authentication_key(self) -> str:
        """Read the API key, accepting the plain ``API_KEY`` variable of older ``.env`` files."""
        return super().get_authentication_key() or os.getenv(LEGACY_KEY_VARIABLE, "")

    def initialize(self, config: Config) -> None:
        """Set up the HTTP client from the ``[DEEP_TRANSLATE]`` section.

        A missing API key is not an error here: the service will reject the first request,
        which reaches the user as a regular failure notification.
        """
        logger.debug("'%s' Initialization start", self.__class__.__name__)
        self.engine_attributes = EngineAttributes(name="deep_translate", supports_language_list_api=True)

        self._base_url = config.DEEP_TRANSLATE.BASE_URL.rstrip("/")
        self._host = config.DEEP_TRANSLATE.HOST
        self._timeout = config.TRANSLATION.TIMEOUT
        self._api_key = self.get_authentication_key()
        if not self._api_key:
            logger.warning("No API key set. Define DEEP_TRANSLATE_API_OAUTH in the environment or in '.env'.")

        self.__http = AsyncHttp()

    def _headers(self) -> dict[str, str]:
        return {
            "x-rapidapi-key": self._api_key,
            "x-rapidapi-host": self._host,
            "Content-Type": "application/json",
        }

    async def fetch_languages(self) -> list[str]:
        """Fetch the codes listed by ``GET /languages``.

        Raises:
            TranslationAuthenticationError: If the API key is rejected.
            TranslateExceptionError: If the request fails or the payload is malformed.
        """
        try:
            response: Any = await self._http.get(
                url=f"{self._base_url}/languages",
                headers=self._headers(),
                total_timeout=self._timeout,
            )
        except AsyncCommError as err:
            raise self._convert_error(err, "Failed to get the supported languages") from err

        try:
            codes: list[str] = [entry["language"] for entry in response["languages"]]
        except (KeyError, TypeError) as err:
            msg = "Unexpected response format for the supported languages"
            raise TranslateExceptionError(msg) from err

        if not all(isinstance(code, str) and code for code in codes):
            msg = f"Unexpected language code in the supported languages: {codes}"
            raise TranslateExceptionError(msg)

        logger.info("Deep Translate supports %d languages", len(codes))
        return codes

    async def translation(self, content: str, tgt_lang: str, src_lang: str | None = None) -> Result:
        """Translate a text with ``POST /``.

        Raises:
            NotSupportedLanguagesError: If the service rejects the language pair.
            TranslationAuthenticationError: If the API key is rejected.
            TranslationRateLimitError: If the request is rate-limited by the API.
            TranslateExceptionError: If the request fails or the payload is malformed.
        """
        logger.debug("'content': '%s', 'src_lang': '%s', 'tgt_lang': '%s'", content, src_lang, tgt_lang)
        payload: dict[str, str] = {"q": content, "target": tgt_lang}
        if src_lang:
            payload["source"] = src_lang

        try:
            response: Any = await self._http.post(
                url=self._base_url,
                headers=self._headers(),
                data=payload,
                total_timeout=self._timeout,
            )
        except AsyncCommError as err:
            raise self._convert_error(
                err, f"Translation failed (src: '{src_lang}', tgt: '{tgt_lang}')", tgt_lang=tgt_lang, src_lang=src_lang
            ) from err

        result = Result(
            text=self._extract_text(response),
            source_lang=src_lang,
            target_lang=tgt_lang,
            metadata={"engine": "deep_translate"},
        )
        logger.info("translation completed (%s > %s)", src_lang, tgt_lang)
        logger.debug("'return': '%s'", result)
        return result

    @staticmethod
    def _extract_text(response: Any) -> str:
        """Pull ``data.translations.translatedText`` out of the response body.

        Raises:
            TranslateExceptionError: If the body does not have the expected shape.
        """
        try:
            translations: Any = response["data"]["translations"]
            if isinstance(translations, list):
                # Returned as a list when "q" is a list; this engine always sends a single string.
                translations = translations[0]
            text: Any = translations["translatedText"]
        except (KeyError, IndexError, TypeError) as err:
            msg = "Unexpected response format for the translation"
            raise TranslateExceptionError(msg) from err

        if isinstance(text, list):
            text = text[0] if text else ""
        if not isinstance(text, str):
            msg = f"Unexpected type for the translated text: {type(text).__name__}"
            raise TranslateExceptionError(msg)
        return text

    @staticmethod
    def _convert_error(
        err: AsyncCommError, context: str, *, tgt_lang: str | None = None, src_lang: str | None = None
    ) -> TranslateExceptionError:
        """Map a transport error to the matching translation exception."""
        logger.error("%s: %s", context, err)
        if isinstance(err, AsyncCommTimeoutError):
            return TranslateExceptionError(f"{context}: the server did not respond in time")
        if err.status == HTTP_TOO_MANY_REQUESTS:
            return TranslationRateLimitError(f"{context}: rate limit reached")
        if err.status in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN):
            return TranslationAuthenticationError(f"{context}: authorisation failed, please check your API key")
        if err.status == HTTP_BAD_REQUEST and tgt_lang is not None:
            return NotSupportedLanguagesError(
                f"Languages not supported by Deep Translate. Source language: '{src_lang}'. "
                f"Target language: '{tgt_lang}'."
            )
        return TranslateExceptionError(f"{context}: {err}")

    async def close(self) -> None:
        if self.__http is not None:
            await self.__http.close()
        self.__http = None
        logger.debug("'%s' process termination", self.__class__.__name__)
