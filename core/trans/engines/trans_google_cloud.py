"""Engine for Google Cloud Translation Basic (v2).

Credentials are either an API key in ``GOOGLE_CLOUD_API_OAUTH`` or the application default
credentials (``GOOGLE_APPLICATION_CREDENTIALS``). Google reports locale codes such as "zh-CN"
and "mni-Mtei"; they are sent back unchanged.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Final

from google.api_core.exceptions import BadRequest, Forbidden, GoogleAPIError, TooManyRequests, Unauthorized
from google.auth.credentials import AnonymousCredentials
from google.auth.exceptions import DefaultCredentialsError
from google.auth.transport.requests import AuthorizedSession
from google.cloud import translate_v2 as translate

from core.trans.interface import (
    EngineAttributes,
    NotSupportedLanguagesError,
    Result,
    TransInterface,
    TranslateExceptionError,
    TranslationAuthenticationError,
    TranslationRateLimitError,
)
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config

__all__: list[str] = ["ApiKeySession", "GoogleCloudTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

ERROR_CLASSES: Final[tuple[tuple[tuple[type[GoogleAPIError], ...], type[TranslateExceptionError]], ...]] = (
    ((TooManyRequests,), TranslationRateLimitError),
    ((Unauthorized, Forbidden), TranslationAuthenticationError),
)


class ApiKeySession(AuthorizedSession):
    """Anonymous session that sends ``key=<api_key>`` with every request."""

    def __init__(self, api_key: str) -> None:
        super().__init__(AnonymousCredentials())
        self.api_key: str = api_key

    def request(self, method, url, **kwargs):
        params: dict[str, Any] = dict(kwargs.pop("params", None) or {})
        params["key"] = self.api_key
        return super().request(method, url, params=params, **kwargs)


class GoogleCloudTranslation(TransInterface):
    """Google Cloud Translation v2 client, called in a worker thread."""

    def __init__(self) -> None:
        super().__init__()
        self._client: translate.Client | None = None

    @property
    def client(self) -> translate.Client:
        if self._client is None:
            msg = "Google Cloud Translation client is not initialized"
            raise TranslateExceptionError(msg)
        return self._client

    @property
    def is_available(self) -> bool:
        return self._client is not None

    @staticmethod
    def fetch_engine_name() -> str:
        return "google_cloud"

    def initialize(self, config: Config) -> None:
        """Create the client from the API key or the default credentials.

        Raises:
            TranslationAuthenticationError: If no credentials are available.
            RuntimeError: If the client rejects its arguments.
        """
        _ = config
        self.engine_attributes = EngineAttributes(name="google_cloud", supports_language_list_api=True)
        api_key: str = self.get_authentication_key()
        try:
            if api_key:
                self._client = translate.Client(credentials=AnonymousCredentials(), _http=ApiKeySession(api_key))
            else:
                self._client = translate.Client()
        except DefaultCredentialsError as err:
            logger.critical("No Google Cloud credentials: %s", err)
            msg = "Set GOOGLE_CLOUD_API_OAUTH or GOOGLE_APPLICATION_CREDENTIALS to use Google Cloud Translation"
            raise TranslationAuthenticationError(msg) from err
        except (TypeError, ValueError) as err:
            logger.critical("Cannot create the Google Cloud Translation client: %s", err)
            msg = "Google Cloud Translation client could not be created"
            raise RuntimeError(msg) from err
        logger.debug("Google Cloud Translation client created (%s)", "API key" if api_key else "default credentials")

    async def fetch_languages(self) -> list[str]:
        """Return the codes listed by the ``languages`` endpoint."""
        try:
            entries: list[dict[str, Any]] = await asyncio.to_thread(self.client.get_languages)
        except GoogleAPIError as err:
            raise self._translate_error(err, "Language list request failed") from err

        try:
            codes: list[str] = [entry["language"] for entry in entries]
        except (KeyError, TypeError) as err:
            msg = "Google Cloud Translation returned a malformed language list"
            raise TranslateExceptionError(msg) from err
        if not all(isinstance(code, str) and code for code in codes):
            msg = f"Google Cloud Translation returned an invalid language code: {codes}"
            raise TranslateExceptionError(msg)
        logger.info("Google Cloud Translation supports %d languages", len(codes))
        return codes

    async def translation(self, content: str, tgt_lang: str, src_lang: str | None = None) -> Result:
        """Translate as plain text. Without ``src_lang`` the detected language is reported.

        Raises:
            NotSupportedLanguagesError: If Google answers 400 Bad Request.
            TranslationAuthenticationError: If the credentials are rejected.
            TranslationRateLimitError: If Google throttled the request.
            TranslateExceptionError: For any other failure.
        """
        logger.debug("Google request %s -> %s: %r", src_lang, tgt_lang, content)
        try:
            # "text" keeps the answer free of HTML entities.
            answer: dict[str, Any] = await asyncio.to_thread(
                self.client.translate, content, target_language=tgt_lang, source_language=src_lang, format_="text"
            )
        except BadRequest as err:
            logger.error("Google refused the language pair: %s", err)
            msg = f"Google Cloud Translation does not support '{src_lang}' -> '{tgt_lang}'"
            raise NotSupportedLanguagesError(msg) from err
        except GoogleAPIError as err:
            raise self._translate_error(err, "Translation request failed") from err

        try:
            text: str = answer["translatedText"]
        except (KeyError, TypeError) as err:
            msg = "Google Cloud Translation returned a malformed translation"
            raise TranslateExceptionError(msg) from err

        source: str | None = answer.get("detectedSourceLanguage", src_lang)
        logger.info("Google translation completed (%s > %s)", source, tgt_lang)
        return Result(text=text, source_lang=source, target_lang=tgt_lang, metadata={"engine": "google_cloud"})

    @staticmethod
    def _translate_error(err: GoogleAPIError, context: str) -> TranslateExceptionError:
        logger.error("%s: %s", context, err)
        for google_errors, error_cls in ERROR_CLASSES:
            if isinstance(err, google_errors):
                return error_cls(f"{context}: {err.message}")
        return TranslateExceptionError(f"{context}: {err}")

    async def close(self) -> None:
        self._client = None
        logger.debug("Google Cloud Translation client released")
