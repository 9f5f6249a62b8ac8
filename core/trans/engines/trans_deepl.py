from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Final

from deepl import DeepLClient, Language, TextResult
from deepl.exceptions import (
    AuthorizationException,
    ConnectionException,
    DeepLException,
    QuotaExceededException,
    TooManyRequestsException,
)

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

__all__: list[str] = ["DeeplTranslation", "build_code_tables"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

# Locales without a DeepL language of their own; the source is always "ZH".
CHINESE_LOCALES: Final[dict[str, str]] = {"zh-CN": "ZH-HANS", "zh-TW": "ZH-HANT"}

# Target variant used for a base language that DeepL offers in several variants.
PREFERRED_TARGETS: Final[dict[str, str]] = {"en": "EN-US", "pt": "PT-BR", "zh": "ZH-HANS"}

ERROR_CLASSES: Final[tuple[tuple[type[DeepLException], type[TranslateExceptionError], str], ...]] = (
    (QuotaExceededException, TranslateExceptionError, "DeepL character quota exceeded"),
    (AuthorizationException, TranslationAuthenticationError, "DeepL rejected the authentication key"),
    (TooManyRequestsException, TranslationRateLimitError, "DeepL rate limit reached"),
    (ConnectionException, TranslateExceptionError, "Cannot reach the DeepL server"),
)


def build_code_tables(language_cls: Any) -> tuple[dict[str, str], dict[str, str]]:
    """Map lowercase base codes to DeepL source and target codes.

    Source codes are bare languages ("EN"); target codes may carry a variant ("EN-US"). The keys
    are what ``fetch_languages`` reports, so a code picked by the user maps back directly. When a
    base has several target variants, ``PREFERRED_TARGETS`` decides, then the bare code, then the
    first variant listed.

    Args:
        language_cls (Any): Class whose upper-case string attributes are DeepL codes.

    Returns:
        tuple[dict[str, str], dict[str, str]]: Source table and target table.
    """
    variants: dict[str, list[str]] = {}
    for attr, code in vars(language_cls).items():
        if attr.isupper() and isinstance(code, str):
            variants.setdefault(code.partition("-")[0].lower(), []).append(code.upper())

    source: dict[str, str] = {base: base.upper() for base in variants}
    target: dict[str, str] = {}
    for base, codes in variants.items():
        preferred: str | None = PREFERRED_TARGETS.get(base)
        if preferred in codes:
            target[base] = preferred
        elif base.upper() in codes:
            target[base] = base.upper()
        else:
            target[base] = codes[0]

    chinese: list[str] = variants.get("zh", [])
    for locale, variant in CHINESE_LOCALES.items():
        source[locale] = "ZH"
        target[locale] = variant if variant in chinese else target.get("zh", "ZH")
    return source, target


class DeeplTranslation(TransInterface):
    """Engine backed by the official DeepL client, called in a worker thread."""

    def __init__(self) -> None:
        super().__init__()
        self._client: DeepLClient | None = None
        self.source_codes, self.target_codes = build_code_tables(Language)
        logger.debug("DeepL code tables: %d source, %d target", len(self.source_codes), len(self.target_codes))

    @property
    def client(self) -> DeepLClient:
        if self._client is None:
            msg = "DeepL client is not initialized"
            raise TranslateExceptionError(msg)
        return self._client

    @property
    def is_available(self) -> bool:
        return self._client is not None

    @staticmethod
    def fetch_engine_name() -> str:
        return "deepl"

    def initialize(self, config: Config) -> None:
        """Create the DeepL client. The key is only checked by the first request.

        Raises:
            RuntimeError: If the client rejects its arguments.
        """
        _ = config
        self.engine_attributes = EngineAttributes(name="deepl", supports_language_list_api=True)
        try:
            self._client = DeepLClient(self.get_authentication_key())
        except (AttributeError, ValueError) as err:
            logger.critical("Cannot create the DeepL client: %s", err)
            msg = "DeepL client could not be created"
            raise RuntimeError(msg) from err
        logger.debug("DeepL client created")

    async def fetch_languages(self) -> list[str]:
        """Return the lowercase base codes DeepL accepts as both source and target."""
        try:
            languages = await asyncio.to_thread(self.client.get_source_languages)
        except DeepLException as err:
            raise self._translate_error(err) from err

        codes: list[str] = [language.code.lower() for language in languages]
        usable: list[str] = [code for code in codes if code in self.target_codes]
        if len(usable) != len(codes):
            logger.debug("Source-only DeepL languages skipped: %s", sorted(set(codes) - set(usable)))
        logger.info("DeepL supports %d languages", len(usable))
        return usable

    async def translation(self, content: str, tgt_lang: str, src_lang: str | None = None) -> Result:
        """Translate with DeepL. Without ``src_lang`` the detected language is reported.

        Raises:
            NotSupportedLanguagesError: If DeepL has no code for either language.
            TranslationAuthenticationError: If the key is rejected.
            TranslationRateLimitError: If DeepL throttled the request.
            TranslateExceptionError: For any other failure.
        """
        deepl_target: str | None = self.target_codes.get(tgt_lang)
        deepl_source: str | None = self.source_codes.get(src_lang) if src_lang else None
        if deepl_target is None or (src_lang and deepl_source is None):
            msg = f"DeepL does not support '{src_lang}' -> '{tgt_lang}'"
            raise NotSupportedLanguagesError(msg)

        logger.debug("DeepL request %s -> %s: %r", deepl_source, deepl_target, content)
        try:
            answer: TextResult | list[TextResult] = await asyncio.to_thread(
                self.client.translate_text, content, source_lang=deepl_source, target_lang=deepl_target
            )
        except DeepLException as err:
            raise self._translate_error(err) from err
        except (TypeError, ValueError) as err:
            msg = "DeepL client failed to translate"
            raise TranslateExceptionError(msg) from err

        if isinstance(answer, list):
            if not answer:
                msg = "DeepL returned no translation"
                raise TranslateExceptionError(msg)
            answer = answer[0]

        logger.info("DeepL translation completed (%s > %s)", deepl_source, deepl_target)
        return Result(
            text=answer.text,
            source_lang=src_lang or answer.detected_source_lang.lower(),
            target_lang=tgt_lang,
            metadata={"engine": "deepl"},
        )

    @staticmethod
    def _translate_error(err: DeepLException) -> TranslateExceptionError:
        logger.error("DeepL error: %s", err)
        for deepl_error, error_cls, message in ERROR_CLASSES:
            if isinstance(err, deepl_error):
                return error_cls(message)
        return TranslateExceptionError(f"DeepL request failed: {err}")

    async def close(self) -> None:
        self._client = None
        logger.debug("DeepL client released")
