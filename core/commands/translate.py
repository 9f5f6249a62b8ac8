"""Translate command.

Replaces the selected text with its translation. The user picks the source and the target
language from the languages the active engine supports. The document is only touched once
the translation has been received, so every failure leaves it unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Final

from core.commands.base import CommandBase
from core.trans.interface import TranslateExceptionError
from models.translation_models import TranslationInfo
from utils.language_utils import LanguageUtils
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging

__all__: list[str] = ["TranslateCommand"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

MESSAGE_PREFIX: Final[str] = "ZeTranslate"
MSG_NO_SELECTION: Final[str] = f"{MESSAGE_PREFIX}: No text selected!"
MSG_LANGUAGES_FAILED: Final[str] = f"{MESSAGE_PREFIX}: Error while getting the list of supported languages"
MSG_NO_SOURCE: Final[str] = f"{MESSAGE_PREFIX}: Source language not specified"
MSG_NO_TARGET: Final[str] = f"{MESSAGE_PREFIX}: Target language not specified"
MSG_TRANSLATE_FAILED: Final[str] = f"{MESSAGE_PREFIX}: Error while translating the text"
MSG_REPLACE_FAILED: Final[str] = f"{MESSAGE_PREFIX}: Error while replacing the text"

SOURCE_PLACEHOLDER: Final[str] = "Select the source language"
TARGET_PLACEHOLDER: Final[str] = "Select the target language"


class TranslateCommand(CommandBase):
    """Translate the current selection in place."""

    command_id: ClassVar[str] = "zemizer-translator.translate"
    title: ClassVar[str] = "ZeTranslate"

    async def run(self) -> None:
        text: str = StringUtils.ensure_str(self.host.get_selected_text())
        if not text:
            self.host.show_error_message(MSG_NO_SELECTION)
            return

        languages: dict[str, str] | None = await self._fetch_language_names()
        if languages is None:
            return

        src_lang: str | None = await self._pick_language(languages, SOURCE_PLACEHOLDER)
        if src_lang is None:
            self.host.show_information_message(MSG_NO_SOURCE)
            return

        tgt_lang: str | None = await self._pick_language(languages, TARGET_PLACEHOLDER)
        if tgt_lang is None:
            self.host.show_information_message(MSG_NO_TARGET)
            return

        trans_info = TranslationInfo(content=text, src_lang=src_lang, tgt_lang=tgt_lang)
        try:
            await self.trans_manager.translate(trans_info)
        except TranslateExceptionError as err:
            logger.error("Translation failed: %s", err)
            self.host.show_error_message(MSG_TRANSLATE_FAILED)
            return

        replacement: str = StringUtils.preserve_trailing_newline(text, trans_info.translated_text)
        if not await self.host.replace_selection(replacement):
            self.host.show_error_message(MSG_REPLACE_FAILED)

    async def _fetch_language_names(self) -> dict[str, str] | None:
        """Get the code to display name mapping, or None after reporting a failure."""
        try:
            codes: list[str] = await self.trans_manager.fetch_languages()
        except TranslateExceptionError as err:
            logger.error("Failed to get the supported languages: %s", err)
            self.host.show_error_message(MSG_LANGUAGES_FAILED)
            return None

        return LanguageUtils.get_language_names(codes)

    async def _pick_language(self, languages: dict[str, str], placeholder: str) -> str | None:
        picked: str | None = await self.host.quick_pick(list(languages.values()), placeholder=placeholder)
        if not picked:
            return None
        code: str | None = LanguageUtils.name_to_code(languages, picked)
        logger.debug("'%s': '%s' -> '%s'", placeholder, picked, code)
        return code
