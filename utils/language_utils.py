"""Language code to display name resolution.

Codes reported by translation APIs are mostly IANA language subtags, with a few
Google-specific locale codes that the subtag registry does not know. Those are
rewritten through ``SPECIAL_CODES`` before the registry lookup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from language_tags import tags

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Iterable

__all__: list[str] = ["SPECIAL_CODES", "LanguageUtils"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

SPECIAL_CODES: Final[dict[str, str]] = {
    "zh-CN": "cmn",
    "zh-TW": "TW",
    "mni-Mtei": "mni",
}


class LanguageUtils:
    """Lookups between API language codes and human readable language names."""

    @staticmethod
    def normalize_code(code: str) -> str:
        """Return the code to use for the registry lookup."""
        return SPECIAL_CODES.get(code, code)

    @staticmethod
    def describe(code: str) -> str | None:
        """Get the first registry description of a language subtag.

        Args:
            code (str): Language subtag, already normalized.

        Returns:
            str | None: Description such as "English", or None if the registry has no language subtag `code`.
        """
        language = tags.language(code)
        if language is None:
            return None
        descriptions: list[str] = language.description
        return descriptions[0] if descriptions else None

    @staticmethod
    def get_language_names(codes: Iterable[str]) -> dict[str, str]:
        """Build the code to display name mapping shown in the language prompts.

        Keys are the codes as reported by the API, so they can be sent back unchanged.
        Codes the registry does not know are logged and skipped. When two codes resolve to the
        same description, the later one is shown with its code in parentheses, which keeps every
        display name unique.

        Args:
            codes (Iterable[str]): Language codes supported by the translation API.

        Returns:
            dict[str, str]: Mapping of API code to display name, in input order.
        """
        language_names: dict[str, str] = {}
        seen_names: set[str] = set()

        for code in codes:
            lookup_code: str = LanguageUtils.normalize_code(code)
            name: str | None = LanguageUtils.describe(lookup_code)
            if not name:
                logger.error("Language not found for code %s", lookup_code)
                continue

            if name in seen_names:
                logger.debug("Duplicate language name '%s' for code '%s'", name, code)
                name = f"{name} ({code})"

            language_names[code] = name
            seen_names.add(name)

        logger.debug("Resolved %d of the supported language codes", len(language_names))
        return language_names

    @staticmethod
    def name_to_code(languages: dict[str, str], name: str) -> str | None:
        """Get the code of a language from its display name.

        Args:
            languages (dict[str, str]): Mapping of code to display name.
            name (str): Display name picked by the user.

        Returns:
            str | None: The first code with that name, or None.
        """
        for code, language_name in languages.items():
            if language_name == name:
                return code
        return None
