"""Models for translation-related data.

Defines the TranslationInfo dataclass that carries one translate command invocation.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__: list[str] = ["TranslationInfo"]


@dataclass
class TranslationInfo:
    """Translation request and result information.

    Attributes:
        content (str): Original text to be translated.
        src_lang (str | None): Source language code picked by the user.
        tgt_lang (str): Target language code picked by the user.
        translated_text (str): Translation result. Empty until the engine answered.
    """

    content: str = ""
    src_lang: str | None = None
    tgt_lang: str = ""
    translated_text: str = ""

    @property
    def is_translated(self) -> bool:
        return bool(self.translated_text)
