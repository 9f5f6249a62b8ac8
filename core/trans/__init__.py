"""Translation engine management and interfaces.

This package provides translation through pluggable engine implementations
(Deep Translate, DeepL, Google Cloud) behind a common interface.
"""

from core.trans.interface import (
    NotSupportedLanguagesError,
    Result,
    TransInterface,
    TranslateExceptionError,
    TranslationAuthenticationError,
    TranslationRateLimitError,
)
from core.trans.manager import TransManager

__all__: list[str] = [
    "NotSupportedLanguagesError",
    "Result",
    "TransInterface",
    "TransManager",
    "TranslateExceptionError",
    "TranslationAuthenticationError",
    "TranslationRateLimitError",
]
