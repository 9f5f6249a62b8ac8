"""Data models for ZeTranslate.

This package contains dataclass definitions for configuration and translation requests.
"""

from __future__ import annotations

from models.config_models import Config, DeepTranslate, General, Translation
from models.translation_models import TranslationInfo

__all__: list[str] = ["Config", "DeepTranslate", "General", "Translation", "TranslationInfo"]
