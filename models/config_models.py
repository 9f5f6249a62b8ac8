"""Configuration data models for ZeTranslate.

Each dataclass is one section of ``zetranslate.ini``; the field names are the INI keys and
the default values double as type declarations for the loader.
"""

from __future__ import annotations

from dataclasses import dataclass, field

__all__: list[str] = [
    "Config",
    "DeepTranslate",
    "General",
    "Translation",
]


@dataclass
class General:
    DEBUG: bool = False
    VERSION: str = ""
    LOG_FILE: str = ""
    LOG_LEVEL: str = "INFO"
    SCRIPT_NAME: str = ""


@dataclass
class Translation:
    ENGINE: str = "deep_translate"
    TIMEOUT: float = 10.0


@dataclass
class DeepTranslate:
    BASE_URL: str = "https://deep-translate1.p.rapidapi.com/language/translate/v2"
    HOST: str = "deep-translate1.p.rapidapi.com"


@dataclass
class Config:
    GENERAL: General = field(default_factory=General)
    TRANSLATION: Translation = field(default_factory=Translation)
    DEEP_TRANSLATE: DeepTranslate = field(default_factory=DeepTranslate)
