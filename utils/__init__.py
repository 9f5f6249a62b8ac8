"""Utility modules for ZeTranslate.

This package provides utility functions for logging, string handling and language name lookup.
"""

from utils.language_utils import LanguageUtils
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

__all__: list[str] = ["LanguageUtils", "LoggerUtils", "StringUtils"]
