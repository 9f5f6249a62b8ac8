"""Loader for ``zetranslate.ini``.

Every section of the file maps onto one dataclass of ``models.config_models``. Values are coerced
to the type of the field default: booleans and numbers may be written bare, everything else is a
Python literal (so strings are quoted). Unknown sections and keys are ignored with a log message.
"""

from __future__ import annotations

import ast
import configparser
from dataclasses import fields
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final
from urllib.parse import urlparse

from models.config_models import Config
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

__all__: list[str] = [
    "ALLOWED_TRANSLATION_ENGINES",
    "Config",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ConfigLoader",
    "ConfigLoaderError",
    "ConfigTypeError",
    "ConfigValueError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

ALLOWED_TRANSLATION_ENGINES: Final[list[str]] = ["deep_translate", "deepl", "google_cloud"]
ALLOWED_URL_SCHEMES: Final[tuple[str, ...]] = ("http", "https")


class ConfigLoaderError(Exception):
    """The configuration could not be loaded."""


class ConfigFileNotFoundError(ConfigLoaderError):
    """The configuration file does not exist."""


class ConfigFormatError(ConfigLoaderError):
    """The configuration file is malformed."""


class ConfigValueError(ConfigFormatError):
    """A setting has a value outside its allowed range."""


class ConfigTypeError(ConfigFormatError):
    """A setting has a value of the wrong type."""


class ConfigLoader:
    """Build a validated ``Config`` from an INI file and command-line overrides.

    Args:
        config_filename (str): Path of the INI file.
        script_name (str): Name of the running program, stored in ``GENERAL.SCRIPT_NAME`` and
            quoted in error messages.
        missing_ok (bool): Fall back to the defaults when the file does not exist.
        **overrides: ``engine`` replaces ``TRANSLATION.ENGINE``; a true ``debug`` sets
            ``GENERAL.DEBUG``. None values are ignored.

    Raises:
        ConfigFileNotFoundError: If the file is missing and ``missing_ok`` is False.
        ConfigFormatError: If the file cannot be parsed or a setting is invalid.
    """

    def __init__(self, *, config_filename: str, script_name: str, missing_ok: bool = False, **overrides: Any) -> None:
        self.config: Config = Config()
        self.config.GENERAL.SCRIPT_NAME = script_name

        path = Path(config_filename)
        if path.exists():
            self._apply(self._read(path))
        elif missing_ok:
            logger.info("Configuration file '%s' not found. Using default settings.", config_filename)
        else:
            msg: str = (
                f"Configuration file '{config_filename}' not found. "
                f"Create it, or pass an existing file to '{script_name}' with --config."
            )
            raise ConfigFileNotFoundError(msg)

        if overrides.get("engine") is not None:
            self.config.TRANSLATION.ENGINE = overrides["engine"]
        if overrides.get("debug"):
            self.config.GENERAL.DEBUG = True
        self._validate()

    @staticmethod
    def _read(path: Path) -> configparser.ConfigParser:
        parser = configparser.ConfigParser()
        try:
            with path.open(encoding="utf-8") as f:
                parser.read_file(f)
        except configparser.Error as err:
            msg = f"Failed to parse configuration file '{path}': {err}"
            raise ConfigFormatError(msg) from None
        return parser

    def _apply(self, parser: configparser.ConfigParser) -> None:
        """Copy every known setting of ``parser`` into ``self.config``.

        Raises:
            ConfigFormatError: If a value cannot be coerced to its field type.
        """
        known_sections: set[str] = set()
        for section_field in fields(self.config):
            section_name: str = section_field.name
            known_sections.add(section_name)
            if not parser.has_section(section_name):
                logger.debug("Section '%s' not set, using defaults", section_name)
                continue

            section: Any = getattr(self.config, section_name)
            known_keys: set[str] = set()
            for key_field in fields(section):
                key: str = key_field.name
                known_keys.add(key.lower())
                if not parser.has_option(section_name, key):
                    continue
                where: str = f"{section_name}.{key}"
                setattr(section, key, coerce_value(parser.get(section_name, key), type(getattr(section, key)), where))

            # ConfigParser lowercases option names.
            for option in sorted(set(parser.options(section_name)) - known_keys):
                logger.warning("Unknown setting '%s.%s' is ignored", section_name, option.upper())

        for unknown in sorted(set(parser.sections()) - known_sections):
            logger.warning("Unknown configuration section '%s' is ignored", unknown)

    def _validate(self) -> None:
        """Check the settings that have a restricted domain.

        Raises:
            ConfigTypeError: If ``TRANSLATION.ENGINE`` is not a string.
            ConfigValueError: If the timeout is not positive or the base URL is not http(s).
        """
        engine: Any = self.config.TRANSLATION.ENGINE
        if not isinstance(engine, str):
            msg: str = f"'TRANSLATION.ENGINE' must be a string, not {type(engine).__name__}"
            raise ConfigTypeError(msg)
        if engine not in ALLOWED_TRANSLATION_ENGINES:
            logger.warning(
                "Unknown value '%s' is set for 'TRANSLATION.ENGINE' (known: %s)",
                engine,
                ", ".join(ALLOWED_TRANSLATION_ENGINES),
            )

        timeout: float = self.config.TRANSLATION.TIMEOUT
        if timeout <= 0:
            msg = f"'TRANSLATION.TIMEOUT' must be greater than 0: {timeout}"
            raise ConfigValueError(msg)

        base_url: str = self.config.DEEP_TRANSLATE.BASE_URL
        parsed = urlparse(base_url)
        if parsed.scheme not in ALLOWED_URL_SCHEMES or not parsed.netloc:
            msg = f"'DEEP_TRANSLATE.BASE_URL' is not an http(s) URL: '{base_url}'"
            raise ConfigValueError(msg)


def coerce_value(raw: str, expected: type, where: str) -> Any:
    """Convert the INI text of a setting to ``expected``.

    Args:
        raw (str): Value as written in the file.
        expected (type): Type of the field default.
        where (str): "SECTION.KEY", for error messages.

    Raises:
        ConfigValueError: If the text is not a valid value.
        ConfigFormatError: If a literal has invalid syntax.
        ConfigTypeError: If a literal evaluates to another type.
    """
    if expected in (bool, int, float):
        # Numbers and booleans are accepted with or without quotes.
        text: str = raw.strip().strip("'\"")
        try:
            if expected is bool:
                return configparser.ConfigParser.BOOLEAN_STATES[text.lower()]
            if expected is int:
                return int(float(text))
            return float(text)
        except (KeyError, ValueError):
            msg = f"Invalid {expected.__name__} for {where}: {raw}"
            raise ConfigValueError(msg) from None

    try:
        value: Any = ast.literal_eval(raw)
    except ValueError as err:
        msg = f"Invalid literal for {where}: {raw} (strings must be quoted)"
        raise ConfigValueError(msg) from err
    except SyntaxError as err:
        msg = f"Invalid literal for {where}: {raw}"
        raise ConfigFormatError(msg) from err

    if not isinstance(value, expected):
        msg = f"Expected {expected.__name__} for {where}, got {type(value).__name__}"
        raise ConfigTypeError(msg)
    return value
