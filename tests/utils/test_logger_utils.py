from __future__ import annotations

import logging
import warnings
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

import pytest

from models.config_models import General
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture
def fresh_logger_utils(monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    """Give each test an unconfigured LoggerUtils bound to its own namespace."""
    namespace = "ZeTranslateTest"
    monkeypatch.setattr(LoggerUtils, "_instance", None)
    monkeypatch.setattr(LoggerUtils, "_configured", False)
    monkeypatch.setattr(LoggerUtils, "_LOGGER_NAMESPACE", namespace)
    monkeypatch.setattr(warnings, "showwarning", warnings.showwarning)
    yield namespace
    root: logging.Logger = logging.getLogger(namespace)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def test_get_logger_uses_namespace(fresh_logger_utils: str) -> None:
    assert LoggerUtils.get_logger("core.extension").name == f"{fresh_logger_utils}.core.extension"
    assert LoggerUtils.get_logger().name == fresh_logger_utils


def test_constructor_is_singleton(fresh_logger_utils: str) -> None:
    _ = fresh_logger_utils
    first = LoggerUtils(use_null_console=True)
    second = LoggerUtils()

    assert first is second


def test_initialize_after_configuration_raises(fresh_logger_utils: str) -> None:
    _ = fresh_logger_utils
    LoggerUtils(use_null_console=True)

    with pytest.raises(RuntimeError):
        LoggerUtils.initialize("Other")


def test_from_general_sets_level_and_file(fresh_logger_utils: str, tmp_path: Path) -> None:
    log_file: Path = tmp_path / "zetranslate.log"
    general = General(LOG_FILE=str(log_file), LOG_LEVEL="WARNING")

    utils: LoggerUtils = LoggerUtils.from_general(general)
    LoggerUtils.get_logger("test").warning("written to file")

    assert utils.get_level().name == "WARNING"
    root: logging.Logger = logging.getLogger(fresh_logger_utils)
    assert any(isinstance(handler, RotatingFileHandler) for handler in root.handlers)
    for handler in root.handlers:
        handler.flush()
    assert "written to file" in log_file.read_text(encoding="utf-8")


def test_from_general_debug_overrides_level(fresh_logger_utils: str) -> None:
    _ = fresh_logger_utils
    general = General(LOG_LEVEL="ERROR")

    utils: LoggerUtils = LoggerUtils.from_general(general, debug=True)

    assert utils.get_level().name == "DEBUG"


def test_unknown_level_falls_back_to_info(fresh_logger_utils: str) -> None:
    _ = fresh_logger_utils
    utils = LoggerUtils(use_null_console=True)

    utils.set_level("VERBOSE")

    assert utils.get_level() == ("INFO", logging.INFO)

