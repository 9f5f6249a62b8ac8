from __future__ import annotations

from types import SimpleNamespace
from typing import TYPE_CHECKING, Any, ClassVar, cast

import pytest

from core.trans.engines import deep_translate as deep_translate_module
from core.trans.interface import (
    NotSupportedLanguagesError,
    Result,
    TranslateExceptionError,
    TranslationAuthenticationError,
    TranslationRateLimitError,
)
from handlers.async_comm import AsyncCommError, AsyncCommTimeoutError

if TYPE_CHECKING:
    from models.config_models import Config

BASE_URL = "https://deep-translate1.p.rapidapi.com/language/translate/v2"
HOST = "deep-translate1.p.rapidapi.com"


class DummyHttp:
    get_response: ClassVar[Any] = {"languages": [{"language": "en"}, {"language": "zh-CN"}, {"language": "fr"}]}
    post_response: ClassVar[Any] = {"data": {"translations": {"translatedText": "Bonjour"}}}
    error: ClassVar[Exception | None] = None
    requests: ClassVar[list[tuple[str, dict[str, Any]]]] = []
    closed_count: ClassVar[int] = 0

    async def get(self, **kwargs: Any) -> Any:
        type(self).requests.append(("GET", kwargs))
        if type(self).error is not None:
            raise type(self).error
        return type(self).get_response

    async def post(self, **kwargs: Any) -> Any:
        type(self).requests.append(("POST", kwargs))
        if type(self).error is not None:
            raise type(self).error
        return type(self).post_response

    async def close(self) -> None:
        type(self).closed_count += 1


@pytest.fixture(autouse=True)
def setup_deep_translate_module(monkeypatch: pytest.MonkeyPatch) -> None:
    DummyHttp.get_response = {"languages": [{"language": "en"}, {"language": "zh-CN"}, {"language": "fr"}]}
    DummyHttp.post_response = {"data": {"translations": {"translatedText": "Bonjour"}}}
    DummyHttp.error = None
    DummyHttp.requests = []
    DummyHttp.closed_count = 0
    monkeypatch.setattr(deep_translate_module, "AsyncHttp", DummyHttp)
    monkeypatch.setenv("DEEP_TRANSLATE_API_OAUTH", "secret")
    monkeypatch.delenv("API_KEY", raising=False)


@pytest.fixture
def config() -> Config:
    return cast(
        "Config",
        SimpleNamespace(
            TRANSLATION=SimpleNamespace(ENGINE="deep_translate", TIMEOUT=5.0),
            DEEP_TRANSLATE=SimpleNamespace(BASE_URL=BASE_URL + "/", HOST=HOST),
        ),
    )


@pytest.fixture
def engine(config: Config) -> deep_translate_module.DeepTranslation:
    engine = deep_translate_module.DeepTranslation()
    engine.initialize(config)
    return engine


def _status_error(status: int) -> AsyncCommError:
    return AsyncCommError("POST https://example.invalid answered with an error status", status=status)


def test_http_property_raises_when_uninitialized() -> None:
    engine = deep_translate_module.DeepTranslation()

    assert engine.is_available is False
    with pytest.raises(TranslateExceptionError):
        _ = engine._http


def test_initialize_sets_attributes(engine: deep_translate_module.DeepTranslation) -> None:
    assert engine.engine_attributes.name == "deep_translate"
    assert engine.engine_attributes.supports_language_list_api is True
    assert engine.is_available is True


def test_authentication_key_falls_back_to_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DEEP_TRANSLATE_API_OAUTH", raising=False)
    monkeypatch.setenv("API_KEY", "legacy")

    assert deep_translate_module.DeepTranslation().get_authentication_key() == "legacy"


def test_initialize_without_key_logs_warning(
    monkeypatch: pytest.MonkeyPatch, config: Config, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.delenv("DEEP_TRANSLATE_API_OAUTH", raising=False)
    caplog.set_level("WARNING", logger="ZeTranslate")
    engine = deep_translate_module.DeepTranslation()

    engine.initialize(config)

    assert engine.is_available is True
    assert any("No API key set" in rec.message for rec in caplog.records)


@pytest.mark.asyncio
async def test_fetch_languages_requests_languages_endpoint(engine: deep_translate_module.DeepTranslation) -> None:
    codes: list[str] = await engine.fetch_languages()

    assert codes == ["en", "zh-CN", "fr"]
    method, kwargs = DummyHttp.requests[0]
    assert method == "GET"
    assert kwargs["url"] == BASE_URL + "/languages"
    assert kwargs["headers"] == {
        "x-rapidapi-key": "secret",
        "x-rapidapi-host": HOST,
        "Content-Type": "application/json",
    }
    assert kwargs["total_timeout"] == 5.0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        None,
        {},
        {"languages": [{"code": "en"}]},
        {"languages": None},
        {"languages": [{"language": "en"}, {"language": None}]},
        {"languages": [{"language": ""}]},
        {"languages": [{"language": 42}]},
    ],
)
async def test_fetch_languages_rejects_malformed_payload(
    engine: deep_translate_module.DeepTranslation, response: Any
) -> None:
    DummyHttp.get_response = response

    with pytest.raises(TranslateExceptionError):
        await engine.fetch_languages()


@pytest.mark.asyncio
async def test_translation_posts_query_and_languages(engine: deep_translate_module.DeepTranslation) -> None:
    result: Result = await engine.translation("Hello", tgt_lang="fr", src_lang="en")

    assert result.text == "Bonjour"
    assert result.source_lang == "en"
    assert result.target_lang == "fr"
    assert result.metadata == {"engine": "deep_translate"}
    method, kwargs = DummyHttp.requests[0]
    assert method == "POST"
    assert kwargs["url"] == BASE_URL
    assert kwargs["data"] == {"q": "Hello", "source": "en", "target": "fr"}


@pytest.mark.asyncio
async def test_translation_omits_missing_source(engine: deep_translate_module.DeepTranslation) -> None:
    await engine.translation("Hello", tgt_lang="fr")

    _, kwargs = DummyHttp.requests[0]
    assert kwargs["data"] == {"q": "Hello", "target": "fr"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        {"data": {"translations": [{"translatedText": "Bonjour"}]}},
        {"data": {"translations": {"translatedText": ["Bonjour"]}}},
    ],
)
async def test_translation_accepts_list_shapes(engine: deep_translate_module.DeepTranslation, response: Any) -> None:
    DummyHttp.post_response = response

    result: Result = await engine.translation("Hello", tgt_lang="fr", src_lang="en")

    assert result.text == "Bonjour"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        None,
        {"data": {}},
        {"data": {"translations": []}},
        {"data": {"translations": {"translatedText": 12}}},
    ],
)
async def test_translation_rejects_malformed_payload(
    engine: deep_translate_module.DeepTranslation, response: Any
) -> None:
    DummyHttp.post_response = response

    with pytest.raises(TranslateExceptionError):
        await engine.translation("Hello", tgt_lang="fr", src_lang="en")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (AsyncCommTimeoutError("timeout"), TranslateExceptionError),
        (_status_error(429), TranslationRateLimitError),
        (_status_error(401), TranslationAuthenticationError),
        (_status_error(403), TranslationAuthenticationError),
        (_status_error(400), NotSupportedLanguagesError),
        (_status_error(500), TranslateExceptionError),
        (AsyncCommError("unreachable"), TranslateExceptionError),
    ],
)
async def test_translation_converts_transport_errors(
    engine: deep_translate_module.DeepTranslation, error: AsyncCommError, expected: type[Exception]
) -> None:
    DummyHttp.error = error

    with pytest.raises(expected) as exc_info:
        await engine.translation("Hello", tgt_lang="fr", src_lang="en")

    assert type(exc_info.value) is expected


@pytest.mark.asyncio
async def test_fetch_languages_bad_request_is_not_a_language_error(
    engine: deep_translate_module.DeepTranslation,
) -> None:
    DummyHttp.error = _status_error(400)

    with pytest.raises(TranslateExceptionError) as exc_info:
        await engine.fetch_languages()

    assert not isinstance(exc_info.value, NotSupportedLanguagesError)


@pytest.mark.asyncio
async def test_close_releases_http_client(engine: deep_translate_module.DeepTranslation) -> None:
    await engine.close()

    assert DummyHttp.closed_count == 1
    assert engine.is_available is False
    with pytest.raises(TranslateExceptionError):
        await engine.fetch_languages()
