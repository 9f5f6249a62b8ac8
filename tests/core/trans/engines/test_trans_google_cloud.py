from __future__ import annotations

from types import SimpleNamespace
from typing import Any, ClassVar

import pytest

from core.trans.engines import trans_google_cloud as trans_google_cloud_module
from core.trans.interface import (
    NotSupportedLanguagesError,
    Result,
    TranslateExceptionError,
    TranslationAuthenticationError,
    TranslationRateLimitError,
)


class DummyClient:
    languages: ClassVar[Any] = [{"language": "en"}, {"language": "zh-CN"}, {"language": "mni-Mtei"}]
    translate_result: ClassVar[Any] = {"translatedText": "ok", "detectedSourceLanguage": "en"}
    languages_error: ClassVar[Exception | None] = None
    translate_error: ClassVar[Exception | None] = None

    def __init__(self, *args, **kwargs) -> None:
        self.args = args
        self.kwargs = kwargs
        self.calls: list[dict[str, Any]] = []

    def get_languages(self) -> Any:
        err = type(self).languages_error
        if err is not None:
            raise err
        return type(self).languages

    def translate(self, content: str, **kwargs: Any) -> Any:
        self.calls.append({"content": content, **kwargs})
        err = type(self).translate_error
        if err is not None:
            raise err
        return type(self).translate_result


async def fake_to_thread(func, *args, **kwargs):
    return func(*args, **kwargs)


@pytest.fixture(autouse=True)
def setup_google_cloud_module(monkeypatch: pytest.MonkeyPatch) -> None:
    DummyClient.languages = [{"language": "en"}, {"language": "zh-CN"}, {"language": "mni-Mtei"}]
    DummyClient.translate_result = {"translatedText": "ok", "detectedSourceLanguage": "en"}
    DummyClient.languages_error = None
    DummyClient.translate_error = None
    monkeypatch.setattr(trans_google_cloud_module.translate, "Client", DummyClient)
    monkeypatch.setattr(trans_google_cloud_module.asyncio, "to_thread", fake_to_thread)
    monkeypatch.delenv("GOOGLE_CLOUD_API_OAUTH", raising=False)


@pytest.fixture
def config() -> Any:
    return SimpleNamespace(TRANSLATION=SimpleNamespace(ENGINE="google_cloud", TIMEOUT=10.0))


@pytest.fixture
def engine(config: Any) -> trans_google_cloud_module.GoogleCloudTranslation:
    engine = trans_google_cloud_module.GoogleCloudTranslation()
    engine.initialize(config)
    return engine


def test_client_raises_when_uninitialized() -> None:
    engine = trans_google_cloud_module.GoogleCloudTranslation()

    assert engine.is_available is False
    with pytest.raises(TranslateExceptionError):
        _ = engine.client


def test_initialize_with_api_key_uses_key_session(monkeypatch: pytest.MonkeyPatch, config: Any) -> None:
    monkeypatch.setenv("GOOGLE_CLOUD_API_OAUTH", "token")
    engine = trans_google_cloud_module.GoogleCloudTranslation()

    engine.initialize(config)

    assert engine.engine_attributes.name == "google_cloud"
    assert engine.is_available is True
    assert isinstance(engine.client, DummyClient)
    http = engine.client.kwargs.get("_http")
    assert isinstance(http, trans_google_cloud_module.ApiKeySession)
    assert http.api_key == "token"


def test_initialize_without_api_key_uses_default_credentials(
    engine: trans_google_cloud_module.GoogleCloudTranslation,
) -> None:
    assert isinstance(engine.client, DummyClient)
    assert engine.client.kwargs == {}


def test_initialize_raises_authentication_error_without_credentials(
    monkeypatch: pytest.MonkeyPatch, config: Any
) -> None:
    def no_credentials(*args, **kwargs) -> DummyClient:
        _ = args, kwargs
        msg = "Could not automatically determine credentials."
        raise trans_google_cloud_module.DefaultCredentialsError(msg)

    monkeypatch.setattr(trans_google_cloud_module.translate, "Client", no_credentials)
    engine = trans_google_cloud_module.GoogleCloudTranslation()

    with pytest.raises(TranslationAuthenticationError):
        engine.initialize(config)


@pytest.mark.asyncio
async def test_fetch_languages_returns_codes(engine: trans_google_cloud_module.GoogleCloudTranslation) -> None:
    codes: list[str] = await engine.fetch_languages()

    assert codes == ["en", "zh-CN", "mni-Mtei"]


@pytest.mark.asyncio
@pytest.mark.parametrize("languages", [[{"name": "English"}], [{"language": "en"}, {"language": None}], None])
async def test_fetch_languages_rejects_malformed_payload(
    engine: trans_google_cloud_module.GoogleCloudTranslation, languages: Any
) -> None:
    DummyClient.languages = languages

    with pytest.raises(TranslateExceptionError):
        await engine.fetch_languages()


@pytest.mark.asyncio
async def test_fetch_languages_forbidden_raises_authentication_error(
    engine: trans_google_cloud_module.GoogleCloudTranslation,
) -> None:
    DummyClient.languages_error = trans_google_cloud_module.Forbidden("invalid key")

    with pytest.raises(TranslationAuthenticationError):
        await engine.fetch_languages()


@pytest.mark.asyncio
async def test_translation_returns_result(engine: trans_google_cloud_module.GoogleCloudTranslation) -> None:
    result: Result = await engine.translation("hello", tgt_lang="ja", src_lang="en")

    assert result.text == "ok"
    assert result.source_lang == "en"
    assert result.target_lang == "ja"
    assert result.metadata == {"engine": "google_cloud"}
    assert engine.client.calls == [
        {"content": "hello", "target_language": "ja", "source_language": "en", "format_": "text"}
    ]


@pytest.mark.asyncio
async def test_translation_keeps_source_when_not_detected(
    engine: trans_google_cloud_module.GoogleCloudTranslation,
) -> None:
    DummyClient.translate_result = {"translatedText": "ok"}

    result: Result = await engine.translation("hello", tgt_lang="ja", src_lang="en")

    assert result.source_lang == "en"


@pytest.mark.asyncio
async def test_translation_raises_for_unsupported_language(
    engine: trans_google_cloud_module.GoogleCloudTranslation,
) -> None:
    DummyClient.translate_error = trans_google_cloud_module.BadRequest("bad")

    with pytest.raises(NotSupportedLanguagesError):
        await engine.translation("hello", tgt_lang="xx", src_lang="en")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (trans_google_cloud_module.TooManyRequests("limit"), TranslationRateLimitError),
        (trans_google_cloud_module.Unauthorized("who"), TranslationAuthenticationError),
        (trans_google_cloud_module.GoogleAPIError("bad"), TranslateExceptionError),
    ],
)
async def test_translation_converts_google_errors(
    engine: trans_google_cloud_module.GoogleCloudTranslation, error: Exception, expected: type[Exception]
) -> None:
    DummyClient.translate_error = error

    with pytest.raises(expected) as exc_info:
        await engine.translation("hello", tgt_lang="ja", src_lang="en")

    assert type(exc_info.value) is expected


@pytest.mark.asyncio
async def test_translation_rejects_malformed_payload(engine: trans_google_cloud_module.GoogleCloudTranslation) -> None:
    DummyClient.translate_result = {"text": "ok"}

    with pytest.raises(TranslateExceptionError):
        await engine.translation("hello", tgt_lang="ja", src_lang="en")


@pytest.mark.asyncio
async def test_close_resets_instance(engine: trans_google_cloud_module.GoogleCloudTranslation) -> None:
    await engine.close()

    assert engine.is_available is False
    with pytest.raises(TranslateExceptionError):
        _ = engine.client
