"""Asynchronous HTTP client used by the translation engines.

One ``AsyncHttp`` instance owns one aiohttp session for the lifetime of an engine. Response
bodies are decoded by media type, and every transport failure surfaces as an ``AsyncCommError``
carrying the HTTP status when the server sent one.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Final, Self

import aiohttp

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable, Mapping

    from aiohttp import ClientResponse

__all__: list[str] = ["AsyncCommError", "AsyncCommInvalidContentTypeError", "AsyncCommTimeoutError", "AsyncHttp"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

type Decoder = Callable[[bytes], Any]

CONNECT_TIMEOUT: Final[float] = 1.0
REDACTED_HEADERS: Final[frozenset[str]] = frozenset({"authorization", "x-rapidapi-key"})


def _decode_text(body: bytes) -> str:
    return body.decode("utf-8")


def _decode_json(body: bytes) -> Any:
    return json.loads(body.decode("utf-8"))


class AsyncHttp:
    """Thin aiohttp wrapper speaking JSON to translation APIs.

    The session is opened lazily on the first request, because aiohttp binds it to the running
    event loop, and reopened if the client is used again after ``close()``.

    Attributes:
        decoders (dict[str, Decoder]): Body decoders keyed by media type. ``text/plain``,
            ``text/html`` and ``application/json`` are registered by default.
    """

    def __init__(self) -> None:
        self._session: aiohttp.ClientSession | None = None
        self.decoders: dict[str, Decoder] = {
            "text/plain": _decode_text,
            "text/html": _decode_text,
            "application/json": _decode_json,
        }
        logger.debug("%s created", self.__class__.__name__)

    async def __aenter__(self) -> Self:
        self._open_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        _ = exc_type, exc_val, exc_tb
        await self.close()

    def _open_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            logger.debug("%s session opened", self.__class__.__name__)
        return self._session

    @property
    def closed(self) -> bool:
        return self._session is None or self._session.closed

    async def close(self) -> None:
        if not self.closed:
            await self._session.close()  # type: ignore[union-attr]
            logger.debug("%s session closed", self.__class__.__name__)
        self._session = None

    def register_decoder(self, media_type: str, decoder: Decoder) -> None:
        """Decode bodies of ``media_type`` with ``decoder``, replacing any earlier one."""
        if media_type in self.decoders:
            logger.debug("Replacing the decoder for '%s'", media_type)
        self.decoders[media_type] = decoder

    async def get(
        self,
        *,
        url: str,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        total_timeout: float = 10.0,
    ) -> Any:
        """Send a GET request and return the decoded body."""
        return await self._send("GET", url, headers=headers, total_timeout=total_timeout, params=params)

    async def post(
        self,
        *,
        url: str,
        headers: Mapping[str, str] | None = None,
        data: Any = None,
        total_timeout: float = 10.0,
    ) -> Any:
        """Send ``data`` as a JSON body and return the decoded response body."""
        return await self._send("POST", url, headers=headers, total_timeout=total_timeout, json=data)

    async def _send(
        self, method: str, url: str, *, headers: Mapping[str, str] | None, total_timeout: float, **kwargs: Any
    ) -> Any:
        """Run one request. Nothing is retried.

        Raises:
            AsyncCommTimeoutError: If the server did not answer within ``total_timeout``.
            AsyncCommInvalidContentTypeError: If no decoder handles the response media type.
            AsyncCommError: For any other transport failure or an error status.
        """
        logger.debug("%s %s headers=%s body=%s", method, url, self.redact(headers), kwargs.get("json"))
        session: aiohttp.ClientSession = self._open_session()
        try:
            async with session.request(
                method, url, headers=headers, timeout=self.build_timeout(total_timeout), **kwargs
            ) as resp:
                resp.raise_for_status()
                return await self.decode(resp)
        except TimeoutError as err:
            msg = f"No response from {url} within {total_timeout} seconds"
            raise AsyncCommTimeoutError(msg) from err
        except aiohttp.ClientResponseError as err:
            msg = f"{method} {url} answered with an error status"
            raise AsyncCommError(msg, status=err.status) from err
        except aiohttp.ClientConnectorError as err:
            msg = f"Cannot connect to {url}"
            raise AsyncCommError(msg) from err
        except (aiohttp.ClientError, ConnectionResetError) as err:
            msg = f"{method} {url} failed: {err}"
            raise AsyncCommError(msg) from err
        except (UnicodeDecodeError, json.JSONDecodeError) as err:
            msg = f"Undecodable response body from {url}"
            raise AsyncCommError(msg) from err

    async def decode(self, resp: ClientResponse) -> Any:
        """Decode a response body according to its media type.

        Returns:
            Any: The decoded body, or None when the body is empty.

        Raises:
            AsyncCommInvalidContentTypeError: If no decoder is registered for the media type.
        """
        body: bytes = await resp.read()
        if not body:
            return None

        media_type: str = resp.headers.get("Content-Type", "").partition(";")[0].strip().lower()
        decoder: Decoder | None = self.decoders.get(media_type)
        if decoder is None:
            msg = f"No decoder for media type '{media_type}'"
            raise AsyncCommInvalidContentTypeError(msg, status=resp.status)
        return decoder(body)

    @staticmethod
    def build_timeout(total_timeout: float) -> aiohttp.ClientTimeout:
        if total_timeout <= 0:
            return aiohttp.ClientTimeout(total=None)
        # A connect timeout above the total would never fire.
        return aiohttp.ClientTimeout(total=total_timeout, connect=min(CONNECT_TIMEOUT, total_timeout))

    @staticmethod
    def redact(headers: Mapping[str, str] | None) -> dict[str, str]:
        """Copy of ``headers`` safe for logging, with API keys masked."""
        return {name: "***" if name.lower() in REDACTED_HEADERS else value for name, value in (headers or {}).items()}


class AsyncCommError(Exception):
    """A request to a remote service failed.

    Attributes:
        status (int | None): HTTP status of the response, or None if no response was received.
    """

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message if status is None else f"{message} (status {status})")
        self.status: int | None = status


class AsyncCommTimeoutError(AsyncCommError):
    """The server did not answer in time."""


class AsyncCommInvalidContentTypeError(AsyncCommError):
    """The response used a media type with no registered decoder."""
