"""Runtime support for generated request builders.

This module is copied verbatim into every generated package (as
``_runtime.py``) so generated code depends only on httpx and pydantic.
It provides the shared HTTP transport, the response envelope, value
encoding and the errors raised by generated ``values()``/``do()`` calls.
"""

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic_core import to_json

__all__ = (
    'APIError',
    'BaseService',
    'CallError',
    'DEFAULT_BASE_URL',
    'EncodeError',
    'Envelope',
    'HTTPClient',
    'MissingParameterError',
    'TransportError',
    'decode_response',
    'encode_field',
    'encode_value',
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://slack.com/api/'


class CallError(Exception):
    """Base exception for errors raised by generated calls."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class MissingParameterError(CallError):
    """A required parameter was left at its empty value.

    Attributes:
        parameter: Name of the missing parameter.
    """

    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(f'missing required parameter {parameter}')


class EncodeError(CallError):
    """A list or object parameter could not be encoded.

    Attributes:
        parameter: Name of the parameter being encoded.
        cause: The underlying exception.
    """

    def __init__(self, parameter: str, cause: Exception | None = None):
        self.parameter = parameter
        self.cause = cause
        message = f'failed to encode field {parameter}'
        if cause:
            message += f': {cause}'
        super().__init__(message)


class TransportError(CallError):
    """Submitting the request or decoding its response failed.

    Attributes:
        endpoint: The endpoint name the request was posted to.
        cause: The underlying exception.
    """

    def __init__(self, endpoint: str, cause: Exception | None = None):
        self.endpoint = endpoint
        self.cause = cause
        message = f'failed to post to {endpoint}'
        if cause:
            message += f': {cause}'
        super().__init__(message)


class APIError(CallError):
    """The remote service answered with ``ok`` set to false.

    The message is the ``error`` string from the response envelope.
    """

    def __init__(self, error: str, endpoint: str | None = None):
        self.error = error
        self.endpoint = endpoint
        super().__init__(error)


class Envelope(BaseModel):
    """Standard response wrapper: ``{"ok": bool, "error": str, ...}``."""

    model_config = ConfigDict(extra='allow', populate_by_name=True)

    ok: bool = False
    error: str = ''


def encode_value(value: Any) -> str:
    """Encode a list or object parameter to its wire string.

    Objects with an ``encode()`` method (including list subclasses) are
    encoded by it. Pydantic models are dumped as JSON, lists of strings are
    joined with commas and anything else is JSON-encoded.

    Raises:
        Exception: Whatever the value's own ``encode()`` raises.
        pydantic_core.PydanticSerializationError: If the value cannot be serialized.
    """
    encode = getattr(value, 'encode', None)
    if callable(encode) and not isinstance(value, str):
        return encode()
    if isinstance(value, BaseModel):
        return value.model_dump_json(by_alias=True, exclude_none=True)
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return ','.join(value)
    return to_json(value, by_alias=True, exclude_none=True).decode('utf-8')


class HTTPClient:
    """Shared transport used by every generated service.

    Example:
        >>> client = HTTPClient(base_url='https://slack.com/api/')
        >>> data = client.post_form('auth.test', {'token': 'xoxb-...'})
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        http_client: httpx.Client | None = None,
        async_http_client: httpx.AsyncClient | None = None,
        timeout: float | None = 30.0,
    ):
        self.base_url = base_url if base_url.endswith('/') else f'{base_url}/'
        self.timeout = timeout
        self._http_client = http_client
        self._async_http_client = async_http_client

    def _url(self, endpoint: str) -> str:
        return f'{self.base_url}{endpoint}'

    def _timeout(self, timeout: float | None) -> float | None:
        return self.timeout if timeout is None else timeout

    def post_form(
        self,
        endpoint: str,
        values: dict[str, str],
        *,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """POST ``values`` form-encoded to ``endpoint`` and return the JSON body.

        Raises:
            TransportError: If the request fails or the body is not JSON.
        """
        logger.debug(f'POST {endpoint} ({len(values)} parameters)')
        try:
            if self._http_client is not None:
                response = self._http_client.post(
                    self._url(endpoint), data=values, timeout=self._timeout(timeout)
                )
            else:
                with httpx.Client() as client:
                    response = client.post(
                        self._url(endpoint),
                        data=values,
                        timeout=self._timeout(timeout),
                    )
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise TransportError(endpoint, e) from e

    async def apost_form(
        self,
        endpoint: str,
        values: dict[str, str],
        *,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """Async variant of :meth:`post_form`."""
        logger.debug(f'POST {endpoint} ({len(values)} parameters)')
        try:
            if self._async_http_client is not None:
                response = await self._async_http_client.post(
                    self._url(endpoint), data=values, timeout=self._timeout(timeout)
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(
                        self._url(endpoint),
                        data=values,
                        timeout=self._timeout(timeout),
                    )
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise TransportError(endpoint, e) from e


class BaseService:
    """Holds the transport and auth token shared by the calls of one group."""

    def __init__(self, client: HTTPClient, token: str):
        self._client = client
        self._token = token


def decode_response(endpoint: str, response_type: Any, data: Any) -> Any:
    """Validate a decoded JSON body as ``response_type``.

    Raises:
        TransportError: If the body does not match the expected shape.
    """
    try:
        return TypeAdapter(response_type).validate_python(data)
    except ValidationError as e:
        raise TransportError(endpoint, e) from e


def encode_field(name: str, value: Any) -> str:
    """Encode ``value`` for parameter ``name``, wrapping failures in EncodeError."""
    try:
        return encode_value(value)
    except Exception as e:
        raise EncodeError(name, e) from e
