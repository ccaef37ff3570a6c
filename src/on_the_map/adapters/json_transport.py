"""JSON request/response helper shared by every API endpoint."""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from on_the_map.adapters.udacity_models import ErrorPayload
from on_the_map.domain.errors import (
    ApiError,
    DecodeError,
    SerializationError,
    TransportError,
)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}
_SUCCESS_STATUS_CODES = frozenset({200, 201})

_logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
ResultT = TypeVar("ResultT")

Completion = Callable[[ResultT | None, BaseException | None], None]


class RequestHandle(Generic[ResultT]):
    """Cancelable handle for one in-flight request.

    Cancelling resolves the request with a ``TransportError`` whose
    ``cancelled`` flag is set; completions always fire exactly once.
    """

    def __init__(self, task: "asyncio.Task[ResultT]") -> None:
        self._task = task

    @classmethod
    def start(cls, operation: Awaitable[ResultT]) -> "RequestHandle[ResultT]":
        """Schedule an operation on the running loop and return its handle."""
        return cls(asyncio.ensure_future(operation))

    @property
    def done(self) -> bool:
        return self._task.done()

    def cancel(self) -> bool:
        """Request cancellation; returns False if the request already finished."""
        return self._task.cancel()

    async def result(self) -> ResultT:
        """Wait for the request and return its value or raise its error."""
        try:
            return await self._task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            raise TransportError("request cancelled", cancelled=True) from None

    def add_completion(self, completion: Completion[ResultT]) -> None:
        """Register a callback receiving ``(value, None)`` or ``(None, error)``."""

        def _deliver(task: "asyncio.Task[ResultT]") -> None:
            if task.cancelled():
                completion(None, TransportError("request cancelled", cancelled=True))
                return
            error = task.exception()
            if error is not None:
                completion(None, error)
                return
            completion(task.result(), None)

        self._task.add_done_callback(_deliver)


@dataclass
class JsonTransport:
    """Executes JSON requests and resolves them into typed values or errors."""

    http_client: httpx.AsyncClient
    timeout: float | None = None

    @classmethod
    def create(cls, timeout: float | None = None) -> "JsonTransport":
        """Create a transport with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(), timeout=timeout)

    async def request(  # noqa: PLR0913
        self,
        url: str,
        method: str,
        response_model: type[ModelT],
        *,
        body: object | None = None,
        headers: dict[str, str] | None = None,
        params: dict[str, str | int] | None = None,
        strip_prefix: int = 0,
    ) -> ModelT:
        """Issue one request and decode the response.

        ``strip_prefix`` drops that many leading bytes from the response body
        before decoding, for endpoints that prepend a security banner.
        """
        content = _encode_body(body)
        _logger.debug("performing %s request for %s", method, url)
        try:
            response = await self.http_client.request(
                method,
                url,
                content=content,
                params=params,
                headers=headers if headers is not None else DEFAULT_HEADERS,
                timeout=self.timeout,
            )
        except httpx.TransportError as exc:
            raise TransportError(f"Request to {url} failed: {exc}") from exc

        data = response.content[strip_prefix:]
        _logger.debug(
            "status code for %s: %s", response_model.__name__, response.status_code
        )
        if response.status_code in _SUCCESS_STATUS_CODES:
            try:
                return response_model.model_validate_json(data)
            except ValidationError as exc:
                _logger.error("could not decode %s: %s", response_model.__name__, exc)
                raise DecodeError(
                    f"Unexpected response from {url}: {exc.error_count()} problem(s)"
                ) from exc

        try:
            error_payload = ErrorPayload.model_validate_json(data)
        except ValidationError as exc:
            _logger.error(
                "could not decode error response (HTTP %s): %s",
                response.status_code,
                exc,
            )
            raise DecodeError(
                f"Unexpected error response from {url} "
                f"(HTTP {response.status_code})"
            ) from exc
        raise ApiError(
            http_status_code=response.status_code,
            status_code=error_payload.status,
            message=error_payload.error,
        )

    def submit(  # noqa: PLR0913
        self,
        url: str,
        method: str,
        response_model: type[ModelT],
        *,
        body: object | None = None,
        headers: dict[str, str] | None = None,
        params: dict[str, str | int] | None = None,
        strip_prefix: int = 0,
    ) -> RequestHandle[ModelT]:
        """Schedule a request and return a cancelable handle."""
        return RequestHandle.start(
            self.request(
                url,
                method,
                response_model,
                body=body,
                headers=headers,
                params=params,
                strip_prefix=strip_prefix,
            )
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _encode_body(body: object | None) -> bytes | None:
    """Serialize a request body to JSON bytes."""
    if body is None:
        return None
    if isinstance(body, BaseModel):
        body = body.model_dump(by_alias=True)
    try:
        encoded = json.dumps(body, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Could not encode request body: {exc}") from exc
    return encoded.encode()
