"""Interceptors that time client and server calls and report them as metrics."""

from __future__ import annotations

import time
from datetime import timedelta
from typing import Any, Callable
from urllib.parse import urlsplit

from mortar.monitoring.types import Tags
from mortar.strings import split_method_and_package

CLIENT_TIMER_METRIC = "client_calls_duration"
CLIENT_TIMER_METRIC_DESCRIPTION = "Monitor external HTTP client calls"
TARGET_TAG = "target"
PATH_TAG = "path"
SUCCESS_TAG = "success"
TYPE_TAG = "ctype"
TYPE_GRPC = "grpc"
TYPE_REST = "rest"

GRPC_CODE_TAG_NAME = "code"
GRPC_NAME_PREFIX = "grpc_"

CODE_OK = 0
CODE_UNKNOWN = 2
_HTTP_BAD_REQUEST = 400


class StatusError(Exception):
    """An error carrying a gRPC status code."""

    def __init__(self, code: int, message: str = "") -> None:
        super().__init__(message)
        self.code = code
        self.message = message


def _elapsed_since(start: float) -> timedelta:
    return timedelta(seconds=time.perf_counter() - start)


def _flag(value: bool) -> str:
    return "true" if value else "false"


def prepare_tags(host: str, path: str, client_type: str, success: str) -> Tags:
    """Return the tags describing one client call."""
    return {
        TARGET_TAG: host.strip(":"),
        PATH_TAG: path,
        SUCCESS_TAG: success,
        TYPE_TAG: client_type,
    }


def _code_of(error: BaseException) -> int:
    if isinstance(error, StatusError):
        return int(error.code)
    code = getattr(error, "code", None)
    if callable(code):
        try:
            value = code()
        except Exception:  # noqa: BLE001 - an unreadable code counts as unknown
            return CODE_UNKNOWN
        if isinstance(value, int):
            return value
        raw = getattr(value, "value", None)
        if isinstance(raw, tuple) and raw and isinstance(raw[0], int):
            return raw[0]
    return CODE_UNKNOWN


def grpc_code_tag_value(error: BaseException | None) -> str:
    """Return the numeric gRPC status code of ``error`` as text.

    No error means OK (``"0"``); an error without a status is Unknown (``"2"``).
    """
    if error is None:
        return str(CODE_OK)
    return str(_code_of(error))


def _record_client_call(
    metrics: Any, tags: Tags, ctx: Any, elapsed: timedelta
) -> None:
    (
        metrics.with_tags(tags)
        .timer(CLIENT_TIMER_METRIC, CLIENT_TIMER_METRIC_DESCRIPTION)
        .with_context(ctx)
        .record(elapsed)
    )


def monitor_grpc_client_calls(metrics: Any) -> Callable[..., Any]:
    """Return a unary gRPC client interceptor that times every call.

    The interceptor is called as ``(ctx, method, req, reply, cc, invoker, *opts)``
    and calls ``invoker(ctx, method, req, reply, cc, *opts)``. Errors raised by
    the invoker are recorded as unsuccessful calls and raised again.
    """

    def interceptor(
        ctx: Any,
        method: str,
        req: Any,
        reply: Any,
        cc: Any,
        invoker: Callable[..., Any],
        *opts: Any,
    ) -> Any:
        start = time.perf_counter()
        succeeded = False
        try:
            result = invoker(ctx, method, req, reply, cc, *opts)
            succeeded = True
            return result
        finally:
            if metrics is not None:
                target = getattr(cc, "target", "") if cc is not None else ""
                if callable(target):
                    target = target()
                tags = prepare_tags(target or "", method, TYPE_GRPC, _flag(succeeded))
                _record_client_call(metrics, tags, ctx, _elapsed_since(start))

    return interceptor


def _response_status(response: Any) -> int | None:
    for attribute in ("status_code", "status"):
        value = getattr(response, attribute, None)
        if isinstance(value, int):
            return value
    return None


def monitor_rest_client_calls(metrics: Any) -> Callable[[Any, Callable[[Any], Any]], Any]:
    """Return a REST client interceptor that times every call.

    The interceptor is called as ``(request, handler)``. The request needs a
    ``url``; ``host`` and ``context`` attributes are used when present. A call
    succeeds when the handler returns a response with a status below 400.
    """

    def interceptor(request: Any, handler: Callable[[Any], Any]) -> Any:
        start = time.perf_counter()
        response = None
        try:
            response = handler(request)
            return response
        finally:
            if metrics is not None:
                parsed = urlsplit(str(getattr(request, "url", "")))
                host = getattr(request, "host", None) or parsed.netloc
                status = _response_status(response) if response is not None else None
                succeeded = status is not None and status < _HTTP_BAD_REQUEST
                tags = prepare_tags(host, parsed.path, TYPE_REST, _flag(succeeded))
                ctx = getattr(request, "context", None)
                _record_client_call(metrics, tags, ctx, _elapsed_since(start))

    return interceptor


def monitor_grpc_server_calls(metrics: Any) -> Callable[..., Any]:
    """Return a unary gRPC server interceptor that times every handled call.

    The interceptor is called as ``(ctx, req, info, handler)`` where ``info``
    has a ``full_method`` attribute (a plain string is accepted too). The timer
    is named after the method and tagged with the resulting status code.
    """

    def interceptor(
        ctx: Any, req: Any, info: Any, handler: Callable[[Any, Any], Any]
    ) -> Any:
        start = time.perf_counter()
        error: BaseException | None = None
        try:
            return handler(ctx, req)
        except BaseException as err:
            error = err
            raise
        finally:
            if metrics is not None:
                full_method = getattr(info, "full_method", info)
                _, method_name = split_method_and_package(str(full_method))
                timer = metrics.with_tags(
                    {GRPC_CODE_TAG_NAME: grpc_code_tag_value(error)}
                ).timer(
                    GRPC_NAME_PREFIX + method_name,
                    f"time api calls for {full_method}",
                )
                timer.record(_elapsed_since(start))

    return interceptor