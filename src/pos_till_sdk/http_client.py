from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any, Callable
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import TransportError
from .tracing import TRACE_HEADER, TraceContext

ResponseHook = Callable[[requests.Response], None]
RequestHook = Callable[[str, str, dict[str, Any]], None]

_READ_METHODS = frozenset({"GET", "HEAD"})


@dataclass
class LastOperation:
    module: str
    operation: str
    duration_ms: int
    result: str
    trace_id: str | None


@dataclass
class HttpClient:
    """Thin JSON transport over a pooled ``requests.Session``.

    Reads may be retried on transport failure or 5xx when ``read_retries`` is
    configured. Mutations are sent exactly once: retrying a sale commit or a
    shift close is an operator decision, never an automatic one.

    ``switch_context`` implements cancel-by-navigation: a response that lands
    after its context moved on is discarded with ``REQUEST_CANCELLED`` so the
    caller leaves local state untouched.
    """

    config: ClientConfig
    trace: TraceContext | None = None
    session: requests.Session | None = None
    before_request: RequestHook | None = None
    after_response: ResponseHook | None = None
    last_operation: LastOperation | None = None
    _context_versions: dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()
            adapter = HTTPAdapter(
                pool_connections=self.config.max_connections,
                pool_maxsize=self.config.max_connections,
            )
            self.session.mount("http://", adapter)
            self.session.mount("https://", adapter)

    def _build_url(self, path: str) -> str:
        base = self.config.api_base_url.rstrip("/") + "/"
        return urljoin(base, path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        module: str = "unknown",
        operation: str = "unknown",
        context_key: str | None = None,
        context_version: int | None = None,
    ) -> dict[str, Any] | list[Any] | None:
        if self.session is None:
            raise RuntimeError("HTTP session not initialized")
        normalized_method = method.upper()
        is_read = normalized_method in _READ_METHODS

        trace_context = self.trace or TraceContext()
        trace_id = trace_context.ensure() if is_read else trace_context.renew()
        request_headers = {"Accept": "application/json"}
        if headers:
            request_headers.update(headers)
        request_headers[TRACE_HEADER] = trace_id

        url = self._build_url(path)
        if self.before_request:
            self.before_request(
                normalized_method,
                url,
                {"headers": request_headers, "json_body": json_body, "params": params},
            )

        if context_key and context_version is None:
            context_version = self.get_context_version(context_key)
        if context_key and not self._context_is_current(context_key, context_version):
            raise self._cancelled(trace_context, "Request cancelled before dispatch")

        attempts = self.config.read_retries + 1 if is_read else 1
        started = time.monotonic()
        response: requests.Response | None = None
        for attempt in range(attempts):
            try:
                response = self.session.request(
                    method=normalized_method,
                    url=url,
                    headers=request_headers,
                    json=json_body,
                    params=params,
                    timeout=(self.config.connect_timeout_seconds, self.config.read_timeout_seconds),
                    verify=self.config.verify_ssl,
                )
            except requests.RequestException as exc:
                if attempt >= attempts - 1:
                    self._record_operation(module, operation, started, "transport_error", trace_context.trace_id)
                    raise TransportError(
                        code="TIMEOUT" if isinstance(exc, requests.Timeout) else "TRANSPORT_ERROR",
                        message=str(exc),
                        details={"type": type(exc).__name__},
                        trace_id=trace_context.trace_id,
                        status_code=0,
                        raw_payload=None,
                    ) from exc
            else:
                if response.status_code < 500 or attempt >= attempts - 1:
                    break
            time.sleep(self.config.retry_backoff_seconds * (2**attempt))

        if response is None:
            raise RuntimeError("HTTP request finished without a response")

        if context_key and not self._context_is_current(context_key, context_version):
            raise self._cancelled(trace_context, "Request cancelled due to context switch")

        if self.after_response:
            self.after_response(response)
        trace_context.update_from_headers(response.headers)

        if response.ok:
            self._record_operation(module, operation, started, "success", trace_context.trace_id)
            if not response.content:
                return None
            try:
                return response.json()
            except json.JSONDecodeError as exc:
                raise TransportError(
                    code="INVALID_RESPONSE",
                    message="Response body is not valid JSON",
                    details={"body": response.text[:200]},
                    trace_id=trace_context.trace_id,
                    status_code=response.status_code,
                    raw_payload=None,
                ) from exc

        payload: Any
        try:
            payload = response.json()
        except json.JSONDecodeError:
            payload = {"message": response.text}
        if not isinstance(payload, dict):
            payload = {"message": str(payload)}
        trace_context.update_from_payload(payload)
        self._record_operation(module, operation, started, "error", trace_context.trace_id)
        raise map_error(response.status_code, payload, trace_context.trace_id)

    def switch_context(self, context_key: str) -> int:
        new_version = self.get_context_version(context_key) + 1
        self._context_versions[context_key] = new_version
        return new_version

    def get_context_version(self, context_key: str) -> int:
        return self._context_versions.get(context_key, 0)

    def _context_is_current(self, context_key: str, context_version: int | None) -> bool:
        if context_version is None:
            return True
        return self.get_context_version(context_key) == context_version

    @staticmethod
    def _cancelled(trace_context: TraceContext, message: str) -> TransportError:
        return TransportError(
            code="REQUEST_CANCELLED",
            message=message,
            details={"type": "context_switched"},
            trace_id=trace_context.trace_id,
            status_code=0,
            raw_payload=None,
        )

    def _record_operation(self, module: str, operation: str, started: float, result: str, trace_id: str | None) -> None:
        self.last_operation = LastOperation(
            module=module,
            operation=operation,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
            trace_id=trace_id,
        )
