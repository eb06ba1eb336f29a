from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..error_mapper import map_rejection
from ..http_client import HttpClient


@dataclass
class BaseClient:
    http: HttpClient
    access_token: str | None = None

    def _auth_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _request(self, method: str, path: str, **kwargs):
        headers = kwargs.pop("headers", {})
        merged = {**self._auth_headers(), **headers}
        return self.http.request(method, path, headers=merged, **kwargs)

    def _call(self, method: str, path: str, **kwargs) -> Any:
        """Send a request and unwrap the ``{success, data, message}`` envelope.

        ``success=false`` is a well-formed rejection and raises the mapped
        :class:`RejectionError` with the backend message untouched.
        """
        payload = self._request(method, path, **kwargs)
        return unwrap_envelope(payload, self.http.trace.trace_id if self.http.trace else None)


def unwrap_envelope(payload: Any, trace_id: str | None) -> Any:
    if not isinstance(payload, dict) or "success" not in payload:
        return payload
    if not payload.get("success"):
        raise map_rejection(payload, trace_id)
    return payload.get("data")


def _coerce_model(value: Any, model_type: type[Any]):
    if isinstance(value, model_type):
        return value
    return model_type.model_validate(value)


def _expect_dict(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"Expected {what} response to be a JSON object")
    return data


def _expect_list(data: Any, what: str) -> list[Any]:
    if isinstance(data, dict) and isinstance(data.get("items"), list):
        return data["items"]
    if not isinstance(data, list):
        raise ValueError(f"Expected {what} response to be a JSON array")
    return data


def _params(**values: Any) -> dict[str, Any] | None:
    params = {key: value for key, value in values.items() if value is not None}
    return params or None

