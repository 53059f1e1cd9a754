"""HTTP transport backed by ``httpx``.

Requests run on a small thread pool so :meth:`HttpxTransport.send` returns
immediately with a future.  Bodies are form-encoded; nested values (the full
row list, mappings) are sent as JSON strings.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict, Mapping, Optional

import httpx

from gridnet.application.interfaces import ITransport
from gridnet.domain.models import TransportResponse
from gridnet.errors import TransportError
from gridnet.settings.loader import TransportSettings

LOGGER = logging.getLogger(__name__)


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    return str(value)


def encode_form(body: Mapping[str, Any]) -> Dict[str, str]:
    """Flatten *body* into string form fields."""
    return {str(key): _form_value(value) for key, value in body.items()}


class HttpxTransport(ITransport):
    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        *,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        headers: Optional[Mapping[str, str]] = None,
        max_workers: int = 2,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=base_url or "",
            timeout=timeout,
            headers=dict(headers or {}),
        )
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="gridnet-http")

    @classmethod
    def from_settings(cls, settings: TransportSettings) -> "HttpxTransport":
        return cls(
            base_url=settings.base_url,
            timeout=settings.timeout,
            headers=settings.headers,
            max_workers=settings.max_workers,
        )

    def send(self, url: str, method: str, body: Mapping[str, Any]) -> "Future[TransportResponse]":
        return self._executor.submit(self._perform, url, method.upper(), encode_form(body))

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
        if self._owns_client:
            self._client.close()

    def _perform(self, url: str, method: str, fields: Dict[str, str]) -> TransportResponse:
        LOGGER.debug("%s %s (%d field(s))", method, url, len(fields))
        try:
            if method == "GET":
                response = self._client.get(url, params=fields)
            else:
                response = self._client.request(method, url, data=fields)
        except httpx.TimeoutException as exc:
            raise TransportError(f"Request to {url} timed out") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {url} failed: {exc}") from exc

        status = response.status_code
        if response.is_error:
            raise TransportError(f"{method} {url} returned HTTP {status}", status=status)
        if not response.content:
            return TransportResponse(status=status, body=None)
        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportError(f"{method} {url} returned invalid JSON", status=status) from exc
        if not isinstance(payload, dict):
            raise TransportError(f"{method} {url} returned a non-object JSON body", status=status)
        return TransportResponse(status=status, body=payload)
