"""HTTP, JSON-RPC and Web3 connection helpers shared by the broadcasters."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Mapping, Sequence
from typing import Any

import requests
from web3 import HTTPProvider, Web3

from .constants import DEFAULT_REQUEST_TIMEOUT
from .exceptions import JsonRpcError, NetworkError

logger = logging.getLogger(__name__)

_request_ids = itertools.count(1)


class HttpTransport:
    """POST JSON payloads and decode JSON responses."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        return self._timeout

    def post_json(self, url: str, payload: Any) -> Any:
        """POST ``payload`` to ``url`` and return the decoded JSON body.

        Error statuses are returned as long as the body is JSON, since most
        broadcast endpoints describe rejections in the body.
        """
        try:
            response = self._session.post(url, json=payload, timeout=self._timeout)
        except requests.RequestException as exc:
            raise NetworkError(
                f"Request to {url} failed: {exc}",
                endpoint=url,
                details={"error": str(exc)},
            ) from exc

        status_code = getattr(response, "status_code", None)
        try:
            body = response.json()
        except ValueError as exc:
            text = getattr(response, "text", "") or ""
            raise NetworkError(
                f"Non-JSON response from {url} (status={status_code}): {text[:200]}",
                endpoint=url,
                status_code=status_code,
            ) from exc

        logger.debug("POST %s -> status=%s", url, status_code)
        return body


class JsonRpcClient:
    """Minimal JSON-RPC 2.0 client over :class:`HttpTransport`."""

    def __init__(self, url: str, transport: HttpTransport) -> None:
        self._url = url
        self._transport = transport

    @property
    def url(self) -> str:
        return self._url

    def call(self, method: str, params: Sequence[Any] | Mapping[str, Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(_request_ids),
            "method": method,
            "params": params,
        }
        body = self._transport.post_json(self._url, payload)

        if not isinstance(body, Mapping):
            raise NetworkError(
                f"Malformed JSON-RPC response for {method}", endpoint=self._url
            )

        error = body.get("error")
        if error:
            if isinstance(error, Mapping):
                raise JsonRpcError(
                    str(error.get("message") or "JSON-RPC error"),
                    code=error.get("code"),
                    data=error.get("data"),
                    endpoint=self._url,
                )
            raise JsonRpcError(str(error), endpoint=self._url)

        if "result" not in body:
            raise NetworkError(
                f"JSON-RPC response for {method} carries no result", endpoint=self._url
            )
        return body["result"]


def build_web3(rpc_url: str, *, timeout: float = DEFAULT_REQUEST_TIMEOUT) -> Web3:
    """Create a Web3 instance bound to ``rpc_url``."""
    provider = HTTPProvider(rpc_url, request_kwargs={"timeout": timeout})
    return Web3(provider)
