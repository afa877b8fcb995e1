"""Exception hierarchy for the raw-transaction broadcast API."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .constants import SEQUENCE_CONFLICT_MARKERS
from .types import ErrorKind


class BroadcastError(Exception):
    """Base exception for all broadcast errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ClassifiedError(BroadcastError):
    """An error the caller is expected to branch on.

    ``possibly_already_submitted`` tells the caller whether the network may
    already hold the transaction. When it is ``True`` resending is unsafe.
    """

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        possibly_already_submitted: bool = False,
        marker: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.cause = cause
        self.possibly_already_submitted = possibly_already_submitted
        self.marker = marker
        if cause is not None:
            self.__cause__ = cause

    @property
    def is_sequence_conflict(self) -> bool:
        """Whether the matched marker reports a nonce/sequence conflict rather than a resend."""
        return self.marker in SEQUENCE_CONFLICT_MARKERS


class BroadcastFailed(ClassifiedError):
    """Raised when the network rejected or could not complete a submission."""

    kind = ErrorKind.BROADCAST_FAILED

    def __init__(
        self,
        message: str,
        chain: str | None = None,
        cause: BaseException | None = None,
        possibly_already_submitted: bool = False,
        marker: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, cause, possibly_already_submitted, marker, details)
        self.chain = chain


class UnsupportedChain(ClassifiedError):
    """Raised when no broadcaster is registered for the requested chain."""

    kind = ErrorKind.UNSUPPORTED_CHAIN

    def __init__(
        self,
        chain: str,
        supported_families: Sequence[str] = (),
        message: str | None = None,
    ):
        supported = ", ".join(supported_families)
        if message is None:
            message = f"Raw broadcast not yet supported for chain: {chain}"
            if supported:
                message = f"{message} (supported families: {supported})"
        super().__init__(
            message, details={"chain": chain, "supported_families": list(supported_families)}
        )
        self.chain = chain
        self.supported_families = tuple(supported_families)


class NetworkError(BroadcastError):
    """Raised when a broadcast endpoint is unreachable or answers with an unusable body.

    ``endpoint`` and ``status_code`` are copied into ``details`` so callers that
    only log ``details`` still see where the submission went.
    """

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        context = {"endpoint": endpoint, "status_code": status_code}
        merged = {k: v for k, v in context.items() if v is not None}
        merged.update(details or {})
        super().__init__(message, merged)
        self.endpoint = endpoint
        self.status_code = status_code


class JsonRpcError(NetworkError):
    """Raised when a JSON-RPC response carries an ``error`` object."""

    def __init__(
        self,
        message: str,
        code: int | None = None,
        data: Any | None = None,
        endpoint: str | None = None,
    ):
        text = message if data in (None, "") else f"{message}: {data}"
        super().__init__(text, endpoint=endpoint, details={"code": code, "data": data})
        self.code = code
        self.data = data


class ValidationError(BroadcastError):
    """Raised when a raw transaction or a configuration value cannot be decoded."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, {"field": field, **(details or {})} if field else details)
        self.field = field
        self.value = value
