"""Payload normalisation and sniffing helpers."""

from __future__ import annotations

import base64
import binascii
import json
import logging
from collections.abc import Mapping
from typing import Any

import base58

from .exceptions import BroadcastError, ValidationError
from .types import DecodedAs, DecodedPayload

logger = logging.getLogger(__name__)


def strip_hex_prefix(value: str) -> str:
    """Drop a leading ``0x``/``0X`` if present."""
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


def ensure_hex_prefix(value: str) -> str:
    """Return ``value`` with exactly one leading ``0x``."""
    return "0x" + strip_hex_prefix(value)


def _decode_base64(value: str, field: str) -> bytes:
    # Unpadded input is accepted; characters outside the alphabet are not.
    text = value.strip().rstrip("=")
    try:
        return base64.b64decode(text + "=" * (-len(text) % 4), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError(
            "Payload is not valid base64", field=field, details={"error": str(exc)}
        ) from exc


def sniff_solana_payload(raw_tx: str) -> DecodedPayload:
    """Decode a Solana transaction supplied as base58 or base64 text.

    Base64 is assumed when the text carries ``=`` padding or a ``+``/``/``
    character, none of which exist in the base58 alphabet.
    """
    if not raw_tx:
        raise ValidationError("Solana transaction payload is empty", field="raw_tx")

    if "=" in raw_tx or "+" in raw_tx or "/" in raw_tx:
        payload = DecodedPayload(DecodedAs.BASE64, _decode_base64(raw_tx, "raw_tx"))
    else:
        try:
            data = base58.b58decode(raw_tx.strip())
        except ValueError as exc:
            raise ValidationError(
                "Payload is not valid base58", field="raw_tx", details={"error": str(exc)}
            ) from exc
        payload = DecodedPayload(DecodedAs.BASE58, data)

    logger.debug("Decoded Solana payload as %s (%d bytes)", payload.format.value, len(payload.data))
    return payload


def sniff_cosmos_payload(raw_tx: str) -> DecodedPayload:
    """Decode a Cosmos transaction given as ``{"tx_bytes": b64}`` JSON or bare base64."""
    try:
        parsed = json.loads(raw_tx)
    except ValueError:
        parsed = None

    if isinstance(parsed, Mapping) and isinstance(parsed.get("tx_bytes"), str):
        payload = DecodedPayload(DecodedAs.JSON, _decode_base64(parsed["tx_bytes"], "tx_bytes"))
    else:
        payload = DecodedPayload(DecodedAs.RAW_BYTES, _decode_base64(raw_tx, "raw_tx"))

    logger.debug("Decoded Cosmos payload as %s (%d bytes)", payload.format.value, len(payload.data))
    return payload


def extract_error_message(value: Any) -> str:
    """Pull a readable error message out of an exception, string or JSON body."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, BroadcastError):
        return value.message
    if isinstance(value, BaseException):
        return str(value)
    if isinstance(value, Mapping):
        context = value.get("context")
        if isinstance(context, Mapping) and context.get("error"):
            return extract_error_message(context["error"])

        error = value.get("error")
        if isinstance(error, str) and error:
            return error
        if isinstance(error, Mapping):
            message = error.get("message")
            if message:
                data = error.get("data")
                return f"{message}: {data}" if isinstance(data, str) and data else str(message)

        message = value.get("message")
        if isinstance(message, str) and message:
            return message

        return json.dumps(value, sort_keys=True, default=str)
    return str(value)
