"""txcast - broadcast pre-signed transactions to many chains.

This library submits transactions that were signed elsewhere to EVM, UTXO,
Solana, Cosmos SDK, TON, Polkadot, Ripple, Sui and Tron networks behind one
call, and classifies failures that suggest the transaction was already
submitted.
"""

from .chains import is_chain_of_kind, resolve_family
from .classifier import find_duplicate_marker, looks_already_submitted
from .config import BroadcastConfig
from .constants import DUPLICATE_SUBMISSION_MARKERS
from .dispatcher import BroadcastDispatcher, broadcast_raw_tx
from .exceptions import (
    BroadcastError,
    BroadcastFailed,
    ClassifiedError,
    JsonRpcError,
    NetworkError,
    UnsupportedChain,
    ValidationError,
)
from .types import (
    BroadcastRequest,
    Chain,
    ChainFamily,
    ChainKind,
    DecodedAs,
    DecodedPayload,
    ErrorKind,
)
from .utils import (
    ensure_hex_prefix,
    sniff_cosmos_payload,
    sniff_solana_payload,
    strip_hex_prefix,
)

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "BroadcastDispatcher",
    "broadcast_raw_tx",
    "BroadcastConfig",
    # Types and enums
    "BroadcastRequest",
    "Chain",
    "ChainFamily",
    "ChainKind",
    "DecodedAs",
    "DecodedPayload",
    "ErrorKind",
    "DUPLICATE_SUBMISSION_MARKERS",
    # Exceptions
    "BroadcastError",
    "ClassifiedError",
    "BroadcastFailed",
    "UnsupportedChain",
    "NetworkError",
    "JsonRpcError",
    "ValidationError",
    # Utility functions
    "is_chain_of_kind",
    "resolve_family",
    "find_duplicate_marker",
    "looks_already_submitted",
    "strip_hex_prefix",
    "ensure_hex_prefix",
    "sniff_solana_payload",
    "sniff_cosmos_payload",
]
