"""Type definitions and data models for the broadcast API."""

from dataclasses import dataclass
from enum import Enum


class Chain(str, Enum):
    """Chains known to the broadcast layer."""

    # EVM
    ETHEREUM = "Ethereum"
    ARBITRUM = "Arbitrum"
    AVALANCHE = "Avalanche"
    BASE = "Base"
    BLAST = "Blast"
    BSC = "BSC"
    CRONOS_CHAIN = "CronosChain"
    OPTIMISM = "Optimism"
    POLYGON = "Polygon"
    ZKSYNC = "Zksync"
    MANTLE = "Mantle"
    HYPERLIQUID = "Hyperliquid"
    SEI = "Sei"

    # UTXO
    BITCOIN = "Bitcoin"
    BITCOIN_CASH = "Bitcoin-Cash"
    LITECOIN = "Litecoin"
    DOGECOIN = "Dogecoin"
    DASH = "Dash"
    ZCASH = "Zcash"
    CARDANO = "Cardano"

    # Cosmos SDK
    THORCHAIN = "THORChain"
    MAYACHAIN = "MayaChain"
    COSMOS = "Cosmos"
    OSMOSIS = "Osmosis"
    DYDX = "Dydx"
    KUJIRA = "Kujira"
    TERRA = "Terra"
    TERRA_CLASSIC = "TerraClassic"
    NOBLE = "Noble"
    AKASH = "Akash"

    # Other
    SOLANA = "Solana"
    TON = "Ton"
    POLKADOT = "Polkadot"
    RIPPLE = "Ripple"
    SUI = "Sui"
    TRON = "Tron"


class ChainKind(str, Enum):
    """Broad chain kinds that share tooling."""

    EVM = "evm"
    UTXO = "utxo"
    COSMOS = "cosmos"
    OTHER = "other"


class ChainFamily(str, Enum):
    """Groups of chains sharing a submission protocol."""

    EVM = "evm"
    UTXO = "utxo"
    SOLANA = "solana"
    COSMOS = "cosmos"
    TON = "ton"
    POLKADOT = "polkadot"
    RIPPLE = "ripple"
    SUI = "sui"
    TRON = "tron"


class ErrorKind(str, Enum):
    """Classified failure kinds surfaced to callers."""

    BROADCAST_FAILED = "BroadcastFailed"
    UNSUPPORTED_CHAIN = "UnsupportedChain"


class DecodedAs(str, Enum):
    """Encoding a sniffed payload was decoded from."""

    BASE58 = "base58"
    BASE64 = "base64"
    JSON = "json"
    RAW_BYTES = "raw_bytes"


@dataclass(frozen=True)
class BroadcastRequest:
    """A pre-signed transaction addressed to a chain."""

    chain: Chain | str
    raw_tx: str


@dataclass(frozen=True)
class DecodedPayload:
    """Bytes recovered from an ambiguous payload, tagged with the detected format."""

    format: DecodedAs
    data: bytes
