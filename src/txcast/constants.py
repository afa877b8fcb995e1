"""Constants and mappings for the broadcast API."""

from collections.abc import Mapping
from types import MappingProxyType

from .types import Chain, ChainFamily

# Error markers that indicate the network already has (or had) the transaction.
# Matching is a case-insensitive substring test in table order.
DUPLICATE_SUBMISSION_MARKERS: Mapping[ChainFamily, tuple[str, ...]] = MappingProxyType(
    {
        ChainFamily.EVM: (
            "already known",
            "transaction is temporarily banned",
            "nonce too low",
            "transaction already exists",
            "future transaction tries to replace pending",
            "could not replace existing tx",
            "tx already in mempool",
        ),
        ChainFamily.UTXO: (
            "BadInputsUTxO",
            "timed out",
            "txn-mempool-conflict",
            "already known",
        ),
        ChainFamily.SOLANA: (
            "already been processed",
            "AlreadyProcessed",
        ),
        ChainFamily.COSMOS: (
            "tx already exists in cache",
            "account sequence mismatch",
        ),
        ChainFamily.TON: ("duplicate message",),
        ChainFamily.POLKADOT: (),
        ChainFamily.RIPPLE: (
            "tefPAST_SEQ",
            "tefALREADY",
        ),
        ChainFamily.SUI: ("Transaction already executed",),
        ChainFamily.TRON: (
            "DUPLICATE_TRANSACTION",
            "DUP_TRANSACTION_ERROR",
        ),
    }
)

# Markers that signal an ordering conflict rather than a true resubmission.
SEQUENCE_CONFLICT_MARKERS = frozenset({"nonce too low", "account sequence mismatch"})

DEFAULT_API_ROOT = "https://api.vultisig.com"
DEFAULT_REQUEST_TIMEOUT = 10.0

DEFAULT_EVM_RPC_URLS: Mapping[Chain, str] = MappingProxyType(
    {
        Chain.ETHEREUM: "https://ethereum-rpc.publicnode.com",
        Chain.ARBITRUM: "https://arbitrum-one-rpc.publicnode.com",
        Chain.AVALANCHE: "https://avalanche-c-chain-rpc.publicnode.com",
        Chain.BASE: "https://base-rpc.publicnode.com",
        Chain.BLAST: "https://rpc.blast.io",
        Chain.BSC: "https://bsc-rpc.publicnode.com",
        Chain.CRONOS_CHAIN: "https://cronos-evm-rpc.publicnode.com",
        Chain.OPTIMISM: "https://optimism-rpc.publicnode.com",
        Chain.POLYGON: "https://polygon-bor-rpc.publicnode.com",
        Chain.ZKSYNC: "https://mainnet.era.zksync.io",
        Chain.MANTLE: "https://rpc.mantle.xyz",
        Chain.HYPERLIQUID: "https://rpc.hyperliquid.xyz/evm",
        Chain.SEI: "https://evm-rpc.sei-apis.com",
    }
)

# Tendermint RPC endpoints used for broadcast_tx_sync.
DEFAULT_COSMOS_RPC_URLS: Mapping[Chain, str] = MappingProxyType(
    {
        Chain.THORCHAIN: "https://rpc.ninerealms.com",
        Chain.MAYACHAIN: "https://tendermint.mayachain.info",
        Chain.COSMOS: "https://cosmos-rpc.publicnode.com",
        Chain.OSMOSIS: "https://osmosis-rpc.publicnode.com",
        Chain.DYDX: "https://dydx-rpc.publicnode.com",
        Chain.KUJIRA: "https://kujira-rpc.publicnode.com",
        Chain.TERRA: "https://terra-rpc.publicnode.com",
        Chain.TERRA_CLASSIC: "https://terra-classic-rpc.publicnode.com",
        Chain.NOBLE: "https://noble-rpc.polkachu.com",
        Chain.AKASH: "https://akash-rpc.publicnode.com",
    }
)

# Blockchair chain names, served through the API root proxy.
BLOCKCHAIR_CHAIN_NAMES: Mapping[Chain, str] = MappingProxyType(
    {
        Chain.BITCOIN: "bitcoin",
        Chain.BITCOIN_CASH: "bitcoin-cash",
        Chain.LITECOIN: "litecoin",
        Chain.DOGECOIN: "dogecoin",
        Chain.DASH: "dash",
        Chain.ZCASH: "zcash",
        Chain.CARDANO: "cardano",
    }
)

DEFAULT_SOLANA_RPC_URL = "https://api.mainnet-beta.solana.com"
DEFAULT_POLKADOT_RPC_URL = "https://polkadot-rpc.publicnode.com"
DEFAULT_RIPPLE_RPC_URL = "https://xrplcluster.com"
DEFAULT_SUI_RPC_URL = "https://fullnode.mainnet.sui.io:443"
DEFAULT_TRON_RPC_URL = "https://tron-rpc.publicnode.com"

TON_SEND_BOC_PATH = "/ton/v2/sendBocReturnHash"
BLOCKCHAIR_PUSH_PATH = "/push/transaction"
TRON_BROADCAST_PATH = "/wallet/broadcasttransaction"

SOLANA_SEND_OPTIONS: Mapping[str, object] = MappingProxyType(
    {
        "encoding": "base64",
        "skipPreflight": False,
        "preflightCommitment": "confirmed",
        "maxRetries": 3,
    }
)
