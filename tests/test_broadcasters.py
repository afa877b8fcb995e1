from __future__ import annotations

import base64
import json
from collections.abc import Iterable
from types import SimpleNamespace
from typing import Any

import base58
import pytest
import requests
from hexbytes import HexBytes
from requests import Session

from txcast.broadcasters import (
    CosmosBroadcaster,
    EvmBroadcaster,
    PolkadotBroadcaster,
    RippleBroadcaster,
    SolanaBroadcaster,
    SuiBroadcaster,
    TonBroadcaster,
    TronBroadcaster,
    UtxoBroadcaster,
)
from txcast.broadcasters.tron import decode_tron_message
from txcast.config import BroadcastConfig
from txcast.connections import HttpTransport
from txcast.exceptions import BroadcastFailed, JsonRpcError, NetworkError, ValidationError
from txcast.types import Chain


class DummyResponse:
    def __init__(self, payload: Any, *, status_code: int = 200, text: str | None = None) -> None:
        self._payload = payload
        self.status_code = status_code
        self.text = text if text is not None else ""

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class DummySession(Session):
    """Session that records POSTs and replays canned responses in order."""

    def __init__(self, responses: Iterable[Any] = ()) -> None:
        super().__init__()
        self._responses = list(responses)
        self.calls: list[tuple[str, Any, float]] = []

    def queue(self, *responses: Any) -> None:
        self._responses.extend(responses)

    def post(self, url: str, json: Any = None, timeout: float | None = None) -> Any:  # type: ignore[override]
        self.calls.append((url, json, timeout))
        if not self._responses:
            raise AssertionError(f"unexpected POST to {url}")
        response = self._responses.pop(0)
        if isinstance(response, requests.RequestException):
            raise response
        if isinstance(response, DummyResponse):
            return response
        return DummyResponse(response)


class DummyEth:
    def __init__(self, result: Any = None, error: Exception | None = None) -> None:
        self._result = result
        self._error = error
        self.sent: list[str] = []

    def send_raw_transaction(self, raw_tx: str) -> Any:
        self.sent.append(raw_tx)
        if self._error is not None:
            raise self._error
        return self._result


class DummyWeb3Factory:
    def __init__(self, eth: DummyEth) -> None:
        self.eth = eth
        self.calls: list[tuple[str, float]] = []

    def __call__(self, rpc_url: str, *, timeout: float) -> Any:
        self.calls.append((rpc_url, timeout))
        return SimpleNamespace(eth=self.eth)


@pytest.fixture
def config() -> BroadcastConfig:
    return BroadcastConfig(api_root="https://api.test", request_timeout=3.0)


@pytest.fixture
def session() -> DummySession:
    return DummySession()


@pytest.fixture
def transport(session: DummySession) -> HttpTransport:
    return HttpTransport(session, timeout=3.0)


def _rpc_result(result: object) -> dict:
    return {"jsonrpc": "2.0", "id": 1, "result": result}


def _rpc_error(code: int, message: str, data: object = None) -> dict:
    error = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": 1, "error": error}


# ----------------------------------------------------------------------
# EVM
# ----------------------------------------------------------------------
class TestEvmBroadcaster:
    def _broadcaster(self, config: BroadcastConfig, transport: HttpTransport, eth: DummyEth):
        factory = DummyWeb3Factory(eth)
        return EvmBroadcaster(config, transport, web3_factory=factory), factory

    def test_returns_node_hash_verbatim(self, config, transport) -> None:
        eth = DummyEth(result=HexBytes("0xabc123"))
        broadcaster, factory = self._broadcaster(config, transport, eth)

        tx_hash = broadcaster.broadcast(Chain.ETHEREUM, "02f8")

        assert tx_hash == "0xabc123"
        assert eth.sent == ["0x02f8"]
        assert factory.calls == [(config.rpc_url_for(Chain.ETHEREUM), 3.0)]

    def test_prefixed_input_is_not_double_prefixed(self, config, transport) -> None:
        eth = DummyEth(result=HexBytes("0xabc123"))
        broadcaster, _ = self._broadcaster(config, transport, eth)

        broadcaster.broadcast(Chain.POLYGON, "0x02f8")

        assert eth.sent == ["0x02f8"]

    @pytest.mark.parametrize("message", ["already known", "nonce too low", "tx already in mempool"])
    def test_duplicate_errors_are_flagged(self, config, transport, message: str) -> None:
        error = ValueError({"code": -32000, "message": message})
        broadcaster, _ = self._broadcaster(config, transport, DummyEth(error=error))

        with pytest.raises(BroadcastFailed) as excinfo:
            broadcaster.broadcast(Chain.BASE, "02f8")

        err = excinfo.value
        assert err.possibly_already_submitted is True
        assert err.marker == message
        assert err.cause is error
        assert err.chain == "Base"
        assert "cannot be recovered" in err.message

    def test_unmatched_errors_propagate(self, config, transport) -> None:
        error = ValueError({"code": -32000, "message": "insufficient funds for gas"})
        broadcaster, _ = self._broadcaster(config, transport, DummyEth(error=error))

        with pytest.raises(ValueError) as excinfo:
            broadcaster.broadcast(Chain.ETHEREUM, "02f8")

        assert excinfo.value is error


# ----------------------------------------------------------------------
# UTXO
# ----------------------------------------------------------------------
class TestUtxoBroadcaster:
    def test_success(self, config, transport, session: DummySession) -> None:
        session.queue({"data": {"transaction_hash": "f00dcafe"}, "context": {"code": 200}})

        tx_hash = UtxoBroadcaster(config, transport).broadcast(Chain.BITCOIN, "0x0200000001")

        assert tx_hash == "f00dcafe"
        url, payload, timeout = session.calls[0]
        assert url == "https://api.test/blockchair/bitcoin/push/transaction"
        assert payload == {"data": "0200000001"}
        assert timeout == 3.0

    def test_already_known_is_flagged(self, config, transport, session: DummySession) -> None:
        session.queue({"data": None, "context": {"error": "already known"}})

        with pytest.raises(BroadcastFailed) as excinfo:
            UtxoBroadcaster(config, transport).broadcast(Chain.LITECOIN, "0200")

        assert excinfo.value.possibly_already_submitted is True
        assert excinfo.value.marker == "already known"

    def test_error_status_with_json_body(self, config, transport, session: DummySession) -> None:
        error = "Invalid transaction. Error: txn-mempool-conflict"
        body = {"data": None, "context": {"code": 400, "error": error}}
        session.queue(DummyResponse(body, status_code=400))

        with pytest.raises(BroadcastFailed) as excinfo:
            UtxoBroadcaster(config, transport).broadcast(Chain.DOGECOIN, "0200")

        assert excinfo.value.marker == "txn-mempool-conflict"

    def test_cardano_bad_inputs(self, config, transport, session: DummySession) -> None:
        session.queue({"data": None, "context": {"error": "ApplyTxError [BadInputsUTxO ...]"}})

        with pytest.raises(BroadcastFailed) as excinfo:
            UtxoBroadcaster(config, transport).broadcast(Chain.CARDANO, "84a4")

        assert excinfo.value.possibly_already_submitted is True
        assert session.calls[0][0] == "https://api.test/blockchair/cardano/push/transaction"

    def test_unmatched_error(self, config, transport, session: DummySession) -> None:
        session.queue({"data": None, "context": {"error": "bad-txns-inputs-missingorspent"}})

        with pytest.raises(NetworkError) as excinfo:
            UtxoBroadcaster(config, transport).broadcast(Chain.BITCOIN, "0200")

        assert excinfo.value.message == "Failed to broadcast transaction: bad-txns-inputs-missingorspent"

    def test_read_timeout_is_flagged(self, config, transport, session: DummySession) -> None:
        timeout = requests.exceptions.ReadTimeout("Read timed out.")
        session.queue(timeout)

        with pytest.raises(BroadcastFailed) as excinfo:
            UtxoBroadcaster(config, transport).broadcast(Chain.BITCOIN, "0200")

        err = excinfo.value
        assert err.possibly_already_submitted is True
        assert err.marker == "timed out"
        assert isinstance(err.cause, NetworkError)
        assert err.cause.__cause__ is timeout

    def test_unmatched_transport_error_propagates(self, config, transport, session) -> None:
        session.queue(requests.ConnectionError("connection refused"))

        with pytest.raises(NetworkError):
            UtxoBroadcaster(config, transport).broadcast(Chain.BITCOIN, "0200")


# ----------------------------------------------------------------------
# Solana
# ----------------------------------------------------------------------
_SOLANA_TX = bytes(range(1, 65))
_SOLANA_B58 = base58.b58encode(_SOLANA_TX).decode()


class TestSolanaBroadcaster:
    @pytest.mark.parametrize(
        "raw_tx",
        [
            base58.b58encode(_SOLANA_TX).decode(),
            base64.b64encode(_SOLANA_TX).decode(),
        ],
    )
    def test_sends_base64_bytes_with_options(self, config, transport, session, raw_tx) -> None:
        session.queue(_rpc_result("5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnb"))

        signature = SolanaBroadcaster(config, transport).broadcast(Chain.SOLANA, raw_tx)

        assert signature == "5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnb"
        url, payload, _ = session.calls[0]
        assert url == config.solana_rpc_url
        assert payload["method"] == "sendTransaction"
        encoded, options = payload["params"]
        assert base64.b64decode(encoded) == _SOLANA_TX
        assert options == {
            "encoding": "base64",
            "skipPreflight": False,
            "preflightCommitment": "confirmed",
            "maxRetries": 3,
        }

    def test_already_processed_is_flagged(self, config, transport, session) -> None:
        session.queue(
            _rpc_error(
                -32002,
                "Transaction simulation failed: This transaction has already been processed",
                {"err": "AlreadyProcessed", "logs": []},
            )
        )

        with pytest.raises(BroadcastFailed) as excinfo:
            SolanaBroadcaster(config, transport).broadcast(Chain.SOLANA, _SOLANA_B58)

        err = excinfo.value
        assert err.possibly_already_submitted is True
        assert isinstance(err.cause, JsonRpcError)

    def test_invalid_payload_makes_no_call(self, config, transport, session) -> None:
        with pytest.raises(ValidationError):
            SolanaBroadcaster(config, transport).broadcast(Chain.SOLANA, "0OIl")

        assert session.calls == []


# ----------------------------------------------------------------------
# Cosmos
# ----------------------------------------------------------------------
_COSMOS_TX = b"\n\x9a\x01\n\x97\x01\n\x1c/cosmos.bank.v1beta1.MsgSend" + bytes(range(0, 40))
_COSMOS_B64 = base64.b64encode(_COSMOS_TX).decode()


class TestCosmosBroadcaster:
    def test_json_and_bare_base64_send_identical_bytes(self, config, transport, session) -> None:
        encoded = base64.b64encode(_COSMOS_TX).decode()
        session.queue(
            _rpc_result({"code": 0, "hash": "A1B2C3", "log": "[]"}),
            _rpc_result({"code": 0, "hash": "A1B2C3", "log": "[]"}),
        )
        broadcaster = CosmosBroadcaster(config, transport)

        first = broadcaster.broadcast(Chain.THORCHAIN, json.dumps({"tx_bytes": encoded}))
        second = broadcaster.broadcast(Chain.THORCHAIN, encoded)

        assert first == second == "A1B2C3"
        sent = [payload["params"]["tx"] for _, payload, _ in session.calls]
        assert sent[0] == sent[1]
        assert base64.b64decode(sent[0]) == _COSMOS_TX
        assert session.calls[0][0] == config.rpc_url_for(Chain.THORCHAIN)
        assert session.calls[0][1]["method"] == "broadcast_tx_sync"

    def test_sequence_mismatch_is_flagged_as_sequence_conflict(self, config, transport, session) -> None:
        session.queue(
            _rpc_result(
                {
                    "code": 32,
                    "codespace": "sdk",
                    "hash": "A1B2C3",
                    "log": "account sequence mismatch, expected 7, got 6: incorrect account sequence",
                }
            )
        )

        with pytest.raises(BroadcastFailed) as excinfo:
            CosmosBroadcaster(config, transport).broadcast(Chain.COSMOS, _COSMOS_B64)

        err = excinfo.value
        assert err.possibly_already_submitted is True
        assert err.marker == "account sequence mismatch"
        assert err.is_sequence_conflict is True

    def test_cache_duplicate_from_rpc_error(self, config, transport, session) -> None:
        session.queue(_rpc_error(-32603, "Internal error", "tx already exists in cache"))

        with pytest.raises(BroadcastFailed) as excinfo:
            CosmosBroadcaster(config, transport).broadcast(Chain.OSMOSIS, _COSMOS_B64)

        err = excinfo.value
        assert err.marker == "tx already exists in cache"
        assert err.is_sequence_conflict is False

    def test_unmatched_code_raises_network_error(self, config, transport, session) -> None:
        session.queue(_rpc_result({"code": 5, "codespace": "sdk", "log": "insufficient funds"}))

        with pytest.raises(NetworkError) as excinfo:
            CosmosBroadcaster(config, transport).broadcast(Chain.KUJIRA, _COSMOS_B64)

        assert "code 5" in excinfo.value.message
        assert "insufficient funds" in excinfo.value.message

    def test_unpadded_base64_is_accepted(self, config, transport, session) -> None:
        raw = b"\x0a\x01\x02\x03\x04"
        session.queue(_rpc_result({"code": 0, "hash": "D4E5F6", "log": "[]"}))

        tx_hash = CosmosBroadcaster(config, transport).broadcast(
            Chain.COSMOS, base64.b64encode(raw).decode().rstrip("=")
        )

        assert tx_hash == "D4E5F6"
        assert base64.b64decode(session.calls[0][1]["params"]["tx"]) == raw


# ----------------------------------------------------------------------
# TON
# ----------------------------------------------------------------------
class TestTonBroadcaster:
    def test_success(self, config, transport, session) -> None:
        session.queue({"ok": True, "result": {"hash": "kd8Jx1TbQ0w4v1t4Zp3fPq=="}})

        tx_hash = TonBroadcaster(config, transport).broadcast(Chain.TON, "te6ccgEBAQEA")

        assert tx_hash == "kd8Jx1TbQ0w4v1t4Zp3fPq=="
        url, payload, _ = session.calls[0]
        assert url == "https://api.test/ton/v2/sendBocReturnHash"
        assert payload == {"boc": "te6ccgEBAQEA"}

    def test_duplicate_message_is_flagged(self, config, transport, session) -> None:
        session.queue(
            DummyResponse(
                {"ok": False, "error": "LITE_SERVER_UNKNOWN: duplicate message", "code": 500},
                status_code=500,
            )
        )

        with pytest.raises(BroadcastFailed) as excinfo:
            TonBroadcaster(config, transport).broadcast(Chain.TON, "te6ccgEBAQEA")

        assert excinfo.value.possibly_already_submitted is True

    def test_other_failure(self, config, transport, session) -> None:
        session.queue({"ok": False, "error": "failed to unpack account state", "code": 500})

        with pytest.raises(NetworkError) as excinfo:
            TonBroadcaster(config, transport).broadcast(Chain.TON, "te6ccgEBAQEA")

        assert excinfo.value.message == "TON broadcast failed: failed to unpack account state"


# ----------------------------------------------------------------------
# Polkadot
# ----------------------------------------------------------------------
class TestPolkadotBroadcaster:
    def test_success_adds_hex_prefix(self, config, transport, session) -> None:
        session.queue(_rpc_result("0x1f2e3d"))

        tx_hash = PolkadotBroadcaster(config, transport).broadcast(Chain.POLKADOT, "4502")

        assert tx_hash == "0x1f2e3d"
        url, payload, _ = session.calls[0]
        assert url == config.polkadot_rpc_url
        assert payload["method"] == "author_submitExtrinsic"
        assert payload["params"] == ["0x4502"]

    def test_rpc_error_is_generic_failure(self, config, transport, session) -> None:
        session.queue(_rpc_error(1010, "Invalid Transaction", "Transaction is outdated"))

        with pytest.raises(NetworkError) as excinfo:
            PolkadotBroadcaster(config, transport).broadcast(Chain.POLKADOT, "0x4502")

        assert not isinstance(excinfo.value, BroadcastFailed)
        assert excinfo.value.message == (
            "Polkadot broadcast failed: Invalid Transaction: Transaction is outdated"
        )


# ----------------------------------------------------------------------
# Ripple
# ----------------------------------------------------------------------
class TestRippleBroadcaster:
    def test_success(self, config, transport, session) -> None:
        session.queue(
            {
                "result": {
                    "status": "success",
                    "engine_result": "tesSUCCESS",
                    "accepted": True,
                    "tx_json": {"hash": "C53ECF838647FA5A4C780377025FEC7999AB4182590510CA461444B207AB74A9"},
                }
            }
        )

        tx_hash = RippleBroadcaster(config, transport).broadcast(Chain.RIPPLE, "0x1200002280")

        assert tx_hash == "C53ECF838647FA5A4C780377025FEC7999AB4182590510CA461444B207AB74A9"
        _, payload, _ = session.calls[0]
        assert payload["method"] == "submit"
        assert payload["params"] == [{"tx_blob": "1200002280"}]

    def test_queued_result_without_accepted_field(self, config, transport, session) -> None:
        session.queue(
            {"result": {"status": "success", "engine_result": "terQUEUED", "tx_json": {"hash": "AB"}}}
        )

        assert RippleBroadcaster(config, transport).broadcast(Chain.RIPPLE, "12") == "AB"

    @pytest.mark.parametrize("engine_result", ["tefPAST_SEQ", "tefALREADY"])
    def test_past_sequence_is_flagged(self, config, transport, session, engine_result) -> None:
        session.queue(
            {
                "result": {
                    "status": "success",
                    "engine_result": engine_result,
                    "engine_result_message": "This sequence number has already passed.",
                    "accepted": False,
                    "tx_json": {"hash": "AB"},
                }
            }
        )

        with pytest.raises(BroadcastFailed) as excinfo:
            RippleBroadcaster(config, transport).broadcast(Chain.RIPPLE, "12")

        assert excinfo.value.possibly_already_submitted is True
        assert excinfo.value.marker == engine_result

    def test_server_error(self, config, transport, session) -> None:
        session.queue(
            {
                "result": {
                    "status": "error",
                    "error": "invalidTransaction",
                    "error_message": "fails local checks: Empty signature.",
                }
            }
        )

        with pytest.raises(NetworkError) as excinfo:
            RippleBroadcaster(config, transport).broadcast(Chain.RIPPLE, "12")

        assert excinfo.value.message == "Ripple submit failed: fails local checks: Empty signature."


# ----------------------------------------------------------------------
# Sui
# ----------------------------------------------------------------------
class TestSuiBroadcaster:
    @pytest.mark.parametrize(
        "raw_tx",
        [
            json.dumps({"unsignedTx": "AAACAAgA"}),
            json.dumps({"signature": "AKD4"}),
            json.dumps({"unsignedTx": "", "signature": "AKD4"}),
            json.dumps(["AAACAAgA", "AKD4"]),
            "not json",
        ],
    )
    def test_preflight_validation_makes_no_call(self, config, transport, session, raw_tx) -> None:
        with pytest.raises(BroadcastFailed) as excinfo:
            SuiBroadcaster(config, transport).broadcast(Chain.SUI, raw_tx)

        assert excinfo.value.possibly_already_submitted is False
        assert session.calls == []

    def test_success(self, config, transport, session) -> None:
        session.queue(_rpc_result({"digest": "7mZ8dUHZ5sx3qkBj8GQDpSDkHqJ3hEGxTqJTHXWeadq4"}))

        digest = SuiBroadcaster(config, transport).broadcast(
            Chain.SUI, json.dumps({"unsignedTx": "AAACAAgA", "signature": "AKD4"})
        )

        assert digest == "7mZ8dUHZ5sx3qkBj8GQDpSDkHqJ3hEGxTqJTHXWeadq4"
        url, payload, _ = session.calls[0]
        assert url == config.sui_rpc_url
        assert payload["method"] == "sui_executeTransactionBlock"
        assert payload["params"] == ["AAACAAgA", ["AKD4"]]

    def test_already_executed_is_flagged(self, config, transport, session) -> None:
        session.queue(_rpc_error(-32002, "Transaction already executed"))

        with pytest.raises(BroadcastFailed) as excinfo:
            SuiBroadcaster(config, transport).broadcast(
                Chain.SUI, json.dumps({"unsignedTx": "AAACAAgA", "signature": "AKD4"})
            )

        assert excinfo.value.possibly_already_submitted is True


# ----------------------------------------------------------------------
# Tron
# ----------------------------------------------------------------------
_TRON_TX = {"txID": "abc", "raw_data_hex": "0a02", "signature": ["ff"]}


class TestTronBroadcaster:
    def test_success(self, config, transport, session) -> None:
        session.queue({"result": True, "txid": "77ddfa7093cc5f745c0d3a54abb89ef070f983343c05e0f89e5a52f3e5401299"})

        txid = TronBroadcaster(config, transport).broadcast(Chain.TRON, json.dumps(_TRON_TX))

        assert txid == "77ddfa7093cc5f745c0d3a54abb89ef070f983343c05e0f89e5a52f3e5401299"
        url, payload, _ = session.calls[0]
        assert url == f"{config.tron_rpc_url}/wallet/broadcasttransaction"
        assert payload == _TRON_TX

    def test_success_code_without_txid_is_failure(self, config, transport, session) -> None:
        session.queue({"code": "SUCCESS"})

        with pytest.raises(BroadcastFailed) as excinfo:
            TronBroadcaster(config, transport).broadcast(Chain.TRON, json.dumps(_TRON_TX))

        assert excinfo.value.possibly_already_submitted is False
        assert "did not return transaction ID" in excinfo.value.message

    @pytest.mark.parametrize("code", ["DUP_TRANSACTION_ERROR", "DUPLICATE_TRANSACTION"])
    def test_duplicate_code_is_flagged(self, config, transport, session, code) -> None:
        session.queue({"code": code, "message": b"Dup transaction.".hex()})

        with pytest.raises(BroadcastFailed) as excinfo:
            TronBroadcaster(config, transport).broadcast(Chain.TRON, json.dumps(_TRON_TX))

        assert excinfo.value.possibly_already_submitted is True
        assert excinfo.value.marker == code

    def test_other_code_decodes_message(self, config, transport, session) -> None:
        session.queue({"code": "SIGERROR", "message": b"validate signature error".hex()})

        with pytest.raises(NetworkError) as excinfo:
            TronBroadcaster(config, transport).broadcast(Chain.TRON, json.dumps(_TRON_TX))

        assert excinfo.value.message == "Tron broadcast failed: SIGERROR: validate signature error"

    def test_invalid_json_makes_no_call(self, config, transport, session) -> None:
        with pytest.raises(ValidationError):
            TronBroadcaster(config, transport).broadcast(Chain.TRON, "{not json")

        assert session.calls == []

    def test_decode_tron_message(self) -> None:
        assert decode_tron_message("436f6e7472616374") == "Contract"
        assert decode_tron_message("plain text") == "plain text"
        assert decode_tron_message("ff") == "ff"
        assert decode_tron_message("") == ""

    def test_duplicate_in_non_json_body_is_flagged(self, config, transport, session) -> None:
        session.queue(
            DummyResponse(ValueError("no json"), status_code=500, text="DUP_TRANSACTION_ERROR")
        )

        with pytest.raises(BroadcastFailed) as excinfo:
            TronBroadcaster(config, transport).broadcast(Chain.TRON, json.dumps(_TRON_TX))

        err = excinfo.value
        assert err.possibly_already_submitted is True
        assert err.marker == "DUP_TRANSACTION_ERROR"
        assert isinstance(err.cause, NetworkError)
        assert err.cause.status_code == 500
