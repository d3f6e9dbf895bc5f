from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from contract_proxy.evm import subscriptions
from contract_proxy.evm.config import NetworkParams
from contract_proxy.types import Artifact

NETWORK_ID = "42"
ACCOUNT = "0x9999999999999999999999999999999999999999"
DEPLOYED_ADDRESS = "0x1111111111111111111111111111111111111111"
OTHER_ADDRESS = "0x2222222222222222222222222222222222222222"
TX_HASH = "0x" + "ab" * 32

TOKEN_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "balanceOf",
        "stateMutability": "view",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "decimals",
        "stateMutability": "pure",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint8"}],
    },
    {
        "type": "function",
        "name": "transfer",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "value", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "type": "function",
        "name": "deposit",
        "stateMutability": "payable",
        "inputs": [],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "subscribe",
        "stateMutability": "nonpayable",
        "inputs": [],
        "outputs": [],
    },
    {
        "type": "event",
        "name": "Transfer",
        "anonymous": False,
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
    },
]


class DummyChain:
    """Shared record of every transport interaction, in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.results: dict[str, Any] = {}
        self.gas_estimate: int | float = 21_000
        self.estimate_error: Exception | None = None
        self.call_error: Exception | None = None
        self.transact_error: Exception | None = None
        self.receipt: Any = {"status": 1, "blockNumber": 7}
        self.receipt_error: Exception | None = None

    def names(self) -> list[Any]:
        return [entry[0] for entry in self.calls]

    def count(self, name: str) -> int:
        return self.names().count(name)


class DummyFunction:
    def __init__(self, chain: DummyChain, name: str, args: tuple[Any, ...]) -> None:
        self._chain = chain
        self.name = name
        self.args = args

    async def estimate_gas(self, params: dict[str, Any]) -> int | float:
        self._chain.calls.append(("estimate_gas", self.name, dict(params)))
        if self._chain.estimate_error is not None:
            raise self._chain.estimate_error
        return self._chain.gas_estimate

    async def call(self, params: dict[str, Any]) -> Any:
        self._chain.calls.append(("call", self.name, dict(params)))
        if self._chain.call_error is not None:
            raise self._chain.call_error
        return self._chain.results.get(self.name)

    async def transact(self, params: dict[str, Any]) -> str:
        self._chain.calls.append(("transact", self.name, dict(params)))
        if self._chain.transact_error is not None:
            raise self._chain.transact_error
        return TX_HASH


class DummyFunctions:
    def __init__(self, chain: DummyChain) -> None:
        self._chain = chain

    def __getattr__(self, name: str) -> Any:
        return lambda *args: DummyFunction(self._chain, name, args)


class DummyArgumentFilter:
    def __init__(self) -> None:
        self.value: Any = None

    def match_single(self, value: Any) -> None:
        self.value = value


class DummyFilterBuilder:
    def __init__(self) -> None:
        self.args = {"from": DummyArgumentFilter(), "to": DummyArgumentFilter()}

    @property
    def filter_params(self) -> dict[str, Any]:
        return {"topics": ["0xddf2", self.args["from"].value, self.args["to"].value]}


class DummyEvent:
    def __init__(self) -> None:
        self.builder = DummyFilterBuilder()

    def build_filter(self) -> DummyFilterBuilder:
        return self.builder

    def process_log(self, log: Any) -> Any:
        if log.get("malformed"):
            raise ValueError("could not decode log")
        return {"event": "Transfer", "args": log["args"]}


class DummyContract:
    def __init__(self, chain: DummyChain, address: str, abi: list[dict[str, Any]]) -> None:
        self.address = address
        self.abi = abi
        self.functions = DummyFunctions(chain)
        self.transfer_event = DummyEvent()
        self.events = SimpleNamespace(Transfer=lambda: self.transfer_event)


class DummySubscriptionManager:
    def __init__(self) -> None:
        self.subscriptions: list[Any] = []
        self.subscribe_error: Exception | None = None
        self.unsubscribe_error: Exception | None = None
        self.cleared = 0
        self.handled: list[bool] = []

    async def subscribe(self, subscription: Any) -> str:
        if self.subscribe_error is not None:
            raise self.subscribe_error
        self.subscriptions.append(subscription)
        return f"0x{len(self.subscriptions):02x}"

    async def unsubscribe_all(self) -> bool:
        if self.unsubscribe_error is not None:
            raise self.unsubscribe_error
        self.subscriptions.clear()
        self.cleared += 1
        return True

    async def handle_subscriptions(self, run_forever: bool = False) -> None:
        self.handled.append(run_forever)


class DummyEth:
    def __init__(self, chain: DummyChain) -> None:
        self._chain = chain
        self.contracts: list[DummyContract] = []

    def contract(self, address: str, abi: list[dict[str, Any]]) -> DummyContract:
        contract = DummyContract(self._chain, address, abi)
        self.contracts.append(contract)
        return contract

    async def wait_for_transaction_receipt(self, tx_hash: Any, timeout: float) -> Any:
        self._chain.calls.append(("wait_for_receipt", tx_hash, timeout))
        if self._chain.receipt_error is not None:
            raise self._chain.receipt_error
        return self._chain.receipt


class DummyWeb3:
    def __init__(self, chain: DummyChain) -> None:
        self.eth = DummyEth(chain)
        self.subscription_manager = DummySubscriptionManager()


@pytest.fixture
def chain() -> DummyChain:
    return DummyChain()


@pytest.fixture
def web3(chain: DummyChain) -> DummyWeb3:
    return DummyWeb3(chain)


@pytest.fixture
def params(chain: DummyChain, web3: DummyWeb3) -> NetworkParams:
    return NetworkParams(
        network_id=NETWORK_ID,
        account=ACCOUNT,
        web3=web3,  # type: ignore[arg-type]
        on_tx_hash=lambda tx_hash: chain.calls.append(("on_tx_hash", tx_hash)),
        on_tx_confirmed=lambda receipt: chain.calls.append(("on_tx_confirmed", receipt)),
        receipt_timeout=5.0,
    )


@pytest.fixture
def artifact() -> Artifact:
    return Artifact.from_dict(
        {
            "contractName": "Token",
            "abi": TOKEN_ABI,
            "networks": {NETWORK_ID: {"address": DEPLOYED_ADDRESS}},
        }
    )


@pytest.fixture
def logs_subscription(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        subscriptions, "LogsSubscription", lambda **kwargs: SimpleNamespace(**kwargs)
    )
