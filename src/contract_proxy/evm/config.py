"""Configuration containers for the contract proxy."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any

from dotenv import load_dotenv
from web3 import AsyncWeb3

from ..exceptions import ConfigurationError
from ..types import Address

DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_RECEIPT_TIMEOUT = 120.0

TxHashHook = Callable[[str], Any]
TxConfirmedHook = Callable[[Any], Any]


def _noop(_: Any) -> None:
    return None


@dataclass(frozen=True)
class NetworkParams:
    """Network snapshot shared by every proxy bound to the same node."""

    network_id: str
    account: Address
    web3: AsyncWeb3
    web3_ws: AsyncWeb3 | None = None
    on_tx_hash: TxHashHook = _noop
    on_tx_confirmed: TxConfirmedHook = _noop
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT

    def __post_init__(self) -> None:
        object.__setattr__(self, "network_id", str(self.network_id))
        if self.web3_ws is None:
            object.__setattr__(self, "web3_ws", self.web3)

    @property
    def subscription_web3(self) -> AsyncWeb3:
        return self.web3_ws if self.web3_ws is not None else self.web3

    @property
    def shares_transport(self) -> bool:
        return self.subscription_web3 is self.web3

    def with_overrides(self, **changes: Any) -> NetworkParams:
        """Return a copy with the given fields replaced."""

        return replace(self, **changes)


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings used to build :class:`NetworkParams`."""

    rpc_url: str
    ws_url: str | None = None
    network_id: str | None = None
    account: Address | None = None
    private_key: str | None = field(default=None, repr=False)
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT

    @classmethod
    def from_env(cls) -> ClientConfig:
        """Build the configuration from environment variables (and ``.env``)."""

        load_dotenv()

        rpc_url = os.getenv("CONTRACT_RPC_URL")
        if not rpc_url:
            raise ConfigurationError("CONTRACT_RPC_URL not found in environment variables")

        return cls(
            rpc_url=rpc_url,
            ws_url=os.getenv("CONTRACT_WS_URL") or None,
            network_id=os.getenv("CONTRACT_NETWORK_ID") or None,
            account=os.getenv("CONTRACT_ACCOUNT") or None,
            private_key=os.getenv("PRIVATE_KEY") or None,
            request_timeout=_env_float("CONTRACT_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
            receipt_timeout=_env_float("CONTRACT_RECEIPT_TIMEOUT", DEFAULT_RECEIPT_TIMEOUT),
        )


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"{name} must be a number", details={"value": raw, "error": str(exc)}
        ) from exc
