"""Dynamic proxy exposing every ABI function of a deployed contract."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from decimal import Decimal
from typing import Any

from web3 import Web3

from .evm.config import NetworkParams
from .evm.methods import MethodEntry, MethodKind, MethodRegistry
from .evm.subscriptions import clear_subscriptions, register_event_listener
from .evm.transactions import TransactionGuard
from .exceptions import NotDeployedError, ValidationError
from .types import Address, Artifact
from .utils import (
    from_wei,
    is_empty_address,
    to_ascii,
    to_bytes,
    to_datetime,
    to_list,
    to_unix_ts,
    to_wei,
)

logger = logging.getLogger(__name__)

NATIVE_OPERATIONS = frozenset(
    {
        "account",
        "address",
        "artifact",
        "ensure_bound",
        "method",
        "subscribe",
        "unsubscribe",
        "to_bytes",
        "to_ascii",
        "to_unix_ts",
        "to_datetime",
        "to_list",
        "to_wei",
        "from_wei",
        "is_empty_address",
    }
)


class ContractProxy:
    """Expose the functions of ``artifact`` as awaitable operations.

    ``view``/``pure`` functions resolve to a plain ``eth_call``. Every other
    function is dispatched through :class:`TransactionGuard` and resolves to
    the confirmed receipt::

        token = ContractProxy(artifact, params)
        balance = await token.balanceOf(holder)
        receipt = await token.transfer(recipient, amount)

    Proxy-native operations (see ``NATIVE_OPERATIONS``) shadow ABI functions
    of the same name; use :meth:`method` to look a name up explicitly.
    """

    def __init__(
        self,
        artifact: Artifact,
        params: NetworkParams,
        at: Address | None = None,
    ) -> None:
        self._artifact = artifact
        self._params = params
        self._at = at
        self._registry = MethodRegistry.from_artifact(artifact)
        self._guard = TransactionGuard(params)
        self._address: Address | None = None
        self._contract: Any = None
        self._contract_ws: Any = None

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------
    @property
    def address(self) -> Address | None:
        return self._address

    @property
    def account(self) -> Address:
        return self._params.account

    @property
    def artifact(self) -> Artifact:
        return self._artifact

    def ensure_bound(self, at: Address | None = None) -> Address:
        """Resolve the contract address and (re)build the contract handles."""

        override = at or self._at
        raw_address = override or self._artifact.deployment_address(self._params.network_id)
        if not raw_address:
            raise NotDeployedError(
                self._params.network_id,
                details={"contract": self._artifact.contract_name},
            )

        try:
            address = Web3.to_checksum_address(raw_address)
        except ValueError as exc:
            raise ValidationError(
                "Invalid contract address",
                field="address",
                value=raw_address,
                details={"error": str(exc)},
            ) from exc

        if self._contract is not None and self._address == address:
            return address

        abi = [dict(entry) for entry in self._artifact.abi]
        self._address = address
        self._contract = self._params.web3.eth.contract(address=address, abi=abi)
        if self._params.shares_transport:
            self._contract_ws = self._contract
        else:
            self._contract_ws = self._params.subscription_web3.eth.contract(
                address=address, abi=abi
            )
        logger.debug(
            "Bound %s to %s on network %s",
            self._artifact.contract_name or "contract",
            address,
            self._params.network_id,
        )
        return address

    # ------------------------------------------------------------------
    # Dynamic dispatch
    # ------------------------------------------------------------------
    def method(self, name: str) -> Any:
        """Return the operation called ``name``, or None when there is none."""

        if name in NATIVE_OPERATIONS:
            return getattr(self, name)

        entry = self._registry.get(name)
        if entry is None:
            return None
        if entry.kind is MethodKind.READ:
            return self._reader(entry)
        return self._writer(entry)

    def __getattr__(self, name: str) -> Callable[..., Any]:
        # Dunders and lookups before __init__ finished never reach the ABI.
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        if "_registry" not in self.__dict__:
            raise AttributeError(name)
        operation = self.method(name)
        if operation is None:
            raise AttributeError(
                f"{type(self).__name__!r} has no operation {name!r}"
            )
        return operation

    def _reader(self, entry: MethodEntry) -> Callable[..., Any]:
        async def read(*args: Any) -> Any:
            self.ensure_bound()
            function = getattr(self._contract.functions, entry.name)(*args)
            return await function.call({"from": self._params.account})

        read.__name__ = entry.name
        return read

    def _writer(self, entry: MethodEntry) -> Callable[..., Any]:
        async def write(*args: Any, value: int | float | str | Decimal | None = None) -> Any:
            self.ensure_bound()
            function = getattr(self._contract.functions, entry.name)(*args)
            wei = to_wei(value) if value is not None else None
            return await self._guard.execute(function, entry.descriptor, value=wei)

        write.__name__ = entry.name
        return write

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    async def subscribe(
        self,
        event_name: str,
        filters: Mapping[str, Any] | None,
        callback: Callable[[Any], Any],
    ) -> bool:
        """Invoke ``callback`` for every ``event_name`` log matching ``filters``.

        Returns False (after logging) when the subscription cannot be
        registered. Errors while handling individual notifications, including
        errors raised by ``callback``, are logged and do not cancel the
        subscription.
        """

        self.ensure_bound()

        def on_notification(error: Exception | None, event: Any) -> None:
            if error is not None:
                logger.error("Event %r subscription error: %s", event_name, error)
                return
            logger.info("Emitted %s event %s", event_name, event)
            try:
                callback(event)
            except Exception:
                logger.exception("Event %r callback failed", event_name)

        try:
            await register_event_listener(
                self._params.subscription_web3,
                self._contract_ws,
                event_name,
                filters,
                on_notification,
            )
        except Exception:
            logger.exception("Event %r subscription failed", event_name)
            return False
        return True

    @staticmethod
    async def unsubscribe(params: NetworkParams) -> bool:
        """Clear every subscription on the subscription transport.

        Always returns True; the node reports an error when nothing is
        subscribed, which is indistinguishable from a real failure here.
        """

        try:
            await clear_subscriptions(params.subscription_web3)
        except Exception as exc:
            logger.debug("Clearing subscriptions failed: %s", exc)
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    to_bytes = staticmethod(to_bytes)
    to_ascii = staticmethod(to_ascii)
    to_unix_ts = staticmethod(to_unix_ts)
    to_datetime = staticmethod(to_datetime)
    to_list = staticmethod(to_list)
    to_wei = staticmethod(to_wei)
    from_wei = staticmethod(from_wei)
    is_empty_address = staticmethod(is_empty_address)
