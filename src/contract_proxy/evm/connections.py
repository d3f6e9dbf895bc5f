"""Connection helpers for building contract proxy network parameters."""

from __future__ import annotations

import logging
from typing import cast

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncHTTPProvider, AsyncWeb3, WebSocketProvider
from web3.middleware import SignAndSendRawMiddlewareBuilder

from ..exceptions import ConfigurationError, NetworkError, ValidationError
from ..types import Address
from .config import ClientConfig, NetworkParams, TxConfirmedHook, TxHashHook

logger = logging.getLogger(__name__)


class Web3Connections:
    """Manage the request and subscription providers for one network."""

    def __init__(self, config: ClientConfig):
        self.config = config
        self._web3: AsyncWeb3 | None = None
        self._web3_ws: AsyncWeb3 | None = None
        self._signer: LocalAccount | None = None
        self._network_id: str | None = None
        self._account: Address | None = None
        self._connected = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def connect(self) -> None:
        """Initialise providers, signing middleware and network identity."""

        signer = self._load_signer()

        web3 = AsyncWeb3(
            AsyncHTTPProvider(
                self.config.rpc_url, request_kwargs={"timeout": self.config.request_timeout}
            )
        )
        if not await web3.is_connected():
            raise NetworkError("Unable to connect to RPC", endpoint=self.config.rpc_url)
        if signer is not None:
            self._apply_account_middleware(web3, signer)
        self._web3 = web3
        self._signer = signer

        if self.config.ws_url:
            try:
                web3_ws = await AsyncWeb3(WebSocketProvider(self.config.ws_url))
            except Exception as exc:
                raise NetworkError(
                    "Unable to connect to subscription endpoint",
                    endpoint=self.config.ws_url,
                    details={"error": str(exc)},
                ) from exc
            self._web3_ws = web3_ws
            logger.info("Connected to subscription endpoint at %s", self.config.ws_url)
        else:
            self._web3_ws = web3

        self._network_id = self.config.network_id or str(await web3.eth.chain_id)
        self._account = await self._resolve_account(web3)

        self._connected = True
        logger.info(
            "Connected to RPC at %s (network=%s account=%s)",
            self.config.rpc_url,
            self._network_id,
            self._account,
        )

    async def disconnect(self) -> None:
        web3_ws = self._web3_ws
        if web3_ws is not None and web3_ws is not self._web3:
            await web3_ws.provider.disconnect()
        self._web3 = None
        self._web3_ws = None
        self._signer = None
        self._network_id = None
        self._account = None
        self._connected = False

    def is_connected(self) -> bool:
        return self._connected and self._web3 is not None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def params(
        self,
        on_tx_hash: TxHashHook | None = None,
        on_tx_confirmed: TxConfirmedHook | None = None,
    ) -> NetworkParams:
        """Return a :class:`NetworkParams` snapshot for the connected network."""

        if not self.is_connected():
            raise NetworkError(
                "Connections are not initialised; call connect() first",
                endpoint=self.config.rpc_url,
            )

        params = NetworkParams(
            network_id=cast(str, self._network_id),
            account=cast(Address, self._account),
            web3=cast(AsyncWeb3, self._web3),
            web3_ws=self._web3_ws,
            receipt_timeout=self.config.receipt_timeout,
        )
        hooks = {}
        if on_tx_hash is not None:
            hooks["on_tx_hash"] = on_tx_hash
        if on_tx_confirmed is not None:
            hooks["on_tx_confirmed"] = on_tx_confirmed
        return params.with_overrides(**hooks) if hooks else params

    # ------------------------------------------------------------------
    # Internal wiring
    # ------------------------------------------------------------------
    def _load_signer(self) -> LocalAccount | None:
        if not self.config.private_key:
            return None
        try:
            return cast(LocalAccount, Account.from_key(self.config.private_key))
        except Exception as exc:
            raise ValidationError(
                "Failed to derive signer account from provided private key",
                field="private_key",
                details={"error": str(exc)},
            ) from exc

    def _apply_account_middleware(self, web3: AsyncWeb3, account: LocalAccount) -> None:
        web3.middleware_onion.add(SignAndSendRawMiddlewareBuilder.build(account))  # type: ignore[arg-type]
        web3.eth.default_account = account.address

    async def _resolve_account(self, web3: AsyncWeb3) -> Address:
        if self._signer is not None:
            if self.config.account and AsyncWeb3.to_checksum_address(
                self.config.account
            ) != self._signer.address:
                raise ConfigurationError(
                    "Configured account does not match the private key",
                    details={"account": self.config.account, "signer": self._signer.address},
                )
            return self._signer.address

        if self.config.account:
            return AsyncWeb3.to_checksum_address(self.config.account)

        accounts = await web3.eth.accounts
        if not accounts:
            raise ConfigurationError(
                "No account configured and the node exposes no accounts",
                details={"endpoint": self.config.rpc_url},
            )
        return accounts[0]
