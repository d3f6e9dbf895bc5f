"""Guarded dispatch of state-changing contract calls."""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Any

from hexbytes import HexBytes
from web3.exceptions import TimeExhausted

from ..exceptions import (
    DryRunError,
    EstimationError,
    ReceiptTimeoutError,
    SubmissionError,
    TransactionFailedError,
)
from ..types import MethodDescriptor, TxParams, Wei
from .config import NetworkParams

logger = logging.getLogger(__name__)

GAS_SAFETY_MULTIPLIER = 2
FAILED_STATUS = 0


class TxState(Enum):
    ESTIMATING = "estimating"
    DRY_RUN = "dry_run"
    SUBMITTING = "submitting"
    AWAITING_RECEIPT = "awaiting_receipt"
    CONFIRMED = "confirmed"
    FAILED = "failed"


def is_failed_status(status: Any) -> bool:
    """Return True when a receipt status marks an on-chain failure."""

    if isinstance(status, str):
        try:
            return int(status, 16) == FAILED_STATUS
        except ValueError:
            logger.warning("Unrecognised receipt status %r", status)
            return False
    return status == FAILED_STATUS


class TransactionGuard:
    """Estimate, dry-run, submit and verify a single contract call.

    Every step awaits the previous one; any failure aborts the call with a
    single error and nothing is retried.
    """

    def __init__(self, params: NetworkParams) -> None:
        self._params = params

    async def execute(
        self,
        function: Any,
        descriptor: MethodDescriptor,
        value: Wei | None = None,
    ) -> Any:
        """Run ``function`` (a bound web3 contract function) through the guard."""

        name = descriptor.name
        tx = TxParams(sender=self._params.account, value=value)

        self._transition(name, TxState.ESTIMATING)
        try:
            estimate = await function.estimate_gas(tx.as_dict())
        except Exception as exc:
            self._transition(name, TxState.FAILED)
            raise EstimationError(
                f"Gas estimation failed: {exc}",
                method=name,
                details={"params": tx.as_dict(), "error": str(exc)},
            ) from exc
        tx.gas = math.floor(estimate * GAS_SAFETY_MULTIPLIER)

        self._transition(name, TxState.DRY_RUN)
        try:
            result = await function.call(tx.as_dict())
            if descriptor.has_bool_success_output and result is not True:
                raise ValueError(f"Expected True, but received {result}")
        except Exception as exc:
            self._transition(name, TxState.FAILED)
            raise DryRunError(
                f"Transaction dry run failed: {exc}",
                method=name,
                details={"params": tx.as_dict(), "error": str(exc)},
            ) from exc

        self._transition(name, TxState.SUBMITTING)
        try:
            tx_hash = await function.transact(tx.as_dict())
        except Exception as exc:
            self._transition(name, TxState.FAILED)
            raise SubmissionError(
                f"Failed to submit transaction for {name}",
                method=name,
                details={"params": tx.as_dict(), "error": str(exc)},
            ) from exc

        tx_hex = HexBytes(tx_hash).to_0x_hex()
        logger.info("Transaction sent for %s hash=%s gas=%s", name, tx_hex, tx.gas)
        self._notify_hash(tx_hex)

        self._transition(name, TxState.AWAITING_RECEIPT)
        try:
            receipt = await self._params.web3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self._params.receipt_timeout
            )
        except TimeExhausted as exc:
            self._transition(name, TxState.FAILED)
            raise ReceiptTimeoutError(
                f"Timed out waiting for receipt of {tx_hex}",
                method=name,
                tx_hash=tx_hex,
                details={"timeout": self._params.receipt_timeout},
            ) from exc

        self._params.on_tx_confirmed(receipt)

        status = _receipt_field(receipt, "status")
        if is_failed_status(status):
            self._transition(name, TxState.FAILED)
            raise TransactionFailedError(method=name, tx_hash=tx_hex, receipt=receipt)

        self._transition(name, TxState.CONFIRMED)
        logger.info(
            "Transaction confirmed for %s hash=%s block=%s",
            name,
            tx_hex,
            _receipt_field(receipt, "blockNumber"),
        )
        return receipt

    def _notify_hash(self, tx_hex: str) -> None:
        try:
            self._params.on_tx_hash(tx_hex)
        except Exception:
            logger.exception("Transaction hash hook failed for %s", tx_hex)

    def _transition(self, name: str, state: TxState) -> None:
        logger.debug("%s -> %s", name, state.value)


def _receipt_field(receipt: Any, key: str) -> Any:
    if hasattr(receipt, "get"):
        return receipt.get(key)
    return getattr(receipt, key, None)
