"""Example: Read a token balance and send a guarded transfer."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from decimal import Decimal

from dotenv import load_dotenv

from contract_proxy import (
    Artifact,
    ClientConfig,
    ContractProxy,
    DryRunError,
    TransactionFailedError,
    Web3Connections,
)

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOGLEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

AMOUNT = Decimal("1.5")  # whole tokens, 18 decimals


async def main() -> None:
    """Demonstrate a view call and a transfer through ContractProxy."""

    artifact_path = os.getenv("TOKEN_ARTIFACT")
    if not artifact_path:
        raise ValueError("TOKEN_ARTIFACT not found in environment variables")
    recipient = os.getenv("RECIPIENT")
    if not recipient:
        raise ValueError("RECIPIENT not found in environment variables")

    with open(artifact_path) as handle:
        artifact = Artifact.from_dict(json.load(handle))

    connections = Web3Connections(ClientConfig.from_env())
    await connections.connect()
    try:
        params = connections.params(
            on_tx_hash=lambda tx_hash: logging.info("Submitted %s", tx_hash),
            on_tx_confirmed=lambda receipt: logging.info(
                "Mined in block %s", receipt.get("blockNumber")
            ),
        )
        token = ContractProxy(artifact, params)
        token.ensure_bound()

        balance = await token.balanceOf(params.account)
        logging.info("Balance of %s: %s", params.account, token.from_wei(balance))

        try:
            receipt = await token.transfer(recipient, token.to_wei(AMOUNT))
        except DryRunError as exc:
            logging.error("Transfer rejected before submission: %s", exc)
            return
        except TransactionFailedError as exc:
            logging.error("Transfer %s reverted on-chain", exc.tx_hash)
            return

        logging.info("Transfer confirmed: %s", receipt["transactionHash"].to_0x_hex())
    finally:
        await connections.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
