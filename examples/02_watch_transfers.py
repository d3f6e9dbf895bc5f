"""Example: Stream Transfer events addressed to the configured account."""

from __future__ import annotations

import asyncio
import json
import logging
import os

from dotenv import load_dotenv

from contract_proxy import Artifact, ClientConfig, ContractProxy, Web3Connections
from contract_proxy.evm.subscriptions import process_subscriptions

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOGLEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def on_transfer(event) -> None:
    args = event["args"]
    logging.info("%s -> %s: %s", args["from"], args["to"], ContractProxy.from_wei(args["value"]))


async def main() -> None:
    """Subscribe over the websocket endpoint until interrupted."""

    artifact_path = os.getenv("TOKEN_ARTIFACT")
    if not artifact_path:
        raise ValueError("TOKEN_ARTIFACT not found in environment variables")

    config = ClientConfig.from_env()
    if not config.ws_url:
        raise ValueError("CONTRACT_WS_URL is required for subscriptions")

    with open(artifact_path) as handle:
        artifact = Artifact.from_dict(json.load(handle))

    connections = Web3Connections(config)
    await connections.connect()
    params = connections.params()
    try:
        token = ContractProxy(artifact, params)
        if not await token.subscribe("Transfer", {"to": params.account}, on_transfer):
            return
        await process_subscriptions(params.subscription_web3)
    finally:
        await ContractProxy.unsubscribe(params)
        await connections.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
