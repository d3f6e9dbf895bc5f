"""Contract event subscriptions over a persistent web3 connection."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from web3 import AsyncWeb3
from web3.utils.subscriptions import LogsSubscription

logger = logging.getLogger(__name__)

NotificationHandler = Callable[[Exception | None, Any], None]


async def register_event_listener(
    web3_ws: AsyncWeb3,
    contract: Any,
    event_name: str,
    filters: Mapping[str, Any] | None,
    on_notification: NotificationHandler,
) -> Any:
    """Subscribe to ``event_name`` logs of ``contract`` matching ``filters``.

    Each log is decoded against the contract ABI and handed to
    ``on_notification(error, event)``; exactly one of the two is set.
    Returns the subscription id reported by the node.
    """

    event = getattr(contract.events, event_name)()
    builder = event.build_filter()
    for argument, value in (filters or {}).items():
        builder.args[argument].match_single(value)
    topics = builder.filter_params.get("topics")

    async def handler(context: Any) -> None:
        try:
            decoded = event.process_log(context.result)
        except Exception as exc:
            on_notification(exc, None)
            return
        on_notification(None, decoded)

    subscription = LogsSubscription(
        address=contract.address,
        topics=topics,
        handler=handler,
        label=f"{event_name}@{contract.address}",
    )
    return await web3_ws.subscription_manager.subscribe(subscription)


async def clear_subscriptions(web3_ws: AsyncWeb3) -> None:
    """Drop every subscription registered on ``web3_ws``."""

    await web3_ws.subscription_manager.unsubscribe_all()


async def process_subscriptions(web3_ws: AsyncWeb3, *, run_forever: bool = True) -> None:
    """Deliver incoming notifications to their handlers."""

    logger.debug("Processing subscriptions (run_forever=%s)", run_forever)
    await web3_ws.subscription_manager.handle_subscriptions(run_forever=run_forever)
