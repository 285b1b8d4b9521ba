"""
Access event forwarding.
Posts one AccessEvent per image request to the configured webhook in a detached task.
Delivery is best effort: failures are logged and never retried or surfaced to the caller.
"""
import asyncio
import logging
from typing import Optional, Set

import httpx

from reveal_gallery.schemas import AccessEvent

logger = logging.getLogger(__name__)

SHUTDOWN_GRACE_SECONDS = 2.0


class AccessEventNotifier:
    """
    Fire-and-forget webhook client.

    Args:
        webhook_url: Endpoint receiving the JSON events; empty disables forwarding
        timeout: Per-request timeout in seconds
        client: Optional preconfigured httpx.AsyncClient (used by tests)
        shutdown_grace: Seconds aclose() waits for in-flight deliveries
    """

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
        shutdown_grace: float = SHUTDOWN_GRACE_SECONDS,
    ):
        self.webhook_url = webhook_url
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self.shutdown_grace = shutdown_grace
        self._pending: Set[asyncio.Task] = set()

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def submit(self, event: AccessEvent) -> Optional[asyncio.Task]:
        """
        Schedule delivery of `event` without waiting for it.

        Must be called from a running event loop.

        Returns:
            asyncio.Task for the delivery, or None when forwarding is disabled
        """
        if not self.enabled:
            logger.debug(f"Webhook not configured, dropping access event for {event.filename}")
            return None

        task = asyncio.get_running_loop().create_task(self._deliver(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _deliver(self, event: AccessEvent) -> None:
        try:
            response = await self._client.post(
                self.webhook_url,
                json=event.model_dump(by_alias=True),
            )
            if response.is_success:
                logger.debug(f"Access event delivered for {event.filename} ({response.status_code})")
            else:
                logger.warning(
                    f"Webhook rejected access event for {event.filename}: "
                    f"HTTP {response.status_code}"
                )
        except httpx.TimeoutException as e:
            logger.warning(f"Webhook timed out for {event.filename}: {str(e)}")
        except httpx.HTTPError as e:
            logger.error(f"Failed to send access event for {event.filename}: {str(e)}")

    async def aclose(self) -> None:
        """Give in-flight deliveries a short grace period, then close the client."""
        if self._pending:
            pending = list(self._pending)
            _, still_running = await asyncio.wait(pending, timeout=self.shutdown_grace)
            for task in still_running:
                task.cancel()
            if still_running:
                logger.warning(f"Cancelled {len(still_running)} undelivered access events on shutdown")
                await asyncio.gather(*still_running, return_exceptions=True)
        await self._client.aclose()
