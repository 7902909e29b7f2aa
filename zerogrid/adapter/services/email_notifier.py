"""
Email delivery

QueueNotifier buffers messages on an asyncio.Queue; a single worker task
drains it and hands each message to the Resend REST API over httpx.
"""

import asyncio
import logging
from typing import Optional

import httpx

from zerogrid.app.services.notifier import EmailMessage, INotifier

logger = logging.getLogger(__name__)


class ResendEmailClient:
    """Thin client for POST /emails on the Resend API"""

    def __init__(self, api_key: str, from_email: str, api_url: str, timeout: float = 10.0):
        self.api_key = api_key
        self.from_email = from_email
        self.api_url = api_url
        self.timeout = timeout

    async def send(self, message: EmailMessage) -> bool:
        if not self.api_key:
            logger.info(f"Email delivery disabled, dropping {message.kind} email")
            return False

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                self.api_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "from": self.from_email,
                    "to": [message.to],
                    "subject": message.subject,
                    "text": message.text,
                },
            )
            response.raise_for_status()
        return True


class QueueNotifier(INotifier):
    """
    Notifier backed by an in-process queue and one worker task.

    submit() never blocks and never raises; delivery errors are logged by the
    worker and the message is dropped.
    """

    def __init__(self, client: ResendEmailClient, maxsize: int = 1000):
        self.client = client
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._worker: Optional[asyncio.Task] = None

    def submit(self, message: EmailMessage) -> None:
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.error(f"Email queue full, dropping {message.kind} email")

    async def start(self) -> None:
        if self._worker is None:
            self._worker = asyncio.create_task(self._run())
            logger.info("Email worker started")

    async def stop(self) -> None:
        """Deliver whatever is queued, then stop the worker"""
        if self._worker is None:
            return
        await self.queue.join()
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None
        logger.info("Email worker stopped")

    async def _run(self) -> None:
        while True:
            message = await self.queue.get()
            try:
                await self.client.send(message)
            except httpx.HTTPError as exc:
                logger.error(f"Email send error ({message.kind}): {exc}")
            except Exception:
                logger.exception(f"Unexpected email send error ({message.kind})")
            finally:
                self.queue.task_done()
