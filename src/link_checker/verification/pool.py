"""Bounded-concurrency verification of extracted links."""

import asyncio
import logging
from typing import AsyncIterator

from ..errors import ResultChannelClosed
from ..models import Link, LinkKind, LinkStatus
from .http import HttpProber
from .local import LocalResolver

logger = logging.getLogger(__name__)

_DONE = object()


class ResultChannel:
    """Deliver verified links from many workers to a single consumer."""

    def __init__(self, maxsize: int = 100):
        self._queue: asyncio.Queue = asyncio.Queue(maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, link: Link) -> None:
        if self._closed:
            raise ResultChannelClosed(f"no consumer for {link}")
        await self._queue.put(link)
        # The consumer may have gone away while we waited for room.
        if self._closed:
            raise ResultChannelClosed(f"no consumer for {link}")

    async def finish(self) -> None:
        """Signal that no more links will be sent."""
        await self._queue.put(_DONE)

    def close(self) -> None:
        """Stop receiving. Pending and future sends fail."""
        self._closed = True
        while not self._queue.empty():
            self._queue.get_nowait()

    async def __aiter__(self) -> AsyncIterator[Link]:
        while True:
            item = await self._queue.get()
            if item is _DONE:
                return
            yield item


class LinkVerifier:
    """Resolve a link against the filesystem or the network."""

    def __init__(self, prober: HttpProber, local: LocalResolver | None = None):
        self.prober = prober
        self.local = local or LocalResolver()

    async def verify(self, link: Link) -> LinkStatus:
        if link.kind is LinkKind.HTTP:
            return await self.prober.probe(link)
        return await asyncio.to_thread(self.local.resolve, link)


class VerificationPool:
    """Verify submitted links with at most ``concurrency`` in flight."""

    def __init__(self, verifier: LinkVerifier, channel: ResultChannel, concurrency: int):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.verifier = verifier
        self.channel = channel
        self._semaphore = asyncio.Semaphore(concurrency)
        self._tasks: set[asyncio.Task] = set()
        self.submitted = 0

    def submit(self, link: Link) -> None:
        """Schedule verification of a freshly extracted link."""
        self.submitted += 1
        task = asyncio.create_task(self._run(link))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, link: Link) -> None:
        async with self._semaphore:
            try:
                link.status = await self.verifier.verify(link)
            except Exception as e:
                logger.debug(f"Verifier failed for {link}: {e!r}")
                link.status = LinkStatus.unreachable(f"unexpected error: {e}")
        await self.channel.send(link)

    async def join(self) -> None:
        """Wait for every submitted link, then signal completion.

        Raises ResultChannelClosed if results could not be delivered.
        """
        try:
            while self._tasks:
                pending = list(self._tasks)
                await asyncio.gather(*pending)
                self._tasks.difference_update(pending)
        except ResultChannelClosed:
            remaining = list(self._tasks)
            for task in remaining:
                task.cancel()
            await asyncio.gather(*remaining, return_exceptions=True)
            raise
        await self.channel.finish()
