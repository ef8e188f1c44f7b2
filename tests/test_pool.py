import asyncio
from pathlib import Path

import pytest

from link_checker.errors import ResultChannelClosed
from link_checker.models import Link, LinkKind, LinkStatus
from link_checker.verification.local import LocalResolver
from link_checker.verification.pool import LinkVerifier, ResultChannel, VerificationPool


class FakeVerifier:
    """Verifier that records how many calls overlap."""

    def __init__(self, delay=0.01):
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.calls = []

    async def verify(self, link):
        self.calls.append(link.raw)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        if link.raw.startswith("bad"):
            return LinkStatus.unreachable()
        return LinkStatus.reachable()


async def _collect(channel):
    return [link async for link in channel]


def _links(n, prefix="ok"):
    location = Path("doc.md")
    return [Link(location, i + 1, f"{prefix}-{i}") for i in range(n)]


async def test_every_link_is_delivered_once():
    channel = ResultChannel(maxsize=5)
    verifier = FakeVerifier()
    pool = VerificationPool(verifier, channel, concurrency=4)
    consumer = asyncio.create_task(_collect(channel))

    links = _links(30) + _links(5, prefix="bad")
    for link in links:
        pool.submit(link)
    await pool.join()
    delivered = await consumer

    assert sorted(delivered) == sorted(links)
    assert len(verifier.calls) == len(links)
    assert all(link.status is not None for link in delivered)
    assert sum(link.status.is_unreachable for link in delivered) == 5


async def test_concurrency_is_bounded():
    channel = ResultChannel()
    verifier = FakeVerifier(delay=0.02)
    pool = VerificationPool(verifier, channel, concurrency=3)
    consumer = asyncio.create_task(_collect(channel))

    for link in _links(12):
        pool.submit(link)
    await pool.join()
    await consumer

    assert verifier.max_in_flight == 3


async def test_verifier_crash_becomes_unreachable():
    class Exploding:
        async def verify(self, link):
            raise RuntimeError("boom")

    channel = ResultChannel()
    pool = VerificationPool(Exploding(), channel, concurrency=2)
    consumer = asyncio.create_task(_collect(channel))
    pool.submit(Link(Path("doc.md"), 1, "x.md"))
    await pool.join()
    (link,) = await consumer

    assert link.status.is_unreachable
    assert "boom" in link.status.reason


async def test_closed_channel_is_fatal():
    channel = ResultChannel(maxsize=1)
    pool = VerificationPool(FakeVerifier(delay=0), channel, concurrency=2)
    channel.close()

    for link in _links(3):
        pool.submit(link)
    with pytest.raises(ResultChannelClosed):
        await pool.join()


async def test_consumer_leaving_unblocks_waiting_senders():
    channel = ResultChannel(maxsize=1)
    pool = VerificationPool(FakeVerifier(delay=0), channel, concurrency=4)
    for link in _links(4):
        pool.submit(link)

    async def leave_soon():
        await asyncio.sleep(0.05)
        channel.close()

    closer = asyncio.create_task(leave_soon())
    with pytest.raises(ResultChannelClosed):
        await pool.join()
    await closer


def test_concurrency_must_be_positive():
    with pytest.raises(ValueError):
        VerificationPool(FakeVerifier(), ResultChannel(), concurrency=0)


async def test_link_verifier_routes_local_links(write):
    write("target.md", "")
    source = write("index.md", "")

    class NoNetwork:
        async def probe(self, link):
            raise AssertionError("local link sent to the network")

    verifier = LinkVerifier(NoNetwork(), LocalResolver())
    link = Link(source, 1, "target.md")
    assert link.kind is LinkKind.LOCAL
    assert (await verifier.verify(link)).is_reachable
