"""Probe remote links with HEAD requests."""

import asyncio

import aiohttp

from ..models import Link, LinkStatus

# Statuses where the resource probably exists but the probe cannot confirm it.
# 401/403: may require logging in. 405: HEAD not allowed.
# 406: our Accept header may not match what the server can provide.
QUESTIONABLE_STATUSES = {401, 403, 405, 406}
REDIRECT_FOUND = 302


def classify_status(status: int) -> LinkStatus:
    """Map an HTTP status code to a verification outcome."""
    if 200 <= status < 300 or status == REDIRECT_FOUND:
        return LinkStatus.reachable()
    if status in QUESTIONABLE_STATUSES:
        return LinkStatus.questionable(f"received status code {status}")
    return LinkStatus.unreachable(f"received status code {status}")


class HttpProber:
    """Check remote links over a shared client session."""

    def __init__(self, session: aiohttp.ClientSession, user_agent: str | None = None):
        self.session = session
        self.headers = {"User-Agent": user_agent} if user_agent else {}

    async def probe(self, link: Link) -> LinkStatus:
        """Send a HEAD request for the link and classify the response."""
        try:
            async with self.session.head(link.raw, headers=self.headers) as response:
                return classify_status(response.status)
        except asyncio.TimeoutError:
            return LinkStatus.unreachable("timeout")
        except aiohttp.ClientResponseError as e:
            return LinkStatus.unreachable(f"received status code {e.status}")
        except (aiohttp.ClientError, ValueError):
            return LinkStatus.unreachable()


def make_session(
    timeout_seconds: float, concurrency: int
) -> aiohttp.ClientSession:
    """Build the client session shared by every HTTP probe."""
    timeout = aiohttp.ClientTimeout(total=timeout_seconds, connect=timeout_seconds)
    connector = aiohttp.TCPConnector(limit=concurrency)
    return aiohttp.ClientSession(timeout=timeout, connector=connector)
