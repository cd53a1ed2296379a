"""
Fetch utilities: one shared aiohttp session, both pages retrieved concurrently.

A comparison needs both documents; if either fetch fails the whole run is
aborted and nothing partial is returned. No retries are attempted.
"""

import asyncio
import logging
from dataclasses import dataclass
from contextlib import asynccontextmanager
from typing import Optional, Tuple
from aiohttp import ClientError, ClientSession, ClientTimeout


log = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
# Exceptions
# ─────────────────────────────────────────────────────────────

class FetchError(Exception):
    """Raised on a network failure or a non-2xx response."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.status = status


# ─────────────────────────────────────────────────────────────
# Settings
# ─────────────────────────────────────────────────────────────

@dataclass
class FetchSettings:
    total: float = 30.0       # whole request budget
    connect: float = 10.0     # connection establishment
    sock_read: float = 20.0   # gap between reads
    user_agent: str = "PageDiffBot/1.0 (+https://example.com)"


@dataclass(frozen=True)
class Document:
    """Raw fetched text plus the URL it came from."""
    url: str
    text: str


# ─────────────────────────────────────────────────────────────
# HTTP Session Context Manager
# ─────────────────────────────────────────────────────────────

@asynccontextmanager
async def session(settings: Optional[FetchSettings] = None) -> ClientSession:
    """
    aiohttp session with the timeouts and User-Agent from ``settings``.
    """
    settings = settings or FetchSettings()
    timeout = ClientTimeout(
        total=settings.total,
        connect=settings.connect,
        sock_read=settings.sock_read
    )
    headers = {"User-Agent": settings.user_agent}
    async with ClientSession(headers=headers, timeout=timeout) as s:
        yield s


# ─────────────────────────────────────────────────────────────
# Fetching
# ─────────────────────────────────────────────────────────────

async def fetch_text(url: str, s: ClientSession) -> str:
    """
    GET ``url`` and return the decoded body.

    Raises:
        FetchError: on any non-2xx status, connection error or timeout.
    """
    try:
        async with s.get(url, allow_redirects=True) as r:
            if not 200 <= r.status < 300:
                raise FetchError(url, f"HTTP error! status: {r.status}", status=r.status)
            return await r.text(errors="replace")

    except (ClientError, asyncio.TimeoutError) as e:
        raise FetchError(url, str(e) or type(e).__name__) from e


async def fetch_document(url: str, s: ClientSession) -> Document:
    log.info("fetching", extra={"url": url, "step": "fetch"})
    return Document(url=url, text=await fetch_text(url, s))


async def fetch_documents(
    url_a: str,
    url_b: str,
    settings: Optional[FetchSettings] = None
) -> Tuple[Document, Document]:
    """
    Fetch both pages concurrently and wait for both to finish.

    The first failure (in argument order) is re-raised once both requests
    have settled, so the shared session is never closed under a request
    that is still running.
    """
    async with session(settings) as s:
        results = await asyncio.gather(
            fetch_document(url_a, s),
            fetch_document(url_b, s),
            return_exceptions=True
        )

    for result in results:
        if isinstance(result, BaseException):
            raise result

    doc_a, doc_b = results
    return doc_a, doc_b
