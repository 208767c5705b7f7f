from __future__ import annotations

import logging
from contextlib import asynccontextmanager, contextmanager
from typing import AsyncIterator, Iterator

import httpx

from .dispatch import PreparedRequest

log = logging.getLogger(__name__)


class Transport:
    """Issues prepared GETs on an ``httpx.Client``.

    A client passed in by the caller is used as-is and left open on
    ``close()``; otherwise one is created and owned here.
    """

    def __init__(self, http_client: httpx.Client | None = None):
        self._owned = http_client is None
        self._client = http_client or httpx.Client(follow_redirects=True)

    def close(self) -> None:
        if self._owned:
            self._client.close()

    def get(self, req: PreparedRequest) -> httpx.Response:
        log.debug("GET %s", req.url)
        return self._client.get(req.url, headers=req.headers, **req.options)

    @contextmanager
    def stream(self, req: PreparedRequest) -> Iterator[httpx.Response]:
        log.debug("GET %s (stream)", req.url)
        with self._client.stream("GET", req.url, headers=req.headers, **req.options) as r:
            yield r


class AsyncTransport:
    def __init__(self, http_client: httpx.AsyncClient | None = None):
        self._owned = http_client is None
        self._client = http_client or httpx.AsyncClient(follow_redirects=True)

    async def aclose(self) -> None:
        if self._owned:
            await self._client.aclose()

    async def get(self, req: PreparedRequest) -> httpx.Response:
        log.debug("GET %s", req.url)
        return await self._client.get(req.url, headers=req.headers, **req.options)

    @asynccontextmanager
    async def stream(self, req: PreparedRequest) -> AsyncIterator[httpx.Response]:
        log.debug("GET %s (stream)", req.url)
        async with self._client.stream("GET", req.url, headers=req.headers, **req.options) as r:
            yield r
