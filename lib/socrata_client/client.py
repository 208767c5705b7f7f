from __future__ import annotations

from contextlib import AbstractAsyncContextManager, AbstractContextManager
from typing import Any, Awaitable, Mapping

import httpx

from .config_types import ClientConfig
from .dispatch import prepare_metadata, prepare_records
from .query import Query
from .transport import AsyncTransport, Transport


class SocrataClient:
    """Blocking client for one data set.

    Responses come back as bare ``httpx.Response`` objects: the status code is
    not checked and the body is not decoded.

        >>> cfg = ClientConfig.create("yama-9had", "data.cityofchicago.org")
        >>> with SocrataClient(cfg) as client:
        ...     resp = client.get_records(Query().limit(5), "csv")

    Extra keyword arguments (``timeout``, ``follow_redirects``, ``cookies``,
    ``auth``, ``extensions``) go straight to ``httpx``.
    """

    def __init__(self, cfg: ClientConfig, *, http_client: httpx.Client | None = None):
        self.config = cfg
        self._t = Transport(http_client)

    def __enter__(self) -> SocrataClient:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self._t.close()

    def get_metadata(
            self,
            *,
            app_token: str | None = None,
            headers: Mapping[str, str] | None = None,
            **options: Any,
    ) -> httpx.Response:
        """Fetch the data set's view metadata (always JSON)."""
        req = prepare_metadata(self.config, app_token=app_token, headers=headers, options=options)
        return self._t.get(req)

    def get_records(
            self,
            query: Query | None = None,
            fmt: str | None = None,
            *,
            app_token: str | None = None,
            headers: Mapping[str, str] | None = None,
            **options: Any,
    ) -> httpx.Response:
        """Fetch records matching ``query`` as ``fmt`` (json, csv, tsv or geojson).

        Without ``fmt`` the configured default format is used, then ``"json"``.
        A ``params`` option is ignored in favour of the query.
        """
        req = prepare_records(
            self.config, query, fmt, app_token=app_token, headers=headers, options=options
        )
        return self._t.get(req)

    def stream_records(
            self,
            query: Query | None = None,
            fmt: str | None = None,
            *,
            app_token: str | None = None,
            headers: Mapping[str, str] | None = None,
            **options: Any,
    ) -> AbstractContextManager[httpx.Response]:
        """Like ``get_records`` but the body is left unread.

            >>> with client.stream_records(query, "csv") as resp:
            ...     for line in resp.iter_lines():
            ...         ...
        """
        req = prepare_records(
            self.config, query, fmt, app_token=app_token, headers=headers, options=options
        )
        return self._t.stream(req)


class AsyncSocrataClient:
    """Non-blocking counterpart of ``SocrataClient``.

    Arguments are checked when a method is called; the returned coroutine
    only performs the request. Awaiting it or wrapping it in
    ``asyncio.create_task`` is up to the caller.
    """

    def __init__(self, cfg: ClientConfig, *, http_client: httpx.AsyncClient | None = None):
        self.config = cfg
        self._t = AsyncTransport(http_client)

    async def __aenter__(self) -> AsyncSocrataClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._t.aclose()

    def get_metadata(
            self,
            *,
            app_token: str | None = None,
            headers: Mapping[str, str] | None = None,
            **options: Any,
    ) -> Awaitable[httpx.Response]:
        req = prepare_metadata(self.config, app_token=app_token, headers=headers, options=options)
        return self._t.get(req)

    def get_records(
            self,
            query: Query | None = None,
            fmt: str | None = None,
            *,
            app_token: str | None = None,
            headers: Mapping[str, str] | None = None,
            **options: Any,
    ) -> Awaitable[httpx.Response]:
        req = prepare_records(
            self.config, query, fmt, app_token=app_token, headers=headers, options=options
        )
        return self._t.get(req)

    def stream_records(
            self,
            query: Query | None = None,
            fmt: str | None = None,
            *,
            app_token: str | None = None,
            headers: Mapping[str, str] | None = None,
            **options: Any,
    ) -> AbstractAsyncContextManager[httpx.Response]:
        req = prepare_records(
            self.config, query, fmt, app_token=app_token, headers=headers, options=options
        )
        return self._t.stream(req)
