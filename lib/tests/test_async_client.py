from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import httpx
import pytest

from socrata_client import AsyncSocrataClient, ClientConfig, InvalidArgument, Query, TransportFailure

if TYPE_CHECKING:
    from pytest_httpx import HTTPXMock

CFG = ClientConfig.create("yama-9had", "data.cityofchicago.org", "token")


@pytest.mark.asyncio
async def test_get_metadata(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(json={"name": "Crimes"})

    async with AsyncSocrataClient(CFG) as client:
        resp = await client.get_metadata()

    assert resp.json() == {"name": "Crimes"}
    req = httpx_mock.get_request()
    assert str(req.url) == "https://data.cityofchicago.org/views/yama-9had.json"
    assert req.headers["X-App-Token"] == "token"


@pytest.mark.asyncio
async def test_get_records_as_task(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(json={"type": "FeatureCollection", "features": []})

    async with AsyncSocrataClient(CFG) as client:
        task = asyncio.create_task(client.get_records(Query().limit(2), "geojson"))
        resp = await task

    assert resp.json()["type"] == "FeatureCollection"
    req = httpx_mock.get_request()
    assert req.url.path == "/resource/yama-9had.geojson"
    assert req.url.params["$limit"] == "2"


@pytest.mark.asyncio
async def test_stream_records(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(text="a\tb\n1\t2\n")

    async with AsyncSocrataClient(CFG) as client:
        async with client.stream_records(Query(), "tsv") as resp:
            lines = [line async for line in resp.aiter_lines()]

    assert lines == ["a\tb", "1\t2"]


@pytest.mark.asyncio
async def test_transport_failure_propagates(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_exception(httpx.ReadTimeout("timed out"))

    async with AsyncSocrataClient(CFG) as client:
        with pytest.raises(TransportFailure):
            await client.get_records(Query(), timeout=0.1)


@pytest.mark.asyncio
async def test_unsupported_format_raises_at_call_time() -> None:
    async with AsyncSocrataClient(CFG) as client:
        with pytest.raises(InvalidArgument):
            client.get_records(Query(), "xml")
        with pytest.raises(InvalidArgument):
            client.stream_records(Query(), "xml")
