from __future__ import annotations

import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from pagediff import fetch
from pagediff.fetch import Document, FetchError, FetchSettings, fetch_documents, fetch_text, session


async def _ok(request: web.Request) -> web.Response:
    return web.Response(text=f"<html>{request.path}</html>", content_type="text/html")


async def _fail(request: web.Request) -> web.Response:
    return web.Response(status=503, text="unavailable")


async def _bad_bytes(request: web.Request) -> web.Response:
    return web.Response(body=b"<html>\xff\xfe\xfa</html>", content_type="text/html", charset="utf-8")


async def _echo_agent(request: web.Request) -> web.Response:
    return web.Response(text=request.headers.get("User-Agent", ""))


async def _with_server(fn):
    app = web.Application()
    app.router.add_get("/a", _ok)
    app.router.add_get("/b", _ok)
    app.router.add_get("/down", _fail)
    app.router.add_get("/agent", _echo_agent)
    app.router.add_get("/garbled", _bad_bytes)

    server = TestServer(app)
    await server.start_server()
    try:
        return await fn(lambda path: str(server.make_url(path)))
    finally:
        await server.close()


def test_fetch_text_returns_body() -> None:
    async def scenario(url):
        async with session() as s:
            return await fetch_text(url("/a"), s)

    assert asyncio.run(_with_server(scenario)) == "<html>/a</html>"


def test_fetch_text_sends_configured_user_agent() -> None:
    async def scenario(url):
        async with session(FetchSettings(user_agent="pagediff-test")) as s:
            return await fetch_text(url("/agent"), s)

    assert asyncio.run(_with_server(scenario)) == "pagediff-test"


def test_non_2xx_status_is_a_fetch_error() -> None:
    async def scenario(url):
        async with session() as s:
            await fetch_text(url("/down"), s)

    with pytest.raises(FetchError) as info:
        asyncio.run(_with_server(scenario))

    assert info.value.status == 503
    assert "/down" in info.value.url


def test_missing_page_is_a_fetch_error() -> None:
    async def scenario(url):
        async with session() as s:
            await fetch_text(url("/nope"), s)

    with pytest.raises(FetchError) as info:
        asyncio.run(_with_server(scenario))

    assert info.value.status == 404


def test_fetch_documents_returns_both_in_order() -> None:
    async def scenario(url):
        return await fetch_documents(url("/a"), url("/b"))

    doc_a, doc_b = asyncio.run(_with_server(scenario))

    assert isinstance(doc_a, Document)
    assert doc_a.text == "<html>/a</html>"
    assert doc_b.text == "<html>/b</html>"
    assert doc_b.url.endswith("/b")


def test_fetch_documents_fails_when_either_side_fails() -> None:
    async def scenario(url):
        return await fetch_documents(url("/a"), url("/down"))

    with pytest.raises(FetchError) as info:
        asyncio.run(_with_server(scenario))

    assert info.value.status == 503


def test_both_fetches_settle_before_the_failure_is_raised(monkeypatch) -> None:
    finished = []

    async def fake_fetch_text(url, s):
        if url == "bad":
            raise FetchError(url, "boom")
        await asyncio.sleep(0.01)
        finished.append(url)
        return "ok"

    monkeypatch.setattr(fetch, "fetch_text", fake_fetch_text)

    with pytest.raises(FetchError):
        asyncio.run(fetch_documents("bad", "good"))

    assert finished == ["good"]


def test_connection_error_is_a_fetch_error() -> None:
    settings = FetchSettings(total=5.0, connect=2.0)
    with pytest.raises(FetchError) as info:
        asyncio.run(fetch_documents("http://127.0.0.1:1/", "http://127.0.0.1:1/x", settings))

    assert info.value.status is None


def test_undecodable_bytes_are_replaced() -> None:
    async def scenario(url):
        async with session() as s:
            return await fetch_text(url("/garbled"), s)

    text = asyncio.run(_with_server(scenario))

    assert text.startswith("<html>")
    assert text.endswith("</html>")
    assert "�" in text
