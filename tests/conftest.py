# File: tests/conftest.py
import logging
from collections import Counter
from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path

import pytest
import pytest_asyncio
from aiohttp import web

from docs_downloader.config import DownloadOptions
from docs_downloader.logger import LOGGER_NAME, logger

#: filler long enough to pass the content-length floors of the extractor
LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor "
    "incididunt ut labore et dolore magna aliqua. Ut enim ad minim veniam, quis nostrud "
    "exercitation ullamco laboris nisi ut aliquip ex ea commodo consequat."
)


def doc_page(title: str, links=(), body: str = LOREM) -> str:
    """A documentation page: links in the navigation, text in <main>."""
    nav = "".join(f'<a href="{href}">{href}</a>' for href in links)
    return (
        "<!DOCTYPE html><html><head><title>{t}</title></head><body>"
        "<nav>{nav}</nav><main><h1>{t}</h1><p>{body}</p></main>"
        "<footer>Copyright</footer></body></html>"
    ).format(t=title, nav=nav, body=body)


@pytest.fixture()
def options(tmp_path: Path) -> DownloadOptions:
    """Options without politeness/backoff pauses, writing below *tmp_path*."""
    return DownloadOptions(
        output_dir=tmp_path / "downloads",
        max_depth=3,
        politeness_delay=0,
        retry_delay=0,
        timeout=5.0,
        probe_timeout=2.0,
        markdown_timeout=2.0,
    )


@pytest.fixture()
def hits() -> Counter:
    """(method, path) -> number of requests seen by the test server."""
    return Counter()


@pytest.fixture()
def app_factory(hits: Counter) -> Callable[[dict], web.Application]:
    """
    Build an aiohttp app from ``{path: page}``.

    A page is an HTML string, a ``(body, content_type)`` tuple or a request handler.
    """

    def _static(body: str, content_type: str):
        async def handler(_):
            return web.Response(text=body, content_type=content_type)

        return handler

    def _build(pages: dict) -> web.Application:
        @web.middleware
        async def count(request, handler):
            hits[(request.method, request.path)] += 1
            return await handler(request)

        app = web.Application(middlewares=[count])
        for path, page in pages.items():
            if callable(page):
                handler = page
            elif isinstance(page, tuple):
                handler = _static(*page)
            else:
                handler = _static(page, "text/html")
            app.router.add_get(path, handler)
        return app

    return _build


@pytest_asyncio.fixture
async def serve(unused_tcp_port_factory) -> AsyncIterator[Callable[[web.Application], Awaitable[str]]]:
    """Start apps on 127.0.0.1, return their base URL, clean up afterwards."""
    runners: list[web.AppRunner] = []

    async def _serve(app: web.Application) -> str:
        runner = web.AppRunner(app)
        await runner.setup()
        port = unused_tcp_port_factory()
        await web.TCPSite(runner, "127.0.0.1", port).start()
        runners.append(runner)
        return f"http://127.0.0.1:{port}"

    yield _serve
    for runner in runners:
        await runner.cleanup()


@pytest.fixture()
def log_records(caplog, monkeypatch):
    """caplog wired to the project logger (which does not propagate by default)."""
    monkeypatch.setattr(logger, "propagate", True)
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)
    return caplog
