# File: tests/test_markdown_probe.py
import pytest
from aiohttp import web

from docs_downloader.crawler.fetcher import Fetcher, create_session
from docs_downloader.crawler.markdown_probe import (
    MarkdownProbe,
    candidate_urls,
    is_markdown_response,
    looks_like_html,
    looks_like_markdown,
)
from docs_downloader.crawler.models import ProbeResponse

MARKDOWN = "# Getting started\n\nInstall with `pip install thing`.\n"


class TestCandidateUrls:
    def test_nested_path_with_trailing_slash(self):
        assert candidate_urls("https://docs.example.com/guide/intro/") == [
            "https://docs.example.com/guide/intro.md",
            "https://docs.example.com/guide/intro/index.md",
            "https://docs.example.com/guide/intro/README.md",
            "https://docs.example.com/guide/intro/content.md",
        ]

    @pytest.mark.parametrize("url", ["https://docs.example.com", "https://docs.example.com/"])
    def test_site_root(self, url):
        assert candidate_urls(url) == [
            "https://docs.example.com/index.md",
            "https://docs.example.com/README.md",
            "https://docs.example.com/content.md",
        ]

    def test_html_page_and_docs_segment(self):
        candidates = candidate_urls("https://example.com/doc/setup.html?x=1#y")
        assert candidates[0] == "https://example.com/doc/setup.html.md"
        assert candidates[4] == "https://example.com/doc/setup.md"
        assert candidates[-1] == "https://example.com/docs/setup.md"
        assert len(candidates) == len(set(candidates))
        assert all("?" not in c and "#" not in c for c in candidates)

    def test_guides_segment_is_normalised(self):
        candidates = candidate_urls("https://example.com/guides/setup.html")
        assert candidates == [
            "https://example.com/guides/setup.html.md",
            "https://example.com/guides/setup.html/index.md",
            "https://example.com/guides/setup.html/README.md",
            "https://example.com/guides/setup.html/content.md",
            "https://example.com/guides/setup.md",
            "https://example.com/guide/setup.md",
        ]

    def test_bare_guides_segment_adds_no_rewrite(self):
        assert candidate_urls("https://example.com/guides/") == [
            "https://example.com/guides.md",
            "https://example.com/guides/index.md",
            "https://example.com/guides/README.md",
            "https://example.com/guides/content.md",
        ]

    def test_github_blob_maps_to_raw(self):
        candidates = candidate_urls("https://github.com/org/repo/blob/main/docs/intro.md")
        assert "https://raw.githubusercontent.com/org/repo/main/docs/intro.md" in candidates
        assert "https://github.com/org/repo/blob/main/docs/intro.md" not in candidates

    def test_gitlab_blob_maps_to_raw(self):
        candidates = candidate_urls("https://gitlab.com/group/proj/-/blob/main/README.md")
        assert "https://gitlab.com/group/proj/-/raw/main/README.md" in candidates

    def test_non_http_urls_have_no_candidates(self):
        assert candidate_urls("ftp://example.com/file") == []
        assert candidate_urls("not a url") == []


@pytest.mark.parametrize(
    "text",
    [
        "# Title",
        "- item",
        "1. step",
        "see [docs](https://x.org)",
        "```python",
        "run `make`",
        "> quoted",
        "**bold**",
        "an *emphasised* word",
        "---",
        "| a | b |",
    ],
)
def test_markdown_constructs_are_recognised(text):
    assert looks_like_markdown(text)


def test_plain_text_is_not_markdown():
    assert not looks_like_markdown("Just some plain text without any markup.")


def test_looks_like_html():
    assert looks_like_html("<!DOCTYPE html>\n<html><body></body></html>")
    assert looks_like_html("  <html lang='en'>")
    assert looks_like_html("# heading", "text/html; charset=utf-8")
    assert not looks_like_html("# heading <html>", "text/plain")


def test_byte_order_mark_before_html_is_detected():
    body = "\ufeff<!DOCTYPE html>\n<html>\n# Title\n</html>"
    assert looks_like_html(body, "text/plain")
    assert looks_like_html("\n \ufeff<html>", "")
    assert not is_markdown_response(ProbeResponse("u", 200, "text/plain", body))


@pytest.mark.parametrize(
    "resp, expected",
    [
        (ProbeResponse("u", 200, "text/plain"), True),
        (ProbeResponse("u", 200, "text/markdown; charset=utf-8"), True),
        (ProbeResponse("u", 200, "application/octet-stream"), True),
        (ProbeResponse("u", 200, ""), True),
        (ProbeResponse("u", 200, "text/html"), False),
        (ProbeResponse("u", 200, "application/json"), False),
        (ProbeResponse("u", 404, "text/plain"), False),
        (ProbeResponse("u", 206, "text/plain", MARKDOWN), True),
        (ProbeResponse("u", 200, "text/plain", "plain words only"), False),
        (ProbeResponse("u", 200, "text/plain", "<!DOCTYPE html><html># x</html>"), False),
        (ProbeResponse("u", 200, "text/html", MARKDOWN), False),
    ],
)
def test_is_markdown_response(resp, expected):
    assert is_markdown_response(resp) is expected


@pytest.mark.asyncio()
async def test_probe_returns_first_markdown_candidate(serve, app_factory, hits, options):
    app = app_factory(
        {
            "/guide": "<html><body>page</body></html>",
            "/guide.md": (MARKDOWN, "text/markdown"),
            "/guide/index.md": (MARKDOWN, "text/markdown"),
        }
    )
    base = await serve(app)
    async with create_session(options) as session:
        found = await MarkdownProbe(Fetcher(session, options)).probe(f"{base}/guide")
    assert found == f"{base}/guide.md"
    assert hits[("HEAD", "/guide/index.md")] == 0


@pytest.mark.asyncio()
async def test_probe_rejects_html_candidates(serve, app_factory, options):
    app = app_factory({"/guide.md": "<!DOCTYPE html><html><body>viewer</body></html>"})
    base = await serve(app)
    async with create_session(options) as session:
        assert await MarkdownProbe(Fetcher(session, options)).probe(f"{base}/guide") is None


@pytest.mark.asyncio()
async def test_probe_falls_back_to_ranged_get(serve, options):
    ranges = []

    async def handler(request):
        ranges.append(request.headers.get("Range"))
        return web.Response(text=MARKDOWN, content_type="text/plain")

    app = web.Application()
    # GET only: HEAD is answered with 405
    app.router.add_route("GET", "/guide.md", handler)
    base = await serve(app)

    async with create_session(options) as session:
        found = await MarkdownProbe(Fetcher(session, options)).probe(f"{base}/guide")
    assert found == f"{base}/guide.md"
    assert ranges == ["bytes=0-1023"]


@pytest.mark.asyncio()
async def test_probe_survives_unreachable_host(options, unused_tcp_port):
    url = f"http://127.0.0.1:{unused_tcp_port}/guide"
    async with create_session(options) as session:
        assert await MarkdownProbe(Fetcher(session, options)).probe(url) is None
