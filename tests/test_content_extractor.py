# File: tests/test_content_extractor.py
import pytest
from bs4 import BeautifulSoup

from docs_downloader.config import SiteConfig
from docs_downloader.parser.content_extractor import (
    MIN_FRAGMENT_LENGTH,
    ContentExtractor,
    clean_content,
)

LONG_A = "alpha " * 60
LONG_B = "bravo " * 60
LONG_C = "charlie " * 60


def _extract(html: str, url: str = "https://example.com/page", configs=None) -> str:
    return ContentExtractor(configs).extract(BeautifulSoup(html, "html.parser"), url)


def test_boilerplate_is_removed():
    html = (
        "<html><body><nav>NAVTEXT</nav><main><script>var x = 1;</script>"
        f"<div class='sidebar'>SIDEBAR</div><p>{LONG_A}</p><div id='footer'>FOOT</div></main>"
        "<footer>FOOTER</footer></body></html>"
    )
    result = _extract(html)
    assert "alpha" in result
    for noise in ("NAVTEXT", "SIDEBAR", "FOOT", "var x"):
        assert noise not in result


def test_configured_selector_wins():
    html = f"<body><main><p>{LONG_A}</p></main><div id='docs-body'><p>{LONG_B}</p></div></body>"
    configs = {"example.com": SiteConfig(content_selector="#docs-body")}
    result = _extract(html, configs=configs)
    assert "bravo" in result
    assert "alpha" not in result


def test_short_configured_match_falls_through():
    html = f"<body><main><p>{LONG_A}</p></main><div id='docs-body'>tiny</div></body>"
    configs = {"example.com": SiteConfig(content_selector="#docs-body")}
    result = _extract(html, configs=configs)
    assert "alpha" in result
    assert "tiny" not in result


def test_length_floor_is_exclusive():
    # <main> holding exactly the floor does not qualify; the article does
    html = f"<body><main>{'x' * MIN_FRAGMENT_LENGTH}</main><article><p>{LONG_B}</p></article></body>"
    result = _extract(html)
    assert "bravo" in result
    assert "xxxx" not in result


def test_docs_platform_selectors_only_for_docs_hosts():
    html = f"<body><div class='prose'><p>{LONG_A}</p></div><main><p>{LONG_B}</p></main></body>"
    assert "alpha" in _extract(html, url="https://docs.example.com/intro")
    assert "bravo" in _extract(html, url="https://example.com/intro")


def test_static_site_selectors_prefer_main_article():
    html = (
        f"<body><main><article><p>{LONG_A}</p></article>"
        f"<div><p>{LONG_B}</p></div></main></body>"
    )
    static = _extract(html, url="https://thegraph.com/docs/x")
    assert "alpha" in static and "bravo" not in static
    generic = _extract(html, url="https://example.com/x")
    assert "alpha" in generic and "bravo" in generic


def test_largest_text_block_fallback():
    html = f"<body><div><p>{LONG_A}</p></div><section><p>{LONG_C}</p></section></body>"
    result = _extract(html)
    assert "charlie" in result
    assert "alpha" not in result


def test_body_fallback_for_short_pages():
    html = "<html><body><p>Just a short note.</p></body></html>"
    assert _extract(html) == "<p>Just a short note.</p>"


def test_prefer_markdown_yields_nothing():
    html = f"<body><main><p>{LONG_A}</p></main></body>"
    configs = {"example.com": SiteConfig(prefer_markdown=True)}
    assert _extract(html, configs=configs) == ""


def test_extraction_is_deterministic():
    html = f"<body><nav>x</nav><main><h2>Title</h2><p>{LONG_A}</p></main></body>"
    assert _extract(html) == _extract(html)


class TestCleanContent:
    def test_attributes_are_stripped(self):
        html = '<p class="lead" style="color: red" data-id="7" id="intro">Hello</p>'
        assert clean_content(html) == '<p id="intro">Hello</p>'

    def test_language_class_survives_on_code(self):
        html = '<pre class="shiki"><code class="language-python hljs">print(1)</code></pre>'
        assert clean_content(html) == '<pre><code class="language-python">print(1)</code></pre>'

    def test_whitespace_is_collapsed_outside_pre(self):
        html = "<p>one\n\n   two</p>\n\n<pre>a\n    b</pre>"
        assert clean_content(html) == "<p>one two</p> <pre>a\n    b</pre>"

    @pytest.mark.parametrize(
        "remnant",
        [
            "<script>alert(1)</script>",
            "<style>p { color: red }</style>",
            "--brand-color: #fff;",
        ],
    )
    def test_remnants_are_removed(self, remnant):
        assert clean_content(f"<p>keep{remnant}</p>") == "<p>keep</p>"
