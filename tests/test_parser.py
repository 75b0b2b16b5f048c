"""Tests for linkwalker.utils.parser (link extraction)."""

from __future__ import annotations

import pytest

from linkwalker.utils.parser import LINK_ATTRIBUTES, HTMLParser, get_links

BASE = "http://fake.local/pageBase/index"


def urls(html: str, base: str = BASE):
    return [link.url for link in get_links(html, base)]


class TestAttributeTable:
    def test_is_read_only(self):
        with pytest.raises(TypeError):
            LINK_ATTRIBUTES["href"] = frozenset({"div"})

    def test_registered_pairs(self):
        assert "link" in LINK_ATTRIBUTES["href"]
        assert LINK_ATTRIBUTES["srcset"] == frozenset({"img", "source"})
        assert LINK_ATTRIBUTES["manifest"] == frozenset({"html"})


class TestExtraction:
    def test_anchor_and_image(self):
        html = '<a href="/about">About</a><img src="logo.png">'
        assert urls(html) == [
            "http://fake.local/about",
            "http://fake.local/pageBase/logo.png",
        ]

    def test_unregistered_pairs_ignored(self):
        html = '<div href="/a"></div><a src="/b">x</a><img href="/c"><p cite="/d"></p>'
        assert urls(html) == []

    def test_less_common_attributes(self):
        html = (
            '<html manifest="/app.manifest"><body background="/bg.png">'
            '<blockquote cite="/quote"></blockquote>'
            '<object data="/movie.swf"></object>'
            '<video poster="/poster.jpg" src="/clip.mp4"></video>'
            '<iframe longdesc="/desc" src="/frame"></iframe>'
            '<embed pluginspage="/plugins" pluginurl="/plugin" src="/embed.swf">'
            "</body></html>"
        )
        found = set(urls(html))
        assert found == {
            "http://fake.local/app.manifest",
            "http://fake.local/bg.png",
            "http://fake.local/quote",
            "http://fake.local/movie.swf",
            "http://fake.local/poster.jpg",
            "http://fake.local/clip.mp4",
            "http://fake.local/desc",
            "http://fake.local/frame",
            "http://fake.local/plugins",
            "http://fake.local/plugin",
            "http://fake.local/embed.swf",
        }

    def test_srcset_candidates(self):
        html = (
            '<img srcset="small.png 480w,  large.png 1080w">'
            '<picture><source srcset="/hi.webp 2x, /lo.webp"></picture>'
        )
        assert urls(html) == [
            "http://fake.local/pageBase/small.png",
            "http://fake.local/pageBase/large.png",
            "http://fake.local/hi.webp",
            "http://fake.local/lo.webp",
        ]

    def test_empty_values_dropped(self):
        html = '<a href="">x</a><img src="   "><img srcset=" , ">'
        assert get_links(html, BASE) == []

    @pytest.mark.parametrize("rel", ["preconnect", "dns-prefetch", "DNS-Prefetch"])
    def test_resource_hints_ignored(self, rel):
        html = (
            f'<link rel="{rel}" href="https://fonts.example">'
            '<link rel="stylesheet" href="/site.css">'
        )
        assert urls(html) == ["http://fake.local/site.css"]

    def test_hint_with_other_rel_kept(self):
        html = '<link rel="preconnect stylesheet" href="/site.css">'
        assert urls(html) == ["http://fake.local/site.css"]

    def test_malformed_base_falls_back_to_page(self):
        links = get_links('<base href="//[bad"><a href="ok">x</a>', BASE)
        assert [link.url for link in links] == ["http://fake.local/pageBase/ok"]

    def test_fragment_stripped(self):
        assert urls('<a href="/doc#section-2">x</a>') == ["http://fake.local/doc"]

    def test_raw_link_kept(self):
        (link,) = get_links('<a href="../up#top">x</a>', BASE)
        assert link.link == "../up#top"
        assert link.url == "http://fake.local/up"

    def test_other_schemes_passed_through(self):
        html = '<a href="mailto:me@example.com">m</a><a href="irc://irc.example.net/room">i</a>'
        assert urls(html) == ["mailto:me@example.com", "irc://irc.example.net/room"]

    def test_malformed_link_is_an_error_not_an_exception(self):
        links = get_links('<a href="http://fake.local:99999/">x</a><a href="/ok">y</a>', BASE)
        assert len(links) == 2
        assert links[0].url is None
        assert links[0].error.link == "http://fake.local:99999/"
        assert links[1].url == "http://fake.local/ok"

    def test_accepts_bytes(self):
        assert urls(b'<a href="/bytes">x</a>') == ["http://fake.local/bytes"]


class TestBaseTag:
    @pytest.mark.parametrize(
        "base_href,expected",
        [
            ("/anotherBase/", "http://fake.local/anotherBase/ok"),
            ("anotherBase/", "http://fake.local/pageBase/anotherBase/ok"),
            ("./anotherBase/", "http://fake.local/pageBase/anotherBase/ok"),
            ("index", "http://fake.local/pageBase/ok"),
            ("", "http://fake.local/pageBase/ok"),
            ("http://another.fake.local/", "http://another.fake.local/ok"),
        ],
    )
    def test_base_href(self, base_href, expected):
        html = f'<head><base href="{base_href}"></head><body><a href="ok">ok</a></body>'
        assert urls(html) == [expected]

    def test_only_first_base_counts(self):
        html = '<base href="/first/"><base href="/second/"><a href="ok">x</a>'
        assert urls(html) == ["http://fake.local/first/ok"]

    def test_base_without_href_ignored(self):
        html = '<base target="_blank"><a href="ok">x</a>'
        assert urls(html) == ["http://fake.local/pageBase/ok"]

    def test_document_base_default(self):
        parser = HTMLParser(BASE)
        assert parser.parse("<p>no links</p>") == []
