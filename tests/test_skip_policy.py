"""Tests for linkwalker.utils.skip_policy."""

from __future__ import annotations

import pytest

from linkwalker.utils.error_handler import SkipPolicyError
from linkwalker.utils.skip_policy import SkipPolicy


class TestFromOption:
    def test_none(self):
        policy = SkipPolicy.from_option(None)
        assert not policy
        assert policy.patterns == ()
        assert policy.predicate is None

    def test_list(self):
        policy = SkipPolicy.from_option(["a", "", "b"])
        assert policy.patterns == ("a", "b")

    def test_single_string(self):
        assert SkipPolicy.from_option("very.bad").patterns == ("very.bad",)

    def test_callable(self):
        predicate = lambda url: False  # noqa: E731
        assert SkipPolicy.from_option(predicate).predicate is predicate

    def test_policy_passes_through(self):
        policy = SkipPolicy(patterns=["x"])
        assert SkipPolicy.from_option(policy) is policy


class TestShouldSkip:
    @pytest.mark.asyncio
    async def test_substring(self):
        policy = SkipPolicy(patterns=["very.bad"])
        assert await policy.should_skip("http://very.bad/page")
        assert not await policy.should_skip("http://fine.example/")

    @pytest.mark.asyncio
    async def test_async_predicate(self):
        async def predicate(url):
            return url.endswith(".pdf")

        policy = SkipPolicy(predicate=predicate)
        assert await policy.should_skip("http://a/doc.pdf")
        assert not await policy.should_skip("http://a/doc.html")

    @pytest.mark.asyncio
    async def test_either_filter_skips(self):
        calls = []

        def predicate(url):
            calls.append(url)
            return "private" in url

        policy = SkipPolicy(patterns=["very.bad"], predicate=predicate)
        assert await policy.should_skip("http://very.bad/")
        assert await policy.should_skip("http://a/private")
        assert not await policy.should_skip("http://a/public")
        # substring match short-circuits the predicate
        assert calls == ["http://a/private", "http://a/public"]

    @pytest.mark.asyncio
    async def test_predicate_error(self):
        async def predicate(url):
            raise ConnectionError("lookup service down")

        policy = SkipPolicy(predicate=predicate)
        with pytest.raises(SkipPolicyError) as excinfo:
            await policy.should_skip("http://a/")
        assert excinfo.value.url == "http://a/"
        assert isinstance(excinfo.value.cause, ConnectionError)
