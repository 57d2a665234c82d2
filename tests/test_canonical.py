"""Tests for URL canonicalization (core/canonical.py)."""

from __future__ import annotations

import pytest

from pocket_cull.core.canonical import canonicalize

SAMPLES = [
    "",
    "/",
    "http://",
    "https://example.com",
    "http://example.com/",
    "http://example.com/a?feature=youtu.be&x=1",
    "https://www.youtube.com/watch?v=abc&feature=youtube_gdata&a",
    "https://example.com/p?a&&&b&",
    "http://a/&a/",
    "x&/",
    "https://example.com/?&&/",
    "https://example.com/a?utm_source=news&utm_medium=email",
    "HTTP://EXAMPLE.COM/Path/",
    "https://example.com/a?feature=g-u&feature=g-u&&feature=youtu.be/",
]


@pytest.mark.parametrize("url", SAMPLES)
def test_idempotent(url: str) -> None:
    once = canonicalize(url)
    assert canonicalize(once) == once


class TestScheme:
    def test_http_becomes_https(self) -> None:
        assert canonicalize("http://example.com/a") == "https://example.com/a"

    def test_uppercase_scheme(self) -> None:
        assert canonicalize("HTTP://example.com/a") == "https://example.com/a"

    def test_embedded_http_untouched(self) -> None:
        url = "https://example.com/r?to=http://other.com/x"
        assert canonicalize(url) == url


class TestTrackingParams:
    def test_feature_param_ignored_for_equality(self) -> None:
        assert canonicalize("http://example.com/a?feature=youtu.be&x=1") == canonicalize(
            "https://example.com/a?x=1"
        )

    def test_only_tracking_param_leaves_no_question_mark(self) -> None:
        assert canonicalize("https://youtu.be/abc?feature=g-u") == "https://youtu.be/abc"

    def test_trailing_a_param_dropped(self) -> None:
        assert canonicalize("https://www.youtube.com/watch?v=abc&a") == "https://www.youtube.com/watch?v=abc"

    def test_utm_params_dropped(self) -> None:
        assert (
            canonicalize("https://example.com/a?id=3&utm_source=news&utm_campaign=fall")
            == "https://example.com/a?id=3"
        )

    def test_similar_param_kept(self) -> None:
        url = "https://example.com/a?feature=g-user"
        assert canonicalize(url) == url


class TestSeparators:
    def test_repeated_ampersands_collapse(self) -> None:
        assert canonicalize("https://example.com/p?a&&&b") == "https://example.com/p?a&b"

    def test_trailing_ampersand_stripped(self) -> None:
        assert canonicalize("https://example.com/p?a=1&") == "https://example.com/p?a=1"

    def test_trailing_slash_stripped(self) -> None:
        assert canonicalize("https://example.com/p/") == "https://example.com/p"

    def test_trailing_mix_stripped(self) -> None:
        assert canonicalize("https://example.com/p?a=1&/") == "https://example.com/p?a=1"
