"""
Tests para la derivación de endpoints del REST API
"""

import pytest

from quickwp.endpoints import (
    append_query,
    build_cpt_endpoint,
    derive_endpoint,
    get_base_api_root,
    item_url,
)


@pytest.mark.unit
class TestDeriveEndpoint:

    def test_pretty_permalinks(self):
        base = "https://x.test/wp-json/wp/v2/posts"
        assert derive_endpoint(base, "pages") == "https://x.test/wp-json/wp/v2/pages"
        assert derive_endpoint(base, "tags") == "https://x.test/wp-json/wp/v2/tags"

    def test_pretty_permalinks_keep_query_string(self):
        base = "https://x.test/wp-json/wp/v2/posts?context=edit&lang=es"
        assert derive_endpoint(base, "pages") == "https://x.test/wp-json/wp/v2/pages?context=edit&lang=es"

    def test_pretty_permalinks_in_subdirectory(self):
        base = "https://x.test/blog/wp-json/wp/v2/posts"
        assert derive_endpoint(base, "media") == "https://x.test/blog/wp-json/wp/v2/media"

    def test_rest_route(self):
        base = "https://x.test/?rest_route=/wp/v2/posts"
        assert derive_endpoint(base, "pages") == "https://x.test/?rest_route=/wp/v2/pages"

    def test_rest_route_keeps_other_params(self):
        base = "https://x.test/index.php?rest_route=/wp/v2/posts&lang=es"
        assert derive_endpoint(base, "categories") == "https://x.test/index.php?rest_route=/wp/v2/categories&lang=es"

    def test_suffix_fallback(self):
        assert derive_endpoint("https://x.test/api/posts", "pages") == "https://x.test/api/pages"
        assert derive_endpoint("https://x.test/api/media", "tags") == "https://x.test/api/tags"

    def test_no_match_returns_input(self):
        base = "https://x.test/custom/endpoint"
        assert derive_endpoint(base, "pages") == base

    def test_empty_base(self):
        assert derive_endpoint("", "pages") == ""

    def test_target_with_backslash_is_literal(self):
        base = "https://x.test/?rest_route=/wp/v2/posts"
        assert derive_endpoint(base, r"a\1b") == r"https://x.test/?rest_route=/wp/v2/a\1b"


@pytest.mark.unit
class TestBaseApiRoot:

    def test_pretty(self):
        assert get_base_api_root("https://x.test/wp-json/wp/v2/posts") == "https://x.test/wp-json/wp/v2"

    def test_rest_route(self):
        assert get_base_api_root("https://x.test/?rest_route=/wp/v2/posts") == "https://x.test/?rest_route=/wp/v2"

    def test_suffix_fallback(self):
        assert get_base_api_root("https://x.test/api/posts") == "https://x.test/api"

    def test_empty(self):
        assert get_base_api_root("") == ""


@pytest.mark.unit
class TestCptEndpoint:

    def test_derived_from_posts(self):
        posts = "https://x.test/wp-json/wp/v2/posts"
        assert build_cpt_endpoint(" product ", posts) == "https://x.test/wp-json/wp/v2/product"

    def test_custom_override_wins(self):
        posts = "https://x.test/wp-json/wp/v2/posts"
        custom = "https://x.test/wp-json/custom/v1/events"
        assert build_cpt_endpoint("product", posts, custom) == custom

    def test_empty_slug_uses_posts(self):
        posts = "https://x.test/wp-json/wp/v2/posts"
        assert build_cpt_endpoint("  ", posts) == posts


@pytest.mark.unit
class TestUrlHelpers:

    def test_item_url(self):
        assert item_url("https://x.test/wp-json/wp/v2/posts/", 42) == "https://x.test/wp-json/wp/v2/posts/42"

    def test_append_query_booleans(self):
        url = append_query("https://x.test/wp-json/wp/v2/tags", {"hide_empty": False, "per_page": 100})
        assert url == "https://x.test/wp-json/wp/v2/tags?hide_empty=false&per_page=100"

    def test_append_query_existing_question_mark(self):
        url = append_query("https://x.test/?rest_route=/wp/v2/posts", {"page": 2})
        assert url == "https://x.test/?rest_route=/wp/v2/posts&page=2"

    def test_append_query_without_params(self):
        assert append_query("https://x.test/a", None) == "https://x.test/a"
