"""
Tests para la fachada QuickWP
"""

import pytest

from conftest import API_ROOT, json_response
from quickwp import QuickWP
from quickwp.config import ConfigLoader
from quickwp.models import RequestResult


@pytest.mark.unit
class TestQuickWP:

    def test_services_are_created_once(self, site_config, ok_client):
        qwp = QuickWP(site_config, client=ok_client[0])

        assert qwp.posts() is qwp.posts()
        assert qwp.media() is qwp.media()
        assert qwp.posts() is not qwp.pages()

    def test_shortcuts(self, site_config, make_client):
        client, transport = make_client(lambda request: json_response(201, {"id": 3, "link": "https://example.com/?p=3"}))
        qwp = QuickWP(site_config, client=client)

        result = qwp.create_post({"title": "Hola"})
        qwp.create_page({"title": "Página"})
        qwp.create_cpt_item("book", {"title": "Libro"})
        qwp.create_category({"name": "Noticias"})
        qwp.create_tag({"name": "python"})

        assert QuickWP.is_success(result)
        assert QuickWP.get_id(result) == 3
        assert QuickWP.get_link(result) == "https://example.com/?p=3"
        assert [str(r.url) for r in transport.requests] == [
            f"{API_ROOT}/posts",
            f"{API_ROOT}/pages",
            f"{API_ROOT}/book",
            f"{API_ROOT}/categories",
            f"{API_ROOT}/tags",
        ]

    def test_get_error(self):
        result = RequestResult.config_error("Media endpoint not configured.")
        assert QuickWP.get_error(result) == "Media endpoint not configured."

    def test_with_config(self, site_data, ok_client):
        qwp = QuickWP.with_config(site_data, client=ok_client[0])
        assert qwp.config.posts_endpoint == f"{API_ROOT}/posts"

    def test_from_loader_default_site(self, config_dir, ok_client):
        loader = ConfigLoader(str(config_dir), use_env=False)

        qwp = QuickWP.from_loader(loader, client=ok_client[0])

        assert qwp.config.label == "Blog principal"

    def test_from_loader_named_site(self, config_dir, ok_client):
        loader = ConfigLoader(str(config_dir), use_env=False)

        qwp = QuickWP.from_loader(loader, "shop", client=ok_client[0])

        assert qwp.config.app_password == "shop-pass"

    def test_template_cache_is_shared(self, site_config, ok_client):
        cache = {}
        qwp = QuickWP(site_config, client=ok_client[0], template_cache=cache)
        assert qwp.templates().cache is cache
