"""
Tests para las plantillas de posts y páginas
"""

import pytest

from conftest import json_response
from quickwp.config import SiteConfig
from quickwp.templates import DEFAULT_TEMPLATE_LABEL, TemplateService, format_template_name


def _schema(*templates):
    return {"schema": {"properties": {"template": {"type": "string", "enum": list(templates)}}}}


@pytest.mark.unit
class TestFormatTemplateName:

    def test_examples(self):
        assert format_template_name("template-full-width.php") == "Full Width"
        assert format_template_name("single-product.php") == "Product"
        assert format_template_name("tpl_landing_page.php") == "Landing Page"

    def test_empty_stays_empty(self):
        assert format_template_name("") == ""

    def test_falls_back_to_filename(self):
        assert format_template_name("page.php") == "page.php"


@pytest.mark.unit
class TestTemplateService:

    def test_from_schema(self, site_config, make_client):
        client, transport = make_client(lambda request: json_response(200, _schema("", "template-wide.php")))

        templates = TemplateService(site_config, client).get_page_templates()

        assert transport.last.method == "OPTIONS"
        assert transport.last.url.path.endswith("/pages")
        assert templates == {"": DEFAULT_TEMPLATE_LABEL, "template-wide.php": "Wide"}
        assert list(templates)[0] == ""

    def test_configured_names_win(self, site_data, make_client):
        site_data["page_templates"] = {
            "template-wide.php": "Ancho completo",
            "landing.php": "Landing",
            "__custom__": "Otro...",
        }
        client, _ = make_client(lambda request: json_response(200, _schema("template-wide.php")))

        templates = TemplateService(SiteConfig(site_data), client).get_page_templates()

        assert templates == {
            "": DEFAULT_TEMPLATE_LABEL,
            "template-wide.php": "Ancho completo",
            "landing.php": "Landing",
        }

    def test_api_failure_uses_configuration(self, site_data, make_client):
        site_data["post_templates"] = {"single-wide.php": "Wide post"}
        client, _ = make_client(lambda request: json_response(401, {"message": "Unauthorized"}))

        templates = TemplateService(SiteConfig(site_data), client).get_post_templates()

        assert templates == {"": DEFAULT_TEMPLATE_LABEL, "single-wide.php": "Wide post"}

    def test_injected_cache_is_reused(self, site_config, make_client):
        client, transport = make_client(lambda request: json_response(200, _schema("", "template-a.php")))
        cache = {}

        first = TemplateService(site_config, client, cache).get_page_templates()
        second = TemplateService(site_config, client, cache).get_page_templates()

        assert first == second
        assert transport.call_count == 1
        assert len(cache) == 1

    def test_clear_cache(self, site_config, make_client):
        client, transport = make_client(lambda request: json_response(200, _schema("")))
        service = TemplateService(site_config, client)

        service.get_post_templates()
        service.clear_cache()
        service.get_post_templates()

        assert transport.call_count == 2

    def test_without_endpoint(self, make_client):
        client, transport = make_client(lambda request: json_response(200, _schema("")))

        templates = TemplateService(SiteConfig({}), client).get_page_templates()

        assert templates == {"": DEFAULT_TEMPLATE_LABEL}
        assert transport.call_count == 0

    def test_returned_templates_are_copies(self, site_config, make_client):
        client, transport = make_client(lambda request: json_response(200, _schema("", "template-a.php")))
        cache = {}
        service = TemplateService(site_config, client, cache)

        first = service.get_page_templates()
        first["injected.php"] = "Injected"
        second = service.get_page_templates()

        assert "injected.php" not in second
        assert all("injected.php" not in templates for templates in cache.values())
        assert transport.call_count == 1
