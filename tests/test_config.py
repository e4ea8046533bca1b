"""
Tests para la configuración inmutable y el cargador de sitios
"""

import pytest

from conftest import API_ROOT
from quickwp.config import Config, ConfigLoader, SiteConfig, env_defaults


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("WP_URL", "WP_USER", "WP_USERNAME", "WP_APP_PASSWORD", "WP_PASSWORD"):
        monkeypatch.setenv(name, "")
    return monkeypatch


@pytest.mark.unit
class TestConfig:

    def test_get_default(self):
        config = Config({"a": None, "b": 0})
        assert config.get("a", "x") == "x"
        assert config.get("b", 5) == 0
        assert config.get("missing", "y") == "y"

    def test_is_read_only(self):
        config = Config({"a": 1})
        with pytest.raises(TypeError):
            config.all()["a"] = 2

    def test_source_mapping_is_copied(self):
        data = {"a": 1}
        config = Config(data)
        data["a"] = 2
        assert config.get("a") == 1

    def test_merge_returns_new_instance(self, site_config):
        merged = site_config.merge({"wp_username": "otro"})

        assert isinstance(merged, SiteConfig)
        assert merged.username == "otro"
        assert site_config.username == "editor"

    def test_with_value(self):
        config = Config({"a": 1}).with_value("b", 2)
        assert config.has("a") and config.has("b")


@pytest.mark.unit
class TestSiteConfig:

    def test_defaults(self):
        config = SiteConfig({})
        assert config.posts_endpoint == ""
        assert config.verify_ssl is True
        assert config.debug_http is False
        assert config.access_mode == "none"
        assert config.default_cpt_slug == "post"
        assert not config.has_credentials()

    def test_derived_endpoints(self, site_config):
        assert site_config.media_endpoint == f"{API_ROOT}/media"
        assert site_config.categories_endpoint == f"{API_ROOT}/categories"
        assert site_config.tags_endpoint == f"{API_ROOT}/tags"
        assert site_config.base_endpoint == API_ROOT

    def test_explicit_media_endpoint(self, site_data):
        site_data["media_endpoint"] = "https://cdn.example.com/wp-json/wp/v2/media"
        assert SiteConfig(site_data).media_endpoint == "https://cdn.example.com/wp-json/wp/v2/media"

    def test_cpt_endpoint(self, site_config):
        assert site_config.build_cpt_endpoint("book") == f"{API_ROOT}/book"


@pytest.mark.unit
class TestConfigLoader:

    def test_site_overrides_base(self, config_dir, clean_env):
        loader = ConfigLoader(str(config_dir))

        config = loader.create_site_config("shop")

        assert config.posts_endpoint == "https://shop.example.com/?rest_route=/wp/v2/posts"
        assert config.pages_endpoint == f"{API_ROOT}/pages"
        assert config.username == "editor"
        assert config.app_password == "shop-pass"

    def test_unknown_site_uses_base(self, config_dir, clean_env):
        config = ConfigLoader(str(config_dir)).create_site_config("nope")
        assert config.app_password == "base-pass"

    def test_default_site(self, config_dir, clean_env):
        loader = ConfigLoader(str(config_dir))
        assert loader.get_default_site_key() == "blog"
        assert loader.resolve_site_key() == "blog"
        assert loader.resolve_site_key("shop") == "shop"
        assert loader.resolve_site_key("nope") == "blog"

    def test_first_site_when_no_default(self, tmp_path, clean_env):
        (tmp_path / "quick-sites.json").write_text('{"sites": {"uno": {}, "dos": {}}}', encoding="utf-8")
        assert ConfigLoader(str(tmp_path)).get_default_site_key() == "uno"

    def test_site_label(self, config_dir, clean_env):
        loader = ConfigLoader(str(config_dir))
        assert loader.get_site_label("shop") == "Tienda"
        assert loader.get_site_label("nope") == "nope"

    def test_missing_files(self, tmp_path, clean_env):
        loader = ConfigLoader(str(tmp_path))
        assert loader.load_base_config() == {}
        assert loader.get_sites() == {}
        assert loader.get_default_site_key() == ""

    def test_invalid_json(self, tmp_path, clean_env):
        (tmp_path / "quick-config.json").write_text("{not json", encoding="utf-8")
        assert ConfigLoader(str(tmp_path)).load_base_config() == {}

    def test_env_fills_missing_values(self, tmp_path, clean_env):
        clean_env.setenv("WP_URL", "https://env.example.com/")
        clean_env.setenv("WP_USER", "envuser")
        clean_env.setenv("WP_APP_PASSWORD", "envpass")
        (tmp_path / "quick-config.json").write_text('{"wp_username": "fileuser"}', encoding="utf-8")

        config = ConfigLoader(str(tmp_path)).load_base_config()

        assert config["posts_endpoint"] == "https://env.example.com/wp-json/wp/v2/posts"
        assert config["wp_username"] == "fileuser"
        assert config["wp_app_password"] == "envpass"

    def test_env_can_be_disabled(self, tmp_path, clean_env):
        clean_env.setenv("WP_URL", "https://env.example.com")
        assert ConfigLoader(str(tmp_path), use_env=False).load_base_config() == {}

    def test_env_defaults_empty(self, clean_env):
        assert env_defaults() == {}
