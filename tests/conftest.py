"""
Fixtures compartidos de la suite de QuickWP

Todas las pruebas corren SIN red: las llamadas a WordPress pasan por un
httpx.MockTransport que registra cada petición.
"""

import json

import httpx
import pytest

from quickwp.config import SiteConfig
from quickwp.rest_client import RestClient
from quickwp.uploads import UploadStore

API_ROOT = "https://example.com/wp-json/wp/v2"


class RecordingTransport(httpx.MockTransport):
    """MockTransport que guarda las peticiones recibidas"""

    def __init__(self, handler):
        self.requests = []

        def record(request):
            request.read()
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    @property
    def call_count(self):
        return len(self.requests)

    @property
    def last(self):
        return self.requests[-1]


def json_response(status_code, body=None, headers=None):
    return httpx.Response(status_code, json=body, headers=headers)


def request_json(request):
    return json.loads(request.content.decode("utf-8"))


# ---------------------------------------------------------------------------
# Configuración
# ---------------------------------------------------------------------------

@pytest.fixture
def site_data():
    return {
        "posts_endpoint": f"{API_ROOT}/posts",
        "pages_endpoint": f"{API_ROOT}/pages",
        "wp_username": "editor",
        "wp_app_password": "abcd efgh ijkl mnop",
    }


@pytest.fixture
def site_config(site_data):
    return SiteConfig(site_data)


@pytest.fixture
def anonymous_config(site_data):
    data = dict(site_data)
    data["wp_username"] = ""
    data["wp_app_password"] = ""
    return SiteConfig(data)


@pytest.fixture
def config_dir(tmp_path):
    """Directorio con quick-config.json y quick-sites.json de prueba"""
    base = {
        "posts_endpoint": f"{API_ROOT}/posts",
        "pages_endpoint": f"{API_ROOT}/pages",
        "wp_username": "editor",
        "wp_app_password": "base-pass",
        "verify_ssl": True,
    }
    sites = {
        "default_site": "blog",
        "sites": {
            "blog": {"label": "Blog principal"},
            "shop": {
                "label": "Tienda",
                "posts_endpoint": "https://shop.example.com/?rest_route=/wp/v2/posts",
                "wp_app_password": "shop-pass",
            },
        },
    }
    (tmp_path / "quick-config.json").write_text(json.dumps(base), encoding="utf-8")
    (tmp_path / "quick-sites.json").write_text(json.dumps(sites), encoding="utf-8")
    return tmp_path


# ---------------------------------------------------------------------------
# Transporte
# ---------------------------------------------------------------------------

@pytest.fixture
def upload_store(tmp_path):
    directory = tmp_path / "uploads"
    directory.mkdir()
    return UploadStore(str(directory))


@pytest.fixture
def make_client(upload_store):
    """Fábrica: handler -> (RestClient, RecordingTransport)"""

    def factory(handler):
        transport = RecordingTransport(handler)
        return RestClient(uploads=upload_store, transport=transport), transport

    return factory


@pytest.fixture
def ok_client(make_client):
    """Cliente que responde 200 con el método y la URL de la petición"""

    def handler(request):
        return json_response(200, {"id": 1, "method": request.method, "url": str(request.url)})

    return make_client(handler)
