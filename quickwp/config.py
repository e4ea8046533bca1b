"""
Configuración de QuickWP
Configuración inmutable por sitio y carga de los archivos de sitios
"""

import json
import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

from .endpoints import build_cpt_endpoint, derive_endpoint, get_base_api_root

logger = logging.getLogger(__name__)

BASE_CONFIG_FILE = 'quick-config.json'
SITES_CONFIG_FILE = 'quick-sites.json'


class Config:
    """Contenedor inmutable de configuración (clave -> valor)"""

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        self._data = MappingProxyType(dict(data or {}))

    def get(self, key: str, default: Any = None) -> Any:
        value = self._data.get(key)
        return default if value is None else value

    def has(self, key: str) -> bool:
        return key in self._data

    def all(self) -> Mapping[str, Any]:
        return self._data

    def merge(self, overrides: Mapping[str, Any]) -> "Config":
        """Nueva instancia con los valores de overrides aplicados"""
        data = dict(self._data)
        data.update(overrides)
        return type(self)(data)

    def with_value(self, key: str, value: Any) -> "Config":
        """Nueva instancia con un único valor cambiado"""
        return self.merge({key: value})


class SiteConfig(Config):
    """Configuración de un sitio WordPress: endpoints, credenciales y flags"""

    KEY_POSTS_ENDPOINT = 'posts_endpoint'
    KEY_PAGES_ENDPOINT = 'pages_endpoint'
    KEY_MEDIA_ENDPOINT = 'media_endpoint'
    KEY_CATEGORIES_ENDPOINT = 'categories_endpoint'
    KEY_TAGS_ENDPOINT = 'tags_endpoint'
    KEY_USERNAME = 'wp_username'
    KEY_APP_PASSWORD = 'wp_app_password'
    KEY_VERIFY_SSL = 'verify_ssl'
    KEY_DEBUG_HTTP = 'debug_http'
    KEY_SHOW_AUTH_FORM = 'show_auth_form'
    KEY_ACCESS_MODE = 'access_mode'
    KEY_ACCESS_BASIC_USER = 'access_basic_user'
    KEY_ACCESS_BASIC_PASSWORD = 'access_basic_password'
    KEY_ACCESS_TOKEN = 'access_token'
    KEY_CPT_DEFAULT_SLUG = 'cpt_default_slug'
    KEY_PAGE_TEMPLATES = 'page_templates'
    KEY_POST_TEMPLATES = 'post_templates'
    KEY_LABEL = 'label'

    @property
    def posts_endpoint(self) -> str:
        return self.get(self.KEY_POSTS_ENDPOINT, '')

    @property
    def pages_endpoint(self) -> str:
        return self.get(self.KEY_PAGES_ENDPOINT, '')

    @property
    def media_endpoint(self) -> str:
        """Endpoint de media (o derivado del de posts)"""
        endpoint = self.get(self.KEY_MEDIA_ENDPOINT, '')
        if endpoint == '':
            endpoint = self.derive_endpoint(self.posts_endpoint, 'media')
        return endpoint

    @property
    def categories_endpoint(self) -> str:
        """Endpoint de categorías (o derivado del de posts)"""
        endpoint = self.get(self.KEY_CATEGORIES_ENDPOINT, '')
        if endpoint == '':
            endpoint = self.derive_endpoint(self.posts_endpoint, 'categories')
        return endpoint

    @property
    def tags_endpoint(self) -> str:
        """Endpoint de etiquetas (o derivado del de posts)"""
        endpoint = self.get(self.KEY_TAGS_ENDPOINT, '')
        if endpoint == '':
            endpoint = self.derive_endpoint(self.posts_endpoint, 'tags')
        return endpoint

    @property
    def base_endpoint(self) -> str:
        """Raíz del API: https://example.com/wp-json/wp/v2"""
        return get_base_api_root(self.posts_endpoint)

    @property
    def username(self) -> str:
        return self.get(self.KEY_USERNAME, '')

    @property
    def app_password(self) -> str:
        return self.get(self.KEY_APP_PASSWORD, '')

    @property
    def verify_ssl(self) -> bool:
        return bool(self.get(self.KEY_VERIFY_SSL, True))

    @property
    def debug_http(self) -> bool:
        return bool(self.get(self.KEY_DEBUG_HTTP, False))

    @property
    def show_auth_form(self) -> bool:
        return bool(self.get(self.KEY_SHOW_AUTH_FORM, True))

    @property
    def access_mode(self) -> str:
        """none, basic o token"""
        return self.get(self.KEY_ACCESS_MODE, 'none')

    @property
    def default_cpt_slug(self) -> str:
        return self.get(self.KEY_CPT_DEFAULT_SLUG, 'post')

    @property
    def page_templates(self) -> Dict[str, str]:
        return dict(self.get(self.KEY_PAGE_TEMPLATES, {}))

    @property
    def post_templates(self) -> Dict[str, str]:
        return dict(self.get(self.KEY_POST_TEMPLATES, {}))

    @property
    def label(self) -> str:
        return self.get(self.KEY_LABEL, '')

    def has_credentials(self) -> bool:
        return self.username != '' and self.app_password != ''

    def derive_endpoint(self, base_endpoint: str, resource: str) -> str:
        return derive_endpoint(base_endpoint, resource)

    def build_cpt_endpoint(self, slug: str, custom_endpoint: Optional[str] = None) -> str:
        return build_cpt_endpoint(slug, self.posts_endpoint, custom_endpoint)


def _read_json_file(path: Path) -> Dict[str, Any]:
    """Lee un archivo JSON de configuración; vacío si falta o no es válido"""
    if not path.is_file():
        return {}
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"⚠️ No se pudo leer {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"⚠️ {path} no contiene un objeto JSON")
        return {}
    return data


def env_defaults() -> Dict[str, Any]:
    """Valores por defecto a partir de variables de entorno (.env)"""
    load_dotenv()

    defaults: Dict[str, Any] = {}
    wp_url = os.getenv('WP_URL', '').rstrip('/')
    if wp_url:
        api_root = f"{wp_url}/wp-json/wp/v2"
        defaults['posts_endpoint'] = f"{api_root}/posts"
        defaults['pages_endpoint'] = f"{api_root}/pages"
        defaults['media_endpoint'] = f"{api_root}/media"

    wp_user = os.getenv('WP_USER') or os.getenv('WP_USERNAME')
    wp_password = os.getenv('WP_APP_PASSWORD') or os.getenv('WP_PASSWORD')
    if wp_user:
        defaults['wp_username'] = wp_user
    if wp_password:
        defaults['wp_app_password'] = wp_password
    return defaults


class ConfigLoader:
    """Carga quick-config.json y quick-sites.json y combina los overrides por sitio"""

    def __init__(self, base_dir: Optional[str] = None, use_env: bool = True):
        if base_dir is None:
            load_dotenv()
            base_dir = os.getenv('QUICKWP_CONFIG_DIR', '.')
        self.base_dir = Path(base_dir)
        self.use_env = use_env

    def load_base_config(self) -> Dict[str, Any]:
        config = _read_json_file(self.base_dir / BASE_CONFIG_FILE)
        if not self.use_env:
            return config

        # Las variables de entorno solo rellenan lo que falta
        for key, value in env_defaults().items():
            if not config.get(key):
                config[key] = value
        return config

    def load_sites_config(self) -> Dict[str, Any]:
        return _read_json_file(self.base_dir / SITES_CONFIG_FILE)

    def get_sites(self) -> Dict[str, Dict[str, Any]]:
        sites = self.load_sites_config().get('sites') or {}
        return sites if isinstance(sites, dict) else {}

    def get_default_site_key(self) -> str:
        default_site = self.load_sites_config().get('default_site')
        if default_site:
            return default_site

        # Primer sitio disponible
        for key in self.get_sites():
            return key
        return ''

    def get_site_config(self, site_key: str = '') -> Dict[str, Any]:
        """Configuración base combinada con la del sitio indicado"""
        base_config = self.load_base_config()
        if site_key == '':
            return base_config

        sites = self.get_sites()
        if site_key not in sites:
            return base_config

        merged = dict(base_config)
        merged.update(sites[site_key])
        return merged

    def create_site_config(self, site_key: str = '') -> SiteConfig:
        return SiteConfig(self.get_site_config(site_key))

    def resolve_site_key(self, requested: Optional[str] = None) -> str:
        """Sitio pedido (?site=) si existe, si no el sitio por defecto"""
        if requested and requested in self.get_sites():
            return requested
        return self.get_default_site_key()

    def get_site_label(self, site_key: str) -> str:
        site = self.get_sites().get(site_key)
        if site:
            return site.get('label', site_key)
        return site_key
