"""
Servicios de contenido de QuickWP
Posts, páginas y Custom Post Types sobre el cliente REST
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .config import SiteConfig
from .endpoints import append_query, item_url
from .models import RequestResult
from .rest_client import RestClient

logger = logging.getLogger(__name__)

CREDENTIALS_MISSING = 'WordPress credentials not configured.'

POST_FIELDS = (
    'title', 'content', 'excerpt', 'status', 'slug', 'date', 'author',
    'featured_media', 'comment_status', 'ping_status', 'format', 'sticky',
)
PAGE_FIELDS = (
    'title', 'content', 'excerpt', 'status', 'slug', 'date', 'author',
    'featured_media', 'comment_status', 'ping_status',
)
CPT_FIELDS = PAGE_FIELDS


def parse_id_list(value: Any) -> List[int]:
    """
    Convierte una lista o un texto '1, 5, 12' en lista de IDs enteros

    Las entradas no numéricas, cero o negativas se descartan sin error.
    """
    if isinstance(value, str):
        items: Iterable[Any] = value.split(',')
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        return []

    ids = []
    for item in items:
        try:
            item_id = int(str(item).strip())
        except ValueError:
            continue
        if item_id > 0:
            ids.append(item_id)
    return ids


def to_int(value: Any, default: int = 0) -> int:
    """Entero a partir de un valor de formulario; default si no es numérico"""
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def filter_fields(data: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    """Copia solo los campos permitidos que tengan valor (None y '' se omiten)"""
    payload = {}
    for name in fields:
        value = data.get(name)
        if value is not None and value != '':
            payload[name] = value
    return payload


class ContentService:
    """Base común: endpoint, credenciales y validación previa"""

    not_configured_message = 'Endpoint not configured.'

    def __init__(self, config: SiteConfig, client: RestClient):
        self.config = config
        self.client = client

    def _credentials(self, username: Optional[str], app_password: Optional[str]) -> Tuple[str, str]:
        user = self.config.username if username is None else username
        password = self.config.app_password if app_password is None else app_password
        return user, password

    def _preflight(
        self,
        endpoint: str,
        username: Optional[str],
        app_password: Optional[str],
        missing: Optional[str] = None,
    ) -> Tuple[Optional[RequestResult], str, str]:
        """Devuelve (error, usuario, contraseña); error es None si se puede llamar"""
        user, password = self._credentials(username, app_password)

        if endpoint == '':
            message = missing or self.not_configured_message
            logger.warning(f"⚠️ {message}")
            return RequestResult.config_error(message), user, password

        if user == '' or password == '':
            logger.warning(f"⚠️ {CREDENTIALS_MISSING}")
            return RequestResult.config_error(CREDENTIALS_MISSING), user, password

        return None, user, password

    def _create(self, endpoint: str, payload: Dict[str, Any], username=None, app_password=None, missing=None) -> RequestResult:
        error, user, password = self._preflight(endpoint, username, app_password, missing=missing)
        if error:
            return error
        return self.client.post_json(endpoint, payload, user, password, self.config.verify_ssl)

    def _update(self, endpoint: str, item_id: int, payload: Dict[str, Any], username=None, app_password=None, missing=None) -> RequestResult:
        error, user, password = self._preflight(endpoint, username, app_password, missing=missing)
        if error:
            return error
        return self.client.post_json(item_url(endpoint, item_id), payload, user, password, self.config.verify_ssl)

    def _get(self, endpoint: str, item_id: int, username=None, app_password=None, missing=None) -> RequestResult:
        error, user, password = self._preflight(endpoint, username, app_password, missing=missing)
        if error:
            return error
        return self.client.get(item_url(endpoint, item_id), user, password, self.config.verify_ssl)

    def _list(self, endpoint: str, params: Optional[Dict[str, Any]], username=None, app_password=None, missing=None) -> RequestResult:
        error, user, password = self._preflight(endpoint, username, app_password, missing=missing)
        if error:
            return error
        return self.client.get(append_query(endpoint, params), user, password, self.config.verify_ssl)

    def _delete(self, endpoint: str, item_id: int, force: bool, username=None, app_password=None, missing=None) -> RequestResult:
        error, user, password = self._preflight(endpoint, username, app_password, missing=missing)
        if error:
            return error
        return self.client.delete(item_url(endpoint, item_id), user, password, self.config.verify_ssl, force)


class PostService(ContentService):
    """Crear y gestionar posts"""

    not_configured_message = 'Posts endpoint not configured.'

    @property
    def endpoint(self) -> str:
        return self.config.posts_endpoint

    def create(self, data: Dict[str, Any], username: Optional[str] = None,
               app_password: Optional[str] = None) -> RequestResult:
        return self._create(self.endpoint, self.build_payload(data), username, app_password)

    def update(self, post_id: int, data: Dict[str, Any], username: Optional[str] = None,
               app_password: Optional[str] = None) -> RequestResult:
        return self._update(self.endpoint, post_id, self.build_payload(data), username, app_password)

    def get(self, post_id: int, username: Optional[str] = None,
            app_password: Optional[str] = None) -> RequestResult:
        return self._get(self.endpoint, post_id, username, app_password)

    def list(self, params: Optional[Dict[str, Any]] = None, username: Optional[str] = None,
             app_password: Optional[str] = None) -> RequestResult:
        return self._list(self.endpoint, params, username, app_password)

    def delete(self, post_id: int, force: bool = False, username: Optional[str] = None,
               app_password: Optional[str] = None) -> RequestResult:
        return self._delete(self.endpoint, post_id, force, username, app_password)

    def build_payload(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = filter_fields(data, POST_FIELDS)

        if data.get('categories'):
            payload['categories'] = parse_id_list(data['categories'])
        if data.get('tags'):
            payload['tags'] = parse_id_list(data['tags'])

        # Plantilla de post (WordPress 4.7+)
        if data.get('template'):
            payload['template'] = data['template']

        if data.get('meta') and isinstance(data['meta'], dict):
            payload['meta'] = data['meta']

        return payload


class PageService(PostService):
    """Crear y gestionar páginas"""

    not_configured_message = 'Pages endpoint not configured.'

    @property
    def endpoint(self) -> str:
        return self.config.pages_endpoint

    def build_payload(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = filter_fields(data, PAGE_FIELDS)

        # parent_id (nombre del formulario) tiene prioridad sobre parent
        for key in ('parent', 'parent_id'):
            if data.get(key) not in (None, ''):
                payload['parent'] = to_int(data[key])
        if data.get('menu_order') not in (None, ''):
            payload['menu_order'] = to_int(data['menu_order'])
        if data.get('template'):
            payload['template'] = data['template']

        if data.get('meta') and isinstance(data['meta'], dict):
            payload['meta'] = data['meta']

        return payload


class CptService(ContentService):
    """Crear y gestionar elementos de Custom Post Types"""

    not_configured_message = (
        'CPT endpoint could not be determined. '
        'Configure posts_endpoint or provide a custom endpoint.'
    )

    def endpoint(self, slug: str, custom_endpoint: Optional[str] = None) -> str:
        return self.config.build_cpt_endpoint(slug, custom_endpoint)

    def create(self, slug: str, data: Dict[str, Any], custom_endpoint: Optional[str] = None,
               username: Optional[str] = None, app_password: Optional[str] = None) -> RequestResult:
        return self._create(self.endpoint(slug, custom_endpoint), self.build_payload(data), username, app_password)

    def update(self, slug: str, item_id: int, data: Dict[str, Any], custom_endpoint: Optional[str] = None,
               username: Optional[str] = None, app_password: Optional[str] = None) -> RequestResult:
        return self._update(self.endpoint(slug, custom_endpoint), item_id, self.build_payload(data),
                            username, app_password)

    def get(self, slug: str, item_id: int, custom_endpoint: Optional[str] = None,
            username: Optional[str] = None, app_password: Optional[str] = None) -> RequestResult:
        return self._get(self.endpoint(slug, custom_endpoint), item_id, username, app_password)

    def list(self, slug: str, params: Optional[Dict[str, Any]] = None, custom_endpoint: Optional[str] = None,
             username: Optional[str] = None, app_password: Optional[str] = None) -> RequestResult:
        return self._list(self.endpoint(slug, custom_endpoint), params, username, app_password)

    def delete(self, slug: str, item_id: int, force: bool = False, custom_endpoint: Optional[str] = None,
               username: Optional[str] = None, app_password: Optional[str] = None) -> RequestResult:
        return self._delete(self.endpoint(slug, custom_endpoint), item_id, force, username, app_password)

    def build_payload(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = filter_fields(data, CPT_FIELDS)

        if data.get('categories'):
            payload['categories'] = parse_id_list(data['categories'])
        if data.get('tags'):
            payload['tags'] = parse_id_list(data['tags'])
        if data.get('template'):
            payload['template'] = data['template']

        # Taxonomías personalizadas: cualquier otra lista no vacía pasa tal cual
        for key, value in data.items():
            if key not in payload and isinstance(value, list) and value:
                payload[key] = value

        if data.get('meta') and isinstance(data['meta'], dict):
            payload['meta'] = data['meta']

        return payload
