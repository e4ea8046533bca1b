"""
Derivación de endpoints del REST API de WordPress
Calcula las URLs de colecciones hermanas (pages, tags, CPTs...) a partir de
un único endpoint configurado, sin validar ni corregir la URL
"""

import re
from typing import Any, Dict, Optional
from urllib.parse import urlencode

# Sufijos reconocidos por el fallback textual
KNOWN_SUFFIXES = ('posts', 'pages', 'media')

# Permalinks "bonitos": https://example.com/wp-json/wp/v2/posts
_PRETTY_RE = re.compile(r'^(.*?/wp-json/wp/v2/)([^/?]+)(.*)$')
_PRETTY_ROOT_RE = re.compile(r'^(.*?/wp-json/wp/v2)/[^/?]+')

# Permalinks planos: https://example.com/?rest_route=/wp/v2/posts
_REST_ROUTE_RE = re.compile(r'(rest_route=/wp/v2/)([^&]+)')
_REST_ROUTE_ROOT_RE = re.compile(r'^(.*?)\?rest_route=/wp/v2/')


def derive_endpoint(base_endpoint: str, target_resource: str) -> str:
    """
    Deriva el endpoint de otro recurso a partir de un endpoint base

    Se prueban tres formas en orden (gana la primera que coincide):
    permalinks bonitos, estilo rest_route y sustitución del sufijo final.
    Si ninguna coincide se devuelve el endpoint sin cambios.
    """
    if base_endpoint == '':
        return ''

    match = _PRETTY_RE.match(base_endpoint)
    if match:
        return match.group(1) + target_resource + match.group(3)

    if _REST_ROUTE_RE.search(base_endpoint):
        # Función de reemplazo para que el slug no se interprete como plantilla
        return _REST_ROUTE_RE.sub(lambda m: m.group(1) + target_resource, base_endpoint)

    for suffix in KNOWN_SUFFIXES:
        if base_endpoint.endswith(suffix):
            return base_endpoint[:-len(suffix)] + target_resource

    return base_endpoint


def get_base_api_root(posts_endpoint: str) -> str:
    """
    Obtiene la raíz /wp/v2 del API (sin el recurso final)

    https://example.com/wp-json/wp/v2/posts -> https://example.com/wp-json/wp/v2
    """
    if posts_endpoint == '':
        return ''

    match = _PRETTY_ROOT_RE.match(posts_endpoint)
    if match:
        return match.group(1)

    match = _REST_ROUTE_ROOT_RE.match(posts_endpoint)
    if match:
        return match.group(1) + '?rest_route=/wp/v2'

    for suffix in KNOWN_SUFFIXES:
        if posts_endpoint.endswith(suffix):
            # -1 para la barra que precede al recurso
            return posts_endpoint[:-len(suffix) - 1]

    return posts_endpoint


def build_cpt_endpoint(slug: str, posts_endpoint: str, custom_override: Optional[str] = None) -> str:
    """Endpoint de un Custom Post Type (el override explícito siempre gana)"""
    slug = slug.strip()
    if custom_override:
        return custom_override
    if slug == '':
        return posts_endpoint

    return derive_endpoint(posts_endpoint, slug)


def item_url(endpoint: str, item_id: Any) -> str:
    """URL de un elemento concreto dentro de una colección"""
    return f"{endpoint.rstrip('/')}/{item_id}"


def append_query(url: str, params: Optional[Dict[str, Any]]) -> str:
    """Añade parámetros de consulta respetando un '?' ya existente"""
    if not params:
        return url

    # WordPress espera booleanos en minúsculas
    normalized = {
        key: ('true' if value else 'false') if isinstance(value, bool) else value
        for key, value in params.items()
    }

    separator = '&' if '?' in url else '?'
    return url + separator + urlencode(normalized, doseq=True)
