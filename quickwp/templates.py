"""
Servicio de plantillas de QuickWP
Obtiene las plantillas disponibles del schema del REST API (OPTIONS)
"""

import hashlib
import logging
import re
from typing import Dict, MutableMapping, Optional

from .config import SiteConfig
from .rest_client import RestClient

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_LABEL = '— Default Template —'
CUSTOM_TEMPLATE_KEY = '__custom__'

_PREFIX_RE = re.compile(r'^(template|page|single|tpl)-?')


def format_template_name(filename: str) -> str:
    """
    Convierte el nombre de archivo en un nombre legible

    "template-full-width.php" -> "Full Width"
    """
    name = re.sub(r'\.php$', '', filename)
    name = _PREFIX_RE.sub('', name)
    name = name.replace('-', ' ').replace('_', ' ').strip()
    # Como ucwords: solo se cambia la primera letra de cada palabra
    name = ' '.join(word[:1].upper() + word[1:] for word in name.split(' '))

    return name or filename


class TemplateService:
    """Plantillas de posts y páginas (schema del API + nombres configurados)"""

    def __init__(
        self,
        config: SiteConfig,
        client: RestClient,
        cache: Optional[MutableMapping[str, Dict[str, str]]] = None,
    ):
        self.config = config
        self.client = client
        self.cache = cache if cache is not None else {}

    def get_page_templates(self) -> Dict[str, str]:
        """{'template-file.php': 'Template Name', ...}"""
        return self._templates('page_templates_', self.config.pages_endpoint, self.config.page_templates)

    def get_post_templates(self) -> Dict[str, str]:
        return self._templates('post_templates_', self.config.posts_endpoint, self.config.post_templates)

    def clear_cache(self) -> None:
        self.cache.clear()

    def _templates(self, prefix: str, endpoint: str, configured: Dict[str, str]) -> Dict[str, str]:
        cache_key = prefix + hashlib.md5(endpoint.encode('utf-8')).hexdigest()
        if cache_key in self.cache:
            return dict(self.cache[cache_key])

        templates = self.fetch_templates_from_schema(endpoint)

        # Los nombres configurados tienen prioridad
        for filename, label in configured.items():
            if filename not in ('', CUSTOM_TEMPLATE_KEY):
                templates[filename] = label

        if '' not in templates:
            templates = {'': DEFAULT_TEMPLATE_LABEL, **templates}

        self.cache[cache_key] = templates
        return dict(templates)

    def fetch_templates_from_schema(self, endpoint: str) -> Dict[str, str]:
        """Lee schema.properties.template.enum; vacío si la llamada falla"""
        templates: Dict[str, str] = {}
        if endpoint == '':
            return templates

        result = self.client.options(
            endpoint,
            self.config.username,
            self.config.app_password,
            self.config.verify_ssl,
        )
        if not result.ok or not isinstance(result.parsed_body, dict):
            logger.info(f"Plantillas no disponibles en {endpoint}; se usan las configuradas")
            return templates

        schema = result.parsed_body.get('schema') or {}
        template_schema = (schema.get('properties') or {}).get('template') or {}
        for filename in template_schema.get('enum') or []:
            if filename == '':
                templates[''] = DEFAULT_TEMPLATE_LABEL
            else:
                templates[filename] = format_template_name(filename)

        return templates
